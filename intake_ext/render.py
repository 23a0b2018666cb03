# -*- coding: utf-8 -*-
from __future__ import annotations
import html, time
from typing import List

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from intake_ext.models import ACCEPTED, Order
from intake_ext.status import STATUS_DISPLAY
from intake_ext.validation import category_meta, is_custom_budget

DETAILS_LIMIT = 1024
NOTE_DETAILS_LIMIT = 500
NOTES_LIMIT = 1024
FIELD_LIMIT = 100
LONG_FIELD_LIMIT = 256
LIST_LIMIT = 10
LINE_FIELD_LIMIT = 32


def esc(value) -> str:
    return html.escape(str(value if value is not None else ""))


def clip(value, limit: int) -> str:
    """Escape for HTML, keeping the escaped text within limit characters."""
    text = esc(value)
    if len(text) <= limit:
        return text
    out, size = [], 0
    for ch in str(value):
        piece = html.escape(ch)
        if size + len(piece) > limit - 1:
            break
        out.append(piece)
        size += len(piece)
    return "".join(out) + "…"


def fmt_ts(ts) -> str:
    if not ts:
        return "—"
    return time.strftime("%Y-%m-%d %H:%M UTC", time.gmtime(int(ts)))


def payment_label(order: Order) -> str:
    return "✅ Paid" if order.is_paid else "⏳ Unpaid"


def profile_url(template: str, submitter_id: str) -> str:
    return template.format(id=submitter_id)


def inquiry_text(order: Order, admin_id: int = 0) -> str:
    meta = category_meta(order.category)
    ping = f'<a href="tg://user?id={admin_id}">new inquiry!</a>' if admin_id else "new inquiry!"
    lines = [
        f"🔔 {ping}",
        "",
        f"{meta['emoji']}  <b>New Inquiry — {clip(order.category, FIELD_LIMIT)}</b>",
        "",
        f"👤 <b>Discord:</b> {clip(order.submitter_name, FIELD_LIMIT)} (<code>{clip(order.submitter_id, FIELD_LIMIT)}</code>)",
        f"🖥️ <b>Server:</b> {clip(order.subject_name, LONG_FIELD_LIMIT)}",
        f"🔗 <b>Invite:</b> {clip(order.subject_reference or 'No invite provided', LONG_FIELD_LIMIT)}",
        f"💰 <b>Budget:</b> {clip(order.budget, FIELD_LIMIT)}",
        f"💳 <b>Payment:</b> {clip(order.payment_method, FIELD_LIMIT)}",
        f"🗂️ <b>Server Type:</b> {clip(order.category, FIELD_LIMIT)}",
        f"📊 <b>Status:</b> ⏳ {clip(order.status, FIELD_LIMIT)}",
        "",
        f"📝 <b>Requirements:</b>\n{clip(order.details, DETAILS_LIMIT)}",
    ]
    if is_custom_budget(order.budget):
        lines += ["", "💡 <b>Note:</b> Custom budget — reach out to discuss pricing first."]
    lines += ["", f"<i>Echo Services • Order: {esc(order.short_id)}</i>"]
    return "\n".join(lines)


def decision_keyboard(submitter_id: str, url_template: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        [
            InlineKeyboardButton("✅ Accept", callback_data=f"accept:{submitter_id}"),
            InlineKeyboardButton("❌ Decline", callback_data=f"decline:{submitter_id}"),
        ],
        [InlineKeyboardButton("💬 DM Client", url=profile_url(url_template, submitter_id))],
    ])


def decided_keyboard(status: str, submitter_id: str, url_template: str) -> InlineKeyboardMarkup:
    label = "✅ Accepted" if status == ACCEPTED else "❌ Declined"
    return InlineKeyboardMarkup([
        [InlineKeyboardButton(label, callback_data="done")],
        [InlineKeyboardButton("💬 DM Client", url=profile_url(url_template, submitter_id))],
    ])


def contact_text(fields: dict) -> str:
    return (
        "💬 <b>New Message — Echo Services</b>\n\n"
        f"👤 <b>Discord:</b> {clip(fields['submitter_name'], FIELD_LIMIT)} (<code>{clip(fields['submitter_id'], FIELD_LIMIT)}</code>)\n\n"
        f"📝 <b>Message:</b>\n{clip(fields['message'], DETAILS_LIMIT)}"
    )


def contact_keyboard(submitter_id: str, url_template: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[InlineKeyboardButton("💬 DM Client", url=profile_url(url_template, submitter_id))]])


def order_line(order: Order) -> str:
    return (f"<code>{esc(order.short_id)}</code> | <b>{clip(order.submitter_name, LINE_FIELD_LIMIT)}</b> | "
            f"{clip(order.category, LINE_FIELD_LIMIT)} | {clip(order.budget, LINE_FIELD_LIMIT)} | "
            f"<b>{clip(order.status, LINE_FIELD_LIMIT)}</b> | {payment_label(order)}")


def orders_text(orders: List[Order], status_filter: str | None = None) -> str:
    shown = orders[-LIST_LIMIT:]
    title = f"📋 <b>Orders{' — ' + clip(status_filter, LINE_FIELD_LIMIT) if status_filter else ''} (last {len(shown)})</b>"
    body = "\n".join(order_line(o) for o in shown)
    return f"{title}\n\n{body}\n\n<i>Total: {len(orders)}</i>"


def order_text(order: Order) -> str:
    return "\n".join([
        f"🗂️ <b>Order — {esc(order.short_id)}</b>",
        "",
        f"<b>ID:</b> <code>{esc(order.id)}</code>",
        f"💬 <b>Client:</b> {clip(order.submitter_name, FIELD_LIMIT)} (<code>{clip(order.submitter_id, FIELD_LIMIT)}</code>)",
        f"🖥️ <b>Server:</b> {clip(order.subject_name, LONG_FIELD_LIMIT)}",
        f"🔗 <b>Invite:</b> {clip(order.subject_reference or 'Not provided', LONG_FIELD_LIMIT)}",
        f"🌐 <b>Server Type:</b> {clip(order.category or 'N/A', FIELD_LIMIT)}",
        f"💰 <b>Budget:</b> {clip(order.budget, FIELD_LIMIT)}",
        f"💳 <b>Payment:</b> {clip(order.payment_method, FIELD_LIMIT)}",
        f"📊 <b>Status:</b> {clip(order.status, FIELD_LIMIT)}",
        f"💵 <b>Paid:</b> {payment_label(order)}" + (f" ({fmt_ts(order.paid_at)})" if order.paid_at else ""),
        f"📅 <b>Created:</b> {fmt_ts(order.created_at)}",
        f"📝 <b>Details:</b>\n{clip(order.details, NOTE_DETAILS_LIMIT)}",
        f"🗒️ <b>Notes:</b> {clip(order.notes or 'None', NOTES_LIMIT)}",
    ])


def status_text(state: str, chat_id: str | None) -> str:
    s = STATUS_DISPLAY[state]
    channel = f"<code>{esc(chat_id)}</code>" if chat_id else "⚠️ Not set — run /setchannel"
    return (
        "📡 <b>Echo Services — Status</b>\n\n"
        f"<b>Order Status:</b> {s['emoji']} {s['label']}\n"
        f"<b>Inquiry Channel:</b> {channel}"
    )


def work_list_text(entries: List[dict]) -> str:
    lines = [f"<b>{i}.</b> <code>{esc(e.get('id'))}</code> — <b>{clip(e.get('bot_name'), LINE_FIELD_LIMIT)}</b>"
             f" @ {clip(e.get('server_name'), LINE_FIELD_LIMIT)}"
             for i, e in enumerate(entries, 1)]
    return (f"🗂️ <b>Featured Work ({len(entries)})</b>\n\n" + "\n".join(lines)
            + "\n\n<i>Use /removework &lt;id&gt; to remove an entry</i>")


HELP_TEXT = (
    "📖 <b>Echo Services — Bot Commands</b>\n\n"
    "<b>Availability</b>\n"
    "/open — set Open 🟢\n"
    "/slow — set Slow 🟡\n"
    "/close — set Closed 🔴\n"
    "/status — show status + channel\n"
    "/setchannel [chat_id] — set inquiry chat (defaults to this chat)\n\n"
    "<b>Orders</b>\n"
    "/orders [status] — list orders (filter: pending/accepted/etc)\n"
    "/order &lt;id&gt; — full order details\n"
    "/paid &lt;id&gt; — mark order paid ✅\n"
    "/unpaid &lt;id&gt; — mark order unpaid ⏳\n"
    "/setstatus &lt;id&gt; &lt;text&gt; — set order status\n"
    "/note &lt;id&gt; &lt;text&gt; — add note to order\n\n"
    "<b>Featured Work</b>\n"
    "/addwork name | description | server | invite — add to the website\n"
    "/listwork — list featured work entries + IDs\n"
    "/removework &lt;id&gt; — remove a featured work entry\n\n"
    "/whoami — show your Telegram ID"
)
