import functools, logging
from telegram import Update
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes

from intake_ext.errors import NotFoundError, StorageError, ValidationError
from intake_ext.render import HELP_TEXT, esc, order_text, orders_text, status_text, work_list_text

logger = logging.getLogger(__name__)

OWNER_ONLY = "❌ Owner only."
REPLY_FAILED = "⚠️ Telegram rejected the reply, see the bot logs."


def register_admin_handlers(app: Application):
    app.add_handler(CommandHandler("whoami", cmd_whoami))
    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CommandHandler("setchannel", cmd_setchannel))
    app.add_handler(CommandHandler(["open", "slow", "close"], cmd_availability))
    app.add_handler(CommandHandler("status", cmd_status))
    app.add_handler(CommandHandler("orders", cmd_orders))
    app.add_handler(CommandHandler("order", cmd_order))
    app.add_handler(CommandHandler(["paid", "unpaid"], cmd_payment))
    app.add_handler(CommandHandler("setstatus", cmd_setstatus))
    app.add_handler(CommandHandler("note", cmd_note))
    app.add_handler(CommandHandler("addwork", cmd_addwork))
    app.add_handler(CommandHandler("removework", cmd_removework))
    app.add_handler(CommandHandler("listwork", cmd_listwork))


def _state(context: ContextTypes.DEFAULT_TYPE):
    return context.bot_data["state"]


def _command(update: Update) -> str:
    # "/paid@EchoBot abc" -> "paid"
    text = (update.effective_message.text or "").strip()
    return text.split()[0].lstrip("/").split("@")[0].lower() if text else ""


def _rest(update: Update) -> str:
    parts = (update.effective_message.text or "").strip().split(maxsplit=1)
    return parts[1].strip() if len(parts) > 1 else ""


def owner_only(fn):
    """Gate on ADMIN_ID and turn expected failures into replies."""
    @functools.wraps(fn)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
        admin_id = _state(context).settings.admin_id
        if not admin_id or update.effective_user.id != admin_id:
            await update.effective_message.reply_text(OWNER_ONLY)
            return
        try:
            await fn(update, context)
        except (NotFoundError, ValidationError) as e:
            await update.effective_message.reply_html(f"❌ {esc(e.message)}")
        except StorageError:
            logger.exception("⚠️ storage failure in /%s", _command(update))
            await update.effective_message.reply_text("⚠️ Could not save the change, try again.")
        except TelegramError as e:
            logger.warning("⚠️ reply to /%s rejected: %s", _command(update), e)
            await update.effective_message.reply_text(REPLY_FAILED)
    return wrapper


async def cmd_whoami(update: Update, context: ContextTypes.DEFAULT_TYPE):
    admin_id = _state(context).settings.admin_id
    await update.effective_message.reply_html(
        f"👤 ID: <code>{update.effective_user.id}</code>\n🔐 ADMIN_ID: {admin_id or 'not set'}"
    )


@owner_only
async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.effective_message.reply_html(HELP_TEXT)


@owner_only
async def cmd_setchannel(update: Update, context: ContextTypes.DEFAULT_TYPE):
    target = context.args[0] if context.args else update.effective_chat.id
    try:
        chat = await context.bot.get_chat(target)
    except TelegramError:
        await update.effective_message.reply_text("❌ Channel not found or bot lacks access.")
        return
    await _state(context).service.set_channel(chat.id)
    await update.effective_message.reply_html(f"✅ <b>Channel Set</b>\nInquiries will post to <code>{chat.id}</code>.")


@owner_only
async def cmd_availability(update: Update, context: ContextTypes.DEFAULT_TYPE):
    shown = _state(context).service.set_status(_command(update))
    await update.effective_message.reply_html(
        f"{shown['emoji']} <b>Status Updated</b>\nEcho Services is now <b>{shown['label']}</b>."
    )


@owner_only
async def cmd_status(update: Update, context: ContextTypes.DEFAULT_TYPE):
    st = _state(context)
    chat_id = await st.channel.peek_chat_id()
    await update.effective_message.reply_html(status_text(st.status.state, chat_id))


@owner_only
async def cmd_orders(update: Update, context: ContextTypes.DEFAULT_TYPE):
    status_filter = context.args[0] if context.args else None
    orders = await _state(context).service.list_orders(status_filter)
    if not orders:
        suffix = f" with status <b>{esc(status_filter)}</b>" if status_filter else ""
        await update.effective_message.reply_html(f"📭 No orders{suffix}.")
        return
    await update.effective_message.reply_html(orders_text(orders, status_filter))


@owner_only
async def cmd_order(update: Update, context: ContextTypes.DEFAULT_TYPE):
    if not context.args:
        await update.effective_message.reply_html("❌ Usage: <code>/order &lt;id&gt;</code>")
        return
    order = await _state(context).service.get_order(context.args[0])
    await update.effective_message.reply_html(order_text(order))


@owner_only
async def cmd_payment(update: Update, context: ContextTypes.DEFAULT_TYPE):
    cmd = _command(update)
    if not context.args:
        await update.effective_message.reply_html(f"❌ Usage: <code>/{cmd} &lt;id&gt;</code>")
        return
    paid = cmd == "paid"
    order = await _state(context).service.set_payment(context.args[0], paid)
    await update.effective_message.reply_html(
        f"{'✅' if paid else '⏳'} Order <code>{esc(order.short_id)}</code> marked as <b>{'Paid' if paid else 'Unpaid'}</b>."
    )


@owner_only
async def cmd_setstatus(update: Update, context: ContextTypes.DEFAULT_TYPE):
    args = context.args or []
    if len(args) < 2:
        await update.effective_message.reply_html("❌ Usage: <code>/setstatus &lt;id&gt; &lt;status&gt;</code>")
        return
    order = await _state(context).service.update_status(args[0], " ".join(args[1:]))
    await update.effective_message.reply_html(f"✅ Order <code>{esc(order.short_id)}</code> status → <b>{esc(order.status)}</b>.")


@owner_only
async def cmd_note(update: Update, context: ContextTypes.DEFAULT_TYPE):
    args = context.args or []
    if len(args) < 2:
        await update.effective_message.reply_html("❌ Usage: <code>/note &lt;id&gt; &lt;text&gt;</code>")
        return
    order = await _state(context).service.set_note(args[0], " ".join(args[1:]))
    await update.effective_message.reply_html(f"🗒️ Note saved on <code>{esc(order.short_id)}</code>.")


@owner_only
async def cmd_addwork(update: Update, context: ContextTypes.DEFAULT_TYPE):
    parts = [p.strip() for p in _rest(update).split("|")]
    if len(parts) < 4 or not all(parts[:4]):
        await update.effective_message.reply_html(
            "❌ Usage: <code>/addwork Bot Name | Short description | Server Name | https://discord.gg/invite</code>\n"
            "Separate each field with a pipe <code>|</code> character."
        )
        return
    entry = await _state(context).work.add(*parts[:4])
    await update.effective_message.reply_html(
        "✅ <b>Featured Work Added</b>\n\n"
        f"🤖 <b>Bot Name:</b> {esc(entry['bot_name'])}\n"
        f"🖥️ <b>Server:</b> {esc(entry['server_name'])}\n"
        f"🆔 <b>ID:</b> <code>{esc(entry['id'])}</code>\n"
        f"🔗 <b>Invite:</b> {esc(entry['invite'])}\n"
        f"📝 <b>Description:</b> {esc(entry['description'])}\n\n"
        "<i>This will appear live on the website immediately.</i>"
    )


@owner_only
async def cmd_removework(update: Update, context: ContextTypes.DEFAULT_TYPE):
    if not context.args:
        await update.effective_message.reply_html("❌ Usage: <code>/removework &lt;id&gt;</code> — use /listwork to find IDs")
        return
    removed = await _state(context).work.remove(context.args[0])
    if removed is None:
        await update.effective_message.reply_html(f"❌ No featured work entry found with ID <code>{esc(context.args[0])}</code>")
        return
    await update.effective_message.reply_html(
        f"🗑️ Removed <b>{esc(removed.get('bot_name'))}</b> (<code>{esc(removed.get('id'))}</code>) from featured work."
    )


@owner_only
async def cmd_listwork(update: Update, context: ContextTypes.DEFAULT_TYPE):
    entries = await _state(context).work.list()
    if not entries:
        await update.effective_message.reply_text("📭 No featured work entries yet. Use /addwork to add one.")
        return
    await update.effective_message.reply_html(work_list_text(entries))


