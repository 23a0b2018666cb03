import re
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.constants import MessageLimit
from telegram.error import BadRequest

from conftest import ADMIN_ID, SUBMITTER, inquiry_payload
from handlers import admin
from handlers.decisions import DECISION_PATTERN, decision_cb


def _update(text: str, user_id: int = ADMIN_ID, chat_id: int = -100999):
    update = MagicMock()
    update.effective_user.id = user_id
    update.effective_chat.id = chat_id
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.message.reply_html = AsyncMock()
    update.effective_message = update.message
    return update


def _context(state, args=()):
    context = MagicMock()
    context.bot_data = {"state": state}
    context.args = list(args)
    context.bot.get_chat = AsyncMock()
    return context


def _replied(update) -> str:
    call = update.message.reply_html.await_args or update.message.reply_text.await_args
    return call.args[0]


async def _seed_order(state):
    await state.service.set_channel("-100777")
    return (await state.service.submit_order(inquiry_payload())).order


@pytest.mark.asyncio
async def test_non_owner_is_refused(state):
    update = _update("/orders", user_id=1)
    await admin.cmd_orders(update, _context(state))
    update.message.reply_text.assert_awaited_once_with(admin.OWNER_ONLY)


@pytest.mark.asyncio
async def test_whoami_is_open_to_everyone(state):
    update = _update("/whoami", user_id=77)
    await admin.cmd_whoami(update, _context(state))
    assert "77" in _replied(update)


@pytest.mark.asyncio
async def test_setchannel_defaults_to_current_chat(state):
    update = _update("/setchannel", chat_id=-100123)
    context = _context(state)
    context.bot.get_chat.return_value = MagicMock(id=-100123)
    await admin.cmd_setchannel(update, context)

    context.bot.get_chat.assert_awaited_once_with(-100123)
    assert await state.channel.get_chat_id() == "-100123"


@pytest.mark.asyncio
async def test_setchannel_unknown_chat(state):
    update = _update("/setchannel 5")
    context = _context(state, ["5"])
    context.bot.get_chat.side_effect = BadRequest("Chat not found")
    await admin.cmd_setchannel(update, context)
    assert "not found" in _replied(update)
    assert await state.channel.peek_chat_id() is None


@pytest.mark.asyncio
async def test_availability_commands(state):
    update = _update("/close@EchoBot")
    await admin.cmd_availability(update, _context(state))
    assert state.status.state == "closed"
    assert "Closed for orders" in _replied(update)


@pytest.mark.asyncio
async def test_orders_listing_and_filter(state):
    order = await _seed_order(state)
    update = _update("/orders")
    await admin.cmd_orders(update, _context(state))
    assert order.short_id in _replied(update)

    update = _update("/orders accepted")
    await admin.cmd_orders(update, _context(state, ["accepted"]))
    assert "No orders with status" in _replied(update)


@pytest.mark.asyncio
async def test_order_details_and_missing(state):
    order = await _seed_order(state)
    update = _update(f"/order {order.short_id}")
    await admin.cmd_order(update, _context(state, [order.short_id]))
    assert order.id in _replied(update)

    update = _update("/order zzzz")
    await admin.cmd_order(update, _context(state, ["zzzz"]))
    assert "No order found" in _replied(update)


@pytest.mark.asyncio
async def test_paid_and_unpaid(state):
    order = await _seed_order(state)
    await admin.cmd_payment(_update(f"/paid {order.short_id}"), _context(state, [order.short_id]))
    assert (await state.orders.find_by_id_prefix(order.id)).payment_state == "paid"

    update = _update(f"/unpaid {order.short_id}")
    await admin.cmd_payment(update, _context(state, [order.short_id]))
    stored = await state.orders.find_by_id_prefix(order.id)
    assert (stored.payment_state, stored.paid_at) == ("unpaid", None)
    assert "Unpaid" in _replied(update)


@pytest.mark.asyncio
async def test_setstatus_and_note(state):
    order = await _seed_order(state)
    await admin.cmd_setstatus(_update("/setstatus x"), _context(state, [order.short_id, "In", "Progress"]))
    await admin.cmd_note(_update("/note x"), _context(state, [order.short_id, "call", "friday"]))
    stored = await state.orders.find_by_id_prefix(order.id)
    assert stored.status == "In Progress"
    assert stored.notes == "call friday"

    update = _update("/note")
    await admin.cmd_note(update, _context(state, [order.short_id]))
    assert "Usage" in _replied(update)


@pytest.mark.asyncio
async def test_work_commands(state):
    update = _update("/addwork Echo | Ticket bot | Echo Hangout | https://discord.gg/echo")
    await admin.cmd_addwork(update, _context(state))
    entries = await state.work.list()
    assert entries[0]["server_name"] == "Echo Hangout"

    update = _update("/addwork Echo | Ticket bot | Echo Hangout | discord.gg/echo")
    await admin.cmd_addwork(update, _context(state))
    assert "https://" in _replied(update)

    update = _update("/listwork")
    await admin.cmd_listwork(update, _context(state))
    assert entries[0]["id"] in _replied(update)

    update = _update("/removework")
    await admin.cmd_removework(update, _context(state, [entries[0]["id"]]))
    assert await state.work.list() == []


def _callback(data: str, user_id: int = ADMIN_ID):
    update = MagicMock()
    q = update.callback_query
    q.data = data
    q.from_user.id = user_id
    q.answer = AsyncMock()
    q.edit_message_reply_markup = AsyncMock()
    return update


@pytest.mark.asyncio
async def test_accept_button_updates_latest_pending(state):
    order = await _seed_order(state)
    update = _callback(f"accept:{SUBMITTER}")
    await decision_cb(update, _context(state))

    assert (await state.orders.find_by_id_prefix(order.id)).status == "Accepted"
    markup = update.callback_query.edit_message_reply_markup.await_args.kwargs["reply_markup"]
    assert markup.inline_keyboard[0][0].text == "✅ Accepted"
    assert SUBMITTER in update.callback_query.answer.await_args.args[0]


@pytest.mark.asyncio
async def test_decline_without_pending_order(state):
    update = _callback(f"decline:{SUBMITTER}")
    await decision_cb(update, _context(state))
    assert "No pending order" in update.callback_query.answer.await_args.args[0]
    markup = update.callback_query.edit_message_reply_markup.await_args.kwargs["reply_markup"]
    assert markup.inline_keyboard[0][0].text == "❌ Declined"


@pytest.mark.asyncio
async def test_decision_requires_owner(state):
    order = await _seed_order(state)
    update = _callback(f"accept:{SUBMITTER}", user_id=5)
    await decision_cb(update, _context(state))
    assert (await state.orders.find_by_id_prefix(order.id)).status == "Pending"
    update.callback_query.edit_message_reply_markup.assert_not_awaited()


def test_decision_pattern_takes_ascii_ids_only():
    assert re.match(DECISION_PATTERN, f"accept:{SUBMITTER}")
    assert re.match(DECISION_PATTERN, f"decline:{SUBMITTER}")
    assert not re.match(DECISION_PATTERN, "accept:" + "١" * 18)
    assert not re.match(DECISION_PATTERN, "done")


@pytest.mark.asyncio
async def test_rejected_reply_gets_a_short_fallback(state):
    order = await _seed_order(state)
    update = _update(f"/order {order.short_id}")
    update.message.reply_html.side_effect = BadRequest("Message is too long")
    await admin.cmd_order(update, _context(state, [order.short_id]))
    update.message.reply_text.assert_awaited_once_with(admin.REPLY_FAILED)


@pytest.mark.asyncio
async def test_order_with_long_note_fits_one_reply(state):
    order = await _seed_order(state)
    await state.service.set_note(order.short_id, "n" * 5000)
    update = _update(f"/order {order.short_id}")
    await admin.cmd_order(update, _context(state, [order.short_id]))
    assert len(_replied(update)) <= MessageLimit.MAX_TEXT_LENGTH
