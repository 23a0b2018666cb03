import logging
from telegram import Update
from telegram.error import TelegramError
from telegram.ext import Application, CallbackQueryHandler, ContextTypes

from intake_ext.errors import NotFoundError, StorageError
from intake_ext.models import ACCEPTED, DECLINED
from intake_ext.render import decided_keyboard, profile_url

logger = logging.getLogger(__name__)

DECISION_PATTERN = r"^(accept|decline):[0-9]+$"


def register_decision_handlers(app: Application):
    app.add_handler(CallbackQueryHandler(decision_cb, pattern=DECISION_PATTERN))
    app.add_handler(CallbackQueryHandler(done_cb, pattern=r"^done$"))


async def decision_cb(update: Update, context: ContextTypes.DEFAULT_TYPE):
    q = update.callback_query
    state = context.bot_data["state"]
    if not state.settings.admin_id or q.from_user.id != state.settings.admin_id:
        await q.answer("❌ Owner only.", show_alert=True)
        return

    action, submitter_id = q.data.split(":", 1)
    accept = action == "accept"
    try:
        order = await state.service.on_decision(submitter_id, accept)
        note = None
    except NotFoundError:
        order = None
        note = "No pending order from this client, nothing changed."
    except StorageError:
        logger.exception("⚠️ could not save decision for %s", submitter_id)
        await q.answer("⚠️ Could not save the decision, try again.", show_alert=True)
        return

    status = order.status if order else (ACCEPTED if accept else DECLINED)
    try:
        await q.edit_message_reply_markup(
            reply_markup=decided_keyboard(status, submitter_id, state.settings.profile_url)
        )
    except TelegramError as e:
        logger.warning("⚠️ could not update decision buttons: %s", e)

    if note:
        await q.answer(note, show_alert=True)
    elif accept:
        await q.answer(f"✅ Accepted {order.short_id}. DM the client: {profile_url(state.settings.profile_url, submitter_id)}",
                       show_alert=True)
    else:
        await q.answer(f"❌ {order.short_id} marked as Declined.")


async def done_cb(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.callback_query.answer("Already handled.")
