import logging
from typing import Optional

from telegram import Bot, InlineKeyboardMarkup
from telegram.error import TelegramError

from intake_ext.errors import NotificationError

logger = logging.getLogger(__name__)


async def deliver(bot: Bot, chat_id, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> None:
    if not chat_id:
        raise NotificationError("no destination chat")
    try:
        await bot.send_message(chat_id=chat_id, text=text, reply_markup=reply_markup)
    except TelegramError as e:
        raise NotificationError(f"could not deliver to {chat_id}: {e}") from e


async def safe_send(bot: Bot, chat_id, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> bool:
    """Best-effort send. Never raises; returns whether Telegram accepted the message."""
    try:
        await deliver(bot, chat_id, text, reply_markup)
        return True
    except NotificationError as e:
        logger.warning("⚠️ %s", e.message)
    except Exception:
        logger.exception("⚠️ unexpected error delivering to %s", chat_id)
    return False


class Notifier:
    """Dispatcher bound to the running bot; admin_chat_id gets operational notices."""

    def __init__(self, bot: Optional[Bot] = None, admin_chat_id: int = 0):
        self.bot = bot
        self.admin_chat_id = admin_chat_id

    async def send(self, chat_id, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> bool:
        if self.bot is None:
            logger.warning("⚠️ bot not started yet, dropping message for %s", chat_id)
            return False
        return await safe_send(self.bot, chat_id, text, reply_markup)

    async def log_admin(self, text: str) -> bool:
        return await self.send(self.admin_chat_id, text)
