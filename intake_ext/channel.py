from typing import Optional

from intake_ext.errors import ConfigurationError
from intake_ext.store import JsonStore

NOT_CONFIGURED = "Notification channel not configured. Run /setchannel in the chat that should receive inquiries first."


class ChannelConfig:
    """config.json holder for the chat that receives inquiry notifications."""

    def __init__(self, store: JsonStore, fallback_chat_id: Optional[str] = None):
        self.store = store
        self.fallback_chat_id = fallback_chat_id or None

    async def load(self) -> dict:
        if not self.store.path.exists():
            return {"notify_chat_id": self.fallback_chat_id}
        data = await self.store.read()
        data.setdefault("notify_chat_id", None)
        return data

    async def get_chat_id(self) -> str:
        chat_id = (await self.load()).get("notify_chat_id")
        if not chat_id:
            raise ConfigurationError(NOT_CONFIGURED)
        return str(chat_id)

    async def peek_chat_id(self) -> Optional[str]:
        chat_id = (await self.load()).get("notify_chat_id")
        return str(chat_id) if chat_id else None

    async def set_chat_id(self, chat_id) -> str:
        data = await self.load()
        data["notify_chat_id"] = str(chat_id)
        await self.store.write(data)
        return data["notify_chat_id"]
