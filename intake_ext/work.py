import asyncio, time, uuid
from typing import List, Optional

from intake_ext.errors import ValidationError
from intake_ext.store import JsonStore


class WorkRepository:
    """Featured work entries shown on the website (work.json)."""

    def __init__(self, store: JsonStore):
        self.store = store
        self._lock = asyncio.Lock()

    async def list(self) -> List[dict]:
        return await self.store.read()

    async def add(self, bot_name: str, description: str, server_name: str, invite: str) -> dict:
        parts = [(p or "").strip() for p in (bot_name, description, server_name, invite)]
        if not all(parts):
            raise ValidationError("Every featured work field is required: name | description | server | invite")
        bot_name, description, server_name, invite = parts
        if not invite.startswith("http"):
            raise ValidationError("Invite link must start with https://", code="invalid_invite")
        entry = {
            "id": uuid.uuid4().hex[:8],
            "bot_name": bot_name,
            "description": description,
            "server_name": server_name,
            "invite": invite,
            "added_at": int(time.time()),
        }
        async with self._lock:
            entries = await self.store.read()
            entries.append(entry)
            await self.store.write(entries)
        return entry

    async def remove(self, entry_id: str) -> Optional[dict]:
        async with self._lock:
            entries = await self.store.read()
            idx = next((i for i, e in enumerate(entries) if e.get("id") == entry_id), None)
            if idx is None:
                return None
            removed = entries.pop(idx)
            await self.store.write(entries)
            return removed
