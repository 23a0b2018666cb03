import asyncio, time
from typing import Callable, Dict

from intake_ext.store import JsonStore

VISIT_WINDOW = 60 * 60


class VisitCounter:
    """Page visit counter; one counted visit per client per window."""

    def __init__(self, store: JsonStore, window: float = VISIT_WINDOW, clock: Callable[[], float] = time.monotonic):
        self.store = store
        self.window = window
        self.clock = clock
        self._seen: Dict[str, float] = {}
        self._lock = asyncio.Lock()

    def _forget_expired(self, now: float) -> None:
        for key in [k for k, at in self._seen.items() if now - at >= self.window]:
            del self._seen[key]

    async def count(self) -> int:
        return int((await self.store.read()).get("count", 0) or 0)

    async def record(self, client_key: str) -> int:
        async with self._lock:
            now = self.clock()
            self._forget_expired(now)
            if client_key in self._seen:
                return await self.count()
            data = await self.store.read()
            data["count"] = int(data.get("count", 0) or 0) + 1
            await self.store.write(data)
            self._seen[client_key] = now
            return data["count"]
