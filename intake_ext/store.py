import asyncio, copy, json, logging
from pathlib import Path
from typing import Any

from intake_ext.errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class JsonStore:
    """One JSON document in one file. Reads never fail, writes overwrite the whole file."""

    def __init__(self, path, default: Any, timeout: float = DEFAULT_TIMEOUT):
        self.path = Path(path)
        self.default = default
        self.timeout = timeout

    def _fresh_default(self):
        return copy.deepcopy(self.default)

    def _read(self):
        if not self.path.exists():
            return self._fresh_default()
        try:
            data = json.loads(self.path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("⚠️ %s unreadable, treating as empty: %s", self.path, e)
            return self._fresh_default()
        if not isinstance(data, type(self.default)):
            logger.warning("⚠️ %s holds %s, expected %s", self.path, type(data).__name__, type(self.default).__name__)
            return self._fresh_default()
        return data

    def _write(self, data):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    async def read(self):
        try:
            return await asyncio.wait_for(asyncio.to_thread(self._read), self.timeout)
        except asyncio.TimeoutError:
            logger.warning("⚠️ read of %s timed out after %.1fs", self.path, self.timeout)
            return self._fresh_default()

    async def write(self, data) -> None:
        try:
            await asyncio.wait_for(asyncio.to_thread(self._write, data), self.timeout)
        except asyncio.TimeoutError as e:
            raise StorageError(f"write to {self.path} timed out") from e
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"write to {self.path} failed: {e}") from e
