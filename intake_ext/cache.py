import logging, time
from typing import Callable, List, Optional

from intake_ext.models import Order, decode_orders, encode_orders
from intake_ext.store import JsonStore

logger = logging.getLogger(__name__)

DEFAULT_TTL = 30.0
DEFAULT_MAX_ORDERS = 500


class OrdersCache:
    """
    Time-bounded view of the orders file:
    - reads are served from memory while younger than ttl seconds
    - put() is write-through; memory is only replaced after the file write succeeds
    - both sides keep only the newest max_orders records
    """

    def __init__(self, store: JsonStore, ttl: float = DEFAULT_TTL, max_orders: int = DEFAULT_MAX_ORDERS,
                 clock: Callable[[], float] = time.monotonic):
        self.store = store
        self.ttl = ttl
        self.max_orders = max_orders
        self.clock = clock
        self._snapshot: Optional[List[Order]] = None
        self._loaded_at = 0.0

    def _cap(self, orders: List[Order]) -> List[Order]:
        if len(orders) > self.max_orders:
            return orders[-self.max_orders:]
        return orders

    def is_fresh(self) -> bool:
        return self._snapshot is not None and self.clock() - self._loaded_at < self.ttl

    async def get(self) -> List[Order]:
        if self.is_fresh():
            return self._snapshot
        rows = await self.store.read()
        try:
            orders = decode_orders(rows)
        except ValueError as e:
            logger.warning("⚠️ %s has an unexpected shape, starting from an empty collection: %s", self.store.path, e)
            orders = []
        self._snapshot = self._cap(orders)
        self._loaded_at = self.clock()
        return self._snapshot

    async def put(self, orders: List[Order]) -> List[Order]:
        orders = self._cap(list(orders))
        await self.store.write(encode_orders(orders))
        self._snapshot = orders
        self._loaded_at = self.clock()
        return orders

    def invalidate(self) -> None:
        self._snapshot = None
        self._loaded_at = 0.0
