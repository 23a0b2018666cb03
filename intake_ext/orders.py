import asyncio, dataclasses, time, uuid
from typing import Callable, Dict, List, Optional

from intake_ext.cache import OrdersCache
from intake_ext.models import ACCEPTED, DECLINED, PAID, PENDING, UNPAID, Order


class OrderRepository:
    def __init__(self, cache: OrdersCache, clock: Callable[[], float] = time.time):
        self.cache = cache
        self.clock = clock
        self._lock = asyncio.Lock()

    def _now(self) -> int:
        return int(self.clock())

    async def all(self) -> List[Order]:
        return list(await self.cache.get())

    async def create(self, fields: Dict[str, Optional[str]]) -> Order:
        async with self._lock:
            orders = list(await self.cache.get())
            taken = {o.id for o in orders}
            order_id = str(uuid.uuid4())
            while order_id in taken:
                order_id = str(uuid.uuid4())
            order = Order(
                id=order_id,
                submitter_name=fields["submitter_name"],
                submitter_id=fields["submitter_id"],
                subject_name=fields["subject_name"],
                subject_reference=fields.get("subject_reference") or None,
                category=fields["category"],
                budget=fields["budget"],
                payment_method=fields["payment_method"],
                details=fields["details"],
                created_at=self._now(),
            )
            orders.append(order)
            await self.cache.put(orders)
            return order

    async def find_by_id_prefix(self, prefix: str) -> Optional[Order]:
        if not prefix:
            return None
        for o in await self.cache.get():
            if o.id.startswith(prefix):
                return o
        return None

    async def find_latest_pending_by_submitter(self, submitter_id: str) -> Optional[Order]:
        for o in reversed(await self.cache.get()):
            if o.submitter_id == submitter_id and o.status == PENDING:
                return o
        return None

    async def list_by_status(self, status: Optional[str] = None) -> List[Order]:
        orders = await self.cache.get()
        if not status:
            return list(orders)
        wanted = status.lower()
        return [o for o in orders if o.status.lower() == wanted]

    async def _update(self, match: Callable[[List[Order]], Optional[int]], **changes) -> Optional[Order]:
        async with self._lock:
            orders = list(await self.cache.get())
            idx = match(orders)
            if idx is None:
                return None
            orders[idx] = dataclasses.replace(orders[idx], **changes)
            await self.cache.put(orders)
            return orders[idx]

    @staticmethod
    def _by_prefix(prefix: str):
        def match(orders):
            if not prefix:
                return None
            return next((i for i, o in enumerate(orders) if o.id.startswith(prefix)), None)
        return match

    async def update_status(self, ref: str, status: str) -> Optional[Order]:
        return await self._update(self._by_prefix(ref), status=status)

    async def set_payment(self, ref: str, paid: bool) -> Optional[Order]:
        if paid:
            return await self._update(self._by_prefix(ref), payment_state=PAID, paid_at=self._now())
        return await self._update(self._by_prefix(ref), payment_state=UNPAID, paid_at=None)

    async def set_note(self, ref: str, text: str) -> Optional[Order]:
        return await self._update(self._by_prefix(ref), notes=text)

    async def decide(self, submitter_id: str, accept: bool) -> Optional[Order]:
        def match(orders):
            for i in range(len(orders) - 1, -1, -1):
                if orders[i].submitter_id == submitter_id and orders[i].status == PENDING:
                    return i
            return None
        return await self._update(match, status=ACCEPTED if accept else DECLINED)
