# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional

PENDING = "Pending"
ACCEPTED = "Accepted"
DECLINED = "Declined"
UNPAID = "unpaid"
PAID = "paid"


@dataclass
class Order:
    id: str
    submitter_name: str
    submitter_id: str
    subject_name: str
    category: str
    budget: str
    payment_method: str
    details: str
    created_at: int
    subject_reference: Optional[str] = None
    status: str = PENDING
    payment_state: str = UNPAID
    paid_at: Optional[int] = None
    notes: str = ""

    @property
    def short_id(self) -> str:
        return self.id[:8]

    @property
    def is_paid(self) -> bool:
        return self.payment_state == PAID

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Order":
        """Strict decode of one stored record; raises ValueError on any shape mismatch."""
        if not isinstance(raw, dict):
            raise ValueError(f"order must be an object, got {type(raw).__name__}")
        known = {f.name: f for f in fields(cls)}
        unknown = set(raw) - set(known)
        if unknown:
            raise ValueError(f"unknown order keys: {sorted(unknown)}")
        for name in ("id", "submitter_name", "submitter_id", "subject_name", "category",
                     "budget", "payment_method", "details", "status", "payment_state", "notes"):
            if name in raw and not isinstance(raw[name], str):
                raise ValueError(f"{name} must be a string")
        for name in ("created_at", "paid_at"):
            value = raw.get(name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise ValueError(f"{name} must be an integer timestamp")
        ref = raw.get("subject_reference")
        if ref is not None and not isinstance(ref, str):
            raise ValueError("subject_reference must be a string or null")
        try:
            order = cls(**raw)
        except TypeError as e:
            raise ValueError(str(e)) from e
        if order.payment_state not in (PAID, UNPAID):
            raise ValueError(f"unknown payment_state {order.payment_state!r}")
        if (order.paid_at is not None) != order.is_paid:
            raise ValueError("paid_at must be set exactly when the order is paid")
        return order


def decode_orders(rows: Any) -> List[Order]:
    if not isinstance(rows, list):
        raise ValueError("orders file must hold a list")
    return [Order.from_dict(r) for r in rows]


def encode_orders(orders: List[Order]) -> List[Dict[str, Any]]:
    return [o.to_dict() for o in orders]
