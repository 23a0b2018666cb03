import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from intake_ext.channel import ChannelConfig
from intake_ext.errors import NotFoundError, ValidationError
from intake_ext.models import Order
from intake_ext.orders import OrderRepository
from intake_ext.render import contact_keyboard, contact_text, decision_keyboard, esc, inquiry_text
from intake_ext.settings import DEFAULT_PROFILE_URL
from intake_ext.status import StatusRegister
from intake_ext.validation import is_custom_budget, validate_contact, validate_inquiry

logger = logging.getLogger(__name__)

MSG_RECEIVED = "Inquiry received! I'll get back to you on Discord as soon as possible."
MSG_RECEIVED_CUSTOM = "Inquiry received! I'll DM you on Discord to discuss custom pricing."


@dataclass
class SubmitResult:
    order: Order
    is_custom_budget: bool
    message: str
    notified: bool


class IntakeService:
    """Operations shared by the Telegram command surface and the HTTP routes."""

    def __init__(self, orders: OrderRepository, status: StatusRegister, channel: ChannelConfig, notifier,
                 admin_id: int = 0, profile_url: str = DEFAULT_PROFILE_URL):
        self.orders = orders
        self.status = status
        self.channel = channel
        self.notifier = notifier
        self.admin_id = admin_id
        self.profile_url = profile_url

    # intake

    async def submit_order(self, payload: Dict) -> SubmitResult:
        fields = validate_inquiry(payload)
        chat_id = await self.channel.get_chat_id()
        order = await self.orders.create(fields)
        logger.info("📥 new order %s from %s (%s)", order.short_id, order.submitter_name, order.category)
        notified = await self.notifier.send(
            chat_id, inquiry_text(order, self.admin_id), decision_keyboard(order.submitter_id, self.profile_url)
        )
        if not notified:
            logger.warning("⚠️ order %s saved but the inquiry notification was not delivered", order.short_id)
            await self.notifier.log_admin(
                f"⚠️ Inquiry <code>{order.short_id}</code> from {esc(order.submitter_name)} was saved "
                "but could not be posted to the inquiry channel. Check /status."
            )
        custom = is_custom_budget(order.budget)
        return SubmitResult(order, custom, MSG_RECEIVED_CUSTOM if custom else MSG_RECEIVED, notified)

    async def submit_message(self, payload: Dict) -> bool:
        fields = validate_contact(payload)
        chat_id = await self.channel.get_chat_id()
        notified = await self.notifier.send(
            chat_id, contact_text(fields), contact_keyboard(fields["submitter_id"], self.profile_url)
        )
        if not notified:
            logger.warning("⚠️ contact message from %s was not delivered", fields["submitter_name"])
        return notified

    # management

    async def list_orders(self, status: Optional[str] = None) -> List[Order]:
        return await self.orders.list_by_status(status)

    async def get_order(self, ref: str) -> Order:
        order = await self.orders.find_by_id_prefix(ref)
        if order is None:
            raise NotFoundError(f"No order found for {ref!r}")
        return order

    async def update_status(self, ref: str, status: str) -> Order:
        status = (status or "").strip()
        if not status:
            raise ValidationError("Status text is required")
        return self._found(ref, await self.orders.update_status(ref, status))

    async def set_payment(self, ref: str, paid: bool) -> Order:
        return self._found(ref, await self.orders.set_payment(ref, paid))

    async def set_note(self, ref: str, text: str) -> Order:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Note text is required")
        return self._found(ref, await self.orders.set_note(ref, text))

    async def on_decision(self, submitter_id: str, accept: bool) -> Order:
        order = await self.orders.decide(submitter_id, accept)
        if order is None:
            raise NotFoundError(f"No pending order from {submitter_id}")
        logger.info("📌 order %s %s", order.short_id, order.status.lower())
        return order

    @staticmethod
    def _found(ref: str, order: Optional[Order]) -> Order:
        if order is None:
            raise NotFoundError(f"No order found for {ref!r}")
        return order

    # channel

    async def get_channel(self) -> str:
        return await self.channel.get_chat_id()

    async def set_channel(self, chat_id) -> str:
        return await self.channel.set_chat_id(chat_id)

    # availability

    def get_status(self) -> Dict[str, str]:
        return self.status.display()

    def set_status(self, state: str) -> Dict[str, str]:
        self.status.set(state)
        logger.info("📡 availability set to %s", self.status.state)
        return self.status.display()
