from dataclasses import dataclass

from intake_ext.cache import OrdersCache
from intake_ext.channel import ChannelConfig
from intake_ext.orders import OrderRepository
from intake_ext.service import IntakeService
from intake_ext.settings import Settings
from intake_ext.status import StatusRegister
from intake_ext.store import JsonStore
from intake_ext.visits import VisitCounter
from intake_ext.work import WorkRepository
from utils.notify import Notifier


@dataclass
class AppState:
    settings: Settings
    orders: OrderRepository
    status: StatusRegister
    channel: ChannelConfig
    work: WorkRepository
    visits: VisitCounter
    notifier: Notifier
    service: IntakeService


def build_state(settings: Settings, notifier: Notifier = None) -> AppState:
    """Everything the handlers and routes share, created once by the entry point."""
    t = settings.store_timeout
    cache = OrdersCache(JsonStore(settings.orders_file, [], t), settings.orders_cache_ttl, settings.max_orders)
    orders = OrderRepository(cache)
    status = StatusRegister()
    channel = ChannelConfig(JsonStore(settings.config_file, {}, t), settings.notify_chat_id)
    notifier = notifier or Notifier(admin_chat_id=settings.admin_id)
    service = IntakeService(orders, status, channel, notifier, settings.admin_id, settings.profile_url)
    return AppState(
        settings=settings,
        orders=orders,
        status=status,
        channel=channel,
        work=WorkRepository(JsonStore(settings.work_file, [], t)),
        visits=VisitCounter(JsonStore(settings.visits_file, {"count": 0}, t)),
        notifier=notifier,
        service=service,
    )
