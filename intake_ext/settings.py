import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_PROFILE_URL = "https://discord.com/users/{id}"


def _int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


@dataclass
class Settings:
    bot_token: str = ""
    admin_id: int = 0
    port: int = 10000
    site_url: str = "*"
    orders_file: Path = Path("orders.json")
    config_file: Path = Path("config.json")
    work_file: Path = Path("work.json")
    visits_file: Path = Path("visits.json")
    notify_chat_id: str = ""
    orders_cache_ttl: float = 30.0
    max_orders: int = 500
    store_timeout: float = 5.0
    profile_url: str = DEFAULT_PROFILE_URL

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            bot_token=os.getenv("BOT_TOKEN", "").strip(),
            admin_id=_int("ADMIN_ID", 0),
            port=_int("PORT", 10000),
            site_url=os.getenv("SITE_URL", "*").strip() or "*",
            orders_file=Path(os.getenv("ORDERS_FILE", "orders.json")),
            config_file=Path(os.getenv("CONFIG_FILE", "config.json")),
            work_file=Path(os.getenv("WORK_FILE", "work.json")),
            visits_file=Path(os.getenv("VISITS_FILE", "visits.json")),
            notify_chat_id=os.getenv("NOTIFY_CHAT_ID", "").strip(),
            orders_cache_ttl=_float("ORDERS_CACHE_TTL", 30.0),
            max_orders=_int("MAX_ORDERS", 500),
            store_timeout=_float("STORE_TIMEOUT", 5.0),
            profile_url=os.getenv("PROFILE_URL", DEFAULT_PROFILE_URL).strip() or DEFAULT_PROFILE_URL,
        )
