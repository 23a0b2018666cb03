"""Shared fixtures: isolated files under tmp_path and a mocked Telegram dispatcher."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from intake_ext.models import Order
from intake_ext.settings import Settings
from intake_ext.state import build_state

ADMIN_ID = 4242
SUBMITTER = "123456789012345678"


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_order(i: int, **overrides) -> Order:
    data = dict(
        id=f"{i:08d}-0000-4000-8000-000000000000",
        submitter_name=f"client{i}",
        submitter_id=SUBMITTER,
        subject_name=f"Server {i}",
        category="Gaming Community",
        budget="$50",
        payment_method="PayPal",
        details="A moderation bot",
        created_at=1_700_000_000 + i,
    )
    data.update(overrides)
    return Order(**data)


def inquiry_payload(**overrides) -> dict:
    data = {
        "discordUsername": "echo_fan",
        "clientDiscordId": SUBMITTER,
        "serverName": "Echo Hangout",
        "serverInvite": "https://discord.gg/echo",
        "serverType": "Gaming Community",
        "budget": "$50",
        "paymentMethod": "PayPal",
        "projectDetails": "Ticket bot with transcripts",
    }
    data.update(overrides)
    return data


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        bot_token="test-token",
        admin_id=ADMIN_ID,
        orders_file=tmp_path / "orders.json",
        config_file=tmp_path / "config.json",
        work_file=tmp_path / "work.json",
        visits_file=tmp_path / "visits.json",
        site_url="https://echo.example",
    )


@pytest.fixture
def notifier():
    n = MagicMock()
    n.send = AsyncMock(return_value=True)
    n.log_admin = AsyncMock(return_value=True)
    return n


@pytest.fixture
def state(settings, notifier):
    return build_state(settings, notifier)
