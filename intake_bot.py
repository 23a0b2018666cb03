# -*- coding: utf-8 -*-
from __future__ import annotations
import logging

from telegram.constants import ParseMode
from telegram.ext import Application, ApplicationBuilder, Defaults

from handlers.admin import register_admin_handlers
from handlers.decisions import register_decision_handlers
from intake_ext.settings import Settings
from intake_ext.state import AppState, build_state
from web_server import start_web_server

logger = logging.getLogger(__name__)


async def _post_init(app: Application):
    state: AppState = app.bot_data["state"]
    state.notifier.bot = app.bot
    try:
        await app.bot.delete_webhook(drop_pending_updates=True)
        logger.info("✅ Webhook removed, polling active.")
    except Exception as e:
        logger.warning("⚠️ Could not remove webhook: %s", e)
    try:
        app.bot_data["http_runner"] = await start_web_server(state, state.settings.port, app.bot.username or "")
    except Exception as e:
        logger.error("⚠️ HTTP server start error: %s", e)


async def _post_shutdown(app: Application):
    runner = app.bot_data.get("http_runner")
    if runner is not None:
        await runner.cleanup()


def build_application(settings: Settings, state: AppState | None = None) -> Application:
    app = (
        ApplicationBuilder()
        .token(settings.bot_token)
        .defaults(Defaults(parse_mode=ParseMode.HTML))
        .post_init(_post_init)
        .post_shutdown(_post_shutdown)
        .build()
    )
    app.bot_data["state"] = state or build_state(settings)
    register_admin_handlers(app)
    register_decision_handlers(app)
    return app


def main():
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s", level=logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    settings = Settings.from_env()
    if not settings.bot_token:
        raise SystemExit("BOT_TOKEN is not set")
    if not settings.admin_id:
        logger.warning("⚠️ ADMIN_ID is not set, owner commands are disabled. Use /whoami to find your ID.")
    logger.info("🚀 Bot is running...")
    application = build_application(settings)
    application.run_polling(drop_pending_updates=True)


if __name__ == "__main__":
    main()
