import logging
from aiohttp import web

from intake_ext.errors import ConfigurationError, IntakeError, NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

STATE_KEY = web.AppKey("state", object)
BOT_NAME_KEY = web.AppKey("bot_name", str)

GENERIC_ERROR = "Something went wrong on our end. Please DM directly."


def error_response(e: Exception) -> web.Response:
    if isinstance(e, ValidationError):
        return web.json_response({"error": e.message, "code": e.code}, status=400)
    if isinstance(e, NotFoundError):
        return web.json_response({"error": e.message, "code": e.code}, status=404)
    if isinstance(e, ConfigurationError):
        return web.json_response({"error": e.message, "code": e.code}, status=503)
    code = e.code if isinstance(e, IntakeError) else StorageError.code
    return web.json_response({"error": GENERIC_ERROR, "code": code}, status=500)


@web.middleware
async def cors_middleware(request: web.Request, handler):
    if request.method == "OPTIONS":
        resp = web.Response(status=204)
    else:
        resp = await handler(request)
    resp.headers["Access-Control-Allow-Origin"] = request.app[STATE_KEY].settings.site_url
    resp.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    resp.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return resp


async def _payload(request: web.Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be JSON.")
    return body if isinstance(body, dict) else {}


def _client_key(request: web.Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote or "unknown"


async def healthcheck(request: web.Request):
    name = request.app.get(BOT_NAME_KEY)
    return web.json_response({"status": "online", "bot": f"@{name}" if name else "starting..."})


async def status(request: web.Request):
    return web.json_response(request.app[STATE_KEY].service.get_status())


async def work(request: web.Request):
    try:
        return web.json_response(await request.app[STATE_KEY].work.list())
    except IntakeError as e:
        logger.error("GET /work error: %s", e)
        return web.json_response([], status=500)


async def visit(request: web.Request):
    try:
        count = await request.app[STATE_KEY].visits.record(_client_key(request))
    except StorageError as e:
        logger.error("POST /visit error: %s", e)
        return web.json_response({"count": 0}, status=500)
    return web.json_response({"count": count})


async def inquiry(request: web.Request):
    try:
        result = await request.app[STATE_KEY].service.submit_order(await _payload(request))
    except IntakeError as e:
        if not isinstance(e, ValidationError):
            logger.error("POST /inquiry error: %s", e)
        return error_response(e)
    except Exception as e:
        logger.exception("POST /inquiry failed")
        return error_response(e)
    return web.json_response({
        "success": True,
        "orderId": result.order.id,
        "isCustomBudget": result.is_custom_budget,
        "message": result.message,
    })


async def contact(request: web.Request):
    try:
        await request.app[STATE_KEY].service.submit_message(await _payload(request))
    except IntakeError as e:
        if not isinstance(e, ValidationError):
            logger.error("POST /contact error: %s", e)
        return error_response(e)
    except Exception as e:
        logger.exception("POST /contact failed")
        return error_response(e)
    return web.json_response({"success": True})


def build_web_app(state) -> web.Application:
    app = web.Application(middlewares=[cors_middleware])
    app[STATE_KEY] = state
    app.add_routes([
        web.get("/", healthcheck),
        web.get("/healthz", healthcheck),
        web.get("/status", status),
        web.get("/work", work),
        web.post("/visit", visit),
        web.post("/inquiry", inquiry),
        web.post("/contact", contact),
    ])
    return app


async def start_web_server(state, port: int, bot_name: str = "") -> web.AppRunner:
    app = build_web_app(state)
    if bot_name:
        app[BOT_NAME_KEY] = bot_name
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", port)
    await site.start()
    logger.info("🌐 HTTP server started on 0.0.0.0:%s", port)
    return runner
