"""
Query API server.

Read-only HTTP endpoints over the indexer's published checkpoint.
Large integers are serialized as decimal strings.
"""

import asyncio

from aiohttp import web
from loguru import logger

from goal_indexer.config.constants import HTTP_SHUTDOWN_TIMEOUT
from goal_indexer.services.event_indexer import EventIndexerService

INDEXER_KEY = web.AppKey("indexer", EventIndexerService)
CORS_ORIGIN_KEY = web.AppKey("cors_origin", str)


def _apply_cors(headers, origin: str) -> None:
    headers["Access-Control-Allow-Origin"] = origin
    headers["Access-Control-Allow-Methods"] = "GET,OPTIONS"
    headers["Access-Control-Allow-Headers"] = "Content-Type"


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Add CORS headers to every response and answer preflight requests."""
    origin = request.app[CORS_ORIGIN_KEY]

    if request.method == "OPTIONS":
        response = web.Response(status=200)
    else:
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            _apply_cors(exc.headers, origin)
            raise

    _apply_cors(response.headers, origin)
    return response


async def status_handler(request: web.Request) -> web.Response:
    """
    Indexer status endpoint.

    Returns:
        JSON response with last processed block and counts
    """
    status = request.app[INDEXER_KEY].get_status()
    return web.json_response(
        {
            "lastBlock": str(status["last_processed_block"]),
            "vaults": status["vault_count"],
            "activities": status["activity_count"],
        }
    )


async def activity_handler(request: web.Request) -> web.Response:
    """
    Activity feed endpoint.

    Query params:
        limit: Maximum entries (defaults on missing or invalid values)
        vaults: Comma-separated vault addresses to filter by

    Returns:
        JSON response with newest activities first
    """
    entries = request.app[INDEXER_KEY].get_activity(
        limit=request.query.get("limit"),
        vaults=request.query.get("vaults"),
    )
    return web.json_response(
        {"activities": [entry.to_public_dict() for entry in entries]}
    )


async def vaults_handler(request: web.Request) -> web.Response:
    """
    Discovered vaults endpoint.

    Returns:
        JSON response with vault records in discovery order
    """
    vaults = request.app[INDEXER_KEY].get_vaults()
    return web.json_response(
        {
            "vaults": [
                {"address": address, **record.to_dict()}
                for address, record in vaults
            ]
        }
    )


async def liveness_handler(request: web.Request) -> web.Response:
    """
    Liveness check endpoint.

    Returns:
        JSON response indicating if the process is alive
    """
    return web.json_response(
        {
            "status": "alive",
            "alive": True,
        }
    )


def create_app(indexer: EventIndexerService, cors_origin: str = "*") -> web.Application:
    """
    Build the query API application.

    Args:
        indexer: Indexer whose published state is served
        cors_origin: Value for Access-Control-Allow-Origin

    Returns:
        aiohttp application
    """
    app = web.Application(middlewares=[cors_middleware])
    app[INDEXER_KEY] = indexer
    app[CORS_ORIGIN_KEY] = cors_origin

    app.router.add_get("/status", status_handler)
    app.router.add_get("/activity", activity_handler)
    app.router.add_get("/vaults", vaults_handler)
    app.router.add_get("/health", liveness_handler)
    return app


async def start_http_server(
    app: web.Application,
    host: str = "0.0.0.0",
    port: int = 8081,
) -> web.AppRunner:
    """
    Start query API server.

    Args:
        app: Application from create_app()
        host: Host to bind to
        port: Port to bind to

    Returns:
        AppRunner for cleanup
    """
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"[API] Indexer listening on {host}:{port}")
    logger.info(f"  - Status: http://{host}:{port}/status")
    logger.info(f"  - Activity: http://{host}:{port}/activity")

    return runner


async def stop_http_server(
    runner: web.AppRunner,
    timeout: int = HTTP_SHUTDOWN_TIMEOUT,
) -> None:
    """
    Stop query API server gracefully.

    Args:
        runner: AppRunner to cleanup
        timeout: Maximum time to wait for cleanup in seconds
    """
    logger.info("[API] Stopping HTTP server...")
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info("[API] HTTP server stopped")
    except TimeoutError:
        logger.warning(f"[API] HTTP server cleanup timed out after {timeout}s")
