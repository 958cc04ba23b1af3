"""FastAPI application factory for local development."""

import structlog
from fastapi import FastAPI

from lambda_mcp import __version__
from lambda_mcp.adapters.lambda_handler import create_event_pipeline
from lambda_mcp.api.routes.health import router as health_router
from lambda_mcp.api.routes.mcp import router as mcp_router
from lambda_mcp.auth import BearerTokenAuth
from lambda_mcp.config.settings import Settings
from lambda_mcp.core.logging import configure_logging_once
from lambda_mcp.server import MCPServer


logger = structlog.get_logger(__name__)


def create_app(
    server: MCPServer,
    auth: BearerTokenAuth | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create a FastAPI app serving ``server`` through the Lambda transport.

    Requests are converted into Lambda proxy events so the development server
    behaves exactly like the deployed function.

    Args:
        server: Server whose capabilities are exposed
        auth: Optional authentication strategy
        settings: Optional settings override. If None, uses the server's settings.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or server.settings

    configure_logging_once(settings.logging.level, settings.logging.format)

    app = FastAPI(
        title=server.config.name,
        description=server.config.description,
        version=__version__,
    )
    app.state.mcp_server = server
    app.state.pipeline = create_event_pipeline(server, auth, settings)

    app.include_router(health_router, tags=["health"])
    app.include_router(mcp_router, tags=["mcp"])

    logger.debug(
        "app_created", server_name=server.config.name, **server.registry.counts()
    )
    return app
