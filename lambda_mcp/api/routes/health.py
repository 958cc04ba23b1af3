"""Health check endpoint for the development server."""

from typing import Any

from fastapi import APIRouter, Request, Response

from lambda_mcp import __version__
from lambda_mcp.core.logging import get_logger


router = APIRouter()
logger = get_logger(__name__)


@router.get("/health")
async def health_check(request: Request, response: Response) -> dict[str, Any]:
    """Report the served capabilities.

    Follows the IETF health check response format draft.
    """
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"

    server = request.app.state.mcp_server
    stats = server.get_stats()
    logger.debug("health_check_request", server_name=server.config.name)

    return {
        "status": "pass",
        "version": __version__,
        "serviceId": server.config.name,
        "checks": {
            "capabilities": [
                {
                    "componentType": "registry",
                    "status": "pass",
                    "tools": stats["tools"],
                    "resources": stats["resources"],
                    "prompts": stats["prompts"],
                }
            ]
        },
    }
