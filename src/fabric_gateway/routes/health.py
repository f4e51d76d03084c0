"""Health check endpoint."""

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint."""
    registry = request.app.state.registry
    return JSONResponse(
        {
            "status": "ok",
            "message": "Fabric MCP is running",
            "connections": len(registry),
        }
    )


health_routes = [
    Route("/health", health_check, methods=["GET"]),
]
