"""HTTP front end for the AHA MCP server.

Serves the streamable HTTP transport at ``/mcp`` in stateless mode (each
request gets a fresh transport, no session ids are issued) plus a plain-text
health check at ``/``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Sequence

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.routing import Route

from aha_config import Settings, get_settings
from aha_logging import get_logger
from aha_mcp_server import create_server
from aha_resources import AhaResource, load_resources

logger = get_logger("http")

MCP_PATH = "/mcp"
MCP_METHODS = ["POST", "GET", "DELETE"]

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "content-type, mcp-session-id",
    "Access-Control-Expose-Headers": "Mcp-Session-Id",
}
RESPONSE_CORS_HEADERS = [
    (b"access-control-allow-origin", b"*"),
    (b"access-control-expose-headers", b"Mcp-Session-Id"),
]


class McpEndpoint:
    """ASGI app handing ``/mcp`` requests to the session manager.

    Adds the CORS headers to every reply and turns handler failures into a
    500 when the response has not started yet.
    """

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope, receive, send) -> None:
        started = False

        async def send_with_cors(message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
                message = dict(message)
                message["headers"] = list(message.get("headers", [])) + RESPONSE_CORS_HEADERS
            await send(message)

        try:
            await self.session_manager.handle_request(scope, receive, send_with_cors)
        except Exception:
            logger.exception("Error handling MCP request")
            if not started:
                response = PlainTextResponse("Internal server error", status_code=500)
                await response(scope, receive, send)


def create_app(
    settings: Settings | None = None,
    resources: Sequence[AhaResource] | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if resources is None:
        resources = load_resources(settings.resources_path)

    server = create_server(resources, settings)
    session_manager = StreamableHTTPSessionManager(
        app=server,
        event_store=None,
        json_response=settings.json_response,
        stateless=True,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        async with session_manager.run():
            yield

    app = FastAPI(title="AHA MCP server", lifespan=lifespan)

    @app.get("/", response_class=PlainTextResponse)
    async def health() -> str:
        return "AHA MCP server"

    @app.options(MCP_PATH)
    async def preflight() -> Response:
        return Response(status_code=204, headers=PREFLIGHT_HEADERS)

    app.router.routes.append(Route(MCP_PATH, endpoint=McpEndpoint(session_manager), methods=MCP_METHODS))
    return app
