"""AHA MCP server.

Exposes the American Heart Association widget (an HTML resource rendered by
the chat host) and two tools:

1) ``aha_widget`` - shows the branded widget for any user request
2) ``search_aha_resources`` - keyword search over the static AHA corpus

The corpus is loaded once by the caller and handed to ``create_server``; the
widget HTML is re-read on every request so edits show up without restarting.
"""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence

import mcp.server.stdio
import mcp.types as types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions

from aha_config import Settings, get_settings
from aha_logging import configure_logging, get_logger
from aha_resources import AhaResource, load_resources
from aha_search import search_resources

logger = get_logger("server")

SERVER_NAME = "aha-app"
SERVER_VERSION = "0.1.0"

WIDGET_URI = "ui://widget/aha.html"
WIDGET_MIME_TYPE = "text/html+skybridge"
WIDGET_META = {
    "openai/widgetPrefersBorder": True,
    "openai/widgetDomain": "https://chatgpt.com",
}

WIDGET_TOOL = "aha_widget"
SEARCH_TOOL = "search_aha_resources"

EMPTY_QUERY_TEXT = (
    "Please provide a specific question or topic to search in the American Heart Association resources."
)
DISCLAIMER_TEXT = (
    "*This information is based solely on American Heart Association resources and guidelines. "
    "For specific medical concerns, please consult with a healthcare professional. "
    "If you are experiencing a medical emergency, call 911 immediately.*"
)


def _not_found_text(query: str) -> str:
    return (
        f'I couldn\'t find specific information about "{query}" in the American Heart Association '
        "resources. Please try rephrasing your question or asking about a different heart health "
        "topic. For general health concerns, please consult with a healthcare professional."
    )


@dataclass(frozen=True)
class AhaToolResult:
    text: str
    structured: dict[str, Any] | None = None

    def to_mcp(self):
        content = [types.TextContent(type="text", text=self.text)]
        if self.structured is None:
            return content
        return content, self.structured


def read_widget_html(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def format_widget_response(query: str | None) -> AhaToolResult:
    query = query or ""
    text = f"Processing your request: {query}" if query else "American Heart Association widget loaded."
    return AhaToolResult(
        text=text,
        structured={"message": "American Heart Association", "query": query},
    )


def _format_resource(index: int, resource: AhaResource) -> str:
    lines = f"{index}. **{resource.title}**\n"
    lines += f"   Category: {resource.category}\n\n"
    lines += f"   {resource.content}\n\n"
    if resource.url:
        lines += f"   Learn more: {resource.url}\n"
    return lines


def format_search_response(
    query: str | None,
    resources: Sequence[AhaResource],
    *,
    max_results: int = 3,
) -> AhaToolResult:
    """Run the search and render the top ``max_results`` matches as text.

    An empty query and an empty result set are normal outcomes with fixed
    messages, never errors.
    """
    query = query or ""
    if not query.strip():
        return AhaToolResult(text=EMPTY_QUERY_TEXT)

    matches = search_resources(query, resources)
    if not matches:
        return AhaToolResult(text=_not_found_text(query))

    top = matches[: max(1, max_results)]
    text = f'Based on American Heart Association resources, here is information about "{query}":\n\n'
    text += "\n---\n\n".join(_format_resource(i, r) for i, r in enumerate(top, start=1))

    if len(matches) > len(top):
        text += (
            f"\n\nNote: Found {len(matches)} relevant resources. "
            f"Showing the top {len(top)} most relevant results."
        )
    text += f"\n\n{DISCLAIMER_TEXT}"

    return AhaToolResult(
        text=text,
        structured={
            "query": query,
            "resourcesFound": len(matches),
            "resources": [{"id": r.id, "title": r.title, "category": r.category} for r in top],
        },
    )


def _tool_definitions() -> list[types.Tool]:
    return [
        types.Tool(
            name=WIDGET_TOOL,
            title="American Heart Association Widget",
            description=(
                "ALWAYS call this tool for ANY user query or request when the American Heart Association "
                "connector is enabled. This displays the AHA widget with logo for visual context and "
                "branding. Required for all interactions: questions, requests, conversations, or any user "
                "input. The widget provides the AHA visual identity and should appear in every response."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "The user's query or request"},
                },
            },
            _meta={
                "openai/outputTemplate": WIDGET_URI,
                "openai/toolInvocation/invoking": "Loading American Heart Association widget...",
                "openai/toolInvocation/invoked": "American Heart Association widget ready",
            },
        ),
        types.Tool(
            name=SEARCH_TOOL,
            title="Search AHA Resources",
            description=(
                "Use this tool when a user asks for specific health information, asks questions about "
                "heart health, symptoms, conditions, treatments, prevention, or any medical/health-related "
                "topics. This tool searches the American Heart Association's official resources and "
                "returns information based only on AHA guidelines and recommendations. Always use this "
                "tool for health-related queries instead of general knowledge."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": (
                            "The user's question or information request about heart health, symptoms, "
                            "conditions, treatments, prevention, or related topics"
                        ),
                    },
                },
                "required": ["query"],
            },
            _meta={
                "openai/toolInvocation/invoking": "Searching American Heart Association resources...",
                "openai/toolInvocation/invoked": "Found AHA resources for your query",
            },
        ),
    ]


def create_server(resources: Sequence[AhaResource], settings: Settings) -> Server:
    """Build an MCP server bound to an already loaded corpus."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return [
            types.Resource(
                uri=WIDGET_URI,
                name="aha-widget",
                title="American Heart Association Widget",
                mimeType=WIDGET_MIME_TYPE,
                _meta=WIDGET_META,
            )
        ]

    @server.read_resource()
    async def read_resource(uri) -> Iterable[ReadResourceContents]:
        if str(uri) != WIDGET_URI:
            raise ValueError(f"Unknown resource: {uri}")
        html = read_widget_html(settings.widget_path)
        return [ReadResourceContents(content=html, mime_type=WIDGET_MIME_TYPE, meta=WIDGET_META)]

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return _tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]):
        arguments = arguments or {}
        query = str(arguments.get("query") or "")
        logger.info("Calling tool '%s' with query %r", name, query)

        if name == WIDGET_TOOL:
            return format_widget_response(query).to_mcp()

        if name == SEARCH_TOOL:
            result = format_search_response(query, resources, max_results=settings.max_results)
            if result.structured is not None:
                logger.info("Found %d resources for %r", result.structured["resourcesFound"], query)
            return result.to_mcp()

        raise ValueError(f"Unknown tool: {name}")

    return server


async def server_run(server: Server) -> None:
    try:
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=SERVER_VERSION,
                    capabilities=server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )
    except KeyboardInterrupt:
        return


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the American Heart Association MCP app.")
    parser.add_argument("--transport", choices=["http", "stdio"], default="http", help="MCP transport to serve on.")
    parser.add_argument("--host", default=settings.host, help="HTTP bind address.")
    parser.add_argument("--port", type=int, default=settings.port, help="HTTP port.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    resources = load_resources(settings.resources_path)

    if args.transport == "stdio":
        asyncio.run(server_run(create_server(resources, settings)))
        return

    import uvicorn

    from aha_http import MCP_PATH, create_app

    logger.info("AHA MCP server listening on http://localhost:%d%s", args.port, MCP_PATH)
    uvicorn.run(create_app(settings, resources), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
