"""
3GPP Guidance MCP Server

A Model Context Protocol server that answers questions about 3GPP
specifications with structured, level-appropriate research guidance.

Features:
- Question analysis (intent, domain, concepts, complexity)
- Leveled guidance documents (beginner / intermediate / expert)
- Local catalogue search, details, comparison and implementation planning
- Reference resources and explanation prompts

Architecture:
- instructions.py: SERVER_INSTRUCTIONS for AI agents
- tool_registry.py: Centralized tool registration
- tools/: Individual tool implementations by category
- container: DI container (dependency-injector) for service lifecycle
"""

from __future__ import annotations

import logging
import os
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any, cast

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from tgpp_guidance.container import ApplicationContainer

from .instructions import SERVER_INSTRUCTIONS
from .tool_registry import register_all_mcp_tools

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from tgpp_guidance.application.guidance.engine import GuidanceEngine
    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase

logger = logging.getLogger(__name__)

DEFAULT_NAME = "3gpp-guidance"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8765
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ── Module-level DI container ──────────────────────────────────────────────
_container: ApplicationContainer | None = None


def get_container() -> ApplicationContainer:
    """Get the application DI container.

    Raises:
        RuntimeError: If ``create_server()`` has not been called yet.
    """
    if _container is None:
        msg = "Container not initialized. Call create_server() first."
        raise RuntimeError(msg)
    return _container


def _make_lifespan(
    container: ApplicationContainer,
) -> Callable[[FastMCP[Any]], AbstractAsyncContextManager[ApplicationContainer]]:
    """Create a FastMCP lifespan handler bound to *container*."""

    @asynccontextmanager
    async def _lifespan(server: FastMCP[Any]) -> AsyncIterator[ApplicationContainer]:
        logger.info("Lifecycle: startup, knowledge base ready")
        try:
            yield container
        finally:
            container.reset_singletons()
            logger.info("Lifecycle: shutdown, services released")

    return _lifespan


def create_server(
    name: str = DEFAULT_NAME,
    data_dir: str | None = None,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    disable_security: bool = False,
    json_response: bool = False,
    stateless_http: bool = False,
    container: ApplicationContainer | None = None,
) -> FastMCP:
    """
    Create and configure the 3GPP Guidance MCP server.

    The knowledge base is loaded here, before the server accepts requests.

    Args:
        name: Server name.
        data_dir: Alternate knowledge data directory. Default: bundled YAML data.
        host: Bind host for the HTTP transports.
        port: Bind port for the HTTP transports.
        disable_security: Disable DNS rebinding protection (needed for remote access).
        json_response: Use JSON responses instead of SSE.
        stateless_http: Use stateless HTTP mode (no session management).
        container: Pre-built container (tests override providers this way).

    Returns:
        Configured FastMCP server instance.

    Raises:
        KnowledgeLoadError: knowledge data is missing or malformed.
    """
    global _container
    logger.info("Initializing 3GPP Guidance MCP Server...")

    # ── DI container ────────────────────────────────────────────────────
    if container is None:
        container = ApplicationContainer()
        container.config.from_dict({"data_dir": data_dir})
    _container = container

    knowledge_base = cast("KnowledgeBase", container.knowledge_base())
    engine = cast("GuidanceEngine", container.guidance_engine())
    logger.info("Knowledge data directory: %s", data_dir or "bundled")

    # ── Transport security ──────────────────────────────────────────────
    if disable_security:
        transport_security = TransportSecuritySettings(enable_dns_rebinding_protection=False)
        logger.info("DNS rebinding protection disabled for remote access")
    else:
        transport_security = None

    # ── Create MCP server with lifespan ─────────────────────────────────
    mcp = FastMCP(
        name,
        instructions=SERVER_INSTRUCTIONS,
        host=host,
        port=port,
        transport_security=transport_security,
        json_response=json_response,
        stateless_http=stateless_http,
        lifespan=_make_lifespan(container),
    )

    # ── Register all tools via centralized registry ─────────────────────
    stats = register_all_mcp_tools(mcp=mcp, engine=engine, knowledge_base=knowledge_base)
    logger.info("Tool registration complete: %s", stats)

    # ── Install performance profiling (optional) ────────────────────────
    from tgpp_guidance.shared.profiling import install_profiling

    install_profiling(mcp)

    logger.info("3GPP Guidance MCP Server initialized successfully")
    return mcp


def configure_logging(level: str | None = None) -> None:
    """basicConfig with the server log format; level from TGPP_LOG_LEVEL by default."""
    level_name = (level or os.environ.get("TGPP_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)


def main():
    """Run the MCP server over stdio."""
    configure_logging()

    data_dir = os.environ.get("TGPP_DATA_DIR", "").strip() or None
    server = create_server(data_dir=data_dir)

    # Run stdio MCP server (blocks)
    server.run()


if __name__ == "__main__":
    main()
