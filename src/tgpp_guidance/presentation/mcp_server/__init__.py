"""
3GPP Guidance MCP Server

Usage as standalone server:
    python -m tgpp_guidance.presentation.mcp_server

Or in mcp.json:
    {
        "servers": {
            "3gpp-guidance": {
                "type": "stdio",
                "command": "python",
                "args": ["-m", "tgpp_guidance.presentation.mcp_server"]
            }
        }
    }

Usage for integration:
    from tgpp_guidance.presentation.mcp_server import create_server, register_all_tools

    # Option 1: Create standalone server
    server = create_server()
    server.run()

    # Option 2: Register tools on an existing server
    container = ApplicationContainer()
    register_all_tools(your_mcp_server, container.guidance_engine(), container.knowledge_base())
"""

from __future__ import annotations

from .server import create_server, main
from .tools import register_all_tools

__all__ = ["create_server", "main", "register_all_tools"]
