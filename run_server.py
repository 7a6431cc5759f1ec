#!/usr/bin/env python3
"""
3GPP Guidance MCP Server - Transport Selection

Runs the server over stdio (default) or one of the HTTP transports, so
remote clients on other machines can connect.

Usage:
    # Local stdio (for mcp.json "command" entries)
    python run_server.py

    # SSE transport
    python run_server.py --transport sse --port 8765

    # Streamable HTTP transport, reachable from other hosts
    python run_server.py --transport streamable-http --host 0.0.0.0 --no-security

    # Alternate knowledge data
    python run_server.py --data-dir ./my-catalogue

Environment Variables:
    TGPP_DATA_DIR: Alternate knowledge data directory
    TGPP_LOG_LEVEL: Logging level (default: INFO)
    TGPP_PROFILING: Set to 1 to enable per-tool timing
    MCP_HOST: Server host (default: 127.0.0.1)
    MCP_PORT: Server port (default: 8765)
"""

import argparse
import logging
import os
import sys

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from tgpp_guidance.presentation.mcp_server.server import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    configure_logging,
    create_server,
)

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Run the 3GPP Guidance MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("MCP_HOST", DEFAULT_HOST),
        help=f"Server host for HTTP transports (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("MCP_PORT", str(DEFAULT_PORT))),
        help=f"Server port for HTTP transports (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--data-dir",
        default=os.environ.get("TGPP_DATA_DIR") or None,
        help="Alternate knowledge data directory (default: bundled data)",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("TGPP_LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--no-security",
        action="store_true",
        help="Disable DNS rebinding protection (for remote access)",
    )

    args = parser.parse_args()
    configure_logging(args.log_level)

    logger.info("Creating 3GPP Guidance MCP Server...")
    logger.info("  Transport: %s", args.transport)
    logger.info("  Data dir: %s", args.data_dir or "bundled")
    if args.transport != "stdio":
        logger.info("  Host: %s", args.host)
        logger.info("  Port: %s", args.port)
        logger.info("  DNS Rebinding Protection: %s", "Disabled" if args.no_security else "Enabled")

    server = create_server(
        data_dir=args.data_dir,
        host=args.host,
        port=args.port,
        disable_security=args.no_security,
    )

    if args.transport == "sse":
        logger.info("SSE endpoint: http://%s:%s/sse", args.host, args.port)
    elif args.transport == "streamable-http":
        logger.info("Streamable HTTP endpoint: http://%s:%s/mcp", args.host, args.port)

    server.run(transport=args.transport)


if __name__ == "__main__":
    main()
