"""
Presentation Layer - External interfaces.

- mcp_server: FastMCP server exposing tools, resources and prompts
"""
