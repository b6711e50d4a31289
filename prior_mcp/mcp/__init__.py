"""MCP surface for Prior: tools, resources, and the stdio server."""
