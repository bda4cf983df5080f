"""MCP server exposing the worksheet calculator."""
