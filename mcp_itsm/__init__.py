"""ITSM MCP Server - Model Context Protocol server for service requests and issue tickets."""

__version__ = "0.1.0"
