"""Entry point for running the ITSM MCP server as a module."""

from .server import main

if __name__ == "__main__":
    main()
