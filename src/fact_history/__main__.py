"""Entry point for the fact-history MCP server."""

from fact_history.server import create_server


def main() -> None:
    """Run the fact-history MCP server."""
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
