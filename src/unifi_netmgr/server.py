"""FastMCP server for UniFi network monitoring and IP organisation."""

from fastmcp import FastMCP
from loguru import logger
from unifi_netmgr import tools
from unifi_netmgr.utils.logging import configure_logging


INSTRUCTIONS = """
UniFi Network Manager - monitoring, health analysis and IP organisation.

- Use `network_overview()` to see what the configured API reports.
- Use `network_health()` for a health score and prioritised recommendations.
- Use `organization_plan()` to preview how clients would be grouped into
  category IP ranges. It never commits reservations; committing is done from
  the CLI with `unifi-netmgr organize --apply` after the plan is reviewed.
"""


def create_server() -> FastMCP:
    """Create the FastMCP server with all tools registered."""
    configure_logging()

    mcp = FastMCP(
        name='unifi-netmgr',
        instructions=INSTRUCTIONS,
    )

    for tool_name in tools.__all__:
        mcp.tool(getattr(tools, tool_name))

    logger.info(f'Registered {len(tools.__all__)} tools: {tools.__all__}')
    return mcp


def main() -> None:
    """Main entry point for the MCP server."""
    mcp = create_server()
    try:
        logger.info('Starting UniFi Network Manager MCP server')
        mcp.run()
    except KeyboardInterrupt:
        logger.info('Server stopped by user')
    except Exception as e:
        logger.error('Server error', error=str(e))
        raise


if __name__ == '__main__':
    main()
