"""Unit tests for the MCP server wiring."""

import pytest
from unifi_netmgr import tools
from unifi_netmgr.server import create_server
from unittest.mock import AsyncMock, patch


class TestServer:
    """Test server creation."""

    def test_registers_all_tools(self):
        with patch('unifi_netmgr.server.configure_logging'), patch('unifi_netmgr.server.FastMCP') as mcp_cls:
            create_server()

        registered = [call.args[0].__name__ for call in mcp_cls.return_value.tool.call_args_list]
        assert registered == tools.__all__


class TestTools:
    """Test tool functions against a mocked SDK."""

    @pytest.mark.asyncio
    async def test_organization_plan_never_applies(self):
        sdk = AsyncMock()
        sdk.__aenter__.return_value = sdk
        with (
            patch('unifi_netmgr.tools.UniFiSDK.from_env', return_value=sdk),
            patch('unifi_netmgr.tools.build_plan_document', return_value={'metadata': {}}) as build,
        ):
            plan = await tools.organization_plan()

        sdk.organize_ips.assert_awaited_once_with(apply_changes=False, rules=None)
        build.assert_called_once_with(sdk.organize_ips.return_value)
        assert plan == {'metadata': {}}
