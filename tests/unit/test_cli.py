"""Unit tests for the Typer CLI."""

import asyncio
import json
import pytest
from typer.testing import CliRunner
from unifi_netmgr.cli import app
from unifi_netmgr.models.analysis import ConnectionTestResult, NetworkOverview
from unifi_netmgr.organize.organizer import IPOrganizer
from unifi_netmgr.sdk import UniFiSDK
from unifi_netmgr.utils.errors import ErrorCodes, ToolError
from unittest.mock import AsyncMock, patch


runner = CliRunner()


@pytest.fixture
def sdk():
    """SDK mock returned by UniFiSDK.from_env inside the CLI."""
    mock = AsyncMock(spec=UniFiSDK)
    mock.__aenter__.return_value = mock
    with (
        patch('unifi_netmgr.cli.UniFiSDK.from_env', return_value=mock),
        patch('unifi_netmgr.cli.configure_logging'),
    ):
        yield mock


class TestOrganizeCommand:
    """Test the organize command."""

    def test_writes_plan_files(self, sdk, tmp_path):
        clients = [
            {'mac': '20:f8:3b:aa:bb:cc', 'name': 'nas-backup', 'is_wired': True},
            {'mac': '00:00:5e:00:00:03', 'hostname': 'xyz-123', 'signal': -65},
        ]
        sdk.organize_ips.return_value = asyncio.run(IPOrganizer().organize(clients))

        result = runner.invoke(app, ['organize', '--output-dir', str(tmp_path)])

        assert result.exit_code == 0, result.output
        sdk.organize_ips.assert_awaited_once_with(apply_changes=False, rules=None)
        plan = json.loads((tmp_path / 'ip-organization.json').read_text())
        assert plan['organized']['Servers'][0]['assigned_ip'] == '10.0.0.51'
        assert '# IP Organization Plan' in (tmp_path / 'ip-organization.md').read_text()

    def test_apply_with_failures_exits_non_zero(self, sdk, tmp_path):
        committer = AsyncMock()
        committer.commit_reservation.side_effect = RuntimeError('offline')
        clients = [{'mac': '20:f8:3b:aa:bb:cc', 'name': 'nas-backup'}]
        sdk.organize_ips.return_value = asyncio.run(
            IPOrganizer(committer=committer).organize(clients, apply_changes=True)
        )

        result = runner.invoke(app, ['organize', '--apply', '--output-dir', str(tmp_path)])

        assert result.exit_code == 1
        sdk.organize_ips.assert_awaited_once_with(apply_changes=True, rules=None)

    def test_invalid_rules_file(self, sdk, tmp_path):
        rules = tmp_path / 'rules.json'
        rules.write_text('not json')

        result = runner.invoke(app, ['organize', '--rules', str(rules)])

        assert result.exit_code == 1
        sdk.organize_ips.assert_not_called()


class TestOtherCommands:
    """Test monitor, optimize and test."""

    def test_monitor_writes_overview(self, sdk, tmp_path):
        sdk.get_network_overview.return_value = NetworkOverview(source='local')
        output = tmp_path / 'network-data.json'

        result = runner.invoke(app, ['monitor', '--output', str(output)])

        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text())['source'] == 'local'

    def test_tool_error_exits_non_zero(self, sdk, tmp_path):
        sdk.analyze_network.side_effect = ToolError(
            message='No API configured', error_code=ErrorCodes.NO_API_CONFIGURED
        )
        result = runner.invoke(app, ['optimize', '--output', str(tmp_path / 'analysis.json')])

        assert result.exit_code == 1
        assert 'NO_API_CONFIGURED' in result.output

    def test_connection_failure(self, sdk):
        sdk.test_connection.return_value = ConnectionTestResult(errors=['Local API: refused'])
        result = runner.invoke(app, ['test'])

        assert result.exit_code == 1
        assert 'refused' in result.output

    def test_missing_config_file(self, sdk, tmp_path):
        result = runner.invoke(app, ['--config', str(tmp_path / 'missing.env'), 'test'])
        assert result.exit_code == 1
