"""Unit tests for the UniFiSDK facade."""

import os
import pytest
from unifi_netmgr.api.cloud import UniFiCloudAPI
from unifi_netmgr.api.local import UniFiLocalAPI
from unifi_netmgr.models.analysis import (
    ApplyResult,
    ConfigurationChange,
    Recommendation,
    RecommendationCategory,
    Severity,
)
from unifi_netmgr.models.cloud import CloudSite
from unifi_netmgr.sdk import UniFiSDK
from unifi_netmgr.utils.errors import ErrorCodes, ToolError
from unittest.mock import AsyncMock, patch


def recommendation(rec_id: str, automated: bool = True) -> Recommendation:
    return Recommendation(
        id=rec_id,
        category=RecommendationCategory.SECURITY,
        severity=Severity.CRITICAL,
        title=rec_id,
        description='',
        current_state='',
        recommended_state='',
        impact='',
        automated=automated,
    )


@pytest.fixture
def local_api():
    api = AsyncMock(spec=UniFiLocalAPI)
    api.fetch_clients.return_value = [
        {'mac': '20:f8:3b:aa:bb:cc', 'name': 'nas-backup', 'is_wired': True},
        {'mac': 'broken'},
    ]
    api.fetch_devices.return_value = []
    api.fetch_reservations.return_value = []
    return api


@pytest.fixture
def cloud_api():
    api = AsyncMock(spec=UniFiCloudAPI)
    api.get_hosts.return_value = []
    api.get_sites.return_value = [
        CloudSite.model_validate({'siteId': 's1', 'statistics': {'gateway': {'ipsMode': 'disabled'}}})
    ]
    api.get_devices.return_value = []
    return api


class TestNetworkOverview:
    """Test API selection for monitoring."""

    @pytest.mark.asyncio
    async def test_prefers_cloud(self, cloud_api, local_api):
        overview = await UniFiSDK(cloud=cloud_api, local=local_api).get_network_overview()
        assert overview.source == 'cloud'
        local_api.fetch_clients.assert_not_called()

    @pytest.mark.asyncio
    async def test_local_skips_bad_records(self, local_api):
        overview = await UniFiSDK(local=local_api).get_network_overview()
        assert overview.source == 'local'
        assert [c.mac for c in overview.clients] == ['20:f8:3b:aa:bb:cc']

    @pytest.mark.asyncio
    async def test_nothing_configured(self):
        with pytest.raises(ToolError) as exc_info:
            await UniFiSDK().get_network_overview()
        assert exc_info.value.error_code == ErrorCodes.NO_API_CONFIGURED

    @pytest.mark.asyncio
    async def test_analyze_marks_fix_automated_with_local(self, cloud_api, local_api):
        analysis = await UniFiSDK(cloud=cloud_api, local=local_api).analyze_network()
        assert analysis.recommendations[0].id == 'ips-disabled'
        assert analysis.recommendations[0].automated is True


class TestApplyOptimizations:
    """Test the automated optimisation flow."""

    @pytest.mark.asyncio
    async def test_requires_local(self):
        with pytest.raises(ToolError) as exc_info:
            await UniFiSDK().apply_optimizations([recommendation('ips-disabled')])
        assert exc_info.value.error_code == ErrorCodes.NO_API_CONFIGURED

    @pytest.mark.asyncio
    async def test_dry_run_changes_nothing(self, local_api):
        results = await UniFiSDK(local=local_api).apply_optimizations(
            [recommendation('ips-disabled')], dry_run=True
        )
        assert results == []
        local_api.enable_ips.assert_not_called()

    @pytest.mark.asyncio
    async def test_enables_ips(self, local_api):
        change = ConfigurationChange(type='ips', action='enable', target='IPS', description='Enable IPS')
        local_api.enable_ips.return_value = ApplyResult(success=True, change=change)

        results = await UniFiSDK(local=local_api).apply_optimizations(
            [recommendation('ips-disabled'), recommendation('offline-devices', automated=False)]
        )

        local_api.enable_ips.assert_awaited_once_with('detection')
        assert [r.success for r in results] == [True]

    @pytest.mark.asyncio
    async def test_retry_rate_not_implemented(self, local_api):
        results = await UniFiSDK(local=local_api).apply_optimizations([recommendation('high-retry-rate')])
        assert results[0].success is False
        assert results[0].error == 'Requires device-specific implementation'


class TestOrganizeAndConnection:
    """Test IP organisation and connectivity checks."""

    @pytest.mark.asyncio
    async def test_organize_uses_local_as_source_and_committer(self, local_api):
        result = await UniFiSDK(local=local_api).organize_ips(apply_changes=True)

        assert result.summary.auto_classified == 1
        assert result.summary.rejected == 1
        local_api.commit_reservation.assert_awaited_once_with(
            '20:f8:3b:aa:bb:cc', '10.0.0.51', 'nas-backup'
        )

    @pytest.mark.asyncio
    async def test_connection_report(self, cloud_api, local_api):
        local_api.get_devices.side_effect = ToolError(
            message='Login failed', error_code=ErrorCodes.AUTHENTICATION_FAILED
        )
        result = await UniFiSDK(cloud=cloud_api, local=local_api).test_connection()

        assert result.cloud is True
        assert result.local is False
        assert result.errors == ['Local API: Login failed']

    @pytest.mark.asyncio
    async def test_close_closes_both(self, cloud_api, local_api):
        async with UniFiSDK(cloud=cloud_api, local=local_api):
            pass
        cloud_api.close.assert_awaited_once()
        local_api.close.assert_awaited_once()

    def test_from_env(self):
        env = {
            'UNIFI_LOCAL_HOST': '192.168.1.1',
            'UNIFI_LOCAL_USERNAME': 'admin',
            'UNIFI_LOCAL_PASSWORD': 'secret',  # pragma: allowlist secret
        }
        with patch.dict(os.environ, env, clear=True):
            sdk = UniFiSDK.from_env()
        assert sdk.cloud is None
        assert isinstance(sdk.local, UniFiLocalAPI)
