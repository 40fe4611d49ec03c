"""High-level facade over the cloud and local APIs."""

import asyncio
from loguru import logger
from typing import Any, Iterable
from unifi_netmgr.analysis import analyze_network
from unifi_netmgr.api.cloud import UniFiCloudAPI
from unifi_netmgr.api.local import UniFiLocalAPI
from unifi_netmgr.models.analysis import (
    ApplyResult,
    ConfigurationChange,
    ConnectionTestResult,
    NetworkAnalysis,
    NetworkOverview,
    Recommendation,
)
from unifi_netmgr.models.organization import OrganizationResult
from unifi_netmgr.organize.organizer import IPOrganizer, parse_client_records
from unifi_netmgr.organize.rules import ClassificationRule
from unifi_netmgr.organize.scheme import CategoryScheme
from unifi_netmgr.utils.auth import CloudCredentials, Credentials, load_optional_credentials
from unifi_netmgr.utils.errors import ErrorCodes, ToolError


class UniFiSDK:
    """Monitoring through the cloud API when configured, configuration through the local API."""

    def __init__(
        self,
        cloud: UniFiCloudAPI | None = None,
        local: UniFiLocalAPI | None = None,
    ):
        self.cloud = cloud
        self.local = local

    @classmethod
    def from_credentials(
        cls,
        cloud: CloudCredentials | None = None,
        local: Credentials | None = None,
    ) -> 'UniFiSDK':
        return cls(
            cloud=UniFiCloudAPI(cloud) if cloud else None,
            local=UniFiLocalAPI(local) if local else None,
        )

    @classmethod
    def from_env(cls) -> 'UniFiSDK':
        """Build from UNIFI_CLOUD_* / UNIFI_LOCAL_* environment variables."""
        cloud, local = load_optional_credentials()
        return cls.from_credentials(cloud, local)

    async def __aenter__(self) -> 'UniFiSDK':
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self.cloud:
            await self.cloud.close()
        if self.local:
            await self.local.close()

    def _require_local(self) -> UniFiLocalAPI:
        if self.local is None:
            raise ToolError(
                message='Local API required for configuration changes',
                error_code=ErrorCodes.NO_API_CONFIGURED,
                suggestion='Configure UNIFI_LOCAL_HOST, UNIFI_LOCAL_USERNAME and UNIFI_LOCAL_PASSWORD',
            )
        return self.local

    # =========================================================================
    # Monitoring
    # =========================================================================

    async def get_network_overview(self) -> NetworkOverview:
        """Cloud hosts/sites/devices when a cloud key is set, else local devices/clients.

        Raises:
            ToolError: NO_API_CONFIGURED when neither API is configured
        """
        if self.cloud:
            hosts, sites, devices = await asyncio.gather(
                self.cloud.get_hosts(),
                self.cloud.get_sites(),
                self.cloud.get_devices(),
            )
            return NetworkOverview(source='cloud', hosts=hosts, sites=sites, cloud_devices=devices)

        if self.local:
            devices, raw_clients = await asyncio.gather(
                self.local.fetch_devices(),
                self.local.fetch_clients(),
            )
            clients, rejected = parse_client_records(raw_clients)
            if rejected:
                logger.warning(f'Skipped {len(rejected)} malformed client records')
            return NetworkOverview(source='local', devices=devices, clients=clients)

        raise ToolError(
            message='No API configured',
            error_code=ErrorCodes.NO_API_CONFIGURED,
            suggestion='Set UNIFI_CLOUD_API_KEY and/or the UNIFI_LOCAL_* variables',
        )

    async def analyze_network(self) -> NetworkAnalysis:
        overview = await self.get_network_overview()
        return analyze_network(overview, local_available=self.local is not None)

    # =========================================================================
    # Automated optimisation
    # =========================================================================

    async def apply_optimizations(
        self,
        recommendations: Iterable[Recommendation],
        dry_run: bool = False,
    ) -> list[ApplyResult]:
        """Apply the automated recommendations through the local API.

        Only IPS enablement is applied. Transmit-power reduction for a high
        retry rate needs per-AP retry statistics, so it is reported as a
        failed ApplyResult instead of being changed.

        Args:
            recommendations: Recommendations from analyze_network()
            dry_run: Only log what would be applied

        Returns:
            One ApplyResult per attempted recommendation (empty on dry run)
        """
        local = self._require_local()
        results: list[ApplyResult] = []

        for rec in recommendations:
            if not rec.automated:
                continue

            if dry_run:
                logger.info(f'[DRY RUN] Would apply: {rec.title}')
                continue

            logger.info(f'Applying: {rec.title}')
            if rec.id == 'ips-disabled':
                results.append(await local.enable_ips('detection'))
            elif rec.id == 'high-retry-rate':
                results.append(
                    ApplyResult(
                        success=False,
                        change=ConfigurationChange(
                            type='device',
                            action='update',
                            target='All APs',
                            description='Reduce AP transmit power',
                            risk_level='medium',
                        ),
                        error='Requires device-specific implementation',
                    )
                )

        return results

    # =========================================================================
    # IP organisation
    # =========================================================================

    async def organize_ips(
        self,
        apply_changes: bool = False,
        rules: Iterable[ClassificationRule] | None = None,
        scheme: CategoryScheme | None = None,
    ) -> OrganizationResult:
        local = self._require_local()
        organizer = IPOrganizer(scheme=scheme, rules=rules, committer=local)
        return await organizer.organize_from(local, apply_changes=apply_changes)

    # =========================================================================
    # Utility
    # =========================================================================

    async def test_connection(self) -> ConnectionTestResult:
        result = ConnectionTestResult()

        if self.cloud:
            try:
                await self.cloud.get_hosts()
                result.cloud = True
            except ToolError as e:
                result.errors.append(f'Cloud API: {e.message}')

        if self.local:
            try:
                await self.local.get_devices()
                result.local = True
            except ToolError as e:
                result.errors.append(f'Local API: {e.message}')

        return result
