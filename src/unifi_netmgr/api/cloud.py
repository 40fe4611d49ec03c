"""Async client for the UniFi Site Manager cloud API (read-only monitoring)."""

import httpx
from loguru import logger
from typing import Any, Literal
from unifi_netmgr.models.cloud import CloudDevice, CloudHost, CloudSite
from unifi_netmgr.utils.auth import CloudCredentials
from unifi_netmgr.utils.errors import ErrorCodes, ToolError


class UniFiCloudAPI:
    """Cloud monitoring client authenticated with an ``X-API-KEY`` header."""

    def __init__(
        self,
        credentials: CloudCredentials,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._credentials = credentials
        self._client = httpx.AsyncClient(
            base_url=credentials.base_url,
            timeout=httpx.Timeout(30.0),
            transport=transport,
            headers={
                'X-API-KEY': credentials.api_key,
                'Accept': 'application/json',
            },
        )

    async def __aenter__(self) -> 'UniFiCloudAPI':
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, path: str, **params: Any) -> Any:
        # base_url carries the /v1 prefix; keep paths relative to it
        try:
            response = await self._client.get(path.lstrip('/'), params=params or None)
        except httpx.RequestError as e:
            raise ToolError(
                message=f'Cloud API unreachable: {e}',
                error_code=ErrorCodes.CONTROLLER_UNREACHABLE,
                suggestion='Check internet connectivity',
            )

        if response.status_code in (401, 403):
            raise ToolError(
                message=f'Cloud API rejected the API key (HTTP {response.status_code})',
                error_code=ErrorCodes.AUTHENTICATION_FAILED,
                suggestion='Regenerate the key at unifi.ui.com and update UNIFI_CLOUD_API_KEY',
            )
        if response.is_error:
            raise ToolError(
                message=f'Cloud API error [{response.status_code}]: {response.text or response.reason_phrase}',
                error_code=ErrorCodes.API_ERROR,
            )

        body = response.json()
        logger.debug(f'GET {path}', status=response.status_code)
        return body.get('data') if isinstance(body, dict) else body

    async def get_hosts(self) -> list[CloudHost]:
        data = await self._request('/hosts') or []
        return [CloudHost.model_validate(item) for item in data]

    async def get_host(self, host_id: str) -> CloudHost:
        data = await self._request(f'/hosts/{host_id}')
        if not data:
            raise ToolError(
                message=f'Host {host_id} not found',
                error_code=ErrorCodes.DEVICE_NOT_FOUND,
            )
        return CloudHost.model_validate(data)

    async def get_sites(self) -> list[CloudSite]:
        data = await self._request('/sites') or []
        return [CloudSite.model_validate(item) for item in data]

    async def get_devices(self) -> list[CloudDevice]:
        """Devices across all hosts.

        The endpoint groups devices per host (``[{hostId, devices: [...]}]``);
        flat lists are accepted as well.
        """
        data = await self._request('/devices') or []
        devices = []
        for item in data:
            if isinstance(item, dict) and isinstance(item.get('devices'), list):
                devices.extend(CloudDevice.model_validate(d) for d in item['devices'])
            else:
                devices.append(CloudDevice.model_validate(item))
        return devices

    async def get_isp_metrics(
        self, kind: Literal['5m', '1h'], duration: str | None = None
    ) -> Any:
        """Raw ISP metrics (latency, packet loss, throughput) per site."""
        params = {'duration': duration} if duration else {}
        return await self._request(f'/ea/isp-metrics/{kind}', **params)
