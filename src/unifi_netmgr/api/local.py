"""Async client for the local UniFi OS controller (read/write).

Session based: logs in with a local admin account, keeps the session cookie
in the httpx cookie jar and forwards the CSRF token on writes. A 401 on any
request triggers a bounded number of re-logins before giving up.
"""

import httpx
from loguru import logger
from typing import Any, Literal
from unifi_netmgr.models.analysis import ApplyResult, ConfigurationChange
from unifi_netmgr.models.local import DeviceRecord
from unifi_netmgr.utils.auth import Credentials
from unifi_netmgr.utils.errors import CommitFailure, ErrorCodes, ToolError


class UniFiLocalAPI:
    """Local controller API client.

    Acts as the client/device source and the reservation committer of the
    IP organiser, and wraps the handful of configuration writes the
    optimiser can apply.
    """

    def __init__(
        self,
        credentials: Credentials,
        max_auth_retries: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the local API client.

        Args:
            credentials: Controller credentials
            max_auth_retries: Re-login attempts after a 401 before failing
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        self._credentials = credentials
        self._max_auth_retries = max_auth_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._csrf_token: str | None = None
        self._authenticated = False
        self.site = credentials.site

    async def __aenter__(self) -> 'UniFiLocalAPI':
        await self.login()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._credentials.base_url,
                verify=self._credentials.verify_ssl,
                timeout=httpx.Timeout(30.0),
                transport=self._transport,
                headers={'Accept': 'application/json'},
            )
        return self._client

    async def login(self) -> None:
        """Authenticate and capture the session cookie and CSRF token.

        Raises:
            ToolError: AUTHENTICATION_FAILED on rejected credentials,
                CONTROLLER_UNREACHABLE when the controller cannot be reached
        """
        client = self._http()
        logger.debug('Logging in to local controller', host=self._credentials.host)

        try:
            response = await client.post(
                '/api/auth/login',
                json={
                    'username': self._credentials.username,
                    'password': self._credentials.password,
                },
            )
        except httpx.RequestError as e:
            raise ToolError(
                message=f'Cannot reach controller {self._credentials.host}: {e}',
                error_code=ErrorCodes.CONTROLLER_UNREACHABLE,
                suggestion='Check UNIFI_LOCAL_HOST and that the controller is online',
            )

        if response.status_code != 200:
            raise ToolError(
                message=f'Login failed: HTTP {response.status_code} {response.text}',
                error_code=ErrorCodes.AUTHENTICATION_FAILED,
                suggestion='Use a local (non-SSO) admin account for UNIFI_LOCAL_USERNAME',
            )

        self._csrf_token = response.headers.get('x-csrf-token')
        if not self._csrf_token:
            try:
                body = response.json()
            except ValueError:
                body = {}
            data = body.get('data') if isinstance(body, dict) else None
            if isinstance(data, dict):
                self._csrf_token = data.get('csrf_token')

        if self._csrf_token:
            client.headers['X-CSRF-Token'] = self._csrf_token
        else:
            logger.warning('No CSRF token in login response; writes may be rejected')

        self._authenticated = True
        logger.info('Logged in to local controller', host=self._credentials.host, site=self.site)

    async def logout(self) -> None:
        if self._client and self._authenticated:
            await self._request('POST', '/api/auth/logout')
        self._authenticated = False
        self._csrf_token = None

    async def close(self) -> None:
        """Log out (best effort) and close the HTTP client."""
        if self._client:
            try:
                await self.logout()
            except ToolError as e:
                logger.debug(f'Logout failed: {e.message}')
            finally:
                await self._client.aclose()
                self._client = None
                self._authenticated = False

    def build_path(self, endpoint: str) -> str:
        """Full network application path for the configured site."""
        return f'/proxy/network/api/s/{self.site}/{endpoint}'

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Authenticated request returning the ``data`` payload of the response."""
        if not self._authenticated:
            await self.login()

        client = self._http()
        for attempt in range(self._max_auth_retries + 1):
            logger.debug(f'{method} {path}', attempt=attempt)
            try:
                response = await client.request(method, path, **kwargs)
            except httpx.RequestError as e:
                raise ToolError(
                    message=f'Request failed: {e}',
                    error_code=ErrorCodes.CONTROLLER_UNREACHABLE,
                    suggestion='Check network connectivity and controller status',
                )

            if response.status_code == 401 and attempt < self._max_auth_retries:
                logger.info('Session expired, logging in again')
                self._authenticated = False
                await self.login()
                continue
            break

        if response.status_code == 401:
            raise ToolError(
                message='Controller keeps rejecting the session (HTTP 401)',
                error_code=ErrorCodes.AUTHENTICATION_FAILED,
            )
        if response.status_code == 404:
            raise ToolError(
                message=f'Endpoint not found: {path}',
                error_code=ErrorCodes.ENDPOINT_NOT_FOUND,
            )
        if response.is_error:
            raise ToolError(
                message=f'Local API error [{response.status_code}]: {response.text or response.reason_phrase}',
                error_code=ErrorCodes.API_ERROR,
            )

        if not response.content:
            return None
        data = response.json()

        if isinstance(data, dict) and 'meta' in data:
            if data['meta'].get('rc') == 'error':
                raise ToolError(
                    message=f'UniFi API error: {data["meta"].get("msg", "Unknown API error")}',
                    error_code=ErrorCodes.API_ERROR,
                )
            return data.get('data', [])

        return data

    # =========================================================================
    # Read operations
    # =========================================================================

    async def get_devices(self) -> list[dict[str, Any]]:
        return await self._request('GET', self.build_path('stat/device')) or []

    async def get_clients(self) -> list[dict[str, Any]]:
        return await self._request('GET', self.build_path('stat/sta')) or []

    async def get_known_clients(self) -> list[dict[str, Any]]:
        """Configured client entries (aliases and fixed-IP reservations)."""
        return await self._request('GET', self.build_path('rest/user')) or []

    async def get_site_settings(self) -> list[dict[str, Any]]:
        return await self._request('GET', self.build_path('rest/setting')) or []

    async def get_wlan_config(self) -> list[dict[str, Any]]:
        return await self._request('GET', self.build_path('rest/wlanconf')) or []

    async def get_firewall_rules(self) -> list[dict[str, Any]]:
        return await self._request('GET', self.build_path('rest/firewallrule')) or []

    async def fetch_clients(self) -> list[dict[str, Any]]:
        """Raw client records; the organiser validates and isolates bad ones."""
        clients = await self.get_clients()
        logger.debug(f'Fetched {len(clients)} clients')
        return clients

    async def fetch_devices(self) -> list[DeviceRecord]:
        devices = await self.get_devices()
        logger.debug(f'Fetched {len(devices)} devices')
        return [DeviceRecord.model_validate(device) for device in devices if device.get('mac')]

    async def fetch_reservations(self) -> list[dict[str, Any]]:
        """Configured client entries that carry a fixed-IP reservation, online or not."""
        known = await self.get_known_clients()
        reservations = [entry for entry in known if entry.get('use_fixedip') and entry.get('fixed_ip')]
        logger.debug(f'Fetched {len(reservations)} fixed-IP reservations')
        return reservations

    # =========================================================================
    # Write operations
    # =========================================================================

    async def commit_reservation(self, mac: str, ip: str, hostname: str | None = None) -> None:
        """Create or update a fixed-IP reservation for a client.

        PUT keyed by MAC, so repeating the same (mac, ip) is harmless.

        Raises:
            CommitFailure: When the controller rejects the reservation
        """
        payload: dict[str, Any] = {'fixed_ip': ip, 'use_fixedip': True}
        if hostname:
            payload['name'] = hostname

        try:
            await self._request('PUT', self.build_path(f'rest/user/{mac}'), json=payload)
        except ToolError as e:
            raise CommitFailure(mac, ip, e.message)

    async def _apply(self, change: ConfigurationChange, method: str, path: str, body: Any) -> ApplyResult:
        try:
            await self._request(method, self.build_path(path), json=body)
        except ToolError as e:
            logger.warning(f'{change.description} failed', error=e.message)
            return ApplyResult(success=False, change=change, error=e.message)
        logger.info(f'{change.description} applied', target=change.target)
        return ApplyResult(success=True, change=change)

    async def enable_ips(self, mode: Literal['detection', 'prevention'] = 'detection') -> ApplyResult:
        change = ConfigurationChange(
            type='ips',
            action='enable',
            target='IPS',
            payload={'ips_enabled': True, 'ips_mode': mode},
            description=f'Enable IPS in {mode} mode',
            risk_level='low',
        )
        body = {'enabled': True, 'mode': mode, 'signature_auto_update': True}
        return await self._apply(change, 'PUT', 'rest/setting/ips', body)

    async def disable_ips(self) -> ApplyResult:
        change = ConfigurationChange(
            type='ips',
            action='disable',
            target='IPS',
            payload={'ips_enabled': False},
            description='Disable IPS',
            risk_level='medium',
        )
        return await self._apply(change, 'PUT', 'rest/setting/ips', {'enabled': False})

    async def update_device_radio_settings(
        self,
        device_id: str,
        radio: Literal['ng', 'na'],
        tx_power: int | None = None,
        channel: int | None = None,
        channel_width: Literal[20, 40, 80, 160] | None = None,
    ) -> ApplyResult:
        settings: dict[str, Any] = {}
        if tx_power is not None:
            settings['tx_power_mode'] = 'custom'
            settings['tx_power'] = tx_power
        if channel is not None:
            settings['channel'] = channel
        if channel_width is not None:
            settings['ht'] = str(channel_width)

        band = '2.4GHz' if radio == 'ng' else '5GHz'
        change = ConfigurationChange(
            type='device',
            action='update',
            target=f'Device {device_id} radio {radio}',
            payload=settings,
            description=f'Update radio settings for {band}',
            risk_level='medium',
        )
        return await self._apply(
            change, 'PUT', f'rest/device/{device_id}', {f'radio_table_{radio}': settings}
        )

    async def enable_band_steering(self, wlan_id: str) -> ApplyResult:
        change = ConfigurationChange(
            type='wlan',
            action='update',
            target=f'WLAN {wlan_id}',
            payload={'band_steering_mode': 'prefer_5g'},
            description='Enable band steering to 5GHz',
        )
        return await self._apply(
            change, 'PUT', f'rest/wlanconf/{wlan_id}', {'band_steering_mode': 'prefer_5g'}
        )

    async def enable_fast_roaming(self, wlan_id: str) -> ApplyResult:
        change = ConfigurationChange(
            type='wlan',
            action='update',
            target=f'WLAN {wlan_id}',
            payload={'fast_roaming_enabled': True},
            description='Enable 802.11r fast roaming',
            risk_level='medium',
        )
        return await self._apply(
            change, 'PUT', f'rest/wlanconf/{wlan_id}', {'fast_roaming_enabled': True}
        )

    async def create_vlan(
        self, name: str, vlan: int, subnet: str, dhcp_enabled: bool = True
    ) -> ApplyResult:
        if not 1 <= vlan <= 4094:
            raise ToolError(
                message=f'VLAN id {vlan} out of range',
                error_code=ErrorCodes.CONFIG_INVALID,
                suggestion='VLAN ids run from 1 to 4094',
            )

        change = ConfigurationChange(
            type='configuration',
            action='create',
            target=f'VLAN {vlan}',
            payload={'name': name, 'vlan': vlan, 'subnet': subnet, 'dhcp_enabled': dhcp_enabled},
            description=f'Create VLAN {vlan} ({name})',
            risk_level='high',
        )
        body = {
            'name': name,
            'vlan_enabled': True,
            'vlan': vlan,
            'ip_subnet': subnet,
            'dhcpd_enabled': dhcp_enabled,
            'purpose': 'corporate',
        }
        return await self._apply(change, 'POST', 'rest/networkconf', body)

    async def reboot_device(self, device_mac: str) -> ApplyResult:
        change = ConfigurationChange(
            type='device',
            action='update',
            target=f'Device {device_mac}',
            description='Reboot device',
            reversible=False,
            risk_level='medium',
        )
        return await self._apply(
            change, 'POST', 'cmd/devmgr', {'cmd': 'restart', 'mac': device_mac.lower()}
        )
