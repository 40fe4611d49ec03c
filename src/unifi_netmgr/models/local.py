"""Local controller models: connected clients and infrastructure devices."""

import ipaddress
import re
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Literal


MAC_PATTERN = re.compile(r'^([0-9a-f]{2}:){5}[0-9a-f]{2}$')


def canonical_mac(value: str) -> str:
    """Lower-case, colon-separated form of a MAC address."""
    return value.strip().lower().replace('-', ':')


class DeviceMetadata(BaseModel):
    """OS/device hints reported by the controller's fingerprinting.

    Only present on a ClientRecord when the controller supplied at least one
    of the fields; absence is modelled as ``ClientRecord.metadata is None``.
    """

    model_config = ConfigDict(frozen=True)

    os_name: str | None = Field(default=None, description='Operating system family')
    device_name: str | None = Field(default=None, description='Device model or family')
    vendor: str | None = Field(default=None, description='Vendor reported by the controller')


class ClientRecord(BaseModel):
    """A client as returned by ``stat/sta``.

    Unknown controller fields are ignored. Parsing fails (pydantic
    ValidationError) when the MAC is missing or malformed or the IP is not
    an IPv4 address.
    """

    model_config = ConfigDict(extra='ignore', frozen=True)

    mac: str = Field(description='MAC address (identity key)')
    name: str | None = Field(default=None, description='User-assigned alias')
    hostname: str | None = Field(default=None, description='DHCP hostname')

    ip: str | None = Field(default=None, description='Current IPv4 address')
    is_wired: bool = Field(default=False, description='Wired connection')
    is_guest: bool = Field(default=False, description='Guest network client')
    essid: str | None = Field(default=None, description='SSID for wireless clients')
    signal: int | None = Field(default=None, description='Signal strength in dBm')
    ap_mac: str | None = Field(default=None, description='Access point MAC (wireless)')
    sw_mac: str | None = Field(default=None, description='Switch MAC (wired)')
    sw_port: int | None = Field(default=None, description='Switch port (wired)')
    network: str | None = Field(default=None, description='Network name')
    vlan: int | None = Field(default=None, description='VLAN id')

    tx_bytes: int = Field(default=0, ge=0)
    rx_bytes: int = Field(default=0, ge=0)
    tx_packets: int = Field(default=0, ge=0)
    rx_packets: int = Field(default=0, ge=0)
    uptime: int = Field(default=0, ge=0, description='Connection uptime in seconds')
    last_seen: int | None = Field(default=None, description='Epoch seconds')
    satisfaction: int | None = Field(default=None)

    metadata: DeviceMetadata | None = Field(default=None, description='OS/device hints')

    @model_validator(mode='before')
    @classmethod
    def _fold_metadata(cls, data: Any) -> Any:
        """Collect the controller's loose fingerprint fields into DeviceMetadata."""
        if not isinstance(data, dict) or data.get('metadata') is not None:
            return data

        def text(*keys: str) -> str | None:
            for key in keys:
                value = data.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
            return None

        os_name = text('os_name', 'os')
        device_name = text('device_name', 'dev_model', 'model_name')
        vendor = text('oui', 'dev_vendor')

        folded = dict(data)
        if os_name or device_name or vendor:
            folded['metadata'] = {
                'os_name': os_name,
                'device_name': device_name,
                'vendor': vendor,
            }
        return folded

    @field_validator('mac')
    @classmethod
    def _normalize_mac(cls, value: str) -> str:
        mac = canonical_mac(value)
        if not MAC_PATTERN.match(mac):
            raise ValueError(f'invalid MAC address: {value!r}')
        return mac

    @field_validator('ip', mode='before')
    @classmethod
    def _validate_ip(cls, value: Any) -> Any:
        if value is None or value == '':
            return None
        try:
            return str(ipaddress.IPv4Address(value))
        except (ipaddress.AddressValueError, ValueError):
            raise ValueError(f'invalid IPv4 address: {value!r}')

    @field_validator('name', 'hostname', mode='before')
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def display_name(self) -> str:
        """Alias, then hostname, then MAC."""
        return self.name or self.hostname or self.mac

    @property
    def connection_type(self) -> Literal['wired', 'wireless']:
        return 'wired' if self.is_wired else 'wireless'

    @property
    def total_bytes(self) -> int:
        return self.tx_bytes + self.rx_bytes

    @property
    def uplink_mac(self) -> str | None:
        """MAC of the switch or AP this client hangs off."""
        mac = self.sw_mac if self.is_wired else self.ap_mac
        return mac.lower() if mac else None


class DeviceRecord(BaseModel):
    """UniFi infrastructure device from ``stat/device``."""

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    id: str | None = Field(default=None, alias='_id', description='Controller object id')
    mac: str = Field(description='MAC address')
    name: str | None = Field(default=None, description='Device name')
    model: str | None = Field(default=None, description='Hardware model')
    type: str | None = Field(default=None, description='uap, usw, ugw, udm...')
    ip: str | None = Field(default=None)
    state: int = Field(default=0, description='1 = online')
    adopted: bool = Field(default=False)
    version: str | None = Field(default=None, description='Firmware version')
    uptime: int = Field(default=0)

    @property
    def is_online(self) -> bool:
        return self.state == 1

    @property
    def display_name(self) -> str:
        return self.name or self.model or self.mac
