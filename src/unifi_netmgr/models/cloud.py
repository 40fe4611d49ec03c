"""Site Manager (cloud) API models.

The cloud API speaks camelCase; fields keep snake_case names with aliases so
payloads validate as-is and serialise back under either name.
"""

from pydantic import BaseModel, ConfigDict, Field


class _CloudModel(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)


class WanIssue(_CloudModel):
    """One WAN health issue window."""

    index: int = 0
    high_latency: bool = Field(default=False, alias='highLatency')
    latency_avg_ms: float | None = Field(default=None, alias='latencyAvgMs')
    latency_max_ms: float | None = Field(default=None, alias='latencyMaxMs')
    packet_loss: bool = Field(default=False, alias='packetLoss')


class IspInfo(_CloudModel):
    name: str = ''
    organization: str = ''


class WanStatus(_CloudModel):
    """Per-WAN status as reported in site statistics."""

    external_ip: str | None = Field(default=None, alias='externalIp')
    isp_info: IspInfo = Field(default_factory=IspInfo, alias='ispInfo')
    wan_uptime: float = Field(default=0, alias='wanUptime')
    wan_issues: list[WanIssue] = Field(default_factory=list, alias='wanIssues')


class SiteCounts(_CloudModel):
    total_device: int = Field(default=0, alias='totalDevice')
    offline_device: int = Field(default=0, alias='offlineDevice')
    wifi_device: int = Field(default=0, alias='wifiDevice')
    wired_device: int = Field(default=0, alias='wiredDevice')
    wifi_client: int = Field(default=0, alias='wifiClient')
    wired_client: int = Field(default=0, alias='wiredClient')
    guest_client: int = Field(default=0, alias='guestClient')
    critical_notification: int = Field(default=0, alias='criticalNotification')


class GatewayStatus(_CloudModel):
    shortname: str = ''
    inspection_state: str = Field(default='', alias='inspectionState')
    ips_mode: str = Field(default='', alias='ipsMode')


class SitePercentages(_CloudModel):
    tx_retry: float = Field(default=0.0, alias='txRetry')
    wan_uptime: float = Field(default=0.0, alias='wanUptime')


class SiteStatistics(_CloudModel):
    counts: SiteCounts = Field(default_factory=SiteCounts)
    gateway: GatewayStatus = Field(default_factory=GatewayStatus)
    percentages: SitePercentages = Field(default_factory=SitePercentages)
    wans: dict[str, WanStatus] = Field(default_factory=dict)


class SiteMeta(_CloudModel):
    name: str = ''
    desc: str = ''
    gateway_mac: str = Field(default='', alias='gatewayMac')
    timezone: str = ''


class CloudSite(_CloudModel):
    """A site with its aggregated statistics."""

    site_id: str = Field(alias='siteId')
    host_id: str = Field(default='', alias='hostId')
    meta: SiteMeta = Field(default_factory=SiteMeta)
    statistics: SiteStatistics = Field(default_factory=SiteStatistics)
    permission: str = ''
    is_owner: bool = Field(default=False, alias='isOwner')


class HostHardware(_CloudModel):
    name: str = ''
    shortname: str = ''
    firmware_version: str = Field(default='', alias='firmwareVersion')


class HostReportedState(_CloudModel):
    hostname: str = ''
    mac: str = ''
    version: str = ''
    hardware: HostHardware = Field(default_factory=HostHardware)


class CloudHost(_CloudModel):
    """A console (UDM, UDR, Cloud Key...) registered with the cloud."""

    id: str
    hardware_id: str = Field(default='', alias='hardwareId')
    type: str = ''
    ip_address: str = Field(default='', alias='ipAddress')
    owner: bool = False
    is_blocked: bool = Field(default=False, alias='isBlocked')
    registration_time: str | None = Field(default=None, alias='registrationTime')
    last_connection_state_change: str | None = Field(
        default=None, alias='lastConnectionStateChange'
    )
    reported_state: HostReportedState | None = Field(default=None, alias='reportedState')


class CloudDevice(_CloudModel):
    """A device as listed by the cloud ``/devices`` endpoint."""

    id: str = ''
    mac: str = ''
    model: str = ''
    name: str = ''
    type: str = ''
    adopted: bool = False
    state: int = 0
    ip: str | None = None
    version: str | None = None
    uptime: int | None = None

    @property
    def is_online(self) -> bool:
        return self.state == 1
