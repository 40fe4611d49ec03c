"""Models for network health analysis and configuration changes."""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Any, Literal
from unifi_netmgr.models.cloud import CloudDevice, CloudHost, CloudSite
from unifi_netmgr.models.local import ClientRecord, DeviceRecord


class Severity(str, Enum):
    """Recommendation severity levels."""

    CRITICAL = 'critical'
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


class RecommendationCategory(str, Enum):
    SECURITY = 'security'
    PERFORMANCE = 'performance'
    RELIABILITY = 'reliability'
    CONFIGURATION = 'configuration'


class Recommendation(BaseModel):
    """A single optimisation recommendation."""

    id: str = Field(description='Stable identifier, e.g. ips-disabled')
    category: RecommendationCategory
    severity: Severity
    title: str
    description: str
    current_state: str
    recommended_state: str
    impact: str
    automated: bool = Field(
        default=False, description='Whether apply can change this automatically'
    )


class NetworkSummary(BaseModel):
    total_devices: int = 0
    online_devices: int = 0
    total_clients: int = 0
    wifi_clients: int = 0
    wired_clients: int = 0
    health_score: int = Field(default=100, ge=0, le=100)


class NetworkAnalysis(BaseModel):
    """Health analysis report."""

    timestamp: str = Field(description='ISO timestamp of the analysis')
    summary: NetworkSummary
    recommendations: list[Recommendation] = Field(default_factory=list)

    def by_severity(self, severity: Severity) -> list[Recommendation]:
        return [r for r in self.recommendations if r.severity == severity]


class NetworkOverview(BaseModel):
    """Raw monitoring data from whichever API is configured."""

    source: Literal['cloud', 'local']
    hosts: list[CloudHost] = Field(default_factory=list)
    sites: list[CloudSite] = Field(default_factory=list)
    cloud_devices: list[CloudDevice] = Field(default_factory=list)
    devices: list[DeviceRecord] = Field(default_factory=list)
    clients: list[ClientRecord] = Field(default_factory=list)


class ConfigurationChange(BaseModel):
    """Description of a write made (or attempted) against the controller."""

    type: Literal['ips', 'wlan', 'device', 'firewall', 'system', 'configuration', 'dhcp']
    action: Literal['enable', 'disable', 'update', 'create', 'delete']
    target: str
    payload: dict[str, Any] = Field(default_factory=dict)
    description: str
    reversible: bool = True
    risk_level: Literal['low', 'medium', 'high'] = 'low'


class ApplyResult(BaseModel):
    """Outcome of a configuration change."""

    success: bool
    change: ConfigurationChange
    error: str | None = None


class ConnectionTestResult(BaseModel):
    cloud: bool = False
    local: bool = False
    errors: list[str] = Field(default_factory=list)
