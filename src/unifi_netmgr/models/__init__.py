"""Pydantic models for the UniFi network manager."""

from unifi_netmgr.models.analysis import (
    ApplyResult,
    ConfigurationChange,
    ConnectionTestResult,
    NetworkAnalysis,
    NetworkOverview,
    NetworkSummary,
    Recommendation,
    RecommendationCategory,
    Severity,
)
from unifi_netmgr.models.cloud import (
    CloudDevice,
    CloudHost,
    CloudSite,
    SiteStatistics,
    WanIssue,
    WanStatus,
)
from unifi_netmgr.models.local import ClientRecord, DeviceMetadata, DeviceRecord
from unifi_netmgr.models.organization import (
    OrganizationResult,
    OrganizationSummary,
    OrganizedEntry,
    RejectedRecord,
    UnclassifiedEntry,
)

__all__ = [
    # Local controller
    'ClientRecord',
    'DeviceMetadata',
    'DeviceRecord',
    # Cloud
    'CloudDevice',
    'CloudHost',
    'CloudSite',
    'SiteStatistics',
    'WanIssue',
    'WanStatus',
    # Analysis
    'ApplyResult',
    'ConfigurationChange',
    'ConnectionTestResult',
    'NetworkAnalysis',
    'NetworkOverview',
    'NetworkSummary',
    'Recommendation',
    'RecommendationCategory',
    'Severity',
    # Organisation
    'OrganizationResult',
    'OrganizationSummary',
    'OrganizedEntry',
    'RejectedRecord',
    'UnclassifiedEntry',
]
