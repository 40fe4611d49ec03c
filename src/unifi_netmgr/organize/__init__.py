"""Device classification and IP organisation engine."""

from unifi_netmgr.organize.allocator import AllocationState, IPAllocator
from unifi_netmgr.organize.classifier import Classification, DeviceClassifier
from unifi_netmgr.organize.identifier import (
    UnknownDeviceIdentifier,
    signal_quality,
    suggest_classification,
)
from unifi_netmgr.organize.organizer import (
    ClientSource,
    IPOrganizer,
    ReservationCommitter,
    parse_client_records,
)
from unifi_netmgr.organize.oui import lookup_manufacturer
from unifi_netmgr.organize.report import build_plan_document, render_markdown
from unifi_netmgr.organize.rules import (
    ClassificationRule,
    RuleTier,
    default_rules,
    load_rules,
)
from unifi_netmgr.organize.scheme import (
    PERFORMANCE_OPTIMIZED_SCHEME,
    Category,
    CategoryScheme,
)

__all__ = [
    'AllocationState',
    'Category',
    'CategoryScheme',
    'Classification',
    'ClassificationRule',
    'ClientSource',
    'DeviceClassifier',
    'IPAllocator',
    'IPOrganizer',
    'PERFORMANCE_OPTIMIZED_SCHEME',
    'ReservationCommitter',
    'RuleTier',
    'UnknownDeviceIdentifier',
    'build_plan_document',
    'default_rules',
    'load_rules',
    'lookup_manufacturer',
    'parse_client_records',
    'render_markdown',
    'signal_quality',
    'suggest_classification',
]
