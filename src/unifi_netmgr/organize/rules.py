"""Classification rule table.

Rules are plain data: each one names a category, a priority and the
predicates that trigger it. The evaluation order lives in the classifier,
so new device signatures only need a new entry here or in a JSON rule file
passed with ``--rules``.

Tiers, strongest first:

- ``metadata``: OS / device-model strings reported by the controller
- ``name``: keywords in the client alias or DHCP hostname
- ``mac``: OUI prefixes (heuristic fallback)

Priority only orders rules inside a tier.
"""

import json
import re
from enum import Enum
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from typing import Iterable
from unifi_netmgr.models.local import DeviceMetadata
from unifi_netmgr.utils.errors import ErrorCodes, ToolError


OUI_PREFIX_PATTERN = re.compile(r'^[0-9a-f]{2}:[0-9a-f]{2}:[0-9a-f]{2}$')


class RuleTier(str, Enum):
    """Rule tiers; a higher rank always wins over a lower one."""

    METADATA = 'metadata'
    NAME = 'name'
    MAC = 'mac'

    @property
    def rank(self) -> int:
        return {'metadata': 3, 'name': 2, 'mac': 1}[self.value]


class ClassificationRule(BaseModel):
    """One row of the rule table."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description='Rule identifier shown in reports')
    category: str = Field(description='Target category name')
    priority: int = Field(description='Ordering inside the tier, higher first')
    tier: RuleTier
    name_keywords: tuple[str, ...] = Field(default=(), description='Substrings of the display name')
    name_exact: tuple[str, ...] = Field(default=(), description='Whole display names')
    mac_prefixes: tuple[str, ...] = Field(default=(), description='OUI prefixes, xx:xx:xx')
    os_keywords: tuple[str, ...] = Field(default=(), description='Substrings of the OS name')
    device_keywords: tuple[str, ...] = Field(
        default=(), description='Substrings of the device model/family'
    )

    @field_validator('name_keywords', 'name_exact', 'os_keywords', 'device_keywords')
    @classmethod
    def _lower(cls, values: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(v.lower() for v in values if v.strip())

    @field_validator('mac_prefixes')
    @classmethod
    def _check_prefixes(cls, values: tuple[str, ...]) -> tuple[str, ...]:
        prefixes = tuple(v.strip().lower().replace('-', ':') for v in values)
        for prefix in prefixes:
            if not OUI_PREFIX_PATTERN.match(prefix):
                raise ValueError(f'MAC prefix must look like aa:bb:cc, got {prefix!r}')
        return prefixes

    @model_validator(mode='after')
    def _check_tier_predicates(self) -> 'ClassificationRule':
        by_tier = {
            RuleTier.METADATA: bool(self.os_keywords or self.device_keywords),
            RuleTier.NAME: bool(self.name_keywords or self.name_exact),
            RuleTier.MAC: bool(self.mac_prefixes),
        }
        if not by_tier[self.tier]:
            raise ValueError(f'rule {self.name!r} has no predicate for tier {self.tier.value!r}')

        foreign = [tier.value for tier, present in by_tier.items() if present and tier != self.tier]
        if foreign:
            raise ValueError(
                f'rule {self.name!r} in tier {self.tier.value!r} also has {", ".join(foreign)} '
                'predicates; split it into one rule per tier'
            )
        return self

    def matches(self, name: str, mac: str, metadata: DeviceMetadata | None) -> bool:
        """Check the rule against a lower-cased display name and MAC."""
        if self.tier is RuleTier.NAME:
            return name in self.name_exact or any(k in name for k in self.name_keywords)

        if self.tier is RuleTier.MAC:
            return mac[:8] in self.mac_prefixes

        if metadata is None:
            return False
        os_name = (metadata.os_name or '').lower()
        device_name = (metadata.device_name or '').lower()
        # Whole words only: "nas" must not hit "panasonic"
        return any(k in os_name for k in self.os_keywords if os_name) or any(
            re.search(rf'\b{re.escape(k)}\b', device_name) for k in self.device_keywords if device_name
        )


DEFAULT_RULES: list[dict] = [
    # OS / device metadata from the controller's fingerprinting
    {
        'name': 'metadata-servers',
        'category': 'Servers',
        'priority': 90,
        'tier': 'metadata',
        'os_keywords': ['truenas', 'unraid', 'synology dsm', 'qts', 'proxmox'],
        'device_keywords': ['nas', 'diskstation', 'server'],
    },
    {
        'name': 'metadata-security',
        'category': 'Security & Cameras',
        'priority': 85,
        'tier': 'metadata',
        'device_keywords': ['camera', 'doorbell', 'nvr', 'garage door'],
    },
    {
        'name': 'metadata-computers',
        'category': 'Computers',
        'priority': 80,
        'tier': 'metadata',
        'os_keywords': ['windows'],
        'device_keywords': ['desktop', 'imac', 'mac mini', 'mac studio', 'mac pro', 'workstation'],
    },
    {
        'name': 'metadata-laptops',
        'category': 'Laptops & Tablets',
        'priority': 75,
        'tier': 'metadata',
        'os_keywords': ['ipados', 'chrome os', 'chromeos'],
        'device_keywords': ['macbook', 'ipad', 'laptop', 'notebook', 'tablet', 'chromebook'],
    },
    {
        'name': 'metadata-phones',
        'category': 'Phones & Watches',
        'priority': 70,
        'tier': 'metadata',
        'os_keywords': ['ios', 'android', 'watchos', 'wear os'],
        'device_keywords': ['iphone', 'smartphone', 'watch'],
    },
    {
        'name': 'metadata-media',
        'category': 'Media Devices',
        'priority': 65,
        'tier': 'metadata',
        'os_keywords': ['tvos', 'roku', 'tizen', 'webos', 'fire os'],
        'device_keywords': ['apple tv', 'smart tv', 'game console', 'playstation', 'xbox', 'speaker'],
    },
    {
        'name': 'metadata-smart-home',
        'category': 'IoT - Smart Home',
        'priority': 60,
        'tier': 'metadata',
        'device_keywords': ['thermostat', 'smart plug', 'smart bulb', 'light bulb', 'sensor'],
    },
    {
        'name': 'metadata-appliances',
        'category': 'IoT - Appliances',
        'priority': 55,
        'tier': 'metadata',
        'device_keywords': ['washer', 'dryer', 'refrigerator', 'dishwasher', 'smart bed'],
    },
    # Alias / hostname keywords
    {
        'name': 'infrastructure-names',
        'category': 'Infrastructure',
        'priority': 100,
        'tier': 'name',
        'name_keywords': ['switch', 'ap-', 'udm', 'unifi'],
    },
    {
        'name': 'server-names',
        'category': 'Servers',
        'priority': 90,
        'tier': 'name',
        'name_keywords': [
            'nas',
            'truenas',
            'server',
            'plex',
            'home assistant',
            'homeassistant',
            'pihole',
            'pi-hole',
        ],
    },
    {
        'name': 'security-names',
        'category': 'Security & Cameras',
        'priority': 85,
        'tier': 'name',
        'name_keywords': ['ring', 'camera', 'doorbell', 'nvr', 'myq', 'spotlight'],
    },
    {
        'name': 'computer-names',
        'category': 'Computers',
        'priority': 80,
        'tier': 'name',
        'name_keywords': ['desktop', 'pc-', 'imac', 'mac-pro', 'workstation'],
        'name_exact': ['mac'],
    },
    {
        'name': 'laptop-names',
        'category': 'Laptops & Tablets',
        'priority': 75,
        'tier': 'name',
        'name_keywords': ['macbook', 'laptop', 'ipad', 'surface', 'chromebook'],
    },
    {
        'name': 'phone-names',
        'category': 'Phones & Watches',
        'priority': 70,
        'tier': 'name',
        # 'pillow' is the sleep tracking app hostname
        'name_keywords': ['iphone', 'phone', 'android', 'watch', 'pillow'],
    },
    {
        'name': 'media-names',
        'category': 'Media Devices',
        'priority': 65,
        'tier': 'name',
        'name_keywords': [
            'appletv',
            'apple-tv',
            'roku',
            'tv',
            'sonos',
            'playstation',
            'xbox',
            'chromecast',
            'shield',
        ],
    },
    {
        'name': 'smart-home-names',
        'category': 'IoT - Smart Home',
        'priority': 60,
        'tier': 'name',
        'name_keywords': [
            'hue',
            'nest',
            'ecobee',
            'homekit',
            'ac-controller',
            'bedroom',
            'office',
            'garage',
            'master-bathroom',
            'living',
        ],
    },
    {
        'name': 'appliance-names',
        'category': 'IoT - Appliances',
        'priority': 55,
        'tier': 'name',
        'name_keywords': [
            'washer',
            'dryer',
            'laundry',
            'fridge',
            'lg_smart',
            'sleep number',
            'sleepnumber',
        ],
    },
    {
        'name': 'embedded-names',
        'category': 'IoT - Smart Home',
        'priority': 50,
        'tier': 'name',
        # lwIP is the TCP/IP stack of most embedded controllers
        'name_keywords': ['lwip'],
    },
    # OUI prefixes
    {
        'name': 'smart-home-macs',
        'category': 'IoT - Smart Home',
        'priority': 60,
        'tier': 'mac',
        'mac_prefixes': ['d8:bf:c0', '80:7d:3a', 'e0:2b:96', 'd4:90:9c', 'ac:bc:b5', '04:99:b9'],
    },
    {
        'name': 'raspberry-pi-macs',
        'category': 'IoT - Smart Home',
        'priority': 58,
        'tier': 'mac',
        'mac_prefixes': [
            '20:f8:3b',
            '28:cd:c1',
            '2c:cf:67',
            'b8:27:eb',
            'd8:3a:dd',
            'dc:a6:32',
            'e4:5f:01',
        ],
    },
    {
        'name': 'appliance-macs',
        'category': 'IoT - Appliances',
        'priority': 55,
        'tier': 'mac',
        'mac_prefixes': ['1c:39:29', 'c8:dd:6a', '64:db:a0'],
    },
    {
        'name': 'generic-iot-macs',
        'category': 'IoT - Smart Home',
        'priority': 50,
        'tier': 'mac',
        'mac_prefixes': ['5c:47:5e', 'b0:09:da', '5a:6c:0b', 'cc:6a:10', 'c4:29:96'],
    },
]


def build_rules(entries: Iterable[dict]) -> list[ClassificationRule]:
    """Validate raw rule dictionaries.

    Raises:
        ToolError: CONFIG_INVALID when an entry is malformed or names repeat
    """
    rules = []
    seen = set()
    for entry in entries:
        try:
            rule = ClassificationRule.model_validate(entry)
        except ValidationError as e:
            raise ToolError(
                message=f'Invalid classification rule {entry.get("name", "?")}: {e}',
                error_code=ErrorCodes.CONFIG_INVALID,
            )
        if rule.name in seen:
            raise ToolError(
                message=f'Duplicate classification rule name: {rule.name}',
                error_code=ErrorCodes.CONFIG_INVALID,
            )
        seen.add(rule.name)
        rules.append(rule)
    return rules


def default_rules() -> list[ClassificationRule]:
    return build_rules(DEFAULT_RULES)


def load_rules(path: str | Path, extend_defaults: bool = False) -> list[ClassificationRule]:
    """Load a JSON rule file (a list of rule objects).

    Args:
        path: JSON file path
        extend_defaults: Append the file's rules to the built-in table instead of replacing it
    """
    try:
        entries = json.loads(Path(path).read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        raise ToolError(
            message=f'Cannot read rule file {path}: {e}',
            error_code=ErrorCodes.CONFIG_INVALID,
            suggestion='The rule file must be a JSON list of rule objects',
        )

    if not isinstance(entries, list):
        raise ToolError(
            message=f'Rule file {path} must contain a JSON list',
            error_code=ErrorCodes.CONFIG_INVALID,
        )

    if extend_defaults:
        entries = DEFAULT_RULES + entries
    return build_rules(entries)


def dump_rules(rules: Iterable[ClassificationRule]) -> str:
    """Serialise rules to the JSON format accepted by load_rules()."""
    return json.dumps(
        [rule.model_dump(mode='json', exclude_defaults=True) for rule in rules],
        indent=2,
    )
