"""IP category schemes: named, non-overlapping address ranges."""

import ipaddress
import json
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from typing import Iterable, Iterator
from unifi_netmgr.utils.errors import ErrorCodes, ToolError


def ip_to_int(address: str) -> int:
    """Dotted-quad IPv4 address to its 32-bit integer value."""
    return int(ipaddress.IPv4Address(address))


def int_to_ip(value: int) -> str:
    return str(ipaddress.IPv4Address(value))


class Category(BaseModel):
    """A named IP sub-range and the class of devices meant to live there."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description='Category name, e.g. "Servers"')
    start: str = Field(description='First address of the range (inclusive)')
    end: str = Field(description='Last address of the range (inclusive)')
    priority: int = Field(default=0, description='Importance of the category')
    description: str = ''
    devices: list[str] = Field(default_factory=list, description='Example devices')
    first_offset: str | None = Field(
        default=None, description='Where sequential allocation starts (defaults to start)'
    )
    assignable: bool = Field(
        default=True, description='False for pools the organiser must never hand out'
    )

    @model_validator(mode='after')
    def _check_range(self) -> 'Category':
        try:
            start = ip_to_int(self.start)
            end = ip_to_int(self.end)
            first = ip_to_int(self.first_offset) if self.first_offset else start
        except ipaddress.AddressValueError as e:
            raise ValueError(f'{self.name}: {e}')

        if start > end:
            raise ValueError(f'{self.name}: start {self.start} is after end {self.end}')
        if not start <= first <= end:
            raise ValueError(f'{self.name}: first_offset {self.first_offset} outside range')
        return self

    @property
    def start_int(self) -> int:
        return ip_to_int(self.start)

    @property
    def end_int(self) -> int:
        return ip_to_int(self.end)

    @property
    def first_int(self) -> int:
        return ip_to_int(self.first_offset) if self.first_offset else self.start_int

    @property
    def size(self) -> int:
        return self.end_int - self.start_int + 1

    @property
    def range_label(self) -> str:
        return f'{self.start} - {self.end}'

    def contains(self, address: str) -> bool:
        try:
            value = ip_to_int(address)
        except ipaddress.AddressValueError:
            return False
        return self.start_int <= value <= self.end_int


class CategoryScheme:
    """Ordered set of categories whose ranges never overlap.

    Raises:
        ToolError: CONFIG_INVALID on duplicate names or overlapping ranges
    """

    def __init__(self, categories: Iterable[Category]):
        self._categories = list(categories)
        self._by_name = {}

        for category in self._categories:
            if category.name in self._by_name:
                raise ToolError(
                    message=f'Duplicate category name: {category.name}',
                    error_code=ErrorCodes.CONFIG_INVALID,
                )
            self._by_name[category.name] = category

        ordered = sorted(self._categories, key=lambda c: c.start_int)
        for previous, current in zip(ordered, ordered[1:]):
            if current.start_int <= previous.end_int:
                raise ToolError(
                    message=(
                        f'Category ranges overlap: {previous.name} ({previous.range_label}) '
                        f'and {current.name} ({current.range_label})'
                    ),
                    error_code=ErrorCodes.CONFIG_INVALID,
                    suggestion='Give every category its own address block',
                )

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @property
    def names(self) -> list[str]:
        return [c.name for c in self._categories]

    def get(self, name: str) -> Category:
        """Look up a category by name.

        Raises:
            ToolError: CATEGORY_NOT_FOUND if the scheme has no such category
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise ToolError(
                message=f'Unknown category: {name}',
                error_code=ErrorCodes.CATEGORY_NOT_FOUND,
                suggestion=f'Known categories: {", ".join(self.names)}',
            )

    def category_for(self, address: str) -> Category | None:
        """Category whose range contains an address, if any."""
        for category in self._categories:
            if category.contains(address):
                return category
        return None

    @classmethod
    def from_file(cls, path: str | Path) -> 'CategoryScheme':
        """Load a scheme from a JSON list of category objects."""
        try:
            data = json.loads(Path(path).read_text(encoding='utf-8'))
            return cls(Category.model_validate(item) for item in data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ToolError(
                message=f'Cannot load category scheme from {path}: {e}',
                error_code=ErrorCodes.CONFIG_INVALID,
            )


PERFORMANCE_OPTIMIZED_SCHEME = CategoryScheme(
    [
        Category(
            name='Infrastructure',
            start='10.0.0.1',
            end='10.0.0.50',
            priority=100,
            description='Network equipment (router, switches, APs)',
            devices=['UDM', 'switches', 'access points'],
        ),
        Category(
            name='Servers',
            start='10.0.0.51',
            end='10.0.0.100',
            priority=90,
            description='Always-on servers and NAS',
            devices=['NAS', 'TrueNAS', 'Plex', 'Home Assistant', 'Pi-hole'],
        ),
        Category(
            name='Computers',
            start='10.0.0.101',
            end='10.0.0.150',
            priority=80,
            description='Desktop computers and workstations',
            devices=['Desktop PCs', 'iMac', 'Mac Studio', 'Linux boxes'],
        ),
        Category(
            name='Laptops & Tablets',
            start='10.0.0.151',
            end='10.0.0.200',
            priority=75,
            description='Mobile computing devices',
            devices=['MacBooks', 'iPads', 'Windows laptops'],
        ),
        Category(
            name='Phones & Watches',
            start='10.0.0.201',
            end='10.0.0.250',
            priority=70,
            description='Smartphones and wearables',
            devices=['iPhones', 'Android phones', 'Apple Watch'],
        ),
        Category(
            name='Media Devices',
            start='10.0.1.1',
            end='10.0.1.100',
            priority=65,
            description='Streaming and entertainment',
            devices=['Apple TV', 'Roku', 'Smart TVs', 'Sonos', 'Gaming consoles'],
        ),
        Category(
            name='IoT - Smart Home',
            start='10.0.2.1',
            end='10.0.2.100',
            priority=60,
            description='Smart home automation devices',
            devices=['Hue', 'Ecobee', 'Nest', 'HomeKit', 'AC controllers', 'Smart plugs'],
        ),
        Category(
            name='IoT - Appliances',
            start='10.0.3.1',
            end='10.0.3.100',
            priority=55,
            description='Smart appliances',
            devices=['Smart washers', 'Smart dryers', 'Smart fridges', 'Sleep Number'],
        ),
        Category(
            name='Security & Cameras',
            start='10.0.4.1',
            end='10.0.4.100',
            priority=85,
            description='Security equipment',
            devices=['Ring cameras', 'Ring doorbells', 'Security cameras', 'MyQ garage'],
        ),
        Category(
            name='Guest Devices',
            start='10.0.5.1',
            end='10.0.5.254',
            priority=10,
            description='Visitor devices',
            devices=['Guest phones', 'Guest laptops'],
            assignable=False,
        ),
        Category(
            name='DHCP Pool',
            start='10.0.10.1',
            end='10.0.20.254',
            priority=0,
            description='Auto-assigned for new/temporary devices',
            devices=['Unknown devices', 'New devices before classification'],
            assignable=False,
        ),
    ]
)
