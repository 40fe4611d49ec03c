"""Best-guess identification of clients the classifier could not place.

The output is a diagnostic hint for the review table, never a category.
"""

from unifi_netmgr.models.local import ClientRecord
from unifi_netmgr.organize.oui import (
    UNKNOWN_MANUFACTURER,
    is_randomized_mac,
    lookup_manufacturer,
    manufacturer_hint,
)


# (lower bound in dBm, label); first bound the signal reaches wins
SIGNAL_QUALITY_THRESHOLDS: list[tuple[int, str]] = [
    (-50, 'Excellent'),
    (-60, 'Good'),
    (-70, 'Fair'),
    (-80, 'Weak'),
]
POOR_SIGNAL = 'Poor'

HIGH_VOLUME_BYTES = 1_000_000_000
LOW_VOLUME_BYTES = 1_000_000
LONG_LIVED_SECONDS = 30 * 24 * 3600

HOSTNAME_HINTS: list[tuple[tuple[str, ...], str]] = [
    (('controller', 'ctrl', 'ac-'), 'climate or lighting controller'),
    (('sensor', 'temp', 'motion', 'leak'), 'sensor'),
    (('plug', 'outlet', 'socket'), 'smart plug'),
    (('esp', 'tasmota', 'shelly', 'wled'), 'ESP/Tasmota smart home module'),
    (('lwip',), 'embedded device (lwIP network stack)'),
    (('printer', 'epson', 'brother', 'laserjet', 'officejet'), 'printer'),
    (
        ('bedroom', 'kitchen', 'living', 'office', 'garage', 'bathroom', 'basement', 'patio', 'den'),
        'room-based smart home device',
    ),
]

UNKNOWN_GUESS = 'Unknown device, inspect manually'

# Name-only suggestions for the review table, first match wins
SUGGESTIONS: list[tuple[tuple[str, ...], str]] = [
    (('ring', 'camera'), 'Security & Cameras'),
    (('ac-controller', 'bedroom', 'office'), 'IoT - Smart Home'),
    (('lg_smart', 'sleep'), 'IoT - Appliances'),
    (('myq',), 'Security & Cameras (garage door)'),
    (('watch', 'pillow'), 'Phones & Watches'),
]


def signal_quality(signal_dbm: int) -> str:
    """Qualitative label for a wireless signal strength."""
    for threshold, label in SIGNAL_QUALITY_THRESHOLDS:
        if signal_dbm >= threshold:
            return label
    return POOR_SIGNAL


def resolve_manufacturer(client: ClientRecord) -> str:
    """OUI table first, then the vendor string the controller reported."""
    manufacturer = lookup_manufacturer(client.mac)
    if manufacturer == UNKNOWN_MANUFACTURER and client.metadata and client.metadata.vendor:
        return client.metadata.vendor
    return manufacturer


def suggest_classification(name: str) -> str:
    """Suggested category for the manual review table, from the name alone."""
    lower = name.lower()
    for keywords, suggestion in SUGGESTIONS:
        if any(k in lower for k in keywords):
            return suggestion
    return 'Review manually'


class UnknownDeviceIdentifier:
    """Ranked fallback chain producing a human readable guess.

    1. manufacturer hint from the OUI table
    2. hostname keywords
    3. traffic volume
    4. uptime
    5. connection type and signal strength
    6. generic "inspect manually"

    Wireless clients always get a signal quality qualifier appended.
    """

    def __init__(
        self,
        long_lived_seconds: int = LONG_LIVED_SECONDS,
        high_volume_bytes: int = HIGH_VOLUME_BYTES,
        low_volume_bytes: int = LOW_VOLUME_BYTES,
    ):
        self.long_lived_seconds = long_lived_seconds
        self.high_volume_bytes = high_volume_bytes
        self.low_volume_bytes = low_volume_bytes

    def identify(self, client: ClientRecord) -> str:
        guess = self._primary_guess(client)

        if client.is_wired:
            return guess
        if client.signal is None:
            return f'{guess} (signal unknown)'
        return f'{guess} ({signal_quality(client.signal)} signal, {client.signal} dBm)'

    def _primary_guess(self, client: ClientRecord) -> str:
        manufacturer = resolve_manufacturer(client)
        hint = manufacturer_hint(manufacturer)
        if hint:
            return f'Likely {hint} ({manufacturer})'
        if manufacturer == UNKNOWN_MANUFACTURER and is_randomized_mac(client.mac):
            return 'Phone, tablet or laptop using a private Wi-Fi address'

        name = (client.name or client.hostname or '').lower()
        for keywords, hint in HOSTNAME_HINTS:
            if any(k in name for k in keywords):
                return f'Likely {hint} (hostname "{client.display_name}")'

        total = client.total_bytes
        if total > self.high_volume_bytes:
            return 'High traffic: computer, NAS or streaming device'
        if 0 < total < self.low_volume_bytes:
            return 'Low traffic: sensor or controller'

        if client.uptime > self.long_lived_seconds:
            days = client.uptime // 86400
            return f'Always-on infrastructure device (up {days} days)'

        if client.is_wired:
            return 'Stationary wired device'
        if client.signal is not None:
            quality = signal_quality(client.signal)
            if quality in ('Excellent', 'Good'):
                return 'Stationary device near an access point'
            if quality in ('Weak', POOR_SIGNAL):
                return 'Distant or mobile device'

        return UNKNOWN_GUESS

    def connection_context(self, client: ClientRecord, uplink: str | None = None) -> str:
        """Connection description for reports, e.g. 'WiFi "Home" via AP-Hall (Fair, -65 dBm)'."""
        if client.is_wired:
            port = f' port {client.sw_port}' if client.sw_port is not None else ''
            via = f' via {uplink}{port}' if uplink else port
            return f'Wired{via}'

        ssid = f' "{client.essid}"' if client.essid else ''
        via = f' via {uplink}' if uplink else ''
        if client.signal is None:
            return f'WiFi{ssid}{via}'
        return f'WiFi{ssid}{via} ({signal_quality(client.signal)}, {client.signal} dBm)'
