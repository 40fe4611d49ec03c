"""Manufacturer lookup from the MAC address OUI prefix.

Offline table of the vendors that commonly show up on home and small-office
networks, plus a manufacturer -> likely product hint table used when
identifying clients the classifier could not place.
"""

UNKNOWN_MANUFACTURER = 'Unknown'

OUI_DATABASE: dict[str, str] = {
    # Apple
    '00:1c:b3': 'Apple',
    '3c:22:fb': 'Apple',
    'a4:83:e7': 'Apple',
    'ac:bc:32': 'Apple',
    'f0:18:98': 'Apple',
    # Amazon / Ring
    '34:3e:a4': 'Ring',
    '90:48:6c': 'Ring',
    '44:65:0d': 'Amazon',
    '68:54:fd': 'Amazon',
    'f0:27:2d': 'Amazon',
    # Cameras
    '2c:aa:8e': 'Wyze',
    'd0:3f:27': 'Wyze',
    '44:19:b6': 'Hikvision',
    'c0:56:e3': 'Hikvision',
    # Smart home
    '00:17:88': 'Signify (Philips Hue)',
    'ec:b5:fa': 'Signify (Philips Hue)',
    '44:61:32': 'ecobee',
    '18:b4:30': 'Google Nest',
    '64:16:66': 'Google Nest',
    '24:0a:c4': 'Espressif',
    '30:ae:a4': 'Espressif',
    '5c:cf:7f': 'Espressif',
    '84:f3:eb': 'Espressif',
    'a4:cf:12': 'Espressif',
    'ec:fa:bc': 'Espressif',
    '68:57:2d': 'Tuya',
    'd8:1f:12': 'Tuya',
    '50:c7:bf': 'TP-Link',
    'b0:be:76': 'TP-Link',
    '64:52:99': 'Chamberlain',
    # Appliances
    '1c:39:29': 'LG Electronics',
    'c8:dd:6a': 'LG Electronics',
    '64:db:a0': 'Sleep Number',
    # Media
    '00:0e:58': 'Sonos',
    '48:a6:b8': 'Sonos',
    '5c:aa:fd': 'Sonos',
    'b8:e9:37': 'Sonos',
    'b0:a7:37': 'Roku',
    'cc:6d:a0': 'Roku',
    'd8:31:34': 'Roku',
    '00:d9:d1': 'Sony Interactive',
    '70:9e:29': 'Sony Interactive',
    '7c:ed:8d': 'Microsoft',
    # Single-board computers and storage
    '20:f8:3b': 'Raspberry Pi',
    '28:cd:c1': 'Raspberry Pi',
    '2c:cf:67': 'Raspberry Pi',
    'b8:27:eb': 'Raspberry Pi',
    'd8:3a:dd': 'Raspberry Pi',
    'dc:a6:32': 'Raspberry Pi',
    'e4:5f:01': 'Raspberry Pi',
    '00:11:32': 'Synology',
    '24:5e:be': 'QNAP',
    # Computers
    '00:1b:21': 'Intel',
    '3c:97:0e': 'Intel',
    '00:14:22': 'Dell',
    # Network equipment
    '24:5a:4c': 'Ubiquiti',
    '74:83:c2': 'Ubiquiti',
    '78:8a:20': 'Ubiquiti',
    '80:2a:a8': 'Ubiquiti',
    'd8:b3:70': 'Ubiquiti',
    'e0:63:da': 'Ubiquiti',
    'f0:9f:c2': 'Ubiquiti',
    'fc:ec:da': 'Ubiquiti',
}

MANUFACTURER_HINTS: dict[str, str] = {
    'Apple': 'Apple device (iPhone, iPad, Mac or Apple TV)',
    'Ring': 'security camera or doorbell',
    'Amazon': 'Echo speaker, Fire TV or Kindle',
    'Wyze': 'security camera',
    'Hikvision': 'security camera or NVR',
    'Signify (Philips Hue)': 'Hue bridge or light',
    'ecobee': 'thermostat or room sensor',
    'Google Nest': 'Nest thermostat, speaker or camera',
    'Espressif': 'ESP-based smart home module (plug, switch or sensor)',
    'Tuya': 'smart plug or light',
    'TP-Link': 'Kasa smart plug or network device',
    'Chamberlain': 'MyQ garage door opener',
    'LG Electronics': 'LG appliance or TV',
    'Sleep Number': 'smart bed',
    'Sonos': 'Sonos speaker',
    'Roku': 'Roku streaming player or TV',
    'Sony Interactive': 'PlayStation console',
    'Microsoft': 'Xbox console or Surface',
    'Raspberry Pi': 'Raspberry Pi single-board computer',
    'Synology': 'Synology NAS',
    'QNAP': 'QNAP NAS',
    'Intel': 'PC with Intel network adapter',
    'Dell': 'Dell computer',
    'Ubiquiti': 'UniFi network device',
}


def normalize_oui(mac: str) -> str | None:
    """Return the lower-case 'xx:xx:xx' prefix of a MAC address, or None if unparseable."""
    if not isinstance(mac, str):
        return None

    digits = mac.strip().lower().replace(':', '').replace('-', '').replace('.', '')
    if len(digits) < 6 or any(c not in '0123456789abcdef' for c in digits[:6]):
        return None

    return f'{digits[0:2]}:{digits[2:4]}:{digits[4:6]}'


def lookup_manufacturer(mac: str) -> str:
    """Map a MAC address to a manufacturer label.

    Args:
        mac: MAC address in colon-separated (or dash/dotted) hex form

    Returns:
        Manufacturer label, or 'Unknown' when the prefix is not in the table
    """
    oui = normalize_oui(mac)
    if oui is None:
        return UNKNOWN_MANUFACTURER
    return OUI_DATABASE.get(oui, UNKNOWN_MANUFACTURER)


def manufacturer_hint(manufacturer: str) -> str | None:
    """Likely product category for a manufacturer label, if one is known."""
    return MANUFACTURER_HINTS.get(manufacturer)


def is_randomized_mac(mac: str) -> bool:
    """Check the locally-administered bit (private Wi-Fi addresses on phones/laptops)."""
    oui = normalize_oui(mac)
    if oui is None:
        return False
    return bool(int(oui[:2], 16) & 0x02)
