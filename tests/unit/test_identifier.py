"""Unit tests for unknown-device identification."""

import pytest
from unifi_netmgr.organize.identifier import (
    UNKNOWN_GUESS,
    UnknownDeviceIdentifier,
    resolve_manufacturer,
    signal_quality,
    suggest_classification,
)


UNLISTED_MAC = '00:00:5e:00:00:01'


@pytest.fixture
def identifier():
    return UnknownDeviceIdentifier()


class TestSignalQuality:
    """Test the signal threshold table."""

    @pytest.mark.parametrize(
        'dbm, label',
        [
            (-40, 'Excellent'),
            (-50, 'Excellent'),
            (-51, 'Good'),
            (-60, 'Good'),
            (-65, 'Fair'),
            (-70, 'Fair'),
            (-80, 'Weak'),
            (-81, 'Poor'),
        ],
    )
    def test_thresholds(self, dbm, label):
        assert signal_quality(dbm) == label


class TestUnknownDeviceIdentifier:
    """Test the ranked fallback chain."""

    def test_manufacturer_hint_first(self, identifier, make_client):
        client = make_client('34:3e:a4:00:11:22', hostname='sensor-1', is_wired=True)
        assert identifier.identify(client) == 'Likely security camera or doorbell (Ring)'

    def test_controller_vendor_used_when_oui_unknown(self, make_client):
        client = make_client(UNLISTED_MAC, oui='Acme Corp')
        assert resolve_manufacturer(client) == 'Acme Corp'

    def test_randomized_mac(self, identifier, make_client):
        client = make_client('02:00:00:00:00:01', is_wired=True)
        assert 'private Wi-Fi address' in identifier.identify(client)

    def test_hostname_hint(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, hostname='Kitchen-Plug', is_wired=True)
        assert identifier.identify(client) == 'Likely smart plug (hostname "Kitchen-Plug")'

    def test_high_traffic(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, is_wired=True, tx_bytes=600_000_000, rx_bytes=600_000_000)
        assert identifier.identify(client).startswith('High traffic')

    def test_low_traffic(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, is_wired=True, tx_bytes=1000)
        assert identifier.identify(client).startswith('Low traffic')

    def test_zero_traffic_is_not_low_traffic(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, is_wired=True)
        assert identifier.identify(client) == 'Stationary wired device'

    def test_long_uptime(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, is_wired=True, uptime=40 * 86400)
        assert identifier.identify(client) == 'Always-on infrastructure device (up 40 days)'

    def test_strong_signal(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, signal=-45)
        assert identifier.identify(client) == (
            'Stationary device near an access point (Excellent signal, -45 dBm)'
        )

    def test_weak_signal(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, signal=-85)
        assert identifier.identify(client) == 'Distant or mobile device (Poor signal, -85 dBm)'

    def test_fallback(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, signal=-65)
        assert identifier.identify(client) == f'{UNKNOWN_GUESS} (Fair signal, -65 dBm)'

    def test_wireless_without_signal(self, identifier, make_client):
        client = make_client(UNLISTED_MAC)
        assert identifier.identify(client) == f'{UNKNOWN_GUESS} (signal unknown)'

    def test_fair_qualifier_on_every_wireless_client(self, identifier, make_client):
        """51 unclassified wireless clients at -65 dBm all get the Fair qualifier."""
        clients = [
            make_client(f'00:00:5e:00:01:{i:02x}', hostname=f'client-{i}', signal=-65)
            for i in range(51)
        ]
        guesses = [identifier.identify(client) for client in clients]
        assert len(guesses) == 51
        assert all('(Fair signal, -65 dBm)' in guess for guess in guesses)

    def test_identify_is_pure(self, identifier, make_client):
        client = make_client('34:3e:a4:00:11:22', signal=-72, tx_bytes=5000)
        assert identifier.identify(client) == identifier.identify(client)

    def test_custom_thresholds(self, make_client):
        identifier = UnknownDeviceIdentifier(long_lived_seconds=60)
        client = make_client(UNLISTED_MAC, is_wired=True, uptime=120)
        assert identifier.identify(client).startswith('Always-on')


class TestConnectionContext:
    """Test the connection description."""

    def test_wired(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, is_wired=True, sw_port=7)
        assert identifier.connection_context(client, 'USW-24') == 'Wired via USW-24 port 7'

    def test_wireless(self, identifier, make_client):
        client = make_client(UNLISTED_MAC, essid='Home', signal=-65)
        assert identifier.connection_context(client, 'AP-Hall') == 'WiFi "Home" via AP-Hall (Fair, -65 dBm)'

    def test_wireless_without_details(self, identifier, make_client):
        assert identifier.connection_context(make_client(UNLISTED_MAC)) == 'WiFi'


class TestSuggestClassification:
    """Test name-based review suggestions."""

    @pytest.mark.parametrize(
        'name, suggestion',
        [
            ('Ring Spotlight', 'Security & Cameras'),
            ('Bedroom AC', 'IoT - Smart Home'),
            ('LG_Smart_Dryer', 'IoT - Appliances'),
            ('MyQ-123', 'Security & Cameras (garage door)'),
            ('Pillow', 'Phones & Watches'),
            ('xyz', 'Review manually'),
        ],
    )
    def test_suggestions(self, name, suggestion):
        assert suggest_classification(name) == suggestion
