"""Unit tests for manufacturer lookup."""

import pytest
from unifi_netmgr.organize.oui import (
    UNKNOWN_MANUFACTURER,
    is_randomized_mac,
    lookup_manufacturer,
    manufacturer_hint,
    normalize_oui,
)


class TestNormalizeOui:
    """Test OUI prefix extraction."""

    @pytest.mark.parametrize(
        'mac',
        ['20:F8:3B:AA:BB:CC', '20-f8-3b-aa-bb-cc', '20f8.3baa.bbcc', '20f83baabbcc'],
    )
    def test_separator_forms(self, mac):
        assert normalize_oui(mac) == '20:f8:3b'

    @pytest.mark.parametrize('mac', ['', 'zz:zz:zz:00:00:00', '20:f8', None])
    def test_unparseable(self, mac):
        assert normalize_oui(mac) is None


class TestLookupManufacturer:
    """Test the OUI table lookup."""

    def test_known_prefix(self):
        assert lookup_manufacturer('20:f8:3b:aa:bb:cc') == 'Raspberry Pi'
        assert lookup_manufacturer('34:3E:A4:00:11:22') == 'Ring'

    def test_unknown_prefix(self):
        assert lookup_manufacturer('00:00:01:00:00:00') == UNKNOWN_MANUFACTURER

    def test_malformed_mac_is_unknown(self):
        assert lookup_manufacturer('not-a-mac') == UNKNOWN_MANUFACTURER

    def test_lookup_is_pure(self):
        """Repeated lookups give the same answer."""
        first = lookup_manufacturer('34:3e:a4:00:11:22')
        assert lookup_manufacturer('34:3e:a4:00:11:22') == first


class TestHints:
    """Test manufacturer hints and randomized MAC detection."""

    def test_manufacturer_hint(self):
        assert manufacturer_hint('Ring') == 'security camera or doorbell'
        assert manufacturer_hint(UNKNOWN_MANUFACTURER) is None

    def test_randomized_mac(self):
        assert is_randomized_mac('02:00:00:00:00:01') is True
        assert is_randomized_mac('da:a1:19:00:00:01') is True
        assert is_randomized_mac('20:f8:3b:aa:bb:cc') is False
        assert is_randomized_mac('garbage') is False
