"""Unit tests for category schemes."""

import json
import pytest
from pydantic import ValidationError
from unifi_netmgr.organize.scheme import (
    PERFORMANCE_OPTIMIZED_SCHEME,
    Category,
    CategoryScheme,
    int_to_ip,
    ip_to_int,
)
from unifi_netmgr.utils.errors import ErrorCodes, ToolError


class TestCategory:
    """Test Category range validation."""

    def test_size_and_label(self):
        category = Category(name='Infrastructure', start='10.0.0.1', end='10.0.0.3')
        assert category.size == 3
        assert category.range_label == '10.0.0.1 - 10.0.0.3'
        assert category.first_int == ip_to_int('10.0.0.1')

    def test_contains(self):
        category = Category(name='Media Devices', start='10.0.1.1', end='10.0.1.100')
        assert category.contains('10.0.1.1')
        assert category.contains('10.0.1.100')
        assert not category.contains('10.0.1.101')
        assert not category.contains('not-an-ip')

    def test_start_after_end(self):
        with pytest.raises(ValidationError):
            Category(name='Broken', start='10.0.0.9', end='10.0.0.1')

    def test_first_offset_outside_range(self):
        with pytest.raises(ValidationError):
            Category(name='Broken', start='10.0.0.1', end='10.0.0.9', first_offset='10.0.0.10')

    def test_invalid_address(self):
        with pytest.raises(ValidationError):
            Category(name='Broken', start='10.0.0.300', end='10.0.0.9')


class TestCategoryScheme:
    """Test scheme-wide invariants."""

    def test_overlapping_ranges_rejected(self):
        with pytest.raises(ToolError) as exc_info:
            CategoryScheme(
                [
                    Category(name='A', start='10.0.0.1', end='10.0.0.10'),
                    Category(name='B', start='10.0.0.10', end='10.0.0.20'),
                ]
            )
        assert exc_info.value.error_code == ErrorCodes.CONFIG_INVALID

    def test_duplicate_names_rejected(self):
        with pytest.raises(ToolError):
            CategoryScheme(
                [
                    Category(name='A', start='10.0.0.1', end='10.0.0.10'),
                    Category(name='A', start='10.0.1.1', end='10.0.1.10'),
                ]
            )

    def test_get_unknown_category(self):
        with pytest.raises(ToolError) as exc_info:
            PERFORMANCE_OPTIMIZED_SCHEME.get('Printers')
        assert exc_info.value.error_code == ErrorCodes.CATEGORY_NOT_FOUND

    def test_category_for(self):
        assert PERFORMANCE_OPTIMIZED_SCHEME.category_for('10.0.0.60').name == 'Servers'
        assert PERFORMANCE_OPTIMIZED_SCHEME.category_for('192.168.1.10') is None

    def test_default_scheme_layout(self):
        scheme = PERFORMANCE_OPTIMIZED_SCHEME
        assert len(scheme) == 11
        assert scheme.names[0] == 'Infrastructure'
        assert scheme.get('Servers').range_label == '10.0.0.51 - 10.0.0.100'
        assert not scheme.get('DHCP Pool').assignable
        assert not scheme.get('Guest Devices').assignable

    def test_from_file(self, tmp_path):
        path = tmp_path / 'scheme.json'
        path.write_text(
            json.dumps(
                [
                    {'name': 'Infrastructure', 'start': '10.1.0.1', 'end': '10.1.0.3'},
                    {'name': 'Servers', 'start': '10.1.0.10', 'end': '10.1.0.20'},
                ]
            )
        )
        scheme = CategoryScheme.from_file(path)
        assert scheme.names == ['Infrastructure', 'Servers']
        assert 'Servers' in scheme

    def test_from_file_invalid(self, tmp_path):
        path = tmp_path / 'scheme.json'
        path.write_text('[{"name": "A", "start": "10.0.0.5", "end": "10.0.0.1"}]')
        with pytest.raises(ToolError) as exc_info:
            CategoryScheme.from_file(path)
        assert exc_info.value.error_code == ErrorCodes.CONFIG_INVALID


def test_int_round_trip():
    assert int_to_ip(ip_to_int('10.0.2.100')) == '10.0.2.100'
