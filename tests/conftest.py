"""Shared pytest fixtures."""

import pytest
from typing import Any
from unifi_netmgr.models.local import ClientRecord
from unifi_netmgr.utils.auth import CloudCredentials, Credentials


@pytest.fixture
def sample_mac() -> str:
    """Sample MAC address for testing."""
    return 'aa:bb:cc:dd:ee:ff'


@pytest.fixture
def sample_ip() -> str:
    """Sample IP address for testing."""
    return '192.168.1.10'


@pytest.fixture
def sample_credentials() -> Credentials:
    """Local controller credentials for testing."""
    return Credentials(
        host='192.168.1.1',
        username='admin',
        password='password123',  # pragma: allowlist secret
    )


@pytest.fixture
def cloud_credentials() -> CloudCredentials:
    return CloudCredentials(api_key='test-api-key')  # pragma: allowlist secret


@pytest.fixture
def make_client():
    """Factory for ClientRecord objects with sensible wireless defaults."""

    def factory(mac: str = '02:00:00:00:00:01', **fields: Any) -> ClientRecord:
        return ClientRecord.model_validate({'mac': mac, **fields})

    return factory


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        'markers',
        'live: marks tests that require live UniFi controller connection',
    )
    config.addinivalue_line('markers', 'integration: marks tests that test component integration')
