"""Unit tests for credential loading."""

import os
import pytest
from unifi_netmgr.utils.auth import (
    CLOUD_BASE_URL,
    CloudCredentials,
    Credentials,
    load_optional_credentials,
)
from unifi_netmgr.utils.errors import ErrorCodes, ToolError
from unittest.mock import patch


LOCAL_ENV = {
    'UNIFI_LOCAL_HOST': '192.168.1.2',
    'UNIFI_LOCAL_USERNAME': 'testuser',
    'UNIFI_LOCAL_PASSWORD': 'testpass',  # pragma: allowlist secret
}


class TestCredentials:
    """Test local controller Credentials."""

    def test_credentials_creation(self, sample_credentials):
        """Test defaults."""
        assert sample_credentials.port == 443
        assert sample_credentials.site == 'default'
        assert sample_credentials.verify_ssl is False
        assert sample_credentials.base_url == 'https://192.168.1.1:443'

    def test_password_not_in_repr(self, sample_credentials):
        assert 'password123' not in repr(sample_credentials)

    def test_from_env_success(self):
        """Test loading credentials from environment variables."""
        env = {
            **LOCAL_ENV,
            'UNIFI_LOCAL_PORT': '8443',
            'UNIFI_LOCAL_SITE': 'home',
            'UNIFI_VERIFY_SSL': 'true',
        }
        with patch.dict(os.environ, env, clear=True):
            creds = Credentials.from_env()

        assert creds.host == '192.168.1.2'
        assert creds.port == 8443
        assert creds.site == 'home'
        assert creds.verify_ssl is True

    def test_from_env_url_host(self):
        """A full URL in UNIFI_LOCAL_HOST carries its own port."""
        env = {**LOCAL_ENV, 'UNIFI_LOCAL_HOST': 'https://udm.local:8443'}
        with patch.dict(os.environ, env, clear=True):
            creds = Credentials.from_env()

        assert creds.host == 'udm.local'
        assert creds.port == 8443

    def test_from_env_missing_host(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ToolError) as exc_info:
                Credentials.from_env()
        assert exc_info.value.error_code == ErrorCodes.CONFIG_INVALID

    def test_from_env_invalid_port(self):
        env = {**LOCAL_ENV, 'UNIFI_LOCAL_PORT': 'https'}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ToolError) as exc_info:
                Credentials.from_env()
        assert exc_info.value.error_code == ErrorCodes.CONFIG_INVALID
        assert 'UNIFI_LOCAL_PORT' in exc_info.value.message

    def test_from_env_missing_password(self):
        """Test loading credentials with missing required env vars."""
        env = {'UNIFI_LOCAL_HOST': '192.168.1.1', 'UNIFI_LOCAL_USERNAME': 'admin'}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ToolError) as exc_info:
                Credentials.from_env()

        assert exc_info.value.error_code == ErrorCodes.AUTHENTICATION_FAILED
        assert 'UNIFI_LOCAL_PASSWORD' in str(exc_info.value)


class TestCloudCredentials:
    """Test cloud API key loading."""

    def test_from_env(self):
        with patch.dict(os.environ, {'UNIFI_CLOUD_API_KEY': 'key-123'}, clear=True):
            creds = CloudCredentials.from_env()
        assert creds.api_key == 'key-123'
        assert creds.base_url == CLOUD_BASE_URL

    def test_from_env_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ToolError) as exc_info:
                CloudCredentials.from_env()
        assert exc_info.value.error_code == ErrorCodes.CONFIG_INVALID


class TestLoadOptionalCredentials:
    """Test picking up whichever APIs are configured."""

    def test_nothing_configured(self):
        with patch.dict(os.environ, {}, clear=True):
            assert load_optional_credentials() == (None, None)

    def test_local_only(self):
        with patch.dict(os.environ, LOCAL_ENV, clear=True):
            cloud, local = load_optional_credentials()
        assert cloud is None
        assert local.username == 'testuser'

    def test_both(self):
        env = {**LOCAL_ENV, 'UNIFI_CLOUD_API_KEY': 'key-123'}
        with patch.dict(os.environ, env, clear=True):
            cloud, local = load_optional_credentials()
        assert cloud.api_key == 'key-123'
        assert local is not None
