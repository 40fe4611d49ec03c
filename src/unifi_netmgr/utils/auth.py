"""Controller and cloud credential loading."""

import os
from pydantic import BaseModel, Field
from unifi_netmgr.utils.errors import ErrorCodes, ToolError
from urllib.parse import urlparse


CLOUD_BASE_URL = 'https://api.ui.com/v1'


class Credentials(BaseModel):
    """Local UniFi controller credentials (username/password session auth)."""

    host: str = Field(description='Controller hostname or IP')
    port: int = Field(default=443, description='Controller port')
    username: str = Field(description='Admin username')
    password: str = Field(description='Admin password', repr=False)
    site: str = Field(default='default', description='Site name')
    verify_ssl: bool = Field(default=False, description='Verify SSL certificate')

    @property
    def base_url(self) -> str:
        """Base URL of the controller."""
        return f'https://{self.host}:{self.port}'

    @classmethod
    def from_env(cls) -> 'Credentials':
        """Load local controller credentials from environment variables.

        Supports:
        - UNIFI_LOCAL_HOST (plain host or https:// URL) and UNIFI_LOCAL_PORT
        - UNIFI_LOCAL_USERNAME and UNIFI_LOCAL_PASSWORD
        - UNIFI_LOCAL_SITE (default: 'default')
        - UNIFI_VERIFY_SSL ('true' to verify the controller certificate)
        """
        url_or_host = os.environ.get('UNIFI_LOCAL_HOST')
        if not url_or_host:
            raise ToolError(
                message='Missing UNIFI_LOCAL_HOST environment variable',
                error_code=ErrorCodes.CONFIG_INVALID,
                suggestion='Set UNIFI_LOCAL_HOST=192.168.1.1 in your .env file',
            )

        if url_or_host.startswith(('http://', 'https://')):
            parsed = urlparse(url_or_host)
            host = parsed.hostname or url_or_host
            port = parsed.port or 443
        else:
            host = url_or_host
            try:
                port = int(os.environ.get('UNIFI_LOCAL_PORT', '443'))
            except ValueError:
                raise ToolError(
                    message=f'Invalid UNIFI_LOCAL_PORT: {os.environ["UNIFI_LOCAL_PORT"]}',
                    error_code=ErrorCodes.CONFIG_INVALID,
                    suggestion='UNIFI_LOCAL_PORT must be a number such as 443 or 8443',
                )

        username = os.environ.get('UNIFI_LOCAL_USERNAME')
        password = os.environ.get('UNIFI_LOCAL_PASSWORD')
        if not (username and password):
            raise ToolError(
                message='Must provide UNIFI_LOCAL_USERNAME and UNIFI_LOCAL_PASSWORD',
                error_code=ErrorCodes.AUTHENTICATION_FAILED,
                suggestion='Create a local admin account on the controller and add it to .env',
            )

        return cls(
            host=host,
            port=port,
            username=username,
            password=password,
            site=os.environ.get('UNIFI_LOCAL_SITE') or 'default',
            verify_ssl=os.environ.get('UNIFI_VERIFY_SSL', 'false').lower() == 'true',
        )


class CloudCredentials(BaseModel):
    """Site Manager (cloud) API key."""

    api_key: str = Field(description='Cloud API key (X-API-KEY)', repr=False)
    base_url: str = Field(default=CLOUD_BASE_URL, description='Cloud API base URL')

    @classmethod
    def from_env(cls) -> 'CloudCredentials':
        """Load the cloud API key from UNIFI_CLOUD_API_KEY."""
        api_key = os.environ.get('UNIFI_CLOUD_API_KEY')
        if not api_key:
            raise ToolError(
                message='Missing UNIFI_CLOUD_API_KEY environment variable',
                error_code=ErrorCodes.CONFIG_INVALID,
                suggestion='Create an API key at unifi.ui.com and set UNIFI_CLOUD_API_KEY',
            )
        return cls(api_key=api_key)


def load_optional_credentials() -> tuple[CloudCredentials | None, Credentials | None]:
    """Load whichever of the cloud and local credentials are configured.

    Returns:
        (cloud, local) tuple; an entry is None when its variables are not set
    """
    cloud = None
    local = None

    if os.environ.get('UNIFI_CLOUD_API_KEY'):
        cloud = CloudCredentials.from_env()

    if os.environ.get('UNIFI_LOCAL_HOST'):
        local = Credentials.from_env()

    return cloud, local
