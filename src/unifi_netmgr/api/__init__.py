"""HTTP clients for the cloud and local UniFi APIs."""

from unifi_netmgr.api.cloud import UniFiCloudAPI
from unifi_netmgr.api.local import UniFiLocalAPI

__all__ = ['UniFiCloudAPI', 'UniFiLocalAPI']
