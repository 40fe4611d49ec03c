"""UniFi network manager.

Cloud monitoring, local controller configuration, health analysis and
category-based IP organisation for UniFi networks.
"""

from unifi_netmgr.sdk import UniFiSDK

__version__ = '1.0.0'

__all__ = ['UniFiSDK', '__version__']
