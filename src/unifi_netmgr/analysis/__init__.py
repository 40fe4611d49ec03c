"""Network health analysis."""

from unifi_netmgr.analysis.health import analyze_network, health_score

__all__ = ['analyze_network', 'health_score']
