"""Network health analysis and recommendation scoring."""

from datetime import datetime, timezone
from unifi_netmgr.models.analysis import (
    NetworkAnalysis,
    NetworkOverview,
    NetworkSummary,
    Recommendation,
    RecommendationCategory,
    Severity,
)
from unifi_netmgr.models.cloud import CloudSite


TX_RETRY_THRESHOLD = 5.0
WIRELESS_WIRED_RATIO_THRESHOLD = 2.5
SEVERITY_PENALTY = {
    Severity.CRITICAL: 30,
    Severity.HIGH: 15,
    Severity.MEDIUM: 5,
    Severity.LOW: 0,
}


def health_score(recommendations: list[Recommendation]) -> int:
    """100 minus a penalty per recommendation severity, floored at 0."""
    penalty = sum(SEVERITY_PENALTY[r.severity] for r in recommendations)
    return max(0, 100 - penalty)


def _site_recommendations(site: CloudSite, local_available: bool) -> list[Recommendation]:
    stats = site.statistics
    counts = stats.counts
    recommendations = []

    if stats.gateway.ips_mode == 'disabled':
        recommendations.append(
            Recommendation(
                id='ips-disabled',
                category=RecommendationCategory.SECURITY,
                severity=Severity.CRITICAL,
                title='Intrusion Prevention System Disabled',
                description='IPS is disabled, leaving network vulnerable to known exploits',
                current_state='Disabled',
                recommended_state='Enabled (Detection mode)',
                impact='High security risk - network exposed to threats',
                automated=local_available,
            )
        )

    if counts.offline_device > 0:
        recommendations.append(_offline_devices(counts.offline_device))

    if stats.percentages.tx_retry > TX_RETRY_THRESHOLD:
        retry = f'{stats.percentages.tx_retry:.2f}%'
        recommendations.append(
            Recommendation(
                id='high-retry-rate',
                category=RecommendationCategory.PERFORMANCE,
                severity=Severity.MEDIUM,
                title='High WiFi Retry Rate',
                description=f'TX retry rate at {retry} (should be <5%)',
                current_state=retry,
                recommended_state='<5%',
                impact='Reduced WiFi performance, slower speeds',
                automated=local_available,
            )
        )

    for wan_name, wan in stats.wans.items():
        latency_issues = [issue for issue in wan.wan_issues if issue.high_latency]
        if not latency_issues:
            continue
        average = latency_issues[0].latency_avg_ms
        recommendations.append(
            Recommendation(
                id=f'wan-latency-{wan_name}',
                category=RecommendationCategory.PERFORMANCE,
                severity=Severity.MEDIUM,
                title=f'{wan_name} High Latency',
                description=f'{wan_name} ({wan.isp_info.name}) experiencing high latency',
                current_state=f'{average}ms average' if average is not None else 'High latency',
                recommended_state='<20ms',
                impact='Slower internet performance on this connection',
            )
        )

    ratio_check = _client_distribution(counts.wifi_client, counts.wired_client)
    if ratio_check:
        recommendations.append(ratio_check)

    return recommendations


def _offline_devices(count: int) -> Recommendation:
    return Recommendation(
        id='offline-devices',
        category=RecommendationCategory.RELIABILITY,
        severity=Severity.HIGH,
        title=f'{count} Device(s) Offline',
        description='Offline devices may indicate hardware failure or connectivity issues',
        current_state=f'{count} offline',
        recommended_state='All devices online',
        impact='Network coverage gaps, reduced redundancy',
    )


def _client_distribution(wifi: int, wired: int) -> Recommendation | None:
    ratio = wifi / (wired or 1)
    if ratio <= WIRELESS_WIRED_RATIO_THRESHOLD:
        return None
    return Recommendation(
        id='client-distribution',
        category=RecommendationCategory.PERFORMANCE,
        severity=Severity.LOW,
        title='High Wireless-to-Wired Ratio',
        description='Many devices on WiFi that could benefit from wired connections',
        current_state=f'{wifi} wireless, {wired} wired',
        recommended_state='Move stationary devices to wired',
        impact='WiFi congestion, reduced performance',
    )


def analyze_network(overview: NetworkOverview, local_available: bool = False) -> NetworkAnalysis:
    """Derive recommendations and a health score from monitoring data.

    Cloud overviews are analysed from the first site's statistics; local
    overviews from the device and client lists.

    Args:
        overview: Data returned by UniFiSDK.get_network_overview()
        local_available: Whether a local controller is configured (marks fixes as automated)
    """
    recommendations: list[Recommendation] = []

    if overview.sites:
        site = overview.sites[0]
        recommendations = _site_recommendations(site, local_available)
        counts = site.statistics.counts
        summary = NetworkSummary(
            total_devices=counts.total_device,
            online_devices=counts.total_device - counts.offline_device,
            total_clients=counts.wifi_client + counts.wired_client,
            wifi_clients=counts.wifi_client,
            wired_clients=counts.wired_client,
        )
    else:
        offline = sum(1 for device in overview.devices if not device.is_online)
        wired = sum(1 for client in overview.clients if client.is_wired)
        wifi = len(overview.clients) - wired

        if offline:
            recommendations.append(_offline_devices(offline))
        ratio_check = _client_distribution(wifi, wired) if overview.clients else None
        if ratio_check:
            recommendations.append(ratio_check)

        summary = NetworkSummary(
            total_devices=len(overview.devices),
            online_devices=len(overview.devices) - offline,
            total_clients=len(overview.clients),
            wifi_clients=wifi,
            wired_clients=wired,
        )

    summary.health_score = health_score(recommendations)
    return NetworkAnalysis(
        timestamp=datetime.now(timezone.utc).isoformat(),
        summary=summary,
        recommendations=recommendations,
    )
