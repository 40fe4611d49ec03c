"""MCP tools for monitoring, health analysis and IP organisation planning."""

from pydantic import Field
from typing import Annotated, Any
from unifi_netmgr.models.analysis import NetworkAnalysis, NetworkOverview
from unifi_netmgr.organize.report import build_plan_document
from unifi_netmgr.organize.rules import load_rules
from unifi_netmgr.sdk import UniFiSDK

__all__ = [
    'network_health',
    'network_overview',
    'organization_plan',
]


async def network_overview() -> NetworkOverview:
    """Fetch hosts, sites and devices (cloud) or devices and clients (local).

    When to use this tool:
    - Getting an inventory of what is on the network
    - Checking which API the server is configured against

    Returns:
        NetworkOverview with source 'cloud' or 'local'

    Raises:
        ToolError: NO_API_CONFIGURED if neither API has credentials
        ToolError: CONTROLLER_UNREACHABLE if the API cannot be reached
    """
    async with UniFiSDK.from_env() as sdk:
        return await sdk.get_network_overview()


async def network_health() -> NetworkAnalysis:
    """Score network health and list recommendations ordered by severity.

    What to do next:
    - Critical/high findings marked automated can be fixed with the CLI `apply` command
    - Other findings need manual changes in the controller

    Returns:
        NetworkAnalysis with a 0-100 health score and recommendations
    """
    async with UniFiSDK.from_env() as sdk:
        return await sdk.analyze_network()


async def organization_plan(
    rules_file: Annotated[
        str | None,
        Field(description='Optional JSON file of extra classification rules'),
    ] = None,
) -> dict[str, Any]:
    """Plan category-based fixed-IP reservations without committing anything.

    Clients are classified by metadata, name and MAC prefix; each category
    gets addresses from its own range. Unmatched clients come back with a
    best-guess identity for manual review.

    Args:
        rules_file: Path of a JSON rule file extending the built-in rules

    Returns:
        Plan document with summary, per-category entries, unclassified and rejected clients

    Raises:
        ToolError: CONFIG_INVALID if the rule file is invalid
        ToolError: NO_API_CONFIGURED if the local controller is not configured
    """
    rules = load_rules(rules_file, extend_defaults=True) if rules_file else None
    async with UniFiSDK.from_env() as sdk:
        result = await sdk.organize_ips(apply_changes=False, rules=rules)
    return build_plan_document(result)
