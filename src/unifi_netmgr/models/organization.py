"""Result models of an IP organisation pass."""

from collections import defaultdict
from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Literal
from unifi_netmgr.models.local import ClientRecord


class OrganizedEntry(BaseModel):
    """A classified client and the address issued to it."""

    model_config = ConfigDict(frozen=True)

    mac: str = Field(description='Client MAC address')
    name: str = Field(description='Display name (alias, hostname or MAC)')
    hostname: str | None = Field(default=None, description='DHCP hostname')
    current_ip: str | None = Field(default=None, description='Address before organisation')
    assigned_ip: str = Field(description='Address issued from the category range')
    category: str = Field(description='Category name')
    priority: int = Field(description='Priority of the matching rule')
    rule: str = Field(description='Name of the matching rule')
    connection_type: Literal['wired', 'wireless']
    manufacturer: str = Field(default='Unknown')
    uplink: str | None = Field(default=None, description='Parent switch/AP name')
    commit_status: Literal['not_requested', 'committed', 'failed'] = 'not_requested'
    commit_error: str | None = None


class UnclassifiedEntry(BaseModel):
    """A client routed to manual review."""

    model_config = ConfigDict(frozen=True)

    client: ClientRecord
    guess: str = Field(description='Best-guess identity from the unknown-device identifier')
    manufacturer: str = Field(default='Unknown')
    connection: str = Field(description='Connection context, e.g. "WiFi (Fair, -65 dBm) via AP-Hall"')
    suggestion: str = Field(description='Suggested category text for the review table')
    reason: Literal['no_rule_matched', 'allocation_exhausted'] = 'no_rule_matched'
    category: str | None = Field(
        default=None, description='Category the client matched when allocation was exhausted'
    )
    error: str | None = None


class RejectedRecord(BaseModel):
    """An input record excluded from the pass because it could not be parsed."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(description='Position in the input list')
    mac: str | None = None
    reason: str


class OrganizationSummary(BaseModel):
    total_clients: int = 0
    auto_classified: int = 0
    needs_review: int = 0
    rejected: int = 0
    allocation_failures: int = 0
    commit_failures: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    by_connection_type: dict[str, int] = Field(
        default_factory=lambda: {'wired': 0, 'wireless': 0}
    )
    by_manufacturer: dict[str, int] = Field(default_factory=dict)

    @computed_field
    @property
    def partial_failure(self) -> bool:
        """True when some reservations could not be committed."""
        return self.commit_failures > 0


class OrganizationResult(BaseModel):
    """Everything report rendering needs, without re-running the classifier."""

    generated_at: str
    applied: bool = False
    categories: list[str] = Field(default_factory=list, description='Scheme order')
    organized: list[OrganizedEntry] = Field(default_factory=list)
    unclassified: list[UnclassifiedEntry] = Field(default_factory=list)
    rejected: list[RejectedRecord] = Field(default_factory=list)
    summary: OrganizationSummary = Field(default_factory=OrganizationSummary)

    def by_category(self) -> dict[str, list[OrganizedEntry]]:
        """Organized entries grouped per category, in scheme order then input order."""
        grouped: dict[str, list[OrganizedEntry]] = defaultdict(list)
        for entry in self.organized:
            grouped[entry.category].append(entry)

        order = {name: idx for idx, name in enumerate(self.categories)}
        return dict(sorted(grouped.items(), key=lambda item: order.get(item[0], len(order))))
