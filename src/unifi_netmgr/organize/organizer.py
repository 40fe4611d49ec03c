"""Organisation pass: classify, allocate, optionally commit, aggregate."""

import asyncio
from collections import Counter
from datetime import datetime, timezone
from pydantic import ValidationError
from typing import Any, Iterable, Protocol, Sequence
from unifi_netmgr.models.local import MAC_PATTERN, ClientRecord, DeviceRecord, canonical_mac
from unifi_netmgr.models.organization import (
    OrganizationResult,
    OrganizationSummary,
    OrganizedEntry,
    RejectedRecord,
    UnclassifiedEntry,
)
from unifi_netmgr.organize.allocator import AllocationState, IPAllocator
from unifi_netmgr.organize.classifier import DeviceClassifier
from unifi_netmgr.organize.identifier import (
    UnknownDeviceIdentifier,
    resolve_manufacturer,
    suggest_classification,
)
from unifi_netmgr.organize.rules import ClassificationRule
from unifi_netmgr.organize.scheme import PERFORMANCE_OPTIMIZED_SCHEME, CategoryScheme
from unifi_netmgr.utils.errors import AllocationExhausted, ErrorCodes, ToolError
from unifi_netmgr.utils.logging import get_logger


class ClientSource(Protocol):
    """Read side of the controller API."""

    async def fetch_clients(self) -> list[dict[str, Any]]: ...

    async def fetch_devices(self) -> Sequence[DeviceRecord | dict[str, Any]]: ...

    async def fetch_reservations(self) -> list[dict[str, Any]]: ...


class ReservationCommitter(Protocol):
    """Write side: idempotent fixed-IP reservation keyed by MAC.

    Implementations raise (typically ToolError/CommitFailure) on failure.
    """

    async def commit_reservation(self, mac: str, ip: str, hostname: str | None = None) -> None: ...


def parse_client_records(
    raw_clients: Iterable[ClientRecord | dict[str, Any]],
) -> tuple[list[ClientRecord], list[RejectedRecord]]:
    """Validate raw controller records, isolating the ones that cannot be used.

    Records with a missing/invalid MAC or IP, and repeats of a MAC already
    seen, are rejected; input order of the accepted records is kept.
    """
    accepted: list[ClientRecord] = []
    rejected: list[RejectedRecord] = []
    seen: set[str] = set()

    for index, raw in enumerate(raw_clients):
        raw_mac = raw.mac if isinstance(raw, ClientRecord) else None
        try:
            if isinstance(raw, ClientRecord):
                record = raw
            elif isinstance(raw, dict):
                raw_mac = raw.get('mac') if isinstance(raw.get('mac'), str) else None
                record = ClientRecord.model_validate(raw)
            else:
                raise TypeError(f'expected a client object, got {type(raw).__name__}')
        except (ValidationError, TypeError) as e:
            reason = _first_error(e)
            rejected.append(RejectedRecord(index=index, mac=raw_mac, reason=reason))
            continue

        if record.mac in seen:
            rejected.append(
                RejectedRecord(index=index, mac=record.mac, reason='duplicate MAC in client list')
            )
            continue

        seen.add(record.mac)
        accepted.append(record)

    return accepted, rejected


def _first_error(error: Exception) -> str:
    if isinstance(error, ValidationError):
        details = error.errors()
        if details:
            location = '.'.join(str(part) for part in details[0].get('loc', ())) or 'record'
            return f'{location}: {details[0].get("msg", "invalid")}'
    return str(error)


def _uplink_names(devices: Iterable[DeviceRecord | dict[str, Any]] | None) -> dict[str, str]:
    names: dict[str, str] = {}
    for device in devices or ():
        try:
            record = device if isinstance(device, DeviceRecord) else DeviceRecord.model_validate(device)
        except ValidationError:
            continue
        names[record.mac.lower()] = record.display_name
    return names


class IPOrganizer:
    """Organise a flat network into per-category address ranges.

    Each call to organize() is an independent pass with its own
    AllocationState; nothing is cached between calls.
    """

    def __init__(
        self,
        scheme: CategoryScheme | None = None,
        rules: Iterable[ClassificationRule] | None = None,
        committer: ReservationCommitter | None = None,
        identifier: UnknownDeviceIdentifier | None = None,
        log: Any = None,
    ):
        """Initialize the organiser.

        Args:
            scheme: Category scheme (defaults to PERFORMANCE_OPTIMIZED_SCHEME)
            rules: Classification rules (defaults to the built-in table)
            committer: Reservation committer used when apply_changes is True
            identifier: Unknown-device identifier (defaults to standard thresholds)
            log: loguru-style logger (defaults to get_logger())
        """
        self.scheme = scheme or PERFORMANCE_OPTIMIZED_SCHEME
        self.classifier = DeviceClassifier(rules, scheme=self.scheme)
        self.allocator = IPAllocator(self.scheme)
        self.identifier = identifier or UnknownDeviceIdentifier()
        self.committer = committer
        self.log = log if log is not None else get_logger()

    async def organize_from(
        self, source: ClientSource, apply_changes: bool = False
    ) -> OrganizationResult:
        """Fetch clients, devices and configured reservations concurrently, then run a pass.

        Reservations come from the controller's configured client list, so
        addresses held by offline clients are not handed out again.
        """
        clients, devices, reservations = await asyncio.gather(
            source.fetch_clients(), source.fetch_devices(), source.fetch_reservations()
        )
        return await self.organize(
            clients, apply_changes=apply_changes, devices=devices, reservations=reservations
        )

    async def organize(
        self,
        clients: Sequence[ClientRecord | dict[str, Any]],
        apply_changes: bool = False,
        devices: Sequence[DeviceRecord | dict[str, Any]] | None = None,
        reservations: Iterable[dict[str, Any]] | None = None,
    ) -> OrganizationResult:
        """Run one organisation pass over a client list.

        Args:
            clients: Client records (parsed or raw controller dictionaries), in a stable order
            apply_changes: Commit each assignment as a DHCP reservation
            devices: Infrastructure devices, used only to name each client's uplink
            reservations: Configured client entries (``rest/user``); fixed-IP ones hold their address

        Returns:
            OrganizationResult with organized, unclassified and rejected clients

        Raises:
            ToolError: CONFIG_INVALID when apply_changes is set without a committer
        """
        if apply_changes and self.committer is None:
            raise ToolError(
                message='apply_changes requires a reservation committer',
                error_code=ErrorCodes.CONFIG_INVALID,
                suggestion='Pass the local controller API as committer, or run a dry run',
            )

        records, rejected = parse_client_records(clients)
        for item in rejected:
            self.log.warning('Rejected client record', index=item.index, mac=item.mac, reason=item.reason)

        uplinks = _uplink_names(devices)
        state = self.allocator.new_state(self._held_reservations([*clients, *(reservations or ())]))

        organized: list[OrganizedEntry] = []
        unclassified: list[UnclassifiedEntry] = []

        # Allocation order follows input order
        for client in records:
            uplink = uplinks.get(client.uplink_mac or '')
            classification = self.classifier.classify(client)

            if classification is None:
                unclassified.append(self._unclassified(client, uplink))
                continue

            try:
                assigned_ip = self.allocator.allocate(classification.category, state, client.mac)
            except AllocationExhausted as e:
                self.log.warning(
                    'Category range exhausted', mac=client.mac, category=classification.category
                )
                unclassified.append(
                    self._unclassified(
                        client,
                        uplink,
                        reason='allocation_exhausted',
                        category=classification.category,
                        error=e.message,
                    )
                )
                continue

            entry = OrganizedEntry(
                mac=client.mac,
                name=client.display_name,
                hostname=client.hostname,
                current_ip=client.ip,
                assigned_ip=assigned_ip,
                category=classification.category,
                priority=classification.priority,
                rule=classification.rule,
                connection_type=client.connection_type,
                manufacturer=resolve_manufacturer(client),
                uplink=uplink,
            )

            if apply_changes:
                entry = await self._commit(entry, client)

            organized.append(entry)

        result = OrganizationResult(
            generated_at=datetime.now(timezone.utc).isoformat(),
            applied=apply_changes,
            categories=self.scheme.names,
            organized=organized,
            unclassified=unclassified,
            rejected=rejected,
            summary=self._summarize(organized, unclassified, rejected),
        )

        self.log.info(
            'Organisation pass finished',
            organized=len(organized),
            unclassified=len(unclassified),
            rejected=len(rejected),
            commit_failures=result.summary.commit_failures,
            applied=apply_changes,
        )
        return result

    async def _commit(self, entry: OrganizedEntry, client: ClientRecord) -> OrganizedEntry:
        hostname = client.name or client.hostname
        try:
            await self.committer.commit_reservation(entry.mac, entry.assigned_ip, hostname)
        except Exception as e:
            self.log.warning(
                'Reservation commit failed', mac=entry.mac, ip=entry.assigned_ip, error=str(e)
            )
            return entry.model_copy(update={'commit_status': 'failed', 'commit_error': str(e)})

        self.log.info('Reservation committed', mac=entry.mac, ip=entry.assigned_ip, name=hostname)
        return entry.model_copy(update={'commit_status': 'committed'})

    def _unclassified(
        self,
        client: ClientRecord,
        uplink: str | None,
        reason: str = 'no_rule_matched',
        category: str | None = None,
        error: str | None = None,
    ) -> UnclassifiedEntry:
        return UnclassifiedEntry(
            client=client,
            guess=self.identifier.identify(client),
            manufacturer=resolve_manufacturer(client),
            connection=self.identifier.connection_context(client, uplink),
            suggestion=suggest_classification(client.display_name),
            reason=reason,
            category=category,
            error=error,
        )

    def _held_reservations(
        self, entries: Iterable[ClientRecord | dict[str, Any]]
    ) -> list[tuple[str, str]]:
        """(mac, ip) pairs of fixed-IP reservations already present on the controller."""
        held = []
        for raw in entries:
            if not isinstance(raw, dict) or not raw.get('use_fixedip'):
                continue
            mac, ip = raw.get('mac'), raw.get('fixed_ip')
            if not (isinstance(mac, str) and isinstance(ip, str)):
                continue
            mac = canonical_mac(mac)
            if not MAC_PATTERN.match(mac):
                continue
            if self.scheme.category_for(ip) is not None:
                held.append((mac, ip))
        return held

    @staticmethod
    def _summarize(
        organized: list[OrganizedEntry],
        unclassified: list[UnclassifiedEntry],
        rejected: list[RejectedRecord],
    ) -> OrganizationSummary:
        by_category = Counter(entry.category for entry in organized)
        by_connection = Counter(entry.connection_type for entry in organized)
        by_connection.update(entry.client.connection_type for entry in unclassified)
        by_manufacturer = Counter(entry.manufacturer for entry in organized)
        by_manufacturer.update(entry.manufacturer for entry in unclassified)

        return OrganizationSummary(
            total_clients=len(organized) + len(unclassified) + len(rejected),
            auto_classified=len(organized),
            needs_review=len(unclassified),
            rejected=len(rejected),
            allocation_failures=sum(1 for e in unclassified if e.reason == 'allocation_exhausted'),
            commit_failures=sum(1 for e in organized if e.commit_status == 'failed'),
            by_category=dict(by_category),
            by_connection_type={
                'wired': by_connection.get('wired', 0),
                'wireless': by_connection.get('wireless', 0),
            },
            by_manufacturer=dict(by_manufacturer.most_common()),
        )
