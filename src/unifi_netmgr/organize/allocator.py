"""Sequential per-category IP allocation."""

from dataclasses import dataclass, field
from typing import Iterable
from unifi_netmgr.models.local import canonical_mac
from unifi_netmgr.organize.scheme import CategoryScheme, int_to_ip, ip_to_int
from unifi_netmgr.utils.errors import AllocationExhausted, ErrorCodes, ToolError


@dataclass
class AllocationState:
    """Mutable bookkeeping for one organisation pass.

    Attributes:
        next_offsets: Next address (as int) to try, per category name
        issued: Addresses handed out during this pass
        reserved: Addresses already reserved on the controller, mapped to the owning MAC
    """

    next_offsets: dict[str, int]
    issued: set[int] = field(default_factory=set)
    reserved: dict[int, str] = field(default_factory=dict)

    @classmethod
    def initial(
        cls,
        scheme: CategoryScheme,
        reservations: Iterable[tuple[str, str]] = (),
    ) -> 'AllocationState':
        """Fresh state starting every category at its configured first address.

        Args:
            scheme: Category scheme
            reservations: (mac, ip) pairs already held on the controller
        """
        reserved = {}
        for mac, ip in reservations:
            reserved[ip_to_int(ip)] = canonical_mac(mac)

        return cls(
            next_offsets={category.name: category.first_int for category in scheme},
            reserved=reserved,
        )

    def is_issued(self, address: str) -> bool:
        return ip_to_int(address) in self.issued


class IPAllocator:
    """Hands out the next free address of a category's range."""

    def __init__(self, scheme: CategoryScheme):
        self.scheme = scheme

    def new_state(self, reservations: Iterable[tuple[str, str]] = ()) -> AllocationState:
        return AllocationState.initial(self.scheme, reservations)

    def allocate(self, category: str, state: AllocationState, mac: str | None = None) -> str:
        """Issue the next unused address in a category.

        Addresses already issued in this pass are skipped, and so are
        addresses reserved on the controller for a different MAC.

        Args:
            category: Category name
            state: Allocation state of the current pass (updated in place)
            mac: MAC of the client the address is for

        Returns:
            Dotted-quad address

        Raises:
            AllocationExhausted: When the scan passes the end of the range
            ToolError: CATEGORY_NOT_FOUND / CONFIG_INVALID for unknown or reserved categories
        """
        target = self.scheme.get(category)
        if not target.assignable:
            raise ToolError(
                message=f'{category} is a reserved pool and cannot be allocated from',
                error_code=ErrorCodes.CONFIG_INVALID,
            )

        owner = canonical_mac(mac) if mac else None
        offset = state.next_offsets.get(category, target.first_int)

        while offset <= target.end_int:
            if offset not in state.issued and state.reserved.get(offset, owner) == owner:
                state.issued.add(offset)
                state.next_offsets[category] = offset + 1
                return int_to_ip(offset)
            offset += 1

        state.next_offsets[category] = offset
        raise AllocationExhausted(category, target.start, target.end)
