"""Shared utilities for the UniFi network manager."""

from unifi_netmgr.utils.errors import (
    AllocationExhausted,
    CommitFailure,
    ErrorCodes,
    ToolError,
)
from unifi_netmgr.utils.logging import configure_logging, get_logger

__all__ = [
    'AllocationExhausted',
    'CommitFailure',
    'ErrorCodes',
    'ToolError',
    'configure_logging',
    'get_logger',
]
