"""Error handling utilities shared by the API clients and the organiser."""


class ToolError(Exception):
    """Structured error for network manager operations."""

    def __init__(
        self,
        message: str,
        error_code: str,
        suggestion: str | None = None,
        related_tools: list[str] | None = None,
    ):
        """Initialize tool error with structured context.

        Args:
            message: Human-readable error description
            error_code: Structured error code (e.g., 'ALLOCATION_EXHAUSTED')
            suggestion: Optional recovery suggestion for the user
            related_tools: Optional list of commands that might help resolve the issue
        """
        self.message = message
        self.error_code = error_code
        self.suggestion = suggestion
        self.related_tools = related_tools or []
        super().__init__(self._format())

    def _format(self) -> str:
        """Format error message with structured information."""
        parts = [f'[{self.error_code}] {self.message}']

        if self.suggestion:
            parts.append(f'💡 Suggestion: {self.suggestion}')

        if self.related_tools:
            parts.append(f'🔧 Related tools: {", ".join(self.related_tools)}')

        return '\n'.join(parts)

    def to_dict(self) -> dict[str, str | list[str]]:
        """Convert to dictionary for structured logging."""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'suggestion': self.suggestion or '',
            'related_tools': self.related_tools,
        }


class AllocationExhausted(ToolError):
    """Raised when a category's address range has no free slot left."""

    def __init__(self, category: str, start: str, end: str):
        self.category = category
        super().__init__(
            message=f'No free address left in {category} ({start} - {end})',
            error_code=ErrorCodes.ALLOCATION_EXHAUSTED,
            suggestion='Widen the category range or move devices to another category',
        )


class CommitFailure(ToolError):
    """Raised when the controller rejects a DHCP reservation."""

    def __init__(self, mac: str, ip: str, reason: str):
        self.mac = mac
        self.ip = ip
        self.reason = reason
        super().__init__(
            message=f'Reservation {mac} -> {ip} failed: {reason}',
            error_code=ErrorCodes.COMMIT_FAILED,
            suggestion='Re-run organize --apply once the controller is reachable',
        )


# Common error codes for consistency
class ErrorCodes:
    """Standard error codes for network manager operations."""

    # Device/endpoint errors
    DEVICE_NOT_FOUND = 'DEVICE_NOT_FOUND'
    ENDPOINT_NOT_FOUND = 'ENDPOINT_NOT_FOUND'

    # Controller/connection errors
    CONTROLLER_UNREACHABLE = 'CONTROLLER_UNREACHABLE'
    AUTHENTICATION_FAILED = 'AUTHENTICATION_FAILED'
    API_ERROR = 'API_ERROR'
    NO_API_CONFIGURED = 'NO_API_CONFIGURED'

    # Input errors
    INVALID_MAC = 'INVALID_MAC'
    INVALID_IP = 'INVALID_IP'
    DUPLICATE_MAC = 'DUPLICATE_MAC'
    MALFORMED_RECORD = 'MALFORMED_RECORD'

    # Organisation errors
    CATEGORY_NOT_FOUND = 'CATEGORY_NOT_FOUND'
    ALLOCATION_EXHAUSTED = 'ALLOCATION_EXHAUSTED'
    COMMIT_FAILED = 'COMMIT_FAILED'

    # Configuration errors
    CONFIG_INVALID = 'CONFIG_INVALID'
