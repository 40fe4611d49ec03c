"""Unit tests for error handling."""

from unifi_netmgr.utils.errors import AllocationExhausted, CommitFailure, ErrorCodes, ToolError


class TestToolError:
    """Test ToolError class."""

    def test_basic_error(self):
        """Test basic error creation."""
        error = ToolError(message='Something went wrong', error_code='TEST_ERROR')
        assert error.error_code == 'TEST_ERROR'
        assert error.message == 'Something went wrong'
        assert error.suggestion is None
        assert error.related_tools == []

    def test_error_formatting_basic(self):
        """Test basic error formatting."""
        error = ToolError(message='Test error', error_code='TEST')
        assert str(error) == '[TEST] Test error'

    def test_error_formatting_complete(self):
        """Test formatting with suggestion and related tools."""
        error = ToolError(
            message='Unknown category: Printers',
            error_code=ErrorCodes.CATEGORY_NOT_FOUND,
            suggestion='Add the category to the scheme',
            related_tools=['organize'],
        )
        lines = str(error).split('\n')
        assert lines[0] == '[CATEGORY_NOT_FOUND] Unknown category: Printers'
        assert lines[1] == '💡 Suggestion: Add the category to the scheme'
        assert lines[2] == '🔧 Related tools: organize'

    def test_to_dict(self):
        """Test dictionary conversion for structured logging."""
        error = ToolError(message='Boom', error_code=ErrorCodes.API_ERROR)
        assert error.to_dict() == {
            'error_code': 'API_ERROR',
            'message': 'Boom',
            'suggestion': '',
            'related_tools': [],
        }


class TestOrganisationErrors:
    """Test errors raised by the organiser."""

    def test_allocation_exhausted(self):
        """Exhaustion names the category and its range."""
        error = AllocationExhausted('Infrastructure', '10.0.0.1', '10.0.0.3')
        assert isinstance(error, ToolError)
        assert error.category == 'Infrastructure'
        assert error.error_code == ErrorCodes.ALLOCATION_EXHAUSTED
        assert '10.0.0.1 - 10.0.0.3' in error.message

    def test_commit_failure(self):
        """Commit failure keeps the reservation it was about."""
        error = CommitFailure('aa:bb:cc:dd:ee:ff', '10.0.0.51', 'HTTP 500')
        assert error.error_code == ErrorCodes.COMMIT_FAILED
        assert error.mac == 'aa:bb:cc:dd:ee:ff'
        assert error.ip == '10.0.0.51'
        assert 'HTTP 500' in error.message
