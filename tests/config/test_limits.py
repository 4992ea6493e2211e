"""Tests for export limit configuration"""
from bookmark_export.config.limits import MAX_FILENAME_LENGTH, MAX_UPLOAD_BYTES


class TestExportLimits:
    """Test export limit constants"""

    def test_constants_are_defined(self):
        """Should define all export limit constants"""
        assert MAX_FILENAME_LENGTH == 100
        assert MAX_UPLOAD_BYTES == 200 * 1024 * 1024

    def test_constants_are_positive(self):
        """All limits should be positive integers"""
        assert MAX_FILENAME_LENGTH > 0
        assert MAX_UPLOAD_BYTES > 0
