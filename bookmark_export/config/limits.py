"""
Export limits and constants.

Centralized caps used by the API and the file-naming helpers.
"""

# Upload limits
MAX_UPLOAD_BYTES = 200 * 1024 * 1024
"""Largest PDF accepted by the export endpoints"""

# File naming limits
MAX_FILENAME_LENGTH = 100
"""Longest output file name kept after sanitizing (extension excluded)"""
