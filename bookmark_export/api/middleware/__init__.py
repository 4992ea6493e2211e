"""API middleware: token authentication and request logging."""
from bookmark_export.api.middleware.authentication import create_token_verifier, token_matches
from bookmark_export.api.middleware.request_logging import add_request_logging, endpoint_label

__all__ = [
    "add_request_logging",
    "create_token_verifier",
    "endpoint_label",
    "token_matches",
]
