"""Shared utilities for the fixture server."""

from .error_mapper import map_error, create_error_response, ErrorCode

__all__ = [
    "map_error",
    "create_error_response",
    "ErrorCode",
]
