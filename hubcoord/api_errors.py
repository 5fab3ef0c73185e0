"""Error bodies and exceptions for the HTTP API."""

from __future__ import annotations

from typing import Any, Optional

__all__ = ["make_error", "make_server_error", "ServerError"]

_DEFAULT_SERVER_MESSAGE = "Internal Server Error"


def make_error(field_name: str, message: str) -> dict[str, Any]:
    """Body describing an error in one request field."""
    return {"errors": {str(field_name): [message]}}


def make_server_error(message: Optional[str] = None) -> dict[str, Any]:
    """Body describing a server-side failure."""
    return {"errors": [_DEFAULT_SERVER_MESSAGE if message is None else message]}


class ServerError(Exception):
    """HTTP 500 carrying a JSON error body."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.body = make_server_error(message)