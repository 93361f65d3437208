"""
Application exceptions translated into responses by the handlers registered in
shop_erp.api.main.
"""
from __future__ import annotations


class LoginRequired(Exception):
    """Raised by the session guard when a protected page is requested without an identity."""


class StoreError(Exception):
    """
    A read or write against the data store failed.

    The raw driver message is kept so pages can surface it in an alert.
    """

    def __init__(self, message: str, *, operation: str = "", table: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.table = table


class NotFound(Exception):
    """A record addressed by key does not exist."""

    def __init__(self, table: str, key: object) -> None:
        super().__init__(f"{table} record {key!r} not found")
        self.table = table
        self.key = key
