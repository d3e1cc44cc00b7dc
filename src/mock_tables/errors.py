"""Exception hierarchy for mock tables.

Failures raised while a query executes are reported through the result
envelope; configuration failures propagate to the caller.
"""

from __future__ import annotations


class MockTablesError(Exception):
    """Base exception for all mock table failures."""


class MockTablesConfigError(MockTablesError):
    """Raised for invalid runtime configuration."""


class QueryExecutionError(MockTablesError):
    """Raised when a query cannot be carried out against the store."""


class InvalidPayloadError(QueryExecutionError):
    """Raised when an insert, update or upsert payload is not a mapping."""
