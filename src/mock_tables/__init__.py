"""Mock Tables - an in-memory stand-in for a PostgREST-style backend client."""

from mock_tables.config import MockTablesConfig
from mock_tables.errors import (
    InvalidPayloadError,
    MockTablesConfigError,
    MockTablesError,
    QueryExecutionError,
)
from mock_tables.logging_config import configure_logging
from mock_tables.parsing import AnyOf, FilterParser, MalformedTerm, OrTerm
from mock_tables.predicates import Condition
from mock_tables.query import Ordering, Query
from mock_tables.query_builder import QueryBuilder
from mock_tables.query_executor import QueryExecutor, QueryResult
from mock_tables.store import MockStore, get_store, reset_store, set_seeder
from mock_tables.table import Table

__all__ = [
    # Main API
    "MockStore",
    "QueryBuilder",
    "QueryResult",
    "get_store",
    "reset_store",
    "set_seeder",
    # Configuration
    "MockTablesConfig",
    "configure_logging",
    # Query model
    "Query",
    "Ordering",
    "Condition",
    "AnyOf",
    "OrTerm",
    "MalformedTerm",
    "FilterParser",
    "QueryExecutor",
    "Table",
    # Errors
    "MockTablesError",
    "MockTablesConfigError",
    "QueryExecutionError",
    "InvalidPayloadError",
]

__version__ = "0.1.0"
