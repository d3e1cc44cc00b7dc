"""Runtime configuration for mock tables.

This module owns all environment variable parsing and validation.
Stores consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from mock_tables.errors import MockTablesConfigError

LATENCY_ENV = "MOCK_TABLES_LATENCY_MS"
LOG_OPERATIONS_ENV = "MOCK_TABLES_LOG_OPERATIONS"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True)
class MockTablesConfig:
    """Validated runtime configuration.

    Attributes:
        latency_ms: Artificial delay applied before each awaited query.
        log_operations: Whether each executed query emits a log event.
    """

    latency_ms: int = 0
    log_operations: bool = False

    @property
    def latency_seconds(self) -> float:
        return self.latency_ms / 1000.0

    @classmethod
    def from_env(cls) -> "MockTablesConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            MockTablesConfigError: If environment values are invalid.
        """
        latency_ms = _parse_latency(os.getenv(LATENCY_ENV, "0"))
        log_operations = _parse_flag(LOG_OPERATIONS_ENV, os.getenv(LOG_OPERATIONS_ENV, "false"))
        return cls(latency_ms=latency_ms, log_operations=log_operations)


def _parse_latency(raw_value: str) -> int:
    """Parse the latency environment value.

    Raises:
        MockTablesConfigError: If the value is not a non-negative integer.
    """
    try:
        latency_ms = int(raw_value)
    except ValueError as error:
        raise MockTablesConfigError(
            f"Invalid {LATENCY_ENV} value: "
            f"expected integer milliseconds, got '{raw_value}'. "
            f"Set {LATENCY_ENV} to a whole number such as 0 or 250."
        ) from error
    if latency_ms < 0:
        raise MockTablesConfigError(
            f"Invalid {LATENCY_ENV} value: {latency_ms} is negative. "
            f"Set {LATENCY_ENV} to 0 to disable the delay."
        )
    return latency_ms


def _parse_flag(env_name: str, raw_value: str) -> bool:
    """Parse a boolean environment flag.

    Raises:
        MockTablesConfigError: If the value is not a recognised boolean.
    """
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise MockTablesConfigError(
        f"Invalid {env_name} value: expected a boolean, got '{raw_value}'. "
        f"Use one of: {', '.join(sorted(_TRUE_VALUES | (_FALSE_VALUES - {''})))}."
    )
