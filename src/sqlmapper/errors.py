"""
Error hierarchy shared across sqlmapper packages.
"""

from __future__ import annotations

from typing import Dict, List, Mapping


class SqlMapperError(Exception):
    """Base error for every sqlmapper failure."""


class StorageError(SqlMapperError):
    """Raised when the backing store rejects or fails an operation."""


class AdapterError(StorageError):
    """Base error for adapter-related failures."""


class AdapterConfigurationError(AdapterError):
    """Raised when configuration or required dependencies are invalid."""


class AdapterConnectionError(AdapterError):
    """Raised when establishing or using a connection fails."""


class AdapterExecutionError(AdapterError):
    """Raised when SQL execution or parameter validation fails."""


class AdapterTransactionError(AdapterError):
    """Raised when begin, commit or rollback fails at the driver level."""


class MappingError(SqlMapperError):
    """Raised when an entity field or mapped column cannot be resolved."""


class ValidationError(MappingError):
    """
    Aggregated validation error storing field-to-messages mapping.
    """

    def __init__(self, errors: Mapping[str, List[str]]) -> None:
        self.errors: Dict[str, List[str]] = {
            key: list(messages) for key, messages in errors.items()
        }
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        segments = []
        for field, messages in self.errors.items():
            prefix = field if field != "__all__" else "non-field"
            segments.append(f"{prefix}: {'; '.join(messages)}")
        return "; ".join(segments)


class UsageError(SqlMapperError):
    """Raised when the API is driven incorrectly by the caller."""


class NoSuchMapper(UsageError, KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No mapper registered under {name!r}")

    def __str__(self) -> str:
        return self.args[0]


class NoSuchConnection(UsageError, KeyError):
    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"No {kind} connection registered under {name!r}")

    def __str__(self) -> str:
        return self.args[0]


class TransactionError(UsageError):
    """Raised on an illegal transaction state transition."""
