"""
SQL rendering rules shared by the statement builder and the adapters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, Optional, Protocol


@dataclass(frozen=True)
class DialectCapabilities:
    # False means generated ids are read back through the cursor's lastrowid
    supports_returning: bool = False
    supports_schema_namespaces: bool = True


class Dialect(Protocol):
    name: str
    param_style: str
    capabilities: DialectCapabilities

    def quote_identifier(self, identifier: str) -> str: ...

    def format_table(self, table_name: str) -> str: ...

    def limit_clause(self, limit: Optional[int], offset: Optional[int]) -> str: ...

    def parameter_placeholder(self) -> str: ...

    def placeholders(self, count: int) -> str: ...

    def quote_columns(self, columns: Iterable[str]) -> str: ...

    def returning_clause(self, column: Optional[str]) -> str: ...


class QuotedDialect:
    """
    Double-quoted identifiers and ``LIMIT``/``OFFSET`` paging.

    Subclasses pin ``name``, ``param_style``, ``placeholder`` and
    ``capabilities``. ``unbounded_limit`` is emitted when only an offset is
    given, for backends that reject a bare ``OFFSET``.
    """

    name: ClassVar[str]
    param_style: ClassVar[str]
    placeholder: ClassVar[str]
    capabilities: ClassVar[DialectCapabilities] = DialectCapabilities()
    unbounded_limit: ClassVar[Optional[str]] = None

    def quote_identifier(self, identifier: str) -> str:
        return '"' + identifier.replace('"', '""') + '"'

    def format_table(self, table_name: str) -> str:
        if self.capabilities.supports_schema_namespaces and "." in table_name:
            return ".".join(self.quote_identifier(part) for part in table_name.split(".", 1))
        return self.quote_identifier(table_name)

    def limit_clause(self, limit: Optional[int], offset: Optional[int]) -> str:
        clauses = []
        if limit is not None:
            clauses.append(f"LIMIT {int(limit)}")
        elif offset is not None and self.unbounded_limit:
            clauses.append(f"LIMIT {self.unbounded_limit}")
        if offset is not None:
            clauses.append(f"OFFSET {int(offset)}")
        return " ".join(clauses)

    def parameter_placeholder(self) -> str:
        return self.placeholder

    def placeholders(self, count: int) -> str:
        return ", ".join([self.placeholder] * count)

    def quote_columns(self, columns: Iterable[str]) -> str:
        return ", ".join(self.quote_identifier(column) for column in columns)

    def returning_clause(self, column: Optional[str]) -> str:
        """
        ``RETURNING`` suffix for an insert, empty when unsupported.
        """
        if not column or not self.capabilities.supports_returning:
            return ""
        return f" RETURNING {self.quote_identifier(column)}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
