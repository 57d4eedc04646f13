"""SQL dialects mapping Python types to column types."""

from __future__ import annotations

import abc
import datetime
import typing
from typing import Any, Dict, List, Optional, Tuple


class Dialect(abc.ABC):
    """Database-specific type mapping and introspection queries."""

    @abc.abstractmethod
    def data_type_of(self, value_type: Any) -> str:
        """Return the column type for a Python type."""

    @abc.abstractmethod
    def table_exist_sql(self, table_name: str) -> Tuple[str, List[Any]]:
        """Return a query and its arguments that find ``table_name``."""


class Sqlite3Dialect(Dialect):
    """The SQLite dialect."""

    def data_type_of(self, value_type: Any) -> str:
        origin = typing.get_origin(value_type) or value_type
        if isinstance(origin, type):
            if issubclass(origin, bool):
                return "bool"
            if issubclass(origin, int):
                return "integer"
            if issubclass(origin, float):
                return "real"
            if issubclass(origin, str):
                return "text"
            if issubclass(origin, (bytes, bytearray, memoryview, list, tuple)):
                return "blob"
            if issubclass(origin, datetime.datetime):
                return "datetime"
        name = getattr(value_type, "__name__", repr(value_type))
        raise TypeError(f"invalid sql type {name}")

    def table_exist_sql(self, table_name: str) -> Tuple[str, List[Any]]:
        return (
            "SELECT name FROM sqlite_master WHERE type='table' and name = ?",
            [table_name],
        )


_dialects: Dict[str, Dialect] = {}


def register_dialect(name: str, dialect: Dialect) -> None:
    """Make ``dialect`` available under ``name``."""
    _dialects[name] = dialect


def get_dialect(name: str) -> Optional[Dialect]:
    """Return the dialect registered under ``name``, or None."""
    return _dialects.get(name)


register_dialect("sqlite3", Sqlite3Dialect())