"""Build SQL statements from independently set clauses."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

SqlWithVars = Tuple[str, List[Any]]


class ClauseType(IntEnum):
    INSERT = 0
    VALUES = 1
    SELECT = 2
    LIMIT = 3
    WHERE = 4
    ORDER_BY = 5
    UPDATE = 6
    DELETE = 7
    COUNT = 8


def _bind_vars(num: int) -> str:
    return ", ".join(["?"] * num)


def _insert(table_name: str, fields: Sequence[str]) -> SqlWithVars:
    return f"INSERT INTO {table_name} ({','.join(fields)})", []


def _values(*rows: Sequence[Any]) -> SqlWithVars:
    bind = _bind_vars(len(rows[0])) if rows else ""
    sql = "VALUES " + ",".join(f"({bind})" for _ in rows)
    return sql, [value for row in rows for value in row]


def _select(table_name: str, fields: Sequence[str]) -> SqlWithVars:
    return f"SELECT {','.join(fields)} FROM {table_name}", []


def _limit(*values: Any) -> SqlWithVars:
    return "LIMIT ?", list(values)


def _where(desc: str, *args: Any) -> SqlWithVars:
    return f"WHERE {desc}", list(args)


def _order_by(desc: str) -> SqlWithVars:
    return f"ORDER BY {desc}", []


def _update(table_name: str, values: Mapping[str, Any]) -> SqlWithVars:
    keys = ",".join(f"{key} = ?" for key in values)
    return f"UPDATE {table_name} SET {keys}", list(values.values())


def _delete(table_name: str) -> SqlWithVars:
    return f"DELETE FROM {table_name}", []


def _count(table_name: str) -> SqlWithVars:
    return _select(table_name, ["count(*)"])


_GENERATORS: Dict[ClauseType, Callable[..., SqlWithVars]] = {
    ClauseType.INSERT: _insert,
    ClauseType.VALUES: _values,
    ClauseType.SELECT: _select,
    ClauseType.LIMIT: _limit,
    ClauseType.WHERE: _where,
    ClauseType.ORDER_BY: _order_by,
    ClauseType.UPDATE: _update,
    ClauseType.DELETE: _delete,
    ClauseType.COUNT: _count,
}


class Clause:
    """Holds SQL fragments by clause type and joins them on demand."""

    def __init__(self) -> None:
        self._sql: Dict[ClauseType, str] = {}
        self._vars: Dict[ClauseType, List[Any]] = {}

    def set(self, name: ClauseType, *args: Any) -> None:
        """Generate and store the fragment for clause ``name``."""
        kind = ClauseType(name)
        sql, values = _GENERATORS[kind](*args)
        self._sql[kind] = sql
        self._vars[kind] = values

    def build(self, *args: ClauseType) -> Tuple[str, List[Any]]:
        """Join the stored fragments of the given types in order."""
        parts: List[str] = []
        values: List[Any] = []
        for kind in args:
            kind = ClauseType(kind)
            if kind in self._sql:
                parts.append(self._sql[kind])
                values.extend(self._vars[kind])
        return " ".join(parts), values