"""Database sessions: raw SQL, tables, records, hooks and transactions."""

from __future__ import annotations

import enum
import inspect
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from gee.orm import log
from gee.orm.clause import Clause, ClauseType
from gee.orm.dialect import Dialect
from gee.orm.schema import Schema, parse


class Hook(str, enum.Enum):
    """Names of the methods a model may define to run around statements."""

    BEFORE_QUERY = "before_query"
    AFTER_QUERY = "after_query"
    BEFORE_UPDATE = "before_update"
    AFTER_UPDATE = "after_update"
    BEFORE_DELETE = "before_delete"
    AFTER_DELETE = "after_delete"
    BEFORE_INSERT = "before_insert"
    AFTER_INSERT = "after_insert"


def _model_class(value: Any) -> type:
    return value if isinstance(value, type) else type(value)


class Session:
    """Builds and runs statements against a DB-API connection."""

    def __init__(self, db: Any, dialect: Dialect):
        self.db = db
        self.dialect = dialect
        self._ref_table: Optional[Schema] = None
        self._in_tx = False
        self.clear()

    # ---- raw statements -------------------------------------------------

    def clear(self) -> None:
        """Forget the pending statement and clauses."""
        self._sql: List[str] = []
        self._sql_vars: List[Any] = []
        self._clause = Clause()

    def raw(self, sql: str, *args: Any) -> "Session":
        """Append ``sql`` and its arguments to the pending statement."""
        self._sql.append(sql)
        self._sql_vars.extend(args)
        return self

    def _take_statement(self):
        sql, args = " ".join(self._sql), list(self._sql_vars)
        self.clear()
        log.info(sql, args)
        return sql, args

    def _execute(self, sql: str, args: Sequence[Any]):
        cursor = self.db.cursor()
        cursor.execute(sql, args)
        return cursor

    def exec(self):
        """Run the pending statement and return its cursor."""
        sql, args = self._take_statement()
        try:
            return self._execute(sql, args)
        except Exception as exc:
            log.error(exc)
            raise

    def query_row(self) -> Optional[tuple]:
        """Run the pending query and return its first row, or None."""
        sql, args = self._take_statement()
        return self._execute(sql, args).fetchone()

    def query_rows(self):
        """Run the pending query and return a cursor over its rows."""
        sql, args = self._take_statement()
        try:
            return self._execute(sql, args)
        except Exception as exc:
            log.error(exc)
            raise

    # ---- tables ---------------------------------------------------------

    def model(self, value: Any) -> "Session":
        """Use the dataclass (or instance) ``value`` as the current table."""
        if self._ref_table is None or _model_class(value) is not _model_class(
            self._ref_table.model
        ):
            self._ref_table = parse(value, self.dialect)
        return self

    def ref_table(self) -> Schema:
        """Return the current table schema."""
        if self._ref_table is None:
            log.error("Model is not set ...")
            raise RuntimeError("model is not set")
        return self._ref_table

    def create_table(self) -> None:
        """Create the current table."""
        table = self.ref_table()
        columns = ",".join(f"{f.name} {f.type} {f.tag}" for f in table.fields)
        self.raw(f"CREATE TABLE {table.name} ({columns});").exec()

    def drop_table(self) -> None:
        """Drop the current table if it exists."""
        self.raw(f"DROP TABLE IF EXISTS {self.ref_table().name}").exec()

    def has_table(self) -> bool:
        """Tell whether the current table exists."""
        name = self.ref_table().name
        sql, args = self.dialect.table_exist_sql(name)
        row = self.raw(sql, *args).query_row()
        return row is not None and row[0] == name

    # ---- hooks ----------------------------------------------------------

    def call_method(self, method: Hook | str, value: Any) -> None:
        """Call hook ``method`` on ``value``, or on the model when ``value`` is None.

        Errors raised or returned by a hook are logged, not propagated.
        """
        name = Hook(method).value
        target = value
        if target is None and self._ref_table is not None:
            target = self._ref_table.model
        if target is None:
            return
        fn = getattr(target, name, None)
        if fn is None or not callable(fn):
            return
        if isinstance(target, type) and inspect.isfunction(fn):
            # An instance method cannot run without an instance.
            return
        try:
            result = fn(self)
        except Exception as exc:
            log.error(exc)
            return
        if isinstance(result, BaseException):
            log.error(result)

    # ---- records --------------------------------------------------------

    def insert(self, *args: Any) -> int:
        """Insert the given records and return the number of rows affected."""
        if not args:
            raise ValueError("no records to insert")
        rows = []
        for value in args:
            self.call_method(Hook.BEFORE_INSERT, value)
            table = self.model(value).ref_table()
            self._clause.set(ClauseType.INSERT, table.name, table.field_names)
            rows.append(table.record_values(value))
        self._clause.set(ClauseType.VALUES, *rows)
        sql, values = self._clause.build(ClauseType.INSERT, ClauseType.VALUES)
        try:
            cursor = self.raw(sql, *values).exec()
        finally:
            self.call_method(Hook.AFTER_INSERT, None)
        return cursor.rowcount

    def find(self, model_type: Any) -> List[Any]:
        """Return every record of ``model_type`` matching the pending clauses."""
        cls = _model_class(model_type)
        table = self.model(model_type).ref_table()
        self.call_method(Hook.BEFORE_QUERY, None)
        self._clause.set(ClauseType.SELECT, table.name, table.field_names)
        sql, values = self._clause.build(
            ClauseType.SELECT, ClauseType.WHERE, ClauseType.ORDER_BY, ClauseType.LIMIT
        )
        rows = self.raw(sql, *values).query_rows().fetchall()
        records = []
        for row in rows:
            record = cls(**dict(zip(table.field_names, row)))
            self.call_method(Hook.AFTER_QUERY, record)
            records.append(record)
        return records

    def first(self, model_type: Any) -> Any:
        """Return the first matching record; raise LookupError if there is none."""
        records = self.limit(1).find(model_type)
        if not records:
            raise LookupError("Not Found")
        return records[0]

    def update(self, *args: Any) -> int:
        """Update matching rows from a mapping or key/value pairs."""
        if len(args) == 1 and isinstance(args[0], Mapping):
            values = dict(args[0])
        elif args and len(args) % 2 == 0:
            values = dict(zip(args[::2], args[1::2]))
        else:
            raise ValueError("update expects a mapping or key/value pairs")
        self.call_method(Hook.BEFORE_UPDATE, None)
        self._clause.set(ClauseType.UPDATE, self.ref_table().name, values)
        sql, params = self._clause.build(ClauseType.UPDATE, ClauseType.WHERE)
        try:
            cursor = self.raw(sql, *params).exec()
        finally:
            self.call_method(Hook.AFTER_UPDATE, None)
        return cursor.rowcount

    def delete(self) -> int:
        """Delete matching rows and return how many were removed."""
        self.call_method(Hook.BEFORE_DELETE, None)
        self._clause.set(ClauseType.DELETE, self.ref_table().name)
        sql, params = self._clause.build(ClauseType.DELETE, ClauseType.WHERE)
        try:
            cursor = self.raw(sql, *params).exec()
        finally:
            self.call_method(Hook.AFTER_DELETE, None)
        return cursor.rowcount

    def count(self) -> int:
        """Count matching rows."""
        self._clause.set(ClauseType.COUNT, self.ref_table().name)
        sql, params = self._clause.build(ClauseType.COUNT, ClauseType.WHERE)
        row = self.raw(sql, *params).query_row()
        return int(row[0])

    def limit(self, num: int) -> "Session":
        """Limit the number of rows returned."""
        self._clause.set(ClauseType.LIMIT, num)
        return self

    def where(self, desc: str, *args: Any) -> "Session":
        """Filter rows by ``desc`` with ``args`` bound to its placeholders."""
        self._clause.set(ClauseType.WHERE, desc, *args)
        return self

    def order_by(self, desc: str) -> "Session":
        """Order rows by ``desc``."""
        self._clause.set(ClauseType.ORDER_BY, desc)
        return self

    # ---- transactions ---------------------------------------------------

    def begin(self) -> None:
        """Start a transaction."""
        log.info("transaction Begin")
        try:
            self.db.cursor().execute("BEGIN")
        except Exception as exc:
            log.error(exc)
            raise
        self._in_tx = True

    def commit(self) -> None:
        """Commit the current transaction."""
        log.info("transaction Commit")
        if not self._in_tx:
            raise RuntimeError("no transaction in progress")
        try:
            self.db.commit()
        except Exception as exc:
            log.error(exc)
            raise
        finally:
            self._in_tx = False

    def rollback(self) -> None:
        """Roll back the current transaction."""
        log.info("transaction RollBack")
        if not self._in_tx:
            raise RuntimeError("no transaction in progress")
        try:
            self.db.rollback()
        except Exception as exc:
            log.error(exc)
            raise
        finally:
            self._in_tx = False