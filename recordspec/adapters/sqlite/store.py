"""SQLite implementation of the record store protocol."""

import contextlib
import sqlite3
from collections.abc import Generator, Iterable, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from recordspec.adapters.sqlite._translate import expand_bindings, split_access_mode
from recordspec.exceptions import ExecutionError
from recordspec.parameters import AccessMode
from recordspec.utils.logging import get_logger

if TYPE_CHECKING:
    from recordspec.typing import Bindings, Record

__all__ = ("SqliteCursor", "SqliteRecordStore")

logger = get_logger("adapters.sqlite.store")


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    def __init__(self, connection: "sqlite3.Connection") -> None:
        self.connection = connection
        self.cursor: "sqlite3.Cursor | None" = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(sqlite3.Error):
                self.cursor.close()


class SqliteRecordStore:
    """Runs rendered record queries against a SQLite connection.

    The access mode clause is stripped before execution. When
    ``field_permissions`` is given, queries running in ``SECURITY_ENFORCED`` or
    ``USER_MODE`` may only reference the readable fields listed for their
    entity; entities missing from the mapping are unrestricted.

    Args:
        connection: Open SQLite connection.
        field_permissions: Entity type to readable field names.
    """

    __slots__ = ("_field_permissions", "connection", "query_count")

    def __init__(
        self, connection: "sqlite3.Connection", field_permissions: "Mapping[str, Iterable[str]] | None" = None
    ) -> None:
        self.connection = connection
        self.query_count = 0
        self._field_permissions: dict[str, frozenset[str]] = {
            entity.lower(): frozenset(name.lower() for name in names)
            for entity, names in (field_permissions or {}).items()
        }

    def query(self, text: str) -> "list[Record]":
        """Execute query text without bound parameters.

        The access mode is read from the ``WITH`` clause of the text.
        """
        access_mode, sql = split_access_mode(text)
        return self._run(sql, {}, access_mode)

    def query_with_bindings(self, text: str, bindings: "Bindings", access_mode: AccessMode) -> "list[Record]":
        """Execute query text, expanding and binding ``:name`` placeholders."""
        _, sql = split_access_mode(text)
        sql, parameters = expand_bindings(sql, bindings)
        return self._run(sql, parameters, access_mode)

    def _run(self, sql: str, parameters: "dict[str, Any]", access_mode: AccessMode) -> "list[Record]":
        with self._handle_database_exceptions(sql):
            statement = self._parse_select(sql)
            if access_mode is not AccessMode.SYSTEM:
                self._check_field_access(statement, access_mode)
            self.query_count += 1
            logger.debug("Executing on SQLite (%s): %s", access_mode, sql)
            with SqliteCursor(self.connection) as cursor:
                cursor.execute(sql, parameters)
                columns = [column[0] for column in cursor.description or ()]
                return [dict(zip(columns, row)) for row in cursor.fetchall()]

    @staticmethod
    def _parse_select(sql: str) -> "exp.Select":
        statements = sqlglot.parse(sql, read="sqlite")
        if len(statements) != 1 or not isinstance(statements[0], exp.Select):
            msg = "Only single SELECT statements can be executed"
            raise ExecutionError(msg, sql=sql)
        return statements[0]

    def _check_field_access(self, statement: "exp.Select", access_mode: AccessMode) -> None:
        table = statement.find(exp.Table)
        if table is None:
            return
        readable = self._field_permissions.get(table.name.lower())
        if readable is None:
            return
        if any(projection.is_star for projection in statement.expressions):
            msg = f"Wildcard selection is not allowed on {table.name} in {access_mode} mode"
            raise ExecutionError(msg, sql=statement.sql(dialect="sqlite"))
        referenced = {column.name for column in statement.find_all(exp.Column)}
        denied = sorted(name for name in referenced if name.lower() not in readable)
        if denied:
            msg = f"Insufficient access to {table.name} field(s) {', '.join(denied)} in {access_mode} mode"
            raise ExecutionError(msg, sql=statement.sql(dialect="sqlite"))

    @contextmanager
    def _handle_database_exceptions(self, sql: str) -> "Generator[None, None, None]":
        """Wrap SQLite and SQL parsing errors as :class:`ExecutionError`."""
        try:
            yield
        except sqlite3.Error as e:
            msg = f"SQLite database error: {e}"
            raise ExecutionError(msg, sql=sql) from e
        except SqlglotError as e:
            msg = f"SQL parsing failed: {e}"
            raise ExecutionError(msg, sql=sql) from e
