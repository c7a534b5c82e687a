"""
Fluent builder for single-table statements.

Statements are written with `?` placeholders and rendered to psycopg's
`%s` style only when executed. A literal `?` inside a quoted string in a
condition is therefore not supported; bind the value instead.

Usage:
    rows = (
        db.connect()
        .select()
        .from_("users")
        .where("name = ?")
        .order_by("id")
        .execute(["Ada"])
        .fetch_all_class(User)
    )
"""

from typing import Any, Optional, Sequence

from softrepo.exceptions import QueryBuilderError
from softrepo.logger import get_logger

logger = get_logger(__name__)


def to_psycopg(query: str) -> str:
    """Render `?` placeholders as `%s`, escaping literal percent signs."""
    return query.replace("%", "%%").replace("?", "%s")


class QueryBuilder:
    """
    Builds and executes one SELECT, INSERT, UPDATE or DELETE statement.

    A builder is single-use: create one per statement via `Database.connect()`.
    Result rows are fetched eagerly on execute, so the connection is released
    before any fetch method is called.
    """

    def __init__(self, database):
        self._database = database
        self._statement: Optional[str] = None
        self._select = "*"
        self._table: Optional[str] = None
        self._columns: list[str] = []
        self._returning: Optional[str] = None
        self._where: list[str] = []
        self._order: Optional[str] = None
        self._rows: Optional[list[dict]] = None
        self._rowcount = -1
        self._last_insert_id = None

    # -------------------------------------------------------------------------
    # Statement construction
    # -------------------------------------------------------------------------

    def _start(self, statement: str) -> None:
        if self._statement is not None:
            raise QueryBuilderError(
                f"Cannot start {statement.upper()}: builder already holds a {self._statement.upper()}"
            )
        self._statement = statement

    def _require(self, *statements: str) -> None:
        if self._statement not in statements:
            expected = " or ".join(s.upper() for s in statements)
            raise QueryBuilderError(f"Expected a {expected} statement")

    def select(self, expr: str = "*") -> "QueryBuilder":
        self._start("select")
        self._select = expr
        return self

    def from_(self, table: str) -> "QueryBuilder":
        self._require("select")
        self._table = table
        return self

    def insert(self, table: str, columns: Sequence[str], returning: str = "id") -> "QueryBuilder":
        """INSERT into `columns`; the value of `returning` is reported by last_insert_id()."""
        self._start("insert")
        self._table = table
        self._columns = list(columns)
        self._returning = returning
        return self

    def update(self, table: str, columns: Sequence[str]) -> "QueryBuilder":
        """UPDATE `columns`; SET values bind before any WHERE values."""
        self._start("update")
        if not columns:
            raise QueryBuilderError(f"UPDATE of '{table}' needs at least one column")
        self._table = table
        self._columns = list(columns)
        return self

    def delete_from(self, table: str) -> "QueryBuilder":
        self._start("delete")
        self._table = table
        return self

    def where(self, condition: str) -> "QueryBuilder":
        self._require("select", "update", "delete")
        if self._where:
            raise QueryBuilderError("WHERE already set; use and_where() to add conditions")
        self._where.append(condition)
        return self

    def and_where(self, condition: str) -> "QueryBuilder":
        if not self._where:
            raise QueryBuilderError("and_where() called before where()")
        self._where.append(condition)
        return self

    def order_by(self, expr: str) -> "QueryBuilder":
        self._require("select")
        self._order = expr
        return self

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _where_clause(self) -> str:
        if not self._where:
            return ""
        if len(self._where) == 1:
            return f" WHERE {self._where[0]}"
        return " WHERE " + " AND ".join(f"({c})" for c in self._where)

    @property
    def sql(self) -> str:
        """The statement text with `?` placeholders."""
        if self._statement is None:
            raise QueryBuilderError("No statement started")

        if self._statement == "select":
            if self._table is None:
                raise QueryBuilderError("SELECT without FROM")
            query = f"SELECT {self._select} FROM {self._table}{self._where_clause()}"
            if self._order is not None:
                query += f" ORDER BY {self._order}"
            return query

        if self._statement == "insert":
            if self._columns:
                columns = ", ".join(self._columns)
                placeholders = ", ".join("?" for _ in self._columns)
                query = f"INSERT INTO {self._table} ({columns}) VALUES ({placeholders})"
            else:
                query = f"INSERT INTO {self._table} DEFAULT VALUES"
            return f"{query} RETURNING {self._returning}"

        if self._statement == "update":
            assignments = ", ".join(f"{c} = ?" for c in self._columns)
            return f"UPDATE {self._table} SET {assignments}{self._where_clause()}"

        return f"DELETE FROM {self._table}{self._where_clause()}"

    # -------------------------------------------------------------------------
    # Execution and results
    # -------------------------------------------------------------------------

    def execute(self, values: Sequence[Any] = ()) -> "QueryBuilder":
        """
        Execute the statement with positional values.

        Args:
            values: Values for the `?` placeholders, in order

        Returns:
            This builder, ready for fetch()/fetch_class()/fetch_all_class()
        """
        if self._rows is not None:
            raise QueryBuilderError("Statement already executed")

        query = self.sql
        params = tuple(values)
        logger.debug("Executing: %s | params=%r", query, params)

        with self._database.cursor() as cur:
            cur.execute(to_psycopg(query), params)
            self._rowcount = cur.rowcount
            self._rows = cur.fetchall() if cur.description is not None else []

        if self._statement == "insert" and self._rows:
            self._last_insert_id = self._rows[0][self._returning]
        return self

    def _executed_rows(self) -> list[dict]:
        if self._rows is None:
            raise QueryBuilderError("Statement has not been executed")
        return self._rows

    def fetch(self) -> Optional[dict]:
        """First result row as a dict, or None if there were no rows."""
        rows = self._executed_rows()
        return rows[0] if rows else None

    def fetch_all(self) -> list[dict]:
        return list(self._executed_rows())

    def fetch_class(self, model_class):
        """First result row hydrated into `model_class`, or None."""
        row = self.fetch()
        return model_class.from_row(row) if row is not None else None

    def fetch_all_class(self, model_class) -> list:
        return [model_class.from_row(row) for row in self._executed_rows()]

    def last_insert_id(self):
        """Identity generated by the executed INSERT."""
        self._require("insert")
        self._executed_rows()
        return self._last_insert_id

    @property
    def rowcount(self) -> int:
        return self._rowcount
