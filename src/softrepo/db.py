"""
Database connection utilities and the query engine handed to repositories.

Every statement runs on its own psycopg connection, which is committed on
success, rolled back on error and closed afterwards.

For testing, use set_connection_override() to inject a connection
that will be used instead of creating new ones. This enables
transaction rollback between tests.
"""

from contextlib import contextmanager

import psycopg
from psycopg.rows import dict_row

from softrepo.config import config
from softrepo.query import QueryBuilder

# =============================================================================
# Connection Override (for testing)
# =============================================================================

_connection_override: psycopg.Connection | None = None


def set_connection_override(conn: psycopg.Connection) -> None:
    """
    Set a connection to use instead of creating new ones.

    Used by test fixtures to ensure all database operations run
    within a single transaction that can be rolled back.

    Args:
        conn: The connection to use for all subsequent operations
    """
    global _connection_override
    _connection_override = conn


def clear_connection_override() -> None:
    """Clear the connection override, restoring normal behavior."""
    global _connection_override
    _connection_override = None


# =============================================================================
# Connection Management
# =============================================================================


@contextmanager
def get_connection(database_url: str | None = None):
    """
    Context manager for database connections.

    In normal operation:
        - Opens a new connection
        - Commits on successful exit
        - Rolls back on exception
        - Closes connection when done

    With override set (testing):
        - Returns the override connection
        - Does NOT commit, rollback, or close
        - Caller (test fixture) manages the transaction

    Usage:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT ...")
    """
    if _connection_override is not None:
        yield _connection_override
        return

    conn = psycopg.connect(database_url or config.database_url)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def get_cursor(database_url: str | None = None):
    """
    Context manager for a cursor with dict rows.

    Usage:
        with get_cursor() as cur:
            cur.execute("SELECT * FROM users")
            rows = cur.fetchall()  # List of dicts
    """
    with get_connection(database_url) as conn:
        with conn.cursor(row_factory=dict_row) as cur:
            yield cur


# =============================================================================
# Query Engine
# =============================================================================


class Database:
    """
    Query engine shared by repositories.

    Holds nothing but the connection URL, so one instance can be shared
    between any number of repositories and threads.
    """

    def __init__(self, database_url: str | None = None):
        self.database_url = database_url or config.database_url

    def connect(self) -> QueryBuilder:
        """Start a new statement."""
        return QueryBuilder(self)

    @contextmanager
    def cursor(self):
        """Cursor with dict rows on a connection scoped to one statement."""
        with get_cursor(self.database_url) as cur:
            yield cur
