# src/softrepo/conftest.py
"""
Pytest configuration and shared fixtures.

Tests are co-located with implementation files using the *_test.py suffix.
This file provides fixtures available to all tests in the package.
"""

import os

# Set environment BEFORE importing any app modules
os.environ["SOFTREPO_ENV"] = "test"

import logging
from unittest.mock import MagicMock

import psycopg
import pytest
from psycopg.rows import dict_row

from softrepo import db
from softrepo import logger as softrepo_logger
from softrepo.config import config

USERS_SCHEMA = """
    CREATE TEMPORARY TABLE users (
        id          SERIAL PRIMARY KEY,
        name        TEXT NOT NULL,
        email       TEXT,
        deleted_at  TIMESTAMP NULL
    )
"""

# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def restore_package_logger(monkeypatch):
    """Undo configure_logging() so each test starts with library defaults."""
    package_logger = logging.getLogger("softrepo")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    monkeypatch.setattr(softrepo_logger, "_configured", False)
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


# =============================================================================
# Mocked Connection Fixtures
# =============================================================================


@pytest.fixture
def mock_cursor():
    """
    Provide a mocked cursor behind a mocked connection override.

    Every statement executed through softrepo lands on this cursor, so tests
    can assert on `mock_cursor.execute.call_args_list`. By default statements
    return no rows; set `description` and `fetchall` to return some.
    """
    cursor = MagicMock()
    cursor.description = None
    cursor.rowcount = 0
    cursor.fetchall.return_value = []

    connection = MagicMock()
    connection.cursor.return_value.__enter__.return_value = cursor

    db.set_connection_override(connection)
    yield cursor
    db.clear_connection_override()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_db():
    """
    Check once per session that the test database is reachable.

    Integration tests are skipped when it is not.
    """
    try:
        conn = psycopg.connect(config.database_url, connect_timeout=3)
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available at {config.database_url}: {e}")
    conn.close()
    return config.database_url


@pytest.fixture
def db_connection(test_db):
    """
    Provide a database connection with transaction rollback.

    The users table is created as a temporary table inside the test's
    transaction, so rolling back at the end removes it along with any rows.
    """
    conn = psycopg.connect(test_db)
    with conn.cursor() as cur:
        cur.execute(USERS_SCHEMA)

    # Override the db module to use this connection
    db.set_connection_override(conn)

    yield conn

    conn.rollback()
    db.clear_connection_override()
    conn.close()


@pytest.fixture
def db_cursor(db_connection):
    """Provide a cursor for direct SQL operations in tests."""
    with db_connection.cursor(row_factory=dict_row) as cur:
        yield cur
