import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from taxdoc.config.settings import Settings
from taxdoc.database.connection import build_conninfo, close_pool, get_connection, init_pool

_REQUIRED_TABLES = ("tax_ingestion_jobs", "tax_documents", "tax_data")


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "taxdoc_test")
    return Settings()


def _missing_tables(settings: Settings) -> list[str]:
    with psycopg.connect(build_conninfo(settings), connect_timeout=3) as conn:
        with conn.cursor() as cur:
            missing = []
            for table in _REQUIRED_TABLES:
                cur.execute("SELECT to_regclass(%s)", (table,))
                row = cur.fetchone()
                if row is None or row[0] is None:
                    missing.append(table)
    return missing


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        missing = _missing_tables(test_settings)
    except psycopg.Error as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env or see tests/integration/README.md"
        )
    if missing:
        pytest.skip(f"Test DB is missing tables: {', '.join(missing)}")

    init_pool(test_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def user_id(integration_pool: None) -> Generator[str, None, None]:
    """A fresh user id whose rows are removed after the test."""
    value = str(uuid.uuid4())
    yield value
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM tax_ingestion_jobs WHERE user_id = %s", (value,))
            cur.execute("DELETE FROM tax_data WHERE user_id = %s", (value,))
            cur.execute("DELETE FROM tax_documents WHERE user_id = %s", (value,))
        conn.commit()


@pytest.fixture
def seed_job(db_conn: psycopg.Connection[Any], user_id: str) -> int:
    with db_conn.cursor() as cur:
        cur.execute(
            """
            INSERT INTO tax_ingestion_jobs
                (user_id, year, document_type, file_name, file_path, status, attempts)
            VALUES (%s, 2024, 'W2', 'w2.pdf', 'uploads/abc_w2.pdf', 'pending', 0)
            RETURNING id
            """,
            (user_id,),
        )
        row = cur.fetchone()
        assert row is not None
    db_conn.commit()
    return int(row[0])
