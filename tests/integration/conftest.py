import os
import uuid
from collections.abc import Callable, Generator
from typing import Any

import psycopg
import pytest
from psycopg.types.json import Jsonb

from app.config.settings import Settings
from app.database.connection import close_pool, get_connection, init_pool
from app.database.repositories.postgres_document_store import PostgresDocumentStore

SeedFn = Callable[[str, dict[str, Any]], str]


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "incubator_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        PostgresDocumentStore().ensure_schema()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run these tests")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def tenant_code() -> str:
    """Unique tenant per test so seeded rows never collide with other data."""
    return f"IT-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def seed(db_conn: psycopg.Connection[Any]) -> Generator[SeedFn, None, None]:
    """Insert store documents; everything inserted is deleted after the test."""
    inserted: list[tuple[str, str]] = []

    def _seed(collection: str, data: dict[str, Any]) -> str:
        document_id = uuid.uuid4().hex
        with db_conn.cursor() as cur:
            cur.execute(
                "INSERT INTO store_documents (collection, id, data) VALUES (%s, %s, %s)",
                (collection, document_id, Jsonb(data)),
            )
        db_conn.commit()
        inserted.append((collection, document_id))
        return document_id

    yield _seed

    with db_conn.cursor() as cur:
        for collection, document_id in inserted:
            cur.execute(
                "DELETE FROM store_documents WHERE collection = %s AND id = %s",
                (collection, document_id),
            )
    db_conn.commit()
