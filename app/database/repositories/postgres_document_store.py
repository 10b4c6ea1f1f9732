from collections.abc import Mapping, Sequence
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.database.exceptions import DocumentStoreError, StoredDocumentNotFoundError
from app.database.models import StoredDocument
from app.database.repositories.base import BaseDocumentStore, Filter

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS store_documents (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    data JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    PRIMARY KEY (collection, id)
);
CREATE INDEX IF NOT EXISTS store_documents_data_idx
    ON store_documents USING GIN (data jsonb_path_ops);
"""


class PostgresDocumentStore(BaseDocumentStore):
    """Document store backed by one JSONB table keyed by (collection, id)."""

    def ensure_schema(self) -> None:
        """Create the backing table and index if they do not exist."""
        try:
            with get_connection() as conn:
                conn.execute(SCHEMA_SQL)
                conn.commit()
        except psycopg.Error as exc:
            raise DocumentStoreError(f"Failed to prepare document store schema: {exc}") from exc

    def query_documents(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
    ) -> list[StoredDocument]:
        # Equality filters become one containment document: {"field": value, ...}
        containment = {field: value for field, value in filters}
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT id, data
                        FROM store_documents
                        WHERE collection = %s
                          AND data @> %s
                        ORDER BY id
                        """,
                        (collection, Jsonb(containment)),
                    )
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise DocumentStoreError(f"Failed to query '{collection}': {exc}") from exc

        return [StoredDocument(id=row["id"], data=dict(row["data"] or {})) for row in rows]

    def get_document(self, collection: str, document_id: str) -> StoredDocument | None:
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT id, data
                        FROM store_documents
                        WHERE collection = %s AND id = %s
                        """,
                        (collection, document_id),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise DocumentStoreError(
                f"Failed to read '{collection}/{document_id}': {exc}"
            ) from exc

        if row is None:
            return None
        return StoredDocument(id=row["id"], data=dict(row["data"] or {}))

    def update_document(
        self,
        collection: str,
        document_id: str,
        fields: Mapping[str, Any],
    ) -> None:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        UPDATE store_documents
                        SET data = data || %s,
                            updated_at = NOW()
                        WHERE collection = %s AND id = %s
                        """,
                        (Jsonb(dict(fields)), collection, document_id),
                    )
                    if cur.rowcount == 0:
                        raise StoredDocumentNotFoundError(
                            f"Document {collection}/{document_id} not found"
                        )
                conn.commit()
        except psycopg.Error as exc:
            raise DocumentStoreError(
                f"Failed to update '{collection}/{document_id}': {exc}"
            ) from exc
