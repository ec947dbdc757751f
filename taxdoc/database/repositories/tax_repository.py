from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from taxdoc.database.connection import get_connection
from taxdoc.database.models import TaxDataRecord, TaxDocumentRecord
from taxdoc.processor.exceptions import DocumentNotFoundError, StorageError
from taxdoc.processor.models import TaxDataAggregate

_DOCUMENT_COLUMNS = """
    id, user_id, year, document_type, file_name, file_path,
    created_at, updated_at, deleted_at
"""

_DATA_COLUMNS = "id, user_id, year, data, created_at, updated_at"


def _document_from_row(row: dict[str, Any]) -> TaxDocumentRecord:
    return TaxDocumentRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        year=row["year"],
        document_type=row["document_type"],
        file_name=row["file_name"],
        file_path=row["file_path"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row["deleted_at"],
    )


def _data_from_row(row: dict[str, Any]) -> TaxDataRecord:
    return TaxDataRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        year=row["year"],
        data=row["data"] or {},
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class TaxRepository:
    """Database operations for the tax_documents and tax_data tables.

    Methods taking a ``conn`` run inside the caller's transaction and leave
    commit/rollback to the caller. All psycopg failures surface as
    StorageError.
    """

    def create_document(
        self,
        user_id: str,
        year: int,
        document_type: str,
        file_name: str,
        file_path: str,
    ) -> TaxDocumentRecord:
        """Insert a document metadata row and return it."""
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO tax_documents
                            (user_id, year, document_type, file_name, file_path)
                        VALUES (%s, %s, %s, %s, %s)
                        RETURNING {_DOCUMENT_COLUMNS}
                        """,
                        (user_id, year, document_type, file_name, file_path),
                    )
                    row = cur.fetchone()
                conn.commit()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to create tax document: {exc}") from exc

        if row is None:
            raise StorageError("Insert into tax_documents returned no row")
        return _document_from_row(row)

    def find_document_by_id(self, document_id: str) -> TaxDocumentRecord:
        """Find a non-deleted document by ID.

        Raises:
            DocumentNotFoundError: if no such document exists.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        SELECT {_DOCUMENT_COLUMNS}
                        FROM tax_documents
                        WHERE id = %s AND deleted_at IS NULL
                        """,
                        (document_id,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to load tax document {document_id}: {exc}") from exc

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _document_from_row(row)

    def find_documents_by_user(self, user_id: str) -> list[TaxDocumentRecord]:
        """List a user's documents, newest tax year first."""
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        SELECT {_DOCUMENT_COLUMNS}
                        FROM tax_documents
                        WHERE user_id = %s AND deleted_at IS NULL
                        ORDER BY year DESC, created_at DESC
                        """,
                        (user_id,),
                    )
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to list documents for user {user_id}: {exc}") from exc
        return [_document_from_row(row) for row in rows]

    def find_all_aggregates_by_user(self, user_id: str) -> list[TaxDataRecord]:
        """Return every yearly aggregate of a user, newest year first."""
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        SELECT {_DATA_COLUMNS}
                        FROM tax_data
                        WHERE user_id = %s AND deleted_at IS NULL
                        ORDER BY year DESC
                        """,
                        (user_id,),
                    )
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to list tax data for user {user_id}: {exc}") from exc
        return [_data_from_row(row) for row in rows]

    def ensure_aggregate(self, conn: psycopg.Connection[Any], user_id: str, year: int) -> None:
        """Create an empty aggregate for (user_id, year) unless a live one exists.

        A soft-deleted row is revived with an empty document list, so the
        following locking read always finds a row.
        """
        try:
            conn.execute(
                """
                INSERT INTO tax_data (user_id, year, data)
                VALUES (%s, %s, %s)
                ON CONFLICT (user_id, year) DO UPDATE
                SET data = EXCLUDED.data, deleted_at = NULL, updated_at = NOW()
                WHERE tax_data.deleted_at IS NOT NULL
                """,
                (user_id, year, Jsonb(TaxDataAggregate().to_payload())),
            )
        except psycopg.Error as exc:
            raise StorageError(f"Failed to initialise tax data for {user_id}/{year}: {exc}") from exc

    def find_aggregate(
        self,
        conn: psycopg.Connection[Any],
        user_id: str,
        year: int,
        for_update: bool = False,
    ) -> TaxDataAggregate | None:
        """Load the aggregate for (user_id, year).

        With ``for_update`` the row stays locked until the caller's
        transaction ends, which serializes concurrent appends.
        """
        lock_clause = "FOR UPDATE" if for_update else ""
        try:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT data
                    FROM tax_data
                    WHERE user_id = %s AND year = %s AND deleted_at IS NULL
                    {lock_clause}
                    """,
                    (user_id, year),
                )
                row = cur.fetchone()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to load tax data for {user_id}/{year}: {exc}") from exc

        if row is None:
            return None
        return TaxDataAggregate.from_payload(row["data"] or {})

    def upsert_aggregate(
        self,
        conn: psycopg.Connection[Any],
        user_id: str,
        year: int,
        aggregate: TaxDataAggregate,
    ) -> TaxDataRecord:
        """Insert or replace the aggregate keyed by (user_id, year), undeleting it."""
        try:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO tax_data (user_id, year, data)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (user_id, year)
                    DO UPDATE SET data = EXCLUDED.data, deleted_at = NULL, updated_at = NOW()
                    RETURNING {_DATA_COLUMNS}
                    """,
                    (user_id, year, Jsonb(aggregate.to_payload())),
                )
                row = cur.fetchone()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to store tax data for {user_id}/{year}: {exc}") from exc

        if row is None:
            raise StorageError("Upsert into tax_data returned no row")
        return _data_from_row(row)

    def save_manual_data(self, user_id: str, year: int, data: dict[str, Any]) -> TaxDataRecord:
        """Overwrite a user's aggregate for one year with manually entered data."""
        try:
            with get_connection() as conn:
                record = self.upsert_aggregate(
                    conn, user_id, year, TaxDataAggregate.from_payload(data)
                )
                conn.commit()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to save manual tax data for {user_id}/{year}: {exc}") from exc
        return record
