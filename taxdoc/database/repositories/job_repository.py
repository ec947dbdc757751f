from typing import Any

import psycopg
from psycopg.rows import dict_row

from taxdoc.database.connection import get_connection
from taxdoc.database.models import JobRecord

_JOB_COLUMNS = """
    id, user_id, year, document_type, file_name, file_path, status, attempts,
    document_id, error_message, locked_at, created_at, updated_at
"""


def _job_from_row(row: dict[str, Any]) -> JobRecord:
    return JobRecord(
        id=row["id"],
        user_id=str(row["user_id"]),
        year=row["year"],
        document_type=row["document_type"],
        file_name=row["file_name"],
        file_path=row["file_path"],
        status=row["status"],
        attempts=row["attempts"],
        document_id=str(row["document_id"]) if row["document_id"] is not None else None,
        error_message=row["error_message"],
        locked_at=row["locked_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class JobRepository:
    """Database operations for the tax_ingestion_jobs table."""

    def __init__(self, max_attempts: int) -> None:
        self._max_attempts = max_attempts

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> JobRecord | None:
        """Claim the next pending job using SELECT FOR UPDATE SKIP LOCKED."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_JOB_COLUMNS}
                FROM tax_ingestion_jobs
                WHERE status = 'pending'
                  AND attempts < %s
                ORDER BY created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (self._max_attempts,),
            )
            row = cur.fetchone()

        if row is None:
            return None

        conn.execute(
            """
            UPDATE tax_ingestion_jobs
            SET status = 'processing', locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (row["id"],),
        )
        conn.commit()

        job = _job_from_row(row)
        job.status = "processing"
        return job

    def mark_done(self, job_id: int, document_id: str) -> None:
        """Mark a job as done and link it to the document it produced."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE tax_ingestion_jobs
                SET status = 'done', document_id = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (document_id, job_id),
            )
            conn.commit()

    def attach_document(self, job_id: int, document_id: str) -> None:
        """Record the document created for a job so a retry can reuse it."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE tax_ingestion_jobs
                SET document_id = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (document_id, job_id),
            )
            conn.commit()

    def mark_failed(self, job_id: int, error: str) -> None:
        """Mark a job as permanently failed."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE tax_ingestion_jobs
                SET status = 'failed', error_message = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def increment_attempts(self, job_id: int) -> None:
        """Increment attempt count and return job to pending."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE tax_ingestion_jobs
                SET attempts = attempts + 1, status = 'pending',
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def find_by_id(self, job_id: int) -> JobRecord | None:
        """Find a job by ID. Useful for tests."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_JOB_COLUMNS} FROM tax_ingestion_jobs WHERE id = %s",
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _job_from_row(row)
