from typing import Any

import psycopg
import pytest

from taxdoc.database.repositories.job_repository import JobRepository
from taxdoc.database.repositories.tax_repository import TaxRepository


@pytest.mark.integration
class TestJobRepositoryIntegration:
    def test_claim_marks_processing(self, seed_job: int, db_conn: psycopg.Connection[Any]) -> None:
        repo = JobRepository(max_attempts=3)

        job = repo.claim_next_job(db_conn)

        assert job is not None
        assert job.id == seed_job
        assert job.status == "processing"
        with db_conn.cursor() as cur:
            cur.execute(
                "SELECT status, locked_at FROM tax_ingestion_jobs WHERE id = %s",
                (seed_job,),
            )
            row = cur.fetchone()
        assert row is not None
        assert row[0] == "processing"
        assert row[1] is not None

    def test_mark_done_links_document(self, seed_job: int, user_id: str) -> None:
        repo = JobRepository(max_attempts=3)
        document = TaxRepository().create_document(
            user_id, 2024, "W2", "w2.pdf", "uploads/abc_w2.pdf"
        )

        repo.mark_done(seed_job, document.id)

        job = repo.find_by_id(seed_job)
        assert job is not None
        assert job.status == "done"
        assert job.document_id == document.id

    def test_increment_attempts_returns_job_to_pending(self, seed_job: int) -> None:
        repo = JobRepository(max_attempts=3)

        repo.increment_attempts(seed_job)

        job = repo.find_by_id(seed_job)
        assert job is not None
        assert job.status == "pending"
        assert job.attempts == 1

    def test_mark_failed_stores_error(self, seed_job: int) -> None:
        repo = JobRepository(max_attempts=3)

        repo.mark_failed(seed_job, "No file uploaded")

        job = repo.find_by_id(seed_job)
        assert job is not None
        assert job.status == "failed"
        assert job.error_message == "No file uploaded"
