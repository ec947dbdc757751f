from unittest.mock import MagicMock, patch

from taxdoc.database.models import JobRecord
from taxdoc.database.repositories.job_repository import JobRepository

REPO_CONN = "taxdoc.database.repositories.job_repository.get_connection"


def _job_row(**overrides: object) -> dict:
    row = {
        "id": 5,
        "user_id": "user-1",
        "year": 2024,
        "document_type": "W2",
        "file_name": "w2.pdf",
        "file_path": "uploads/abc_w2.pdf",
        "status": "pending",
        "attempts": 1,
        "document_id": None,
        "error_message": None,
        "locked_at": None,
        "created_at": None,
        "updated_at": None,
    }
    row.update(overrides)
    return row


def _conn_with_cursor(mock_cursor: MagicMock) -> MagicMock:
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn


class TestClaimNextJob:
    def test_claims_and_marks_processing(self) -> None:
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = _job_row()
        conn = _conn_with_cursor(mock_cursor)

        job = JobRepository(max_attempts=3).claim_next_job(conn)

        assert isinstance(job, JobRecord)
        assert job.id == 5
        assert job.status == "processing"
        assert job.file_path == "uploads/abc_w2.pdf"
        select_sql, params = mock_cursor.execute.call_args.args
        assert "FOR UPDATE SKIP LOCKED" in select_sql
        assert params == (3,)
        update_sql, update_params = conn.execute.call_args.args
        assert "status = 'processing'" in update_sql
        assert update_params == (5,)
        conn.commit.assert_called_once()

    def test_returns_none_when_queue_empty(self) -> None:
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = None
        conn = _conn_with_cursor(mock_cursor)

        assert JobRepository(max_attempts=3).claim_next_job(conn) is None
        conn.execute.assert_not_called()


class TestJobTransitions:
    @patch(REPO_CONN)
    def test_mark_done_links_document(self, mock_get_conn: MagicMock) -> None:
        mock_conn = MagicMock()
        mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
        mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)

        JobRepository(max_attempts=3).mark_done(5, "doc-1")

        sql, params = mock_conn.execute.call_args.args
        assert "status = 'done'" in sql
        assert params == ("doc-1", 5)
        mock_conn.commit.assert_called_once()

    @patch(REPO_CONN)
    def test_attach_document_records_id(self, mock_get_conn: MagicMock) -> None:
        mock_conn = MagicMock()
        mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
        mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)

        JobRepository(max_attempts=3).attach_document(5, "doc-1")

        sql, params = mock_conn.execute.call_args.args
        assert "SET document_id = %s" in sql
        assert "status" not in sql
        assert params == ("doc-1", 5)
        mock_conn.commit.assert_called_once()

    @patch(REPO_CONN)
    def test_find_by_id_maps_document_id(self, mock_get_conn: MagicMock) -> None:
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = _job_row(status="done", document_id="doc-1")
        mock_get_conn.return_value.__enter__ = MagicMock(
            return_value=_conn_with_cursor(mock_cursor)
        )
        mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)

        job = JobRepository(max_attempts=3).find_by_id(5)

        assert job is not None
        assert job.document_id == "doc-1"
        assert job.status == "done"
