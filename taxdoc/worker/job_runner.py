from pathlib import Path

from taxdoc.config.settings import Settings
from taxdoc.database.models import JobRecord, TaxDocumentRecord
from taxdoc.database.repositories.job_repository import JobRepository
from taxdoc.logging.logger import Log
from taxdoc.processor.exceptions import NoUploadError
from taxdoc.processor.models import UploadedFile, resolve_tax_year
from taxdoc.processor.processor import Processor


def upload_from_job(job: JobRecord, default_year: int | None = None) -> UploadedFile:
    return UploadedFile(
        path=Path(job.file_path or ""),
        declared_year=resolve_tax_year(job.year, default_year),
        declared_type=job.document_type,
        original_name=job.file_name,
    )


class JobRunner:
    """Run one job, catch exceptions, and apply retry logic.

    The document created for a job is recorded on the job right away, so a
    retry reuses it instead of storing the upload a second time.
    """

    def __init__(
        self,
        processor: Processor,
        job_repo: JobRepository,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._job_repo = job_repo
        self._settings = settings

    def run(self, job: JobRecord) -> None:
        """Execute a single job with error handling."""
        Log.info(f"Running job {job.id} (attempt {job.attempts + 1})")

        def _attach(document: TaxDocumentRecord) -> None:
            self._job_repo.attach_document(job.id, document.id)

        try:
            result = self._processor.ingest(
                job.user_id,
                upload_from_job(job, self._settings.default_tax_year),
                document_id=job.document_id,
                on_document_created=_attach,
            )
            self._job_repo.mark_done(job.id, result.document.id)
            Log.info(
                f"Job {job.id} completed: document {result.document.id}, "
                f"{len(result.records)} record(s)"
            )
        except NoUploadError as exc:
            Log.error(f"Job {job.id} has no file: {exc}")
            self._job_repo.mark_failed(job.id, str(exc))
        except Exception as exc:
            self._handle_failure(job, exc)

    def _handle_failure(self, job: JobRecord, exc: Exception) -> None:
        """Increment attempts; mark failed if at max, otherwise back to pending."""
        Log.exception(f"Job {job.id} failed: {exc}")
        if job.attempts + 1 >= self._settings.max_job_attempts:
            self._job_repo.mark_failed(job.id, str(exc))
            Log.error(f"Job {job.id} permanently failed after {job.attempts + 1} attempts")
        else:
            self._job_repo.increment_attempts(job.id)
            Log.warning(f"Job {job.id} will be retried (attempt {job.attempts + 1})")
