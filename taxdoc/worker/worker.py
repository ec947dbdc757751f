import signal
import threading
from types import FrameType

from taxdoc.config.settings import Settings
from taxdoc.database.connection import get_connection
from taxdoc.database.models import JobRecord
from taxdoc.database.repositories.job_repository import JobRepository
from taxdoc.logging.logger import Log
from taxdoc.worker.job_runner import JobRunner


class Worker:
    """Poll loop: wait -> claim -> dispatch, until stopped.

    Several worker processes may share one database; SKIP LOCKED claims keep
    them from picking the same job.
    """

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._settings = settings
        self._stop_event = threading.Event()

    def stop(self) -> None:
        """Ask the loop to exit after the job in progress, if any."""
        self._stop_event.set()

    def install_signal_handlers(self) -> None:
        def _handle(signum: int, _frame: FrameType | None) -> None:
            Log.info(f"Received signal {signum}, stopping after current job")
            self.stop()

        signal.signal(signal.SIGTERM, _handle)

    def run(self, max_jobs: int | None = None) -> None:
        """Main poll loop. Runs until stopped or interrupted.

        If max_jobs is set, stop after processing that many jobs (for testing).
        """
        Log.info("Worker started, polling for ingestion jobs")
        jobs_done = 0
        try:
            while not self._stop_event.is_set():
                if max_jobs is not None and jobs_done >= max_jobs:
                    break
                job = self._try_claim_job()
                if job:
                    self._job_runner.run(job)
                    jobs_done += 1
                else:
                    Log.debug("No jobs available, waiting")
                    self._stop_event.wait(self._settings.job_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker interrupted")
        Log.info(f"Worker shutting down after {jobs_done} job(s)")

    def _try_claim_job(self) -> JobRecord | None:
        """Attempt to claim the next pending job. Gracefully handle DB errors."""
        try:
            with get_connection() as conn:
                return self._job_repo.claim_next_job(conn)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
