from taxdoc.config.settings import Settings
from taxdoc.database.connection import close_pool, init_pool
from taxdoc.database.repositories.job_repository import JobRepository
from taxdoc.logging.logger import Log
from taxdoc.processor.processor import build_processor
from taxdoc.worker.job_runner import JobRunner
from taxdoc.worker.worker import Worker


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    settings.scratch_root.mkdir(parents=True, exist_ok=True)
    init_pool(settings)

    try:
        processor = build_processor(settings)
        job_repo = JobRepository(settings.max_job_attempts)
        job_runner = JobRunner(processor, job_repo, settings)
        worker = Worker(job_repo, job_runner, settings)
        Log.info(
            f"Starting tax document worker (env={settings.app_env}, "
            f"rasterizer={settings.rasterizer_engine}, ocr_workers={settings.ocr_max_workers})"
        )
        worker.install_signal_handlers()
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
