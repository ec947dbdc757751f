from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "taxdoc"
    db_username: str = "taxdoc"
    db_password: str = "secret"

    max_job_attempts: int = 3
    job_poll_interval_seconds: int = 5

    files_root: Path = Path(".")
    scratch_root: Path = Path("uploads")
    default_tax_year: int | None = None
    raw_text_preview_chars: int = 500

    rasterizer_engine: str = "pdftoppm"
    pdftoppm_path: str = "pdftoppm"
    rasterize_dpi: int = 150
    rasterize_timeout_seconds: int = 120

    tesseract_cmd: str = ""
    tesseract_lang: str = "eng"
    tessdata_dir: str = ""
    ocr_timeout_seconds: int = 60
    ocr_max_workers: int = 2
