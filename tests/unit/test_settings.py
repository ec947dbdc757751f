from pathlib import Path

import pytest
from pydantic import ValidationError

from taxdoc.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_max_job_attempts(self) -> None:
        s = Settings()
        assert s.max_job_attempts == 3

    def test_default_rasterizer_engine(self) -> None:
        s = Settings()
        assert s.rasterizer_engine == "pdftoppm"

    def test_default_ocr_language(self) -> None:
        s = Settings()
        assert s.tesseract_lang == "eng"

    def test_default_preview_length(self) -> None:
        s = Settings()
        assert s.raw_text_preview_chars == 500

    def test_default_tax_year_is_unset(self) -> None:
        s = Settings()
        assert s.default_tax_year is None


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_rasterizer_engine(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RASTERIZER_ENGINE", "pymupdf")
        s = Settings()
        assert s.rasterizer_engine == "pymupdf"

    def test_loads_scratch_root_as_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCRATCH_ROOT", "/tmp/taxdoc-scratch")
        s = Settings()
        assert s.scratch_root == Path("/tmp/taxdoc-scratch")

    def test_loads_default_tax_year(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEFAULT_TAX_YEAR", "2024")
        s = Settings()
        assert s.default_tax_year == 2024


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_ocr_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_TIMEOUT_SECONDS", "abc")
        with pytest.raises(ValidationError):
            Settings()
