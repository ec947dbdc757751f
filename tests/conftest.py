from pathlib import Path

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def sample_pdf_path(tmp_path: Path) -> Path:
    """A single-page W-2 style PDF with known text content."""
    path = tmp_path / "w2.pdf"
    c = canvas.Canvas(str(path), pagesize=letter)
    c.drawString(72, 720, "Employer's Name: Acme Corp")
    c.drawString(72, 700, "Wages, tips, other compensation 45,000.00")
    c.save()
    return path


@pytest.fixture()
def multi_page_pdf_path(tmp_path: Path) -> Path:
    """A three-page PDF with one line of text per page."""
    path = tmp_path / "multi.pdf"
    c = canvas.Canvas(str(path), pagesize=letter)
    for number in range(1, 4):
        c.drawString(72, 720, f"Page {number} content")
        c.showPage()
    c.save()
    return path


@pytest.fixture()
def sample_png_path(tmp_path: Path) -> Path:
    """A small blank PNG image."""
    path = tmp_path / "scan.png"
    Image.new("RGB", (64, 32), color="white").save(path, format="PNG")
    return path


@pytest.fixture()
def truncated_png_path(tmp_path: Path) -> Path:
    """A PNG cut off after its first 200 bytes; the header still parses."""
    full = tmp_path / "full.png"
    Image.effect_noise((400, 400), 64).convert("RGB").save(full, format="PNG")
    path = tmp_path / "truncated.png"
    path.write_bytes(full.read_bytes()[:200])
    return path
