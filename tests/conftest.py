"""Pytest configuration: fast-by-default setup.

Slow tests (real zbarimg / ImageMagick executables) are skipped unless --slow
is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
import io

import pytest
from PIL import Image

from fakes import make_bars_image


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that call the real zbarimg and ImageMagick executables",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(make_bars_image()).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_image(tmp_path, png_bytes):
    """A barcode-like PNG on disk, alone in its own directory."""
    image_dir = tmp_path / "uploads"
    image_dir.mkdir()
    path = image_dir / "upload.png"
    path.write_bytes(png_bytes)
    return path
