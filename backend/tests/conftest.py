"""
Test configuration and fixtures for the color analyzer tests.
"""
import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from coloranalyzer.config import config
from main import app


@pytest.fixture
def test_client(tmp_path, monkeypatch):
    """Create test client for the FastAPI app with uploads stored in tmp_path."""
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path / "uploads"))
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from coloranalyzer.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def make_image(tmp_path):
    """
    Factory writing an image file into tmp_path.

    Accepts either a fill color with a size, or a full numpy array.
    """
    def _make(name="image.png", color=(255, 0, 0), size=(20, 10), array=None):
        if array is None:
            width, height = size
            channels = 1 if isinstance(color, int) else len(color)
            shape = (height, width) if channels == 1 else (height, width, channels)
            array = np.zeros(shape, dtype=np.uint8)
            array[...] = color
        image = Image.fromarray(np.asarray(array, dtype=np.uint8))
        path = tmp_path / name
        image.save(path)
        return path

    return _make


@pytest.fixture
def two_color_image(make_image):
    """60 red pixels followed (in scan order) by 40 blue pixels."""
    array = np.zeros((10, 10, 3), dtype=np.uint8)
    array[:6] = (255, 0, 0)
    array[6:] = (0, 0, 255)
    return make_image("two_colors.png", array=array)
