import pytest
from PIL import Image


@pytest.fixture
def red_image():
    return Image.new("RGB", (4, 4), (255, 0, 0))


@pytest.fixture
def image_file(tmp_path):
    """Save an image under tmp_path and return its path."""

    def _save(image, name="image.png"):
        path = tmp_path / name
        image.save(path)
        return path

    return _save
