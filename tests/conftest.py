"""Shared fixtures.

Sample images are generated with Pillow so the suite needs no binary fixtures.
"""

import pytest
from PIL import Image

from vision_review_agent.conversation.messages import ImageContent, Message
from vision_review_agent.utils.images import load_image


def _write_image(path, image_format):
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(path, format=image_format)
    return path


@pytest.fixture
def png_path(tmp_path):
    """A small valid PNG on disk."""
    return _write_image(tmp_path / "flowchart.png", "PNG")


@pytest.fixture
def bmp_path(tmp_path):
    """A small valid BMP on disk."""
    return _write_image(tmp_path / "diagram.bmp", "BMP")


@pytest.fixture
def png_image(png_path) -> ImageContent:
    return load_image(png_path)


@pytest.fixture
def opening_message(png_image) -> Message:
    return Message.user(text="Describe this flowchart.", image=png_image)
