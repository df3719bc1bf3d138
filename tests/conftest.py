import random

import pytest
from PIL import Image

from kawaii_cam.services.style_converter import StyleConverter


class CenterRandom(random.Random):
    """Random source whose uniform draws always land mid-range."""

    def uniform(self, a, b):
        return (a + b) / 2.0


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def solid_image() -> Image.Image:
    """Solid light-blue 300x300 RGB photo."""
    return Image.new("RGB", (300, 300), (120, 180, 230))


@pytest.fixture
def white_image() -> Image.Image:
    return Image.new("RGBA", (200, 160), (255, 255, 255, 255))


@pytest.fixture
def center_rng() -> CenterRandom:
    return CenterRandom(7)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def fast_converter() -> StyleConverter:
    return StyleConverter(delay=0)
