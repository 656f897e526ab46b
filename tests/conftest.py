import itertools
from pathlib import Path

import pytest
from PIL import Image

from storepdf.metadata import LocaleContent, MetadataField, Screenshot


@pytest.fixture
def make_image(tmp_path):
    """Factory writing a solid PNG; every call gets a different color."""
    counter = itertools.count(1)

    def _make(name: str, size=(100, 200), folder: Path = None) -> Path:
        folder = folder or tmp_path / "shots"
        path = folder / name
        path.parent.mkdir(parents=True, exist_ok=True)
        n = next(counter)
        Image.new("RGB", size, ((n * 37) % 256, (n * 91) % 256, (n * 53) % 256)).save(path)
        return path

    return _make


@pytest.fixture
def locale_content():
    def _content(title="My App", screenshots=None, **fields) -> LocaleContent:
        values = {key: MetadataField(value=value) for key, value in fields.items()}
        return LocaleContent(
            title=MetadataField(value=title),
            screenshots=screenshots or [],
            **values,
        )

    return _content


@pytest.fixture
def screenshot(make_image):
    def _shot(name: str, screen_size: str = "iphone", size=(100, 200)) -> Screenshot:
        return Screenshot(path=make_image(name, size=size), screen_size=screen_size)

    return _shot
