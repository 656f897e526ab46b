from pathlib import Path
from typing import Dict, List, Tuple

from PIL import Image, UnidentifiedImageError

from .errors import ScreenshotReadError
from .metadata import MetadataBundle, Screenshot, with_screenshots

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}


def image_size(path: Path) -> Tuple[int, int]:
    """Pixel (width, height) of an image, without decoding the pixel data."""
    try:
        with Image.open(path) as img:
            width, height = img.size
    except FileNotFoundError as exc:
        raise ScreenshotReadError(path, "file not found") from exc
    except (OSError, UnidentifiedImageError) as exc:
        raise ScreenshotReadError(path, str(exc)) from exc

    if width <= 0 or height <= 0:
        raise ScreenshotReadError(path, f"invalid image size {width}x{height}")
    return width, height


def screen_size_for(path: Path) -> str:
    """
    Size class of a screenshot, derived from its pixel size.

    Portrait and landscape captures of the same device share a class, so the
    key always lists the short edge first.
    """
    width, height = image_size(path)
    short, long = sorted((width, height))
    return f"{short}x{long}"


def collect_screenshots(screenshots_dir: Path) -> Dict[str, List[Screenshot]]:
    """
    Discover screenshots laid out as `<screenshots_dir>/<locale>/...`.

    Every image below a locale folder (nested folders included) belongs to
    that locale. Hidden files and non-image files are skipped.
    """
    if not screenshots_dir.is_dir():
        return {}

    found: Dict[str, List[Screenshot]] = {}
    for locale_dir in sorted(p for p in screenshots_dir.iterdir() if p.is_dir()):
        if locale_dir.name.startswith("."):
            continue

        shots: List[Screenshot] = []
        for path in sorted(locale_dir.rglob("*")):
            if not path.is_file() or path.name.startswith("."):
                continue
            if path.suffix.lower() not in IMAGE_EXTENSIONS:
                continue
            shots.append(Screenshot(path=path, screen_size=screen_size_for(path)))

        found[locale_dir.name] = shots
    return found


def attach_screenshots(
    bundle: MetadataBundle,
    discovered: Dict[str, List[Screenshot]],
) -> MetadataBundle:
    """
    Replace the screenshots of every bundle locale that was found on disk.

    Locales that only exist on disk are ignored: there is no text to proofread
    for them.
    """
    return {
        locale: with_screenshots(content, discovered[locale]) if locale in discovered else content
        for locale, content in bundle.items()
    }
