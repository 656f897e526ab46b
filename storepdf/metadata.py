import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import MetadataError


FieldValue = Union[str, List[str], None]

TEXT_FIELDS = (
    "title",
    "description",
    "changelog",
    "support_url",
    "privacy_url",
    "software_url",
)

# Older exports name the changelog after the App Store "What's New" box.
FIELD_ALIASES = {"version_whats_new": "changelog"}


@dataclass(frozen=True)
class MetadataField:
    value: FieldValue = None
    # Marks a value that differs from the live listing; only drives the color.
    modified: bool = False

    @property
    def text(self) -> str:
        if self.value is None:
            return ""
        if isinstance(self.value, list):
            return ", ".join(str(item) for item in self.value)
        return str(self.value)

    @property
    def items(self) -> List[str]:
        if self.value is None:
            return []
        if isinstance(self.value, list):
            return [str(item) for item in self.value]
        return [self.value] if self.value else []


@dataclass(frozen=True)
class Screenshot:
    path: Path
    screen_size: str


@dataclass
class LocaleContent:
    title: MetadataField = field(default_factory=MetadataField)
    description: MetadataField = field(default_factory=MetadataField)
    changelog: MetadataField = field(default_factory=MetadataField)
    support_url: MetadataField = field(default_factory=MetadataField)
    privacy_url: MetadataField = field(default_factory=MetadataField)
    software_url: MetadataField = field(default_factory=MetadataField)
    keywords: MetadataField = field(default_factory=MetadataField)
    screenshots: List[Screenshot] = field(default_factory=list)


# Plain dicts keep insertion order, which is the page order of the PDF.
MetadataBundle = Dict[str, LocaleContent]


def load_metadata(path: Path) -> MetadataBundle:
    """
    Read a metadata JSON file into a bundle.

    The file holds either `{"locales": {...}}` or the locale mapping itself.
    Every field may be a `{"value": ..., "modified": bool}` object or a bare
    value; relative screenshot paths are resolved next to the JSON file.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise MetadataError(f"Cannot open metadata file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise MetadataError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise MetadataError(f"{path}: expected a JSON object at the top level")

    locales = data.get("locales", data)
    if not isinstance(locales, dict):
        raise MetadataError(f"{path}: 'locales' must be an object")

    bundle: MetadataBundle = {}
    for locale, entry in locales.items():
        bundle[locale] = _parse_locale(locale, entry, base_dir=path.parent)
    return bundle


def with_screenshots(content: LocaleContent, screenshots: List[Screenshot]) -> LocaleContent:
    return replace(content, screenshots=list(screenshots))


def _parse_locale(locale: str, entry: Any, base_dir: Path) -> LocaleContent:
    if not isinstance(entry, dict):
        raise MetadataError(f"Locale '{locale}' must be an object, got {type(entry).__name__}")

    values: Dict[str, MetadataField] = {}
    for key, raw in entry.items():
        name = FIELD_ALIASES.get(key, key)
        if name in TEXT_FIELDS or name == "keywords":
            values[name] = _parse_field(raw)

    return LocaleContent(
        screenshots=[
            _parse_screenshot(locale, item, base_dir)
            for item in entry.get("screenshots") or []
        ],
        **values,
    )


def _parse_field(raw: Any) -> MetadataField:
    if isinstance(raw, dict):
        return MetadataField(value=raw.get("value"), modified=bool(raw.get("modified", False)))
    return MetadataField(value=raw)


def _parse_screenshot(locale: str, item: Any, base_dir: Path) -> Screenshot:
    if not isinstance(item, dict) or not item.get("path"):
        raise MetadataError(f"Locale '{locale}': every screenshot needs a 'path'")

    shot_path = Path(item["path"])
    if not shot_path.is_absolute():
        shot_path = base_dir / shot_path

    screen_size: Optional[str] = item.get("screen_size")
    return Screenshot(path=shot_path, screen_size=str(screen_size or ""))
