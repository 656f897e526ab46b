from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from reportlab.lib.utils import simpleSplit

from .assets import image_size
from .metadata import LocaleContent, MetadataField, Screenshot

RGB = Tuple[int, int, int]

FONT_NAME = "Helvetica"
LEADING = 1.2

HEADING_SIZE = 20
HEADING_GAP = 30
BODY_SIZE = 14

# Left column holds the key/value lines, the description takes the rest.
DETAILS_WIDTH = 200
DESCRIPTION_X = 200
DESCRIPTION_WIDTH = 340
DETAIL_SIZE = 10
KEYWORD_SIZE = 8
KEYWORD_INDENT = 5
DESCRIPTION_SIZE = 6
CHANGELOG_LABEL_SIZE = 8

SCREENSHOT_COLUMNS = 6
PADDING = 10

DETAIL_KEYS = ("support_url", "privacy_url", "software_url")

NO_SCREENSHOTS_NOTICE = (
    "No screenshots passed. Is this correct? "
    "They will get removed from App Store Connect."
)


@dataclass
class Palette:
    modified: RGB
    standard: RGB

    def color_for(self, field: Optional[MetadataField]) -> RGB:
        if field is not None and field.modified:
            return self.modified
        return self.standard


@dataclass
class Line:
    """
    One measured row of a text column.

    A `rule` line draws a horizontal divider across the column instead of
    text. Spacing is part of the line so a column's height is just the sum.
    """

    text: str = ""
    size: float = DETAIL_SIZE
    color: RGB = (0, 0, 0)
    indent: float = 0
    space_before: float = 0
    space_after: float = 0
    rule: bool = False

    @property
    def height(self) -> float:
        body = 0 if self.rule else self.size * LEADING
        return self.space_before + body + self.space_after


@dataclass
class PlacedScreenshot:
    screenshot: Screenshot
    width: float
    height: float


@dataclass
class ScreenshotRow:
    screen_size: str
    items: List[PlacedScreenshot]

    @property
    def height(self) -> float:
        return max((item.height for item in self.items), default=0)


def parse_color(color_str: str) -> RGB:
    """
    Parse hex color strings like '#0000AA' or '0000AA' into an RGB tuple.
    """
    s = color_str.strip().lstrip("#")
    if len(s) != 6:
        raise ValueError(f"Expected a 6 digit hex color, got {color_str!r}")
    try:
        return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
    except ValueError as exc:
        raise ValueError(f"Invalid hex color {color_str!r}") from exc


def field_value(content: LocaleContent, name: str) -> MetadataField:
    # Callers may hand over partially built content with None in place of a field.
    return getattr(content, name, None) or MetadataField()


def field_label(key: str) -> str:
    """`support_url` -> `Support url`."""
    return key.replace("_", " ").capitalize()


def wrap_text(text: str, size: float, width: float) -> List[str]:
    if not text:
        return []
    return simpleSplit(text, FONT_NAME, size, width)


def text_lines(
    text: str,
    size: float,
    width: float,
    color: RGB,
    indent: float = 0,
) -> List[Line]:
    return [
        Line(text=chunk, size=size, color=color, indent=indent)
        for chunk in wrap_text(text, size, width - indent)
    ]


def heading_column(locale: str, content: LocaleContent, palette: Palette, width: float) -> List[Line]:
    title = field_value(content, "title")
    lines = text_lines(f"{locale}: {title.text}", HEADING_SIZE, width, palette.color_for(title))
    lines.append(Line(rule=True, space_after=HEADING_GAP))
    return lines


def description_column(content: LocaleContent, palette: Palette) -> List[Line]:
    description = field_value(content, "description")
    changelog = field_value(content, "changelog")

    lines = text_lines(
        description.text, DESCRIPTION_SIZE, DESCRIPTION_WIDTH, palette.color_for(description)
    )
    lines.append(Line(rule=True, space_before=PADDING, space_after=PADDING))
    lines.append(
        Line(
            text="Changelog:",
            size=CHANGELOG_LABEL_SIZE,
            color=palette.standard,
            space_after=5,
        )
    )
    lines.extend(
        text_lines(changelog.text, DESCRIPTION_SIZE, DESCRIPTION_WIDTH, palette.color_for(changelog))
    )
    return lines


def details_column(content: LocaleContent, palette: Palette) -> List[Line]:
    """
    Key/value lines for the URLs followed by the bulleted keyword list.

    Empty values produce no line at all.
    """
    lines: List[Line] = []
    for key in DETAIL_KEYS:
        value = field_value(content, key)
        if not value.text:
            continue
        lines.extend(
            text_lines(
                f"{field_label(key)}: {value.text}",
                DETAIL_SIZE,
                DETAILS_WIDTH,
                palette.color_for(value),
            )
        )

    keywords = field_value(content, "keywords")
    items = [item for item in keywords.items if item]
    if items:
        color = palette.color_for(keywords)
        lines.append(
            Line(text=f"{field_label('keywords')}:", size=DETAIL_SIZE, color=color, space_after=2)
        )
        for item in items:
            lines.extend(
                text_lines(f"- {item}", KEYWORD_SIZE, DETAILS_WIDTH, color, indent=KEYWORD_INDENT)
            )
    return lines


def column_height(lines: Iterable[Line]) -> float:
    return sum(line.height for line in lines)


def screenshot_width(content_width: float) -> float:
    # Wide enough for five portrait screenshots side by side.
    return content_width / SCREENSHOT_COLUMNS


def screenshots_per_row(content_width: float, image_width: float, padding: float = PADDING) -> int:
    return max(1, int((content_width + padding) // (image_width + padding)))


def display_height(image_width: float, pixel_size: Tuple[int, int]) -> float:
    pixel_width, pixel_height = pixel_size
    return image_width / pixel_width * pixel_height


def sort_screenshots(screenshots: Iterable[Screenshot]) -> List[Screenshot]:
    return sorted(screenshots, key=lambda shot: (shot.screen_size, str(shot.path)))


def plan_screenshot_rows(
    screenshots: Iterable[Screenshot],
    image_width: float,
    per_row: int,
    size_of: Callable[[Screenshot], Tuple[int, int]] = lambda shot: image_size(shot.path),
) -> List[ScreenshotRow]:
    """
    Group screenshots into rows.

    Screenshots are ordered by (screen_size, path). A row holds one size class
    only and at most `per_row` images; the next size class always opens a new
    row.
    """
    rows: List[ScreenshotRow] = []
    current: Optional[ScreenshotRow] = None
    for shot in sort_screenshots(screenshots):
        placed = PlacedScreenshot(
            screenshot=shot,
            width=image_width,
            height=display_height(image_width, size_of(shot)),
        )
        if current is None or current.screen_size != shot.screen_size or len(current.items) >= per_row:
            current = ScreenshotRow(screen_size=shot.screen_size, items=[])
            rows.append(current)
        current.items.append(placed)
    return rows
