import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

from . import logger as log
from .errors import OutputDirectoryError, ScreenshotReadError
from .metadata import LocaleContent, MetadataBundle
from .render import (
    BODY_SIZE,
    DESCRIPTION_WIDTH,
    DESCRIPTION_X,
    DETAILS_WIDTH,
    FONT_NAME,
    LEADING,
    NO_SCREENSHOTS_NOTICE,
    PADDING,
    Line,
    Palette,
    description_column,
    details_column,
    field_value,
    heading_column,
    parse_color,
    plan_screenshot_rows,
    screenshot_width,
    screenshots_per_row,
    text_lines,
)

MARGIN = 36
DEFAULT_MODIFIED_COLOR = "0000AA"
DEFAULT_STANDARD_COLOR = "000000"
DOCUMENT_TITLE = "App Store metadata summary"


@dataclass
class Column:
    x: float
    width: float
    lines: List[Line]


class PageWriter:
    """
    Top-down cursor over a reportlab canvas.

    `y` is the absolute canvas coordinate of the cursor; it starts at the top
    margin and moves towards the bottom margin as content is drawn. Column
    and image x offsets are relative to the left margin.
    """

    def __init__(self, pdf: canvas.Canvas, page_size: Tuple[float, float], margin: float) -> None:
        self.pdf = pdf
        self.page_width, self.page_height = page_size
        self.margin = margin
        self.y = self.top

    @property
    def top(self) -> float:
        return self.page_height - self.margin

    @property
    def bottom(self) -> float:
        return self.margin

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def remaining(self) -> float:
        return self.y - self.bottom

    @property
    def at_page_top(self) -> bool:
        return self.y >= self.top

    def new_page(self) -> None:
        self.pdf.showPage()
        self.y = self.top

    def flow_columns(self, columns: Sequence[Column]) -> None:
        """
        Draw columns side by side starting at the cursor.

        When any column runs out of room all of them continue at the top of a
        new page. The cursor ends below the longest column.
        """
        pending = [list(column.lines) for column in columns]
        while True:
            page_top = self.y
            bottoms = []
            for column, lines in zip(columns, pending):
                y = page_top
                # A fresh page always takes at least one line.
                while lines and (y - lines[0].height >= self.bottom or y >= self.top):
                    y = self._draw_line(lines.pop(0), column, y)
                bottoms.append(y)
            if not any(pending):
                break
            self.new_page()
        self.y = min(bottoms, default=self.y)

    def draw_image(self, path: Path, x: float, width: float, height: float) -> None:
        try:
            self.pdf.drawImage(
                str(path),
                self.margin + x,
                self.y - height,
                width=width,
                height=height,
                mask="auto",
            )
        except OSError as exc:
            raise ScreenshotReadError(path, str(exc)) from exc

    def _draw_line(self, line: Line, column: Column, y: float) -> float:
        y -= line.space_before
        left = self.margin + column.x
        if line.rule:
            self.pdf.setStrokeColorRGB(0, 0, 0)
            self.pdf.line(left, y, left + column.width, y)
        else:
            self.pdf.setFillColorRGB(*(channel / 255 for channel in line.color))
            self.pdf.setFont(FONT_NAME, line.size)
            self.pdf.drawString(left + line.indent, y - line.size, line.text)
            y -= line.size * LEADING
        return y - line.space_after


class PdfGenerator:
    """
    Renders every locale of a metadata bundle into a single PDF so all the
    submitted content can be proofread before release:
    - heading with the locale and the app title
    - description and changelog on the right, URLs and keywords on the left
    - screenshots underneath, one row per screen size
    Each locale starts on its own page.
    """

    def __init__(
        self,
        modified_color: str = DEFAULT_MODIFIED_COLOR,
        standard_color: str = DEFAULT_STANDARD_COLOR,
        page_size: Tuple[float, float] = LETTER,
        margin: float = MARGIN,
    ) -> None:
        self.palette = Palette(
            modified=parse_color(modified_color),
            standard=parse_color(standard_color),
        )
        self.page_size = page_size
        self.margin = margin

    def render(
        self,
        bundle: MetadataBundle,
        export_path: Optional[Union[str, Path]] = None,
    ) -> Path:
        """
        Write the summary to `<export_path>/<unix timestamp>.pdf` and return
        that path. `export_path` defaults to the system temp folder.
        """
        export_dir = Path(export_path) if export_path is not None else Path(tempfile.gettempdir())
        try:
            export_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryError(export_dir, str(exc)) from exc

        resulting_path = export_dir / f"{int(time.time())}.pdf"

        pdf = canvas.Canvas(str(resulting_path), pagesize=self.page_size)
        pdf.setTitle(DOCUMENT_TITLE)
        pdf.setCreator("storepdf")
        page = PageWriter(pdf, self.page_size, self.margin)

        locales = list(bundle.items())
        for index, (locale, content) in enumerate(locales):
            self._render_locale(page, locale, content or LocaleContent())
            if index < len(locales) - 1:
                page.new_page()

        try:
            pdf.save()
        except OSError as exc:
            raise OutputDirectoryError(export_dir, str(exc)) from exc

        log.success(f"Summary of {len(locales)} locale(s) written to {resulting_path}")
        return resulting_path

    def _render_locale(self, page: PageWriter, locale: str, content: LocaleContent) -> None:
        title = field_value(content, "title").text
        log.info(f"Exporting locale '{locale}' for app with title '{title}'")

        heading = heading_column(locale, content, self.palette, page.content_width)
        page.flow_columns([Column(0, page.content_width, heading)])
        page.flow_columns(
            [
                Column(0, DETAILS_WIDTH, details_column(content, self.palette)),
                Column(DESCRIPTION_X, DESCRIPTION_WIDTH, description_column(content, self.palette)),
            ]
        )
        page.y -= PADDING

        self._render_screenshots(page, locale, content)

    def _render_screenshots(self, page: PageWriter, locale: str, content: LocaleContent) -> None:
        screenshots = content.screenshots or []
        if not screenshots:
            log.warning(f"No screenshots for locale '{locale}'")
            notice = text_lines(NO_SCREENSHOTS_NOTICE, BODY_SIZE, page.content_width, self.palette.standard)
            page.flow_columns([Column(0, page.content_width, notice)])
            return

        image_width = screenshot_width(page.content_width)
        rows = plan_screenshot_rows(
            screenshots,
            image_width,
            screenshots_per_row(page.content_width, image_width),
        )
        for row in rows:
            if row.height > page.remaining and not page.at_page_top:
                page.new_page()

            log.debug(f"{locale}: row of {len(row.items)} '{row.screen_size}' screenshot(s)")
            for index, placed in enumerate(row.items):
                page.draw_image(
                    placed.screenshot.path,
                    index * (image_width + PADDING),
                    placed.width,
                    placed.height,
                )
            page.y -= row.height + PADDING
