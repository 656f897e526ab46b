from types import SimpleNamespace

import pytest
from loguru import logger
from pypdf import PdfReader

from storepdf import core
from storepdf.core import PdfGenerator
from storepdf.errors import OutputDirectoryError, ScreenshotReadError
from storepdf.metadata import LocaleContent, MetadataField, Screenshot
from storepdf.render import NO_SCREENSHOTS_NOTICE


@pytest.fixture
def fixed_time(monkeypatch):
    def _set(timestamp: float) -> None:
        monkeypatch.setattr(core, "time", SimpleNamespace(time=lambda: timestamp))

    _set(1700000000.7)
    return _set


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


def _texts(path):
    return [page.extract_text() for page in PdfReader(str(path)).pages]


def test_output_path_uses_unix_timestamp(tmp_path, fixed_time, locale_content):
    path = PdfGenerator().render({"en-US": locale_content()}, tmp_path / "out")
    assert path == tmp_path / "out" / "1700000000.pdf"
    assert path.read_bytes().startswith(b"%PDF")


def test_default_export_path_is_temp_folder(tmp_path, fixed_time, monkeypatch, locale_content):
    monkeypatch.setattr(core.tempfile, "gettempdir", lambda: str(tmp_path))
    assert PdfGenerator().render({"en-US": locale_content()}) == tmp_path / "1700000000.pdf"


def test_one_page_per_locale(tmp_path, fixed_time, locale_content):
    bundle = {
        "en-US": locale_content("English"),
        "de-DE": locale_content("Deutsch"),
        "fr-FR": locale_content("Français"),
    }
    texts = _texts(PdfGenerator().render(bundle, tmp_path))

    assert len(texts) == 3
    assert "en-US: English" in texts[0]
    assert "de-DE: Deutsch" in texts[1]
    assert "fr-FR: Fran" in texts[2]


def test_empty_bundle_renders_blank_page(tmp_path, fixed_time):
    assert len(PdfReader(str(PdfGenerator().render({}, tmp_path))).pages) == 1


def test_page_content(tmp_path, fixed_time, locale_content):
    content = locale_content(
        description="A very useful app",
        changelog="Fixed the login crash",
        support_url="https://ex.co/s",
        privacy_url="",
        keywords=["zeta", "alpha", "mid"],
    )
    (text,) = _texts(PdfGenerator().render({"en-US": content}, tmp_path))

    assert "A very useful app" in text
    assert "Changelog:" in text
    assert "Fixed the login crash" in text
    assert "Support url:" in text
    assert "https://ex.co/s" in text
    assert "Privacy url" not in text
    assert "Software url" not in text
    assert "Keywords:" in text
    assert text.index("- zeta") < text.index("- alpha") < text.index("- mid")


def test_missing_fields_render_blank(tmp_path, fixed_time):
    content = LocaleContent(title=None, description=None, keywords=None, screenshots=None)
    (text,) = _texts(PdfGenerator().render({"en-US": content}, tmp_path))
    assert "en-US:" in text
    assert "Keywords" not in text
    assert "No screenshots passed" in text


def test_locale_without_screenshots(tmp_path, fixed_time, locale_content, screenshot):
    bundle = {
        "en-US": locale_content(
            screenshots=[
                screenshot("1.png", "phone"),
                screenshot("2.png", "phone"),
                screenshot("3.png", "tablet", size=(200, 150)),
            ]
        ),
        "de-DE": locale_content(),
    }
    reader = PdfReader(str(PdfGenerator().render(bundle, tmp_path)))

    assert len(reader.pages) == 2
    assert len(reader.pages[0].images) == 3
    assert "No screenshots passed" not in reader.pages[0].extract_text()
    assert len(reader.pages[1].images) == 0
    assert "No screenshots passed" in reader.pages[1].extract_text()
    assert NO_SCREENSHOTS_NOTICE.startswith("No screenshots passed")


def test_screenshot_overflow_adds_pages(tmp_path, fixed_time, locale_content, screenshot):
    # every size class gets its own 270pt tall row, more than fits on a page
    shots = [screenshot(f"{n}.png", f"size-{n}", size=(100, 300)) for n in range(6)]
    bundle = {"en-US": locale_content(screenshots=shots), "de-DE": locale_content()}

    reader = PdfReader(str(PdfGenerator().render(bundle, tmp_path)))

    assert len(reader.pages) > 2
    assert sum(len(page.images) for page in reader.pages) == 6
    assert "de-DE: My App" in reader.pages[-1].extract_text()
    assert "en-US: My App" not in reader.pages[-1].extract_text()


def test_long_description_flows_to_next_page(tmp_path, fixed_time, locale_content):
    description = "\n".join(f"Line {n} of the description" for n in range(200))
    texts = _texts(PdfGenerator().render({"en-US": locale_content(description=description)}, tmp_path))

    assert len(texts) > 1
    joined = "\n".join(texts)
    assert "Line 0 of the description" in joined
    assert "Line 199 of the description" in joined
    assert "Changelog:" in texts[-1]


def test_rendering_twice_gives_same_text(tmp_path, fixed_time, locale_content, screenshot):
    bundle = {
        "en-US": locale_content(keywords=["a", "b"], screenshots=[screenshot("1.png")]),
        "de-DE": locale_content("Deutsch"),
    }
    generator = PdfGenerator()

    fixed_time(1700000000)
    first = generator.render(bundle, tmp_path)
    fixed_time(1700000001)
    second = generator.render(bundle, tmp_path)

    assert first != second
    assert _texts(first) == _texts(second)


def test_unreadable_screenshot_aborts(tmp_path, fixed_time, locale_content):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    out = tmp_path / "out"
    bundle = {"en-US": locale_content(screenshots=[Screenshot(path=broken, screen_size="phone")])}

    with pytest.raises(ScreenshotReadError):
        PdfGenerator().render(bundle, out)
    assert list(out.iterdir()) == []


def test_missing_screenshot_aborts(tmp_path, fixed_time, locale_content):
    missing = Screenshot(path=tmp_path / "missing.png", screen_size="phone")
    with pytest.raises(ScreenshotReadError):
        PdfGenerator().render({"en-US": locale_content(screenshots=[missing])}, tmp_path)


def test_unwritable_output_directory(tmp_path, fixed_time, locale_content):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where a folder should be")
    with pytest.raises(OutputDirectoryError) as excinfo:
        PdfGenerator().render({"en-US": locale_content()}, blocker / "out")
    assert excinfo.value.path == blocker / "out"


def test_invalid_color_is_rejected():
    with pytest.raises(ValueError):
        PdfGenerator(modified_color="blue")


def test_logs_each_locale(tmp_path, fixed_time, locale_content, log_messages):
    PdfGenerator().render({"en-US": locale_content("My App"), "de-DE": locale_content()}, tmp_path)

    assert "[PDF] Exporting locale 'en-US' for app with title 'My App'" in log_messages
    assert "[PDF] No screenshots for locale 'de-DE'" in log_messages
    assert any(message.startswith("[PDF] Summary of 2 locale(s)") for message in log_messages)
