"""
Summary PDF of localized app store metadata, for proofreading before release.

Modules:
- metadata: data model and the JSON metadata loader
- assets: screenshot discovery and image size probing
- render: layout arithmetic (text columns, colors, screenshot rows)
- core: PDF generation on a reportlab canvas
- logger: loguru helpers with the [PDF] prefix
"""

from .assets import attach_screenshots, collect_screenshots
from .core import PdfGenerator
from .errors import (
    MetadataError,
    OutputDirectoryError,
    ScreenshotReadError,
    StorePdfError,
)
from .metadata import (
    LocaleContent,
    MetadataBundle,
    MetadataField,
    Screenshot,
    load_metadata,
)

__all__ = [
    "LocaleContent",
    "MetadataBundle",
    "MetadataError",
    "MetadataField",
    "OutputDirectoryError",
    "PdfGenerator",
    "Screenshot",
    "ScreenshotReadError",
    "StorePdfError",
    "attach_screenshots",
    "collect_screenshots",
    "load_metadata",
]
