from pathlib import Path


class StorePdfError(RuntimeError):
    """Base class for every error raised while building a summary PDF."""


class MetadataError(StorePdfError):
    """Raised when a metadata file cannot be read or has the wrong shape."""


class ScreenshotReadError(StorePdfError):
    """Raised when a screenshot image cannot be opened or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read screenshot {path}: {reason}")
        self.path = path


class OutputDirectoryError(StorePdfError):
    """Raised when the PDF cannot be written to the export folder."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot write PDF to {path}: {reason}")
        self.path = path
