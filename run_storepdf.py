import argparse
import os
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from storepdf import logger as log
from storepdf.assets import attach_screenshots, collect_screenshots
from storepdf.core import PdfGenerator
from storepdf.errors import StorePdfError
from storepdf.metadata import load_metadata


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render localized app store metadata into a PDF for proofreading."
    )
    parser.add_argument(
        "--metadata",
        type=Path,
        required=True,
        help="Path to the metadata JSON file.",
    )
    parser.add_argument(
        "--screenshots",
        type=Path,
        default=None,
        help="Folder with one sub-folder of screenshots per locale.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Folder where the PDF is written (default: $STOREPDF_OUTPUT_DIR or the temp folder).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log layout details.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    # Load environment variables from a local .env file if present
    # (e.g. STOREPDF_OUTPUT_DIR=/some/folder).
    load_dotenv()

    args = parse_args(argv)
    log.setup_logger(verbose=args.verbose)

    output_dir = args.output_dir or Path(
        os.environ.get("STOREPDF_OUTPUT_DIR") or tempfile.gettempdir()
    )

    try:
        bundle = load_metadata(args.metadata)
        if args.screenshots is not None:
            bundle = attach_screenshots(bundle, collect_screenshots(args.screenshots))
        resulting_path = PdfGenerator().render(bundle, output_dir)
    except StorePdfError as exc:
        log.error(str(exc))
        return 1

    print(resulting_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
