"""
Command line for quotation_toolkit.

Usage:
    python -m quotation_toolkit validate quote.json
    python -m quotation_toolkit render quote.json --out quotes/
    python -m quotation_toolkit render quote.json --stdout > quote.pdf
    python -m quotation_toolkit render quote.json --drive-token "$TOKEN"
    python -m quotation_toolkit template > quote.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from quotation_toolkit.builder import BuildError, BuilderConfig, build_quotation
from quotation_toolkit.builder.images import resolve_header_image
from quotation_toolkit.builder.output import RenderMode, pdf_filename
from quotation_toolkit.core.models import blank_quotation_record
from quotation_toolkit.core.schemas import validate_quotation
from quotation_toolkit.upload import DEFAULT_FOLDER, DriveUploader, UploadError

logger = logging.getLogger("quotation_toolkit.cli")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quotation_toolkit",
        description="Validate and render quotation PDFs",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Check a quotation record")
    validate.add_argument("record", type=Path, help="Quotation record (JSON)")

    render = sub.add_parser("render", help="Render a quotation record to PDF")
    render.add_argument("record", type=Path, help="Quotation record (JSON)")
    render.add_argument("--out", type=Path, default=Path("."), help="Output directory")
    render.add_argument("--header", help="Header image file or data URL")
    render.add_argument("--signature", type=Path, help="Signature image file")
    output = render.add_mutually_exclusive_group()
    output.add_argument("--stdout", action="store_true", help="Write the PDF to stdout")
    output.add_argument("--drive-token", help="Upload to Google Drive with this access token")
    render.add_argument("--folder", default=DEFAULT_FOLDER, help="Drive folder name")

    sub.add_parser("template", help="Print a blank quotation record")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "template":
        print(json.dumps(blank_quotation_record(), indent=2))
        return EXIT_OK

    try:
        record = _read_record(args.record)
    except (OSError, ValueError) as e:
        print(f"Error: could not read {args.record}: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.command == "validate":
        return _validate(record)
    return _render(record, args)


def _validate(record: Dict[str, Any]) -> int:
    result = validate_quotation(record)
    if result.is_valid:
        print("OK")
        return EXIT_OK
    _print_failures(result.failures)
    return EXIT_INVALID


def _render(record: Dict[str, Any], args: argparse.Namespace) -> int:
    buffered = args.stdout or bool(args.drive_token)
    config = BuilderConfig(
        output_dir=args.out,
        mode=RenderMode.BUFFER if buffered else RenderMode.DOWNLOAD,
        signature_path=args.signature,
    )

    reference = args.header or record.get("headerImage")
    header = resolve_header_image(reference, base_dir=args.record.parent) if reference else None

    try:
        result = build_quotation(record, config, header_image=header)
    except BuildError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if not result.ok:
        _print_failures(result.failures)
        return EXIT_INVALID

    for warning in result.warnings:
        logger.warning(warning)

    if args.stdout:
        sys.stdout.buffer.write(result.pdf_bytes)
        sys.stdout.buffer.flush()
    elif args.drive_token:
        filename = pdf_filename(result.quotation.quote_name)
        try:
            uploader = DriveUploader(args.drive_token)
            folder_id = uploader.find_or_create_folder(args.folder)
            file_id = uploader.upload_pdf(result.pdf_bytes, filename, folder_id)
        except UploadError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ERROR
        print(f"Uploaded {filename} to Drive folder {args.folder!r} (id {file_id})")
    else:
        print(f"Wrote {result.page_count} page(s) to {result.pdf_path}")
    return EXIT_OK


def _read_record(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        record = json.load(f)
    if not isinstance(record, dict):
        raise ValueError("record must be a JSON object")
    return record


def _print_failures(failures) -> None:
    print(f"Quotation is invalid ({len(failures)} problem(s)):", file=sys.stderr)
    for failure in failures:
        print(f"  - {failure}", file=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
