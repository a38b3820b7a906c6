#!/usr/bin/env python3
"""
LabelLens CLI - Extract garment label data from files or a live camera.

Usage:
    label-lens extract labels.pdf                 # Print label rows as delimited text
    label-lens extract photo.jpg --xlsx           # Also write the spreadsheet report
    label-lens extract photo.jpg -o file          # Save the JSON result to OUTPUT_DIR
    label-lens scan                               # Capture one still from the camera
    label-lens config                             # Show configuration summary
    label-lens theme dark                         # Persist the theme preference
"""

import argparse
import asyncio
import functools
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from label_lens.capture.device import OpenCVCaptureDevice
from label_lens.capture.session import CaptureSession, CaptureState
from label_lens.core import config
from label_lens.core.errors import LabelLensError
from label_lens.core.preferences import PreferenceStore
from label_lens.core.schema import ExtractionResult
from label_lens.core.state import PipelineStatus, ProcessingLifecycle
from label_lens.export.delimited import to_delimited_text
from label_lens.export.spreadsheet import save_spreadsheet
from label_lens.extraction.processor import create_client, extract_label_data

logger = logging.getLogger(__name__)


def save_json_output(result: ExtractionResult, output_dir: Optional[str] = None) -> str:
    """
    Save an extraction result as JSON next to the other reports.

    Returns:
        Path to the saved JSON file
    """
    output_path = Path(output_dir or config.OUTPUT_DIR) / f"{Path(result.filename).stem}.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)

    logger.info(f"Saved output to: {output_path}")
    return str(output_path)


def build_lifecycle() -> ProcessingLifecycle:
    client = create_client()
    return ProcessingLifecycle(functools.partial(extract_label_data, client=client))


def report(lifecycle: ProcessingLifecycle, args: argparse.Namespace) -> int:
    """Print the outcome of an extraction and write requested exports."""
    state = lifecycle.snapshot()
    if state.status == PipelineStatus.ERROR:
        print(f"Extraction Failed: {state.error}", file=sys.stderr)
        return 1

    result = state.result
    print(result.summary(), file=sys.stderr)

    if args.output in ("stdout", "both"):
        print(to_delimited_text(result.labels))

    if args.output in ("file", "both"):
        saved_path = save_json_output(result, args.output_dir)
        print(f"Saved to: {saved_path}", file=sys.stderr)

    if args.xlsx:
        path = save_spreadsheet(result.labels, args.output_dir)
        print(f"Spreadsheet: {path}", file=sys.stderr)

    return 0


async def run_extract(args: argparse.Namespace) -> int:
    lifecycle = build_lifecycle()
    await lifecycle.submit_file(args.file, args.mime_type)
    print(f"Processing: {args.file}...", file=sys.stderr)
    await lifecycle.trigger()
    return report(lifecycle, args)


async def run_scan(args: argparse.Namespace) -> int:
    lifecycle = build_lifecycle()
    device = OpenCVCaptureDevice(index=args.camera_index)

    async with CaptureSession(device, on_capture=lifecycle.submit_capture) as session:
        attempts = 1
        while session.state == CaptureState.ERROR and attempts <= args.retries:
            print(f"{session.error_message} Retrying...", file=sys.stderr)
            attempts += 1
            await session.retry()

        if session.state != CaptureState.READY:
            print(session.error_message, file=sys.stderr)
            return 1

        if args.torch:
            await session.toggle_torch()

        print("Camera ready. Capturing label...", file=sys.stderr)
        await session.capture()

    return report(lifecycle, args)


def run_theme(args: argparse.Namespace) -> int:
    store = PreferenceStore()
    if args.value:
        store.theme = args.value
    print(store.theme)
    return 0


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o", "--output",
        choices=["stdout", "file", "both"],
        default="stdout",
        help="'stdout' (print delimited rows), 'file' (save JSON), or 'both' (default: stdout)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        help=f"Directory for JSON and spreadsheet output (default: {config.OUTPUT_DIR})"
    )
    parser.add_argument(
        "--xlsx",
        action="store_true",
        help=f"Write {config.REPORT_FILENAME}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="label-lens",
        description="Extract structured garment label data from photos, PDFs or a live camera using Claude.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  ANTHROPIC_API_KEY    Your Anthropic API key (required for extract/scan)
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Extract labels from a PDF or image file")
    extract.add_argument("file", help="Path to a PDF, JPEG, PNG or WebP file")
    extract.add_argument("--mime-type", help="Override the media type guessed from the extension")
    _add_output_arguments(extract)

    scan = subparsers.add_parser("scan", help="Capture a label from the camera and extract it")
    scan.add_argument("--camera-index", type=int, default=config.CAMERA_INDEX, help="Camera device index")
    scan.add_argument("--retries", type=int, default=0, help="Times to retry opening the camera")
    scan.add_argument("--torch", action="store_true", help="Turn on the torch if the camera has one")
    _add_output_arguments(scan)

    subparsers.add_parser("config", help="Show the configuration summary")

    theme = subparsers.add_parser("theme", help="Show or set the theme preference")
    theme.add_argument("value", nargs="?", choices=["light", "dark"])

    return parser


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    if args.command == "config":
        print(config.get_config_summary())
        problems = config.validate_config()
        for problem in problems:
            print(f"  - {problem}", file=sys.stderr)
        return 1 if problems else 0

    if args.command == "theme":
        return run_theme(args)

    try:
        if args.command == "extract":
            return asyncio.run(run_extract(args))
        return asyncio.run(run_scan(args))
    except LabelLensError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
