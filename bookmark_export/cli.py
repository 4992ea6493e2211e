#!/usr/bin/env python3
"""
Command line entry point.

    bookmark-export export book.pdf -o out/ --name "My Book"
    bookmark-export serve --port 8000
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import aiofiles

from bookmark_export.adapters.pdf import PyMuPDFDocumentFactory, PyMuPDFSourceDocument
from bookmark_export.config.settings import ExportSettings, load_settings
from bookmark_export.core.exceptions import CoreError
from bookmark_export.core.export import BookmarkExporter, ExportResult, ExportStage

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookmark-export",
        description="Copy a PDF together with its bookmark tree",
    )
    parser.add_argument("--config", help="Path to YAML settings file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    export = commands.add_parser("export", help="Export a local PDF")
    export.add_argument("source", type=Path, help="PDF to copy")
    export.add_argument(
        "-o", "--output", type=Path, default=Path("."),
        help="Output directory (default: current directory)",
    )
    export.add_argument("--name", help="Output file name without extension")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind to")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def print_stage(stage: ExportStage) -> None:
    print(stage.value, flush=True)


async def write_output(result: ExportResult, directory: Path) -> Path:
    """Write the exported document into directory under its file name."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / result.file_name
    async with aiofiles.open(path, "wb") as f:
        await f.write(result.data)
    return path


async def run_export(
    source_path: Path,
    output_dir: Path,
    name: Optional[str],
    settings: ExportSettings,
) -> Path:
    exporter = BookmarkExporter(settings=settings, progress=print_stage)
    with PyMuPDFSourceDocument(source_path) as source:
        result = await exporter.export(source, PyMuPDFDocumentFactory(), name)

    path = await write_output(result, output_dir)
    print(f"Saved {path} ({result.page_count} pages, {result.bookmark_count} bookmarks)")
    return path


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except CoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "serve":
        from bookmark_export.api.export_api import serve
        serve(host=args.host, port=args.port, settings=settings)
        return 0

    if not args.source.is_file():
        print(f"Error: {args.source} does not exist", file=sys.stderr)
        return 1

    logger.info(f"Exporting {args.source}")
    try:
        asyncio.run(run_export(args.source, args.output, args.name, settings))
    except CoreError as e:
        print(f"Export failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
