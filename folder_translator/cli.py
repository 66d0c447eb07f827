"""Command-line interface for Folder Translator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from folder_translator import __version__
from folder_translator.core.config import TranslationConfig
from folder_translator.core.translator import DirectoryTranslator


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="folder-translator",
        description="Translate file names and documents in a directory using "
        "OCR and a LibreTranslate server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  folder-translator --source-dir docs filenames
  folder-translator --source-dir docs filenames --dry-run
  folder-translator --source-dir docs translate docs_en
  folder-translator -s de -t en --url http://localhost:5000 --source-dir docs translate out

Settings are read from ./config.toml (or --config), e.g.:
  libretranslate_url = "http://localhost:5000/"
  tessdata_dir = "/usr/share/tesseract-ocr/5/tessdata"
Command line flags override the file.
        """,
    )

    parser.add_argument(
        "--source-dir",
        type=str,
        required=True,
        help="Directory to translate",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to a TOML config file (default: ./config.toml if present)",
    )

    parser.add_argument(
        "-s",
        "--source",
        type=str,
        default=None,
        help="Source language code (default: ru)",
    )

    parser.add_argument(
        "-t",
        "--target",
        type=str,
        default=None,
        help="Target language code (default: en)",
    )

    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="LibreTranslate server URL (default: http://localhost:5000/)",
    )

    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="LibreTranslate API key",
    )

    parser.add_argument(
        "--tessdata-dir",
        type=str,
        default=None,
        help="Directory with Tesseract traineddata files",
    )

    parser.add_argument(
        "--ocr-engine",
        type=str,
        choices=["tesseract", "surya"],
        default=None,
        help="OCR engine (default: tesseract)",
    )

    parser.add_argument(
        "--pdf-mode",
        type=str,
        choices=["auto", "ocr", "digital"],
        default=None,
        help="Use embedded PDF text when present (auto), always OCR, "
        "or never OCR (default: auto)",
    )

    parser.add_argument(
        "-d",
        "--dpi",
        type=int,
        default=None,
        help="DPI for PDF rendering (default: 200)",
    )

    parser.add_argument(
        "-w",
        "--workers",
        type=int,
        default=None,
        help="Number of parallel translation requests",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print per-page details",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    filenames = subparsers.add_parser(
        "filenames",
        help="Translate file names only, renaming files in place",
    )
    filenames.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the new names without renaming anything",
    )

    translate = subparsers.add_parser(
        "translate",
        help="Translate source folder into target folder",
    )
    translate.add_argument(
        "target_dir",
        type=str,
        help="Directory to write translated files to",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    source_dir = Path(args.source_dir).resolve()

    if not source_dir.is_dir():
        print(f"Error: Directory not found: {source_dir}", file=sys.stderr)
        return 1

    try:
        config = TranslationConfig.load(
            args.config,
            source_lang=args.source,
            target_lang=args.target,
            libretranslate_url=args.url,
            api_key=args.api_key,
            tessdata_dir=args.tessdata_dir,
            ocr_engine=args.ocr_engine,
            pdf_mode=args.pdf_mode,
            dpi=args.dpi,
            num_workers=args.workers,
        )
    except (FileNotFoundError, ValueError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        translator = DirectoryTranslator(config, verbose=args.verbose)
        if args.command == "filenames":
            summary = translator.translate_filenames(source_dir, dry_run=args.dry_run)
        else:
            summary = translator.translate_directory(source_dir, args.target_dir)
        return 0 if summary.ok else 1

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
