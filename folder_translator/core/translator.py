"""Directory translation orchestrator."""

from __future__ import annotations

import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from PIL import Image, ImageSequence

from folder_translator.core.config import TranslationConfig
from folder_translator.core.docx_reader import read_docx_paragraphs
from folder_translator.core.ocr import OCREngine
from folder_translator.core.pdf_extractor import PDFExtractor
from folder_translator.core.pdf_renderer import PDFRenderer
from folder_translator.core.text_translator import TextTranslator
from folder_translator.utils.paths import (
    iter_source_files,
    page_output_name,
    sanitize_filename,
    text_output_name,
    unique_path,
)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp"}

ProgressCallback = Callable[[str, int, int], None]


@dataclass
class FileResult:
    """Outcome of processing one source file."""

    source: Path
    outputs: list[Path] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    """Outcome of a whole run."""

    processed: list[FileResult] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed: list[FileResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def add(self, result: FileResult) -> None:
        if result.ok:
            self.processed.append(result)
        else:
            self.failed.append(result)


class DirectoryTranslator:
    """
    Translates the files of a directory.

    Two operations are supported: renaming files in place with their
    translated names, and writing translated text renditions of PDFs,
    images, Word documents and text files into a destination directory.

    Example:
        >>> from folder_translator import DirectoryTranslator, TranslationConfig
        >>> translator = DirectoryTranslator(TranslationConfig(source_lang="ru"))
        >>> translator.translate_directory("scans", "scans_en")
    """

    def __init__(
        self,
        config: TranslationConfig | None = None,
        progress_callback: ProgressCallback | None = None,
        verbose: bool = False,
    ):
        """
        Initialize the translator.

        Args:
            config: Translation settings. If None, uses defaults.
            progress_callback: Optional function called with (stage, current, total)
            verbose: Print per-page details
        """
        self.config = config or TranslationConfig()
        self.progress_callback = progress_callback
        self.verbose = verbose

        self._text_translator = TextTranslator(
            source_lang=self.config.source_lang,
            target_lang=self.config.target_lang,
            base_url=self.config.libretranslate_url,
            api_key=self.config.api_key,
            max_chunk_chars=self.config.max_chunk_chars,
        )
        self._ocr = OCREngine(self.config)
        self._pdf_renderer = PDFRenderer(
            dpi=self.config.dpi,
            target_width=self.config.render_width,
            max_height=self.config.render_max_height,
            rotate_landscape=self.config.rotate_landscape,
            thread_count=self.config.num_workers,
        )

    def translate_filenames(
        self, source_dir: str | Path, dry_run: bool = False
    ) -> RunSummary:
        """
        Rename every file under source_dir to its translated name.

        The extension is kept; only the stem is translated. Files whose
        translation is empty or unchanged are skipped, and a name that is
        already taken gets a numeric suffix.

        Args:
            source_dir: Directory to process recursively
            dry_run: Only print the planned renames

        Returns:
            Summary of renamed, skipped and failed files
        """
        source_dir = self._check_source(source_dir)
        files = list(iter_source_files(source_dir, skip_hidden=self.config.skip_hidden))
        summary = RunSummary()
        planned: set[Path] = set()

        self._log_start("Translate filenames", source_dir, None, len(files))
        start = time.time()

        for i, path in enumerate(files):
            self._report(path.name, i, len(files))
            try:
                translated = sanitize_filename(self._text_translator.translate(path.stem))
            except Exception as e:
                summary.add(self._failure(path, e))
                continue

            if not translated or translated == path.stem:
                summary.skipped.append(path)
                continue

            target = unique_path(path.with_name(translated + path.suffix), reserved=planned)
            planned.add(target)
            print(f"{path} -> {target.name}")
            if not dry_run:
                try:
                    path.rename(target)
                except OSError as e:
                    summary.add(self._failure(path, e))
                    continue
            summary.add(FileResult(path, [target]))

        self._report("Done", len(files), len(files))
        self._log_complete(start, summary)
        return summary

    def translate_directory(
        self, source_dir: str | Path, target_dir: str | Path
    ) -> RunSummary:
        """
        Translate every supported file under source_dir into target_dir.

        The sub-directory layout of source_dir is mirrored in target_dir.
        A file that fails is recorded in the summary and the run continues.

        Args:
            source_dir: Directory to process recursively
            target_dir: Destination directory, created if missing

        Returns:
            Summary of translated, skipped and failed files
        """
        source_dir = self._check_source(source_dir)
        target_dir = Path(target_dir).resolve()
        if target_dir == source_dir:
            raise ValueError("Destination directory must differ from the source directory")
        target_dir.mkdir(parents=True, exist_ok=True)

        files = list(
            iter_source_files(
                source_dir, exclude=target_dir, skip_hidden=self.config.skip_hidden
            )
        )
        summary = RunSummary()

        self._log_start("Translate documents", source_dir, target_dir, len(files))
        start = time.time()

        for i, path in enumerate(files):
            self._report(path.name, i, len(files))
            handler = self._handler_for(path)
            if handler is None:
                if self.verbose:
                    print(f"  Skipping {path}")
                summary.skipped.append(path)
                continue

            out_dir = target_dir / path.parent.relative_to(source_dir)
            print(f"Translating {path}...")
            file_start = time.time()
            try:
                out_dir.mkdir(parents=True, exist_ok=True)
                outputs = handler(path, out_dir)
            except Exception as e:
                summary.add(self._failure(path, e))
                continue

            summary.add(FileResult(path, outputs))
            print(f"  Done in {time.time() - file_start:.2f}s")

        self._report("Done", len(files), len(files))
        self._log_complete(start, summary)
        return summary

    def translate_pdf(self, path: Path, out_dir: Path) -> list[Path]:
        """
        Translate a PDF page by page.

        Each page produces '<name>-page-<i>.jpg' (the rendered page) and
        '<name>-page-<i>.txt' (its translated text).
        """
        embedded = self._embedded_pages(path)
        outputs = []

        # pages are rendered lazily, one in memory at a time
        for index, image in enumerate(self._pdf_renderer.render_pages(path)):
            texts = embedded.get(index)
            if texts is None:
                texts = [block["text"] for block in self._ocr.extract_blocks(image)]
                source = "OCR"
            else:
                source = "text layer"

            if self.verbose:
                print(f"  Page {index + 1}: {len(texts)} blocks ({source})")

            text_path = out_dir / page_output_name(path, index, ".txt")
            self._write_translation(text_path, texts, separator="\n\n")
            outputs.append(text_path)

            image_path = out_dir / page_output_name(path, index, ".jpg")
            image.convert("RGB").save(str(image_path), "JPEG")
            outputs.append(image_path)

        return outputs

    def translate_image(self, path: Path, out_dir: Path) -> list[Path]:
        """
        OCR an image and write its translated text to '<file name>.txt'.

        Every frame of a multi-page image (e.g. a TIFF scan) is read in order.
        """
        blocks = []
        with Image.open(path) as image:
            for frame_num, frame in enumerate(ImageSequence.Iterator(image)):
                frame_blocks = self._ocr.extract_blocks(frame.convert("RGB"))
                if self.verbose:
                    print(f"  Frame {frame_num + 1}: {len(frame_blocks)} blocks")
                blocks.extend(frame_blocks)

        text_path = out_dir / text_output_name(path)
        self._write_translation(text_path, [b["text"] for b in blocks], separator="\n\n")
        return [text_path]

    def translate_docx(self, path: Path, out_dir: Path) -> list[Path]:
        """Translate a Word document, one output line per paragraph."""
        paragraphs = read_docx_paragraphs(path)

        if self.verbose:
            print(f"  {len(paragraphs)} paragraphs")

        text_path = out_dir / text_output_name(path)
        self._write_translation(text_path, paragraphs, separator="\n")
        return [text_path]

    def translate_text_file(self, path: Path, out_dir: Path) -> list[Path]:
        """Translate a plain text file paragraph by paragraph."""
        content = path.read_text(encoding="utf-8", errors="replace")
        paragraphs = [p.strip() for p in content.split("\n\n") if p.strip()]

        text_path = out_dir / text_output_name(path)
        self._write_translation(text_path, paragraphs, separator="\n\n")
        return [text_path]

    def _handler_for(self, path: Path) -> Callable[[Path, Path], list[Path]] | None:
        ext = path.suffix.lower()
        if ext == ".pdf":
            return self.translate_pdf
        if ext in IMAGE_EXTENSIONS:
            return self.translate_image
        if ext == ".docx":
            return self.translate_docx
        if ext == ".txt":
            return self.translate_text_file
        return None

    def _embedded_pages(self, path: Path) -> dict[int, list[str]]:
        """Text blocks of the pages that can skip OCR, keyed by page index."""
        if self.config.pdf_mode == "ocr":
            return {}

        pages = {}
        with PDFExtractor(path) as extractor:
            if self.verbose and self.config.pdf_mode == "auto":
                if extractor.is_digital_pdf():
                    print("  Detected: Digital PDF (has extractable text)")
                else:
                    print("  Detected: Scanned PDF (using OCR)")

            for index in range(extractor.page_count):
                if self.config.pdf_mode == "digital" or extractor.has_text_on_page(index):
                    pages[index] = [b.text for b in extractor.extract_text_blocks(index)]
        return pages

    def _translate_all(self, texts: list[str]) -> list[str]:
        """Translate texts in parallel, keeping their order."""
        if len(texts) <= 1 or self.config.num_workers == 1:
            return [self._text_translator.translate(t) for t in texts]

        with ThreadPoolExecutor(max_workers=self.config.num_workers) as executor:
            return list(executor.map(self._text_translator.translate, texts))

    def _write_translation(self, out_path: Path, texts: list[str], separator: str) -> None:
        translations = self._translate_all(texts)
        content = separator.join(translations)
        if content:
            content += "\n"
        out_path.write_text(content, encoding="utf-8")

    def _check_source(self, source_dir: str | Path) -> Path:
        source_dir = Path(source_dir).resolve()
        if not source_dir.is_dir():
            raise FileNotFoundError(f"Source directory not found: {source_dir}")
        return source_dir

    def _failure(self, path: Path, error: Exception) -> FileResult:
        print(f"Error: {path}: {error}", file=sys.stderr)
        return FileResult(path, error=str(error) or type(error).__name__)

    def _report(self, stage: str, current: int, total: int) -> None:
        """Report progress if a callback is provided."""
        if self.progress_callback:
            self.progress_callback(stage, current, total)

    def _log_start(
        self, operation: str, source_dir: Path, target_dir: Path | None, count: int
    ) -> None:
        """Print startup information."""
        print("=" * 50)
        print(f"Folder Translator - {operation}")
        print("=" * 50)
        print(f"Source: {source_dir}")
        if target_dir is not None:
            print(f"Output: {target_dir}")
        print(f"Languages: {self.config.source_lang} -> {self.config.target_lang}")
        print(f"Server: {self.config.libretranslate_url}")
        print(f"Files: {count}")
        print("=" * 50)
        print()

    def _log_complete(self, start_time: float, summary: RunSummary) -> None:
        """Print completion summary."""
        elapsed = time.time() - start_time
        print()
        print("=" * 50)
        print("Complete!" if summary.ok else "Finished with errors")
        print(f"Total time: {elapsed:.2f}s")
        print(
            f"Processed: {len(summary.processed)}  "
            f"Skipped: {len(summary.skipped)}  "
            f"Failed: {len(summary.failed)}"
        )
        print("=" * 50)
