"""Embedded text extraction for digitally-born PDFs using PyMuPDF."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import fitz


@dataclass
class TextBlock:
    """A block of embedded text and where it sits on the page."""

    text: str
    bbox: tuple[float, float, float, float]  # x0, y0, x1, y1


class PDFExtractor:
    """
    Extracts embedded text from PDFs using PyMuPDF.

    Used to skip OCR on pages that already carry a text layer, and to
    detect whether a PDF is digital or a scan.
    """

    # Minimum text density (chars per page) to consider a page as having text
    MIN_TEXT_DENSITY = 50

    def __init__(self, path: str | Path):
        """
        Initialize the extractor with a PDF file.

        Args:
            path: Path to the PDF file
        """
        import fitz

        self.path = Path(path)
        self._doc: fitz.Document = fitz.open(str(self.path))

    def __enter__(self) -> PDFExtractor:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the PDF document."""
        if self._doc:
            self._doc.close()

    @property
    def page_count(self) -> int:
        """Get the total number of pages."""
        return len(self._doc)

    def is_digital_pdf(self, sample_pages: int = 3) -> bool:
        """
        Detect if the PDF has extractable text (digital) or is scanned.

        Samples a few pages evenly spread through the document; the PDF
        is digital if most of them have text.
        """
        if self.page_count == 0:
            return False

        pages_to_check = min(sample_pages, self.page_count)
        step = max(1, self.page_count // pages_to_check)
        indices = [i * step for i in range(pages_to_check)]

        pages_with_text = sum(1 for idx in indices if self.has_text_on_page(idx))
        return pages_with_text > pages_to_check // 2

    def has_text_on_page(self, page_num: int) -> bool:
        """
        Check if a specific page has extractable text.

        Args:
            page_num: 0-based page number

        Returns:
            True if page has sufficient extractable text
        """
        if page_num < 0 or page_num >= self.page_count:
            return False

        text = self._doc[page_num].get_text("text")
        return len(text.strip()) >= self.MIN_TEXT_DENSITY

    def extract_text_blocks(self, page_num: int) -> list[TextBlock]:
        """
        Extract the text blocks of a page in reading order.

        Image blocks and blocks with only whitespace are dropped.

        Args:
            page_num: 0-based page number
        """
        if page_num < 0 or page_num >= self.page_count:
            return []

        page = self._doc[page_num]
        blocks: list[TextBlock] = []

        # (x0, y0, x1, y1, text, block_no, block_type)
        for block in page.get_text("blocks", sort=True):
            if block[6] != 0:
                continue

            lines = [" ".join(line.split()) for line in block[4].splitlines()]
            text = "\n".join(line for line in lines if line)
            if not text:
                continue

            blocks.append(TextBlock(text=text, bbox=tuple(block[:4])))

        return blocks
