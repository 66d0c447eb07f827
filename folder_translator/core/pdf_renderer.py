"""Rasterise PDF pages into images for OCR."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from pdf2image import convert_from_path, pdfinfo_from_path
from PIL import Image


class PDFRenderer:
    """
    Renders PDF pages to images using poppler via pdf2image.

    Every page is normalised to a fixed width so OCR sees text at a
    predictable size. Landscape pages can be turned upright first,
    since scanned documents are usually portrait pages lying sideways.
    """

    def __init__(
        self,
        dpi: int = 200,
        target_width: int = 2000,
        max_height: int = 2000,
        rotate_landscape: bool = True,
        thread_count: int = 1,
    ):
        """
        Initialize the renderer.

        Args:
            dpi: Rasterisation resolution
            target_width: Width every page is scaled to
            max_height: Pages taller than this after scaling are shrunk to fit
            rotate_landscape: Rotate landscape pages 90 degrees clockwise
            thread_count: Number of poppler threads
        """
        self.dpi = dpi
        self.target_width = target_width
        self.max_height = max_height
        self.rotate_landscape = rotate_landscape
        self.thread_count = thread_count

    def page_count(self, path: str | Path) -> int:
        """Number of pages in a PDF, as reported by poppler."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"PDF not found: {path}")

        return int(pdfinfo_from_path(str(path))["Pages"])

    def render_pages(self, path: str | Path) -> Iterator[Image.Image]:
        """
        Render the pages of a PDF one at a time.

        Only the page being yielded is held in memory, so large scans
        can be processed page by page.

        Args:
            path: Path to the PDF file

        Yields:
            One RGB image per page, in page order
        """
        for page_num in range(1, self.page_count(path) + 1):
            pages = convert_from_path(
                str(path),
                dpi=self.dpi,
                first_page=page_num,
                last_page=page_num,
                thread_count=self.thread_count,
            )
            for page in pages:
                yield self.fit_page(page)

    def fit_page(self, image: Image.Image) -> Image.Image:
        """Rotate and scale a rendered page to the configured size."""
        image = image.convert("RGB")

        if self.rotate_landscape and image.width > image.height:
            image = image.rotate(-90, expand=True)

        scale = self.target_width / image.width
        if image.height * scale > self.max_height:
            scale = self.max_height / image.height

        size = (max(1, round(image.width * scale)), max(1, round(image.height * scale)))
        if size != image.size:
            image = image.resize(size, Image.LANCZOS)
        return image
