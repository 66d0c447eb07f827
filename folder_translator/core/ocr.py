"""OCR engine with Tesseract and Surya backends."""

from __future__ import annotations

import re
import statistics
import time
from typing import TYPE_CHECKING

import pytesseract
from PIL import Image

if TYPE_CHECKING:
    from folder_translator.core.config import TranslationConfig

# Vertical gap, in median line heights, that starts a new Surya block
SURYA_BLOCK_GAP = 1.5


class OCREngine:
    """
    Extracts text blocks from page images.

    Tesseract is the default backend and groups words into blocks the
    way its page layout analysis reports them. Surya is optional and
    its text lines are grouped into blocks by vertical spacing.
    """

    def __init__(self, config: TranslationConfig | None = None):
        self.config = config
        self.engine = config.ocr_engine if config else "tesseract"
        self._detection_predictor = None
        self._recognition_predictor = None
        self._loaded = False

    @property
    def tesseract_config(self) -> str:
        """Extra command line options passed to the tesseract binary."""
        if self.config and self.config.tessdata_dir:
            return f'--tessdata-dir "{self.config.tessdata_dir}"'
        return ""

    @property
    def lang(self) -> str:
        return self.config.tesseract_lang if self.config else "eng"

    def is_available(self) -> bool:
        """Check whether the tesseract binary can be run."""
        try:
            pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError):
            return False
        return True

    def load_models(self, verbose: bool = True) -> None:
        """
        Load Surya models into memory.

        Tesseract needs no loading; for Surya this is called automatically
        on first use.
        """
        if self._loaded or self.engine != "surya":
            return

        if verbose:
            print("Loading Surya OCR models...")

        start = time.time()

        if self.config:
            self.config.apply_environment()

        from surya.detection import DetectionPredictor
        from surya.foundation import FoundationPredictor
        from surya.recognition import RecognitionPredictor

        self._detection_predictor = DetectionPredictor()
        self._recognition_predictor = RecognitionPredictor(FoundationPredictor())

        self._loaded = True

        if verbose:
            print(f"Models loaded in {time.time() - start:.2f}s")

    def extract_blocks(self, image: Image.Image) -> list[dict]:
        """
        Extract text blocks from a page image.

        Args:
            image: PIL Image to process

        Returns:
            Text blocks in reading order. Each block contains:
            - text: cleaned text, lines separated by newlines
            - box: bounding box [x1, y1, x2, y2]
            - confidence: mean OCR confidence between 0 and 1
        """
        if self.engine == "surya":
            return self._extract_surya(image)
        return self._extract_tesseract(image)

    def _extract_tesseract(self, image: Image.Image) -> list[dict]:
        data = pytesseract.image_to_data(
            image,
            lang=self.lang,
            config=self.tesseract_config,
            output_type=pytesseract.Output.DICT,
        )

        # block -> line -> words, keyed in the order tesseract reports them
        blocks: dict[int, dict] = {}
        for i, word in enumerate(data["text"]):
            word = (word or "").strip()
            conf = float(data["conf"][i])
            if not word or conf < 0:
                continue

            block = blocks.setdefault(
                data["block_num"][i],
                {"lines": {}, "boxes": [], "confs": []},
            )
            line_key = (data["par_num"][i], data["line_num"][i])
            block["lines"].setdefault(line_key, []).append(word)

            left, top = data["left"][i], data["top"][i]
            block["boxes"].append(
                (left, top, left + data["width"][i], top + data["height"][i])
            )
            block["confs"].append(conf / 100)

        results = []
        for block in blocks.values():
            text = self._clean_text(
                "\n".join(" ".join(words) for words in block["lines"].values())
            )
            if not text:
                continue
            results.append(
                {
                    "text": text,
                    "box": _union(block["boxes"]),
                    "confidence": sum(block["confs"]) / len(block["confs"]),
                }
            )
        return results

    def _extract_surya(self, image: Image.Image) -> list[dict]:
        self.load_models()

        assert self._recognition_predictor is not None
        assert self._detection_predictor is not None
        results = self._recognition_predictor(
            [image],
            det_predictor=self._detection_predictor,
            sort_lines=True,
        )

        lines = []
        for line in results[0].text_lines:
            text = self._clean_text(line.text)
            if text:
                lines.append(
                    {"text": text, "box": list(line.bbox), "confidence": line.confidence}
                )
        return group_lines(lines)

    def _clean_text(self, text: str) -> str:
        """
        Strip markup tags, collapse spaces within lines and drop blank lines.

        Surya marks formatting with tags like <b>; Tesseract output is
        plain but may carry stray whitespace.
        """
        clean = re.sub(r"<[^>]+>", "", text)
        lines = (re.sub(r"[ \t\f\v]+", " ", line).strip() for line in clean.splitlines())
        return "\n".join(line for line in lines if line)


def group_lines(lines: list[dict]) -> list[dict]:
    """
    Group text lines into blocks by vertical spacing.

    A new block starts when the gap above a line is larger than
    SURYA_BLOCK_GAP times the median line height.
    """
    if not lines:
        return []

    median_height = statistics.median(
        max(1.0, line["box"][3] - line["box"][1]) for line in lines
    )
    threshold = SURYA_BLOCK_GAP * median_height

    groups: list[list[dict]] = [[lines[0]]]
    for prev, line in zip(lines, lines[1:]):
        if line["box"][1] - prev["box"][3] > threshold:
            groups.append([line])
        else:
            groups[-1].append(line)

    return [
        {
            "text": "\n".join(line["text"] for line in group),
            "box": _union([line["box"] for line in group]),
            "confidence": sum(line["confidence"] for line in group) / len(group),
        }
        for group in groups
    ]


def _union(boxes: list) -> list:
    return [
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    ]
