"""Configuration management for Folder Translator."""

from __future__ import annotations

import multiprocessing as mp
import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

DeviceType = Literal["cuda", "mps", "cpu", "auto"]
OCREngineType = Literal["tesseract", "surya"]
PDFModeType = Literal["auto", "ocr", "digital"]

DEFAULT_CONFIG_FILE = "config.toml"

# LibreTranslate language code -> Tesseract traineddata name
TESSERACT_LANGS = {
    "ar": "ara",
    "de": "deu",
    "en": "eng",
    "es": "spa",
    "fr": "fra",
    "hi": "hin",
    "it": "ita",
    "ja": "jpn",
    "ko": "kor",
    "pl": "pol",
    "pt": "por",
    "ru": "rus",
    "tr": "tur",
    "uk": "ukr",
    "zh": "chi_sim",
}

# Keys accepted in config.toml that map onto a differently named field
_KEY_ALIASES = {"tesserac_data": "tessdata_dir"}

_DEVICES = ("cuda", "mps", "cpu", "auto")
_OCR_ENGINES = ("tesseract", "surya")
_PDF_MODES = ("auto", "ocr", "digital")


@dataclass
class TranslationConfig:
    """
    Configuration for directory translation.

    Attributes:
        source_lang: Source language code (e.g., 'ru' for Russian)
        target_lang: Target language code (e.g., 'en' for English)
        libretranslate_url: Base URL of the LibreTranslate server
        api_key: Optional LibreTranslate API key
        tessdata_dir: Directory holding Tesseract traineddata files
        ocr_lang: Tesseract language override, derived from source_lang if unset
        ocr_engine: 'tesseract' (default) or 'surya'
        pdf_mode: 'auto' uses embedded PDF text when present, 'ocr' always OCRs,
            'digital' never OCRs
        dpi: Resolution for PDF rendering
        render_width: Width rendered PDF pages are scaled to
        render_max_height: Maximum height of a rendered PDF page
        rotate_landscape: Rotate landscape pages upright before OCR
        max_chunk_chars: Longest text sent to the server in one request
        num_workers: Number of parallel translation workers
        device: Compute device for Surya - 'cuda', 'mps', 'cpu', or 'auto'
        skip_hidden: Ignore dot-files and dot-directories
    """

    source_lang: str = "ru"
    target_lang: str = "en"
    libretranslate_url: str = "http://localhost:5000/"
    api_key: str | None = None
    tessdata_dir: str | None = None
    ocr_lang: str | None = None
    ocr_engine: OCREngineType = "tesseract"
    pdf_mode: PDFModeType = "auto"
    dpi: int = 200
    render_width: int = 2000
    render_max_height: int = 2000
    rotate_landscape: bool = True
    max_chunk_chars: int = 4500
    num_workers: int = field(default_factory=lambda: max(1, mp.cpu_count() - 1))
    device: DeviceType = "auto"
    skip_hidden: bool = True

    # Surya batch sizes - tune based on your GPU memory
    detector_batch_size: int = 16
    recognition_batch_size: int = 32

    def __post_init__(self) -> None:
        """Validate settings and set up derived values."""
        if self.ocr_engine not in _OCR_ENGINES:
            raise ValueError(
                f"Unknown OCR engine '{self.ocr_engine}' "
                f"(expected one of: {', '.join(_OCR_ENGINES)})"
            )
        if self.pdf_mode not in _PDF_MODES:
            raise ValueError(
                f"Unknown PDF mode '{self.pdf_mode}' "
                f"(expected one of: {', '.join(_PDF_MODES)})"
            )
        if self.device not in _DEVICES:
            raise ValueError(
                f"Unknown device '{self.device}' "
                f"(expected one of: {', '.join(_DEVICES)})"
            )
        for name in (
            "dpi",
            "render_width",
            "render_max_height",
            "max_chunk_chars",
            "num_workers",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive")

        if not self.libretranslate_url.endswith("/"):
            self.libretranslate_url += "/"

        if self.ocr_engine == "surya":
            self._detect_device()

    @property
    def tesseract_lang(self) -> str:
        """Tesseract language to OCR with."""
        if self.ocr_lang:
            return self.ocr_lang
        return TESSERACT_LANGS.get(self.source_lang, self.source_lang)

    def _detect_device(self) -> None:
        """Auto-detect the best available compute device."""
        if self.device == "auto":
            try:
                import torch

                if torch.cuda.is_available():
                    self.device = "cuda"
                elif (
                    hasattr(torch.backends, "mps") and torch.backends.mps.is_available()
                ):
                    self.device = "mps"
                else:
                    self.device = "cpu"
            except ImportError:
                self.device = "cpu"

    def apply_environment(self) -> None:
        """Apply configuration to environment variables for Surya OCR."""
        os.environ["TORCH_DEVICE"] = self.device
        os.environ["DETECTOR_BATCH_SIZE"] = str(self.detector_batch_size)
        os.environ["RECOGNITION_BATCH_SIZE"] = str(self.recognition_batch_size)
        os.environ["DETECTOR_POSTPROCESSING_CPU_WORKERS"] = str(mp.cpu_count())

    @staticmethod
    def read_toml(path: str | Path) -> dict[str, Any]:
        """
        Read and normalise the keys of a TOML config file.

        Args:
            path: Path to the TOML file

        Returns:
            Mapping of TranslationConfig field names to values
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "rb") as f:
            try:
                raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid config file {path}: {e}") from e

        known = {f.name for f in fields(TranslationConfig)}
        values: dict[str, Any] = {}
        for key, value in raw.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown config key '{key}' in {path}")
            values[name] = value
        return values

    @classmethod
    def from_toml(cls, path: str | Path) -> TranslationConfig:
        """Build a config from a TOML file."""
        return cls(**cls.read_toml(path))

    @classmethod
    def load(
        cls, path: str | Path | None = None, **overrides: Any
    ) -> TranslationConfig:
        """
        Build a config from defaults, a config file and explicit overrides.

        The file is the given path, or ./config.toml when it exists.
        Overrides that are None are ignored so CLI flags left unset
        don't clobber file values.
        """
        values: dict[str, Any] = {}

        if path is not None:
            values.update(cls.read_toml(path))
        elif Path(DEFAULT_CONFIG_FILE).exists():
            values.update(cls.read_toml(DEFAULT_CONFIG_FILE))

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
