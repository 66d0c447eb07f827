"""Core modules for directory translation."""

from folder_translator.core.config import TranslationConfig
from folder_translator.core.docx_reader import read_docx_paragraphs
from folder_translator.core.ocr import OCREngine
from folder_translator.core.pdf_extractor import PDFExtractor
from folder_translator.core.pdf_renderer import PDFRenderer
from folder_translator.core.text_translator import TextTranslator, TranslationError
from folder_translator.core.translator import DirectoryTranslator, RunSummary

__all__ = [
    "TranslationConfig",
    "DirectoryTranslator",
    "RunSummary",
    "OCREngine",
    "TextTranslator",
    "TranslationError",
    "PDFExtractor",
    "PDFRenderer",
    "read_docx_paragraphs",
]
