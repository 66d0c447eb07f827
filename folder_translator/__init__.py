"""
Folder Translator - Translate the files of a directory.

Renames files with their translated names, or writes translated text
renditions of PDFs, images and Word documents, using Tesseract OCR and
a locally hosted LibreTranslate server.
"""

from folder_translator.core.config import TranslationConfig
from folder_translator.core.translator import DirectoryTranslator

__version__ = "0.1.0"

__all__ = [
    "DirectoryTranslator",
    "TranslationConfig",
    "__version__",
]
