"""Utility functions for Folder Translator."""

from folder_translator.utils.paths import (
    iter_source_files,
    page_output_name,
    sanitize_filename,
    text_output_name,
    unique_path,
)

__all__ = [
    "iter_source_files",
    "page_output_name",
    "sanitize_filename",
    "text_output_name",
    "unique_path",
]
