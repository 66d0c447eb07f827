"""File walking and output naming utilities."""

from __future__ import annotations

import os
import re
from collections.abc import Iterator
from pathlib import Path

_UNSAFE_CHARS = re.compile(r'[\x00-\x1f\x7f/\\]')


def iter_source_files(
    source_dir: str | Path,
    exclude: str | Path | None = None,
    skip_hidden: bool = True,
) -> Iterator[Path]:
    """
    Walk a directory tree and yield its regular files in sorted order.

    Args:
        source_dir: Directory to walk
        exclude: Directory to leave out, e.g. an output folder inside source_dir
        skip_hidden: Skip files and directories whose name starts with a dot

    Yields:
        Paths of regular files
    """
    source_dir = Path(source_dir)
    excluded = Path(exclude).resolve() if exclude is not None else None

    for root, dirs, files in os.walk(source_dir):
        root_path = Path(root)

        kept = []
        for name in sorted(dirs):
            if skip_hidden and name.startswith("."):
                continue
            if excluded is not None and (root_path / name).resolve() == excluded:
                continue
            kept.append(name)
        # os.walk descends into whatever is left in dirs
        dirs[:] = kept

        for name in sorted(files):
            if skip_hidden and name.startswith("."):
                continue
            path = root_path / name
            if path.is_file():
                yield path


def page_output_name(pdf_path: str | Path, index: int, suffix: str) -> str:
    """
    Name of a per-page output file.

    Examples:
        >>> page_output_name("Report.PDF", 0, ".txt")
        'report-page-0.txt'
        >>> page_output_name("scan.pdf", 3, ".jpg")
        'scan-page-3.jpg'
    """
    name = Path(pdf_path).name.lower()
    if name.endswith(".pdf"):
        name = name[: -len(".pdf")]
    return f"{name}-page-{index}{suffix}"


def text_output_name(path: str | Path) -> str:
    """Name of the text file a document translates into, e.g. 'photo.jpg.txt'."""
    return f"{Path(path).name}.txt"


def sanitize_filename(name: str) -> str:
    """
    Make a translated string usable as a file name.

    Path separators and control characters become underscores, and
    surrounding whitespace and trailing dots are removed. The result
    may be empty.
    """
    name = _UNSAFE_CHARS.sub("_", name)
    name = name.strip().rstrip(".").strip()
    if name in ("", ".", ".."):
        return ""
    return name


def unique_path(path: str | Path, reserved: set[Path] | None = None) -> Path:
    """
    Return path, or the first free 'name (N).ext' variant of it.

    A name counts as taken when it exists on disk or is in reserved,
    which holds names already handed out but not yet created.

    Examples:
        If 'a.txt' exists, returns 'a (1).txt'; if that exists too, 'a (2).txt'.
    """
    path = Path(path)
    reserved = reserved or set()
    if not path.exists() and path not in reserved:
        return path

    counter = 1
    while True:
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        if not candidate.exists() and candidate not in reserved:
            return candidate
        counter += 1
