"""Paragraph extraction from Word documents."""

from __future__ import annotations

import zipfile
from pathlib import Path

import docx
from docx.opc.exceptions import PackageNotFoundError


def read_docx_paragraphs(path: str | Path) -> list[str]:
    """
    Read the text paragraphs of a .docx file.

    Body paragraphs come first, followed by the paragraphs of every
    table cell. Blank paragraphs are dropped.

    Args:
        path: Path to the .docx file

    Returns:
        Paragraph texts in document order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a readable Word document
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")

    try:
        document = docx.Document(str(path))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError) as e:
        raise ValueError(f"Not a valid Word document: {path}") from e

    paragraphs = [p.text for p in document.paragraphs]

    # merged cells show up once per grid position they span
    seen = set()
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                if id(cell._tc) in seen:
                    continue
                seen.add(id(cell._tc))
                paragraphs.extend(p.text for p in cell.paragraphs)

    return [p.strip() for p in paragraphs if p.strip()]
