"""Pytest configuration and shared fixtures."""

import pytest
from PIL import Image


@pytest.fixture
def sample_image():
    """Create a simple portrait test image."""
    return Image.new("RGB", (100, 200), color="white")


@pytest.fixture
def tesseract_data():
    """image_to_data output with two blocks and one empty, unconfident word."""
    return {
        "level": [5, 5, 5, 5, 5, 5],
        "block_num": [1, 1, 1, 2, 2, 2],
        "par_num": [1, 1, 1, 1, 1, 1],
        "line_num": [1, 1, 2, 1, 1, 1],
        "word_num": [1, 2, 1, 1, 2, 3],
        "left": [10, 60, 10, 10, 80, 200],
        "top": [10, 10, 40, 100, 100, 100],
        "width": [40, 50, 70, 60, 60, 10],
        "height": [20, 20, 20, 20, 20, 20],
        "conf": [96, 90, 84, 80, -1, 70],
        "text": ["Привет", "мир", "Строка", "Второй", "", "блок"],
    }


@pytest.fixture
def config():
    """Create a single-worker config that never touches a config file."""
    from folder_translator.core.config import TranslationConfig

    return TranslationConfig(
        source_lang="ru",
        target_lang="en",
        libretranslate_url="http://localhost:5000",
        num_workers=1,
    )


@pytest.fixture
def source_tree(tmp_path):
    """Create a source directory with a mix of file types."""
    source = tmp_path / "source"
    (source / "sub").mkdir(parents=True)
    (source / ".hidden").mkdir()

    (source / "отчет.txt").write_text("Первый абзац.\n\nВторой абзац.", encoding="utf-8")
    (source / "sub" / "заметка.txt").write_text("Текст", encoding="utf-8")
    (source / "data.bin").write_bytes(b"\x00\x01")
    (source / ".secret.txt").write_text("скрыто", encoding="utf-8")
    (source / ".hidden" / "file.txt").write_text("скрыто", encoding="utf-8")
    return source


@pytest.fixture
def fake_translate():
    """A translate function that marks its input as translated."""

    def translate(text):
        return f"EN[{text}]"

    return translate
