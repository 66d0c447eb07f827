"""Tests for text translation module."""

from unittest.mock import MagicMock, patch

import pytest

from folder_translator.core.text_translator import (
    NO_API_KEY,
    TextTranslator,
    TranslationError,
    split_sentences,
)


class TestTextTranslatorInit:
    """Tests for TextTranslator initialization."""

    def test_default_languages(self):
        """Should default to Russian -> English."""
        translator = TextTranslator()
        assert translator.source_lang == "ru"
        assert translator.target_lang == "en"

    def test_base_url_trailing_slash(self):
        """Base URL should end with a slash."""
        translator = TextTranslator(base_url="http://localhost:5000")
        assert translator.base_url == "http://localhost:5000/"

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_client_created_lazily(self, mock_libre):
        """The client should be created once on first use."""
        translator = TextTranslator(
            source_lang="ru", target_lang="en", base_url="http://srv/", api_key="k"
        )
        mock_libre.assert_not_called()

        assert translator.client is translator.client
        mock_libre.assert_called_once_with(
            source="ru",
            target="en",
            api_key="k",
            use_free_api=False,
            custom_url="http://srv/",
        )

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_client_without_api_key(self, mock_libre):
        """Without a key a placeholder is passed and then cleared."""
        translator = TextTranslator(api_key=None)

        client = translator.client

        assert mock_libre.call_args.kwargs["api_key"] == NO_API_KEY
        assert client.api_key is None

    @patch("deep_translator.libre.requests.post")
    def test_keyless_server_request(self, mock_post):
        """A real client without a key should reach the server without api_key."""
        mock_post.return_value = MagicMock(
            status_code=200, json=MagicMock(return_value={"translatedText": "hello world"})
        )
        translator = TextTranslator(
            source_lang="ru", target_lang="en", base_url="http://localhost:5000"
        )

        assert translator.translate("привет мир") == "hello world"

        call = mock_post.call_args
        url = call.args[0] if call.args else call.kwargs["url"]
        params = call.kwargs.get("params") or call.kwargs.get("data")
        assert url == "http://localhost:5000/translate"
        assert params["q"] == "привет мир"
        assert params["source"] == "ru"
        assert params["target"] == "en"
        assert "api_key" not in params

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_client_creation_failure(self, mock_libre):
        """Unsupported languages should surface as TranslationError."""
        mock_libre.side_effect = Exception("language not supported")
        translator = TextTranslator(source_lang="xx")

        with pytest.raises(TranslationError, match="not supported"):
            translator.translate("hello")


class TestTextTranslatorShouldSkip:
    """Tests for the _should_skip method."""

    def test_skip_empty_and_whitespace(self):
        """Empty and whitespace-only strings should be skipped."""
        translator = TextTranslator()
        assert translator._should_skip("")
        assert translator._should_skip("  \t")

    def test_skip_single_char(self):
        """Single character should be skipped."""
        translator = TextTranslator()
        assert translator._should_skip("я")

    def test_skip_pure_numbers(self):
        """Pure numbers should be skipped."""
        translator = TextTranslator()
        assert translator._should_skip("2024")

    def test_not_skip_text(self):
        """Normal text should not be skipped."""
        translator = TextTranslator()
        assert not translator._should_skip("да")
        assert not translator._should_skip("отчет 2024")


class TestTextTranslatorTranslate:
    """Tests for single text translation."""

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_translate_success(self, mock_libre):
        """Should return the server translation."""
        mock_libre.return_value.translate.return_value = "hello"

        translator = TextTranslator()
        assert translator.translate("привет") == "hello"
        mock_libre.return_value.translate.assert_called_once_with("привет")

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_skipped_text_makes_no_request(self, mock_libre):
        """Skippable text should come back unchanged without a request."""
        translator = TextTranslator()
        assert translator.translate("42") == "42"
        mock_libre.return_value.translate.assert_not_called()

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_empty_result_falls_back(self, mock_libre):
        """An empty server result should fall back to the original."""
        mock_libre.return_value.translate.return_value = ""

        translator = TextTranslator()
        assert translator.translate("привет") == "привет"

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_server_error_raises(self, mock_libre):
        """Server failures should raise TranslationError."""
        mock_libre.return_value.translate.side_effect = Exception("503")

        translator = TextTranslator()
        with pytest.raises(TranslationError, match="503"):
            translator.translate("привет")

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_long_text_is_chunked(self, mock_libre):
        """Text over the limit should be sent in pieces under the limit."""
        mock_libre.return_value.translate.side_effect = lambda t: t.upper()

        translator = TextTranslator(max_chunk_chars=20)
        text = "Один два три. Четыре пять шесть. Семь восемь."
        result = translator.translate(text)

        calls = [c.args[0] for c in mock_libre.return_value.translate.call_args_list]
        assert len(calls) > 1
        assert all(len(c) <= 20 for c in calls)
        assert result == text.upper()

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_long_text_keeps_paragraphs(self, mock_libre):
        """Paragraph breaks in long text should be preserved."""
        mock_libre.return_value.translate.side_effect = lambda t: t

        translator = TextTranslator(max_chunk_chars=15)
        result = translator.translate("Первый абзац.\n\nВторой абзац.")

        assert result == "Первый абзац.\n\nВторой абзац."


class TestTextTranslatorChunk:
    """Tests for splitting oversized text."""

    def test_packs_sentences(self):
        """Short sentences should be packed together."""
        translator = TextTranslator(max_chunk_chars=12)
        assert translator._chunk("Аа. Бб. Вв. Гг.") == ["Аа. Бб. Вв.", "Гг."]

    def test_splits_long_sentence_on_words(self):
        """A sentence over the limit should be split on whitespace."""
        translator = TextTranslator(max_chunk_chars=10)
        chunks = translator._chunk("слово слово слово")
        assert chunks == ["слово", "слово", "слово"]

    def test_cuts_oversized_word(self):
        """A single word over the limit should be cut."""
        translator = TextTranslator(max_chunk_chars=4)
        assert translator._chunk("абвгдеж") == ["абвг", "деж"]


class TestTextTranslatorBatch:
    """Tests for batch translation."""

    def test_empty_batch(self):
        """Empty input should return empty output."""
        assert TextTranslator().translate_batch([]) == []

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_all_skippable_batch(self, mock_libre):
        """Batch with only skippable items should return them unchanged."""
        result = TextTranslator().translate_batch(["1", "2", "a", ""])
        assert result == ["1", "2", "a", ""]
        mock_libre.return_value.translate_batch.assert_not_called()

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_mixed_batch(self, mock_libre):
        """Skippable items should keep their positions."""
        mock_libre.return_value.translate_batch.return_value = ["hello", "world"]

        result = TextTranslator().translate_batch(["привет", "5", "мир"])

        assert result == ["hello", "5", "world"]
        mock_libre.return_value.translate_batch.assert_called_once_with(
            ["привет", "мир"]
        )

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_batch_with_none_result(self, mock_libre):
        """None results should fall back to the original."""
        mock_libre.return_value.translate_batch.return_value = [None, "world"]

        result = TextTranslator().translate_batch(["привет", "мир"])
        assert result == ["привет", "world"]

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_batch_falls_back_to_individual(self, mock_libre, capsys):
        """A failed batch should be retried one text at a time."""
        mock_libre.return_value.translate_batch.side_effect = Exception("boom")
        mock_libre.return_value.translate.side_effect = ["hello", "world"]

        result = TextTranslator().translate_batch(["привет", "мир"])

        assert result == ["hello", "world"]
        assert "falling back" in capsys.readouterr().out

    @patch("folder_translator.core.text_translator.LibreTranslator")
    def test_individual_failure_raises(self, mock_libre):
        """If individual requests fail too, TranslationError is raised."""
        mock_libre.return_value.translate_batch.side_effect = Exception("boom")
        mock_libre.return_value.translate.side_effect = Exception("down")

        with pytest.raises(TranslationError):
            TextTranslator().translate_batch(["привет"])


class TestSplitSentences:
    """Tests for sentence splitting."""

    def test_keeps_terminators(self):
        """Sentences should keep their punctuation."""
        assert split_sentences("Да. Нет! Может? Ну…  Всё") == [
            "Да.",
            "Нет!",
            "Может?",
            "Ну…",
            "Всё",
        ]

    def test_blank_text(self):
        """Blank text has no sentences."""
        assert split_sentences("   ") == []
