"""Text translation using a LibreTranslate server."""

from __future__ import annotations

import re

from deep_translator import LibreTranslator

_SENTENCE_END = re.compile(r"(?<=[.!?…])\s+")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

# Placeholder handed to LibreTranslator when the server needs no key
NO_API_KEY = "none"


class TranslationError(RuntimeError):
    """Raised when the translation server cannot translate a text."""


def split_sentences(text: str) -> list[str]:
    """
    Split text into sentences, keeping the terminating punctuation.

    Args:
        text: Text to split

    Returns:
        Non-empty sentences in order
    """
    return [s.strip() for s in _SENTENCE_END.split(text) if s.strip()]


class TextTranslator:
    """
    Handles text translation through a locally hosted LibreTranslate server.

    Texts longer than the server accepts are split into chunks and
    translated piece by piece. Batch translation falls back to
    individual requests if the batch call fails.
    """

    def __init__(
        self,
        source_lang: str = "ru",
        target_lang: str = "en",
        base_url: str = "http://localhost:5000/",
        api_key: str | None = None,
        max_chunk_chars: int = 4500,
    ):
        self.source_lang = source_lang
        self.target_lang = target_lang
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.api_key = api_key
        self.max_chunk_chars = max_chunk_chars
        self._client: LibreTranslator | None = None

    @property
    def client(self) -> LibreTranslator:
        """The LibreTranslate client, created on first use."""
        if self._client is None:
            try:
                # LibreTranslator refuses to start without a key, even though
                # self-hosted servers usually run with keys disabled
                client = LibreTranslator(
                    source=self.source_lang,
                    target=self.target_lang,
                    api_key=self.api_key or NO_API_KEY,
                    use_free_api=False,
                    custom_url=self.base_url,
                )
            except Exception as e:
                raise TranslationError(
                    f"Cannot create translator {self.source_lang} -> "
                    f"{self.target_lang}: {e}"
                ) from e
            # the key is only sent when set
            client.api_key = self.api_key
            self._client = client
        return self._client

    def translate(self, text: str) -> str:
        """
        Translate a single text string.

        Raises:
            TranslationError: If the server fails to translate the text
        """
        if self._should_skip(text):
            return text

        if len(text) <= self.max_chunk_chars:
            return self._request(text)

        return self._translate_long(text)

    def translate_batch(self, texts: list[str]) -> list[str]:
        """
        Translate a batch of texts.

        Short texts (single characters, pure numbers) are passed through
        unchanged without a request.

        Args:
            texts: List of strings to translate

        Returns:
            List of translated strings in the same order
        """
        if not texts:
            return []

        translatable_indices = []
        translatable_texts = []
        results = [""] * len(texts)

        for i, text in enumerate(texts):
            if self._should_skip(text):
                results[i] = text
            elif len(text) > self.max_chunk_chars:
                results[i] = self._translate_long(text)
            else:
                translatable_indices.append(i)
                translatable_texts.append(text)

        if not translatable_texts:
            return results

        # Try batch first, fall back to individual if needed
        try:
            translated = self.client.translate_batch(translatable_texts)
            for idx, trans in zip(translatable_indices, translated):
                results[idx] = trans if trans else texts[idx]
        except TranslationError:
            raise
        except Exception as e:
            print(f"Batch translation failed ({e}), falling back to individual...")
            for idx, text in zip(translatable_indices, translatable_texts):
                results[idx] = self._request(text)

        return results

    def _request(self, text: str) -> str:
        """Send one text to the server."""
        try:
            result = self.client.translate(text)
        except TranslationError:
            raise
        except Exception as e:
            raise TranslationError(f"Translation failed: {e}") from e
        return str(result) if result else text

    def _translate_long(self, text: str) -> str:
        """Translate text that exceeds the request size limit."""
        paragraphs = _PARAGRAPH_BREAK.split(text)
        translated = []
        for paragraph in paragraphs:
            chunks = self._chunk(paragraph)
            translated.append(
                " ".join(
                    chunk if self._should_skip(chunk) else self._request(chunk)
                    for chunk in chunks
                )
            )
        return "\n\n".join(translated)

    def _chunk(self, text: str) -> list[str]:
        """
        Split text into pieces no longer than max_chunk_chars.

        Sentences are packed greedily; a sentence that is still too long
        is split on whitespace, and a single oversized word is cut hard.
        """
        limit = self.max_chunk_chars
        chunks: list[str] = []
        current = ""

        for sentence in split_sentences(text):
            pieces = [sentence] if len(sentence) <= limit else self._split_words(sentence)
            for piece in pieces:
                if not current:
                    current = piece
                elif len(current) + 1 + len(piece) <= limit:
                    current = f"{current} {piece}"
                else:
                    chunks.append(current)
                    current = piece

        if current:
            chunks.append(current)
        return chunks

    def _split_words(self, sentence: str) -> list[str]:
        limit = self.max_chunk_chars
        pieces: list[str] = []
        current = ""
        for word in sentence.split():
            while len(word) > limit:
                if current:
                    pieces.append(current)
                    current = ""
                pieces.append(word[:limit])
                word = word[limit:]
            if not current:
                current = word
            elif len(current) + 1 + len(word) <= limit:
                current = f"{current} {word}"
            else:
                pieces.append(current)
                current = word
        if current:
            pieces.append(current)
        return pieces

    def _should_skip(self, text: str) -> bool:
        """Check if text should be skipped (too short or just numbers)."""
        stripped = text.strip()
        return len(stripped) < 2 or stripped.isdigit()
