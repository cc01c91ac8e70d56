"""Text processing utilities for OCR output."""

import re
import unicodedata
from typing import Iterable, List

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0e-\x1f\x7f]')


class TextProcessor:
    """Text processing utilities for OCR output"""

    @staticmethod
    def clean_cell_text(text: str) -> str:
        """Clean table cell text; applying it twice gives the same result."""
        text = _CONTROL_CHARS.sub('', text)
        return re.sub(r'\s+', ' ', text).strip()

    @staticmethod
    def normalize_lines(text: str) -> str:
        """Normalize line breaks and in-line spacing while keeping the line structure."""
        text = re.sub(r'\r\n|\r', '\n', text)
        text = re.sub(r'\n+', '\n', text)
        text = re.sub(r'[ \t]+', ' ', text)
        return text.strip()

    @staticmethod
    def non_empty_lines(text: str) -> List[str]:
        return [line.strip() for line in text.splitlines() if line.strip()]

    @staticmethod
    def words(text: str) -> List[str]:
        return text.split()

    @staticmethod
    def is_punctuation(char: str) -> bool:
        return unicodedata.category(char).startswith('P')

    @staticmethod
    def is_all_caps(text: str) -> bool:
        """Uppercase letters, whitespace and punctuation only, with at least one letter."""
        if not any(c.isalpha() for c in text):
            return False
        return all(c.isupper() or c.isspace() or TextProcessor.is_punctuation(c) for c in text)

    @staticmethod
    def is_title_case_word(word: str) -> bool:
        return word[:1].isupper() and all(c.islower() for c in word[1:])

    @staticmethod
    def starts_capitalized(word: str) -> bool:
        return word[:1].isupper()

    @staticmethod
    def contains_any(text: str, needles: Iterable[str]) -> bool:
        return any(needle in text for needle in needles)

    @staticmethod
    def keyword_pattern(keywords: Iterable[str]) -> 're.Pattern[str]':
        """Case-insensitive whole-word pattern for a keyword list; longest keywords win."""
        ordered = sorted(set(keywords), key=len, reverse=True)
        alternation = '|'.join(re.escape(k) for k in ordered)
        return re.compile(r'(?<!\w)(?:' + alternation + r')(?!\w)', re.IGNORECASE)

    @staticmethod
    def context_window(target: str, text: str, radius: int) -> str:
        """Text surrounding the first occurrence of ``target``, ``radius`` characters each side."""
        index = text.find(target)
        if index < 0:
            return ''
        start = max(0, index - radius)
        end = min(len(text), index + len(target) + radius)
        return text[start:end]
