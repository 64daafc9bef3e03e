"""Text preprocessing for legal documents.

Provides cleaning, offset-preserving normalization, sentence-window lookup
and tokenization tailored to legal text. Uses pure Python with regex-based
processing.

Two levels of normalization are offered:

- ``TextPreprocessor.clean`` rewrites extracted text (Unicode NFC, OCR
  artifact removal, whitespace collapsing) and is meant for raw files.
- ``TextPreprocessor.normalize`` only swaps typographic characters for their
  ASCII equivalents one-for-one, so character offsets into the caller's
  text stay valid. The analyzers run on this form.
"""

from __future__ import annotations

import re
import unicodedata

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

STOP_WORDS: frozenset[str] = frozenset(
    """
    a an the and or but nor in on at to for of with by from as into onto under
    over up out upon per via about is was are were be been being have has had
    do does did will would could should may might shall can must so if then
    than that this these those it its he she they them their his her our your
    we you who whom which what where when how all each every both more most
    other some such any only own same too very just also here there herein
    hereby thereof
    """.split()
)

# One-for-one replacements; keeps offsets stable
_TYPOGRAPHIC_MAP = str.maketrans(
    {
        "\u201c": '"',
        "\u201d": '"',
        "\u2018": "'",
        "\u2019": "'",
        "\u2013": "-",
        "\u2014": "-",
        "\u2011": "-",
        "\xa0": " ",
        "\u2009": " ",
        "\u202f": " ",
    }
)

# Regex patterns for OCR artifact cleanup
_OCR_ARTIFACT_PATTERNS: list[tuple[re.Pattern, str]] = [
    # Stray pipe characters often from table borders
    (re.compile(r"\|"), " "),
    # Repeated dots (table of contents leaders)
    (re.compile(r"\.{4,}"), "..."),
    # Multiple spaces
    (re.compile(r"[ \t]{2,}"), " "),
    # Broken hyphenation across lines
    (re.compile(r"(\w)-[ \t]*\n[ \t]*(\w)"), r"\1\2"),
]

# Characters that end a sentence-like unit when locating context
_WINDOW_DELIMITERS = ".!?;\n"

_WORD_RE = re.compile(r"[a-z0-9]+")


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def sentence_window(text: str, start: int, end: int, radius: int = 120) -> str:
    """Return the sentence-like span of ``text`` around ``[start, end)``.

    The span stops at the nearest delimiter on each side and never reaches
    further than ``radius`` characters, so the cost per call is bounded.
    """
    lo = max(0, start - radius)
    head = text[lo:start]
    cut = max(head.rfind(c) for c in _WINDOW_DELIMITERS)
    if cut >= 0:
        lo += cut + 1

    hi = min(len(text), end + radius)
    tail = text[end:hi]
    stops = [p for p in (tail.find(c) for c in _WINDOW_DELIMITERS) if p >= 0]
    if stops:
        hi = end + min(stops)

    return text[lo:hi]


def excerpt(text: str, limit: int) -> str:
    """Truncate ``text`` to ``limit`` characters, marking the cut."""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def tokenize(text: str) -> list[str]:
    """Lowercase alphanumeric tokens; punctuation and hyphens split words."""
    return _WORD_RE.findall(text.lower())


def content_tokens(text: str) -> tuple[str, ...]:
    """Tokens of ``text`` with stop words removed."""
    return tuple(t for t in tokenize(text) if t not in STOP_WORDS)


# ---------------------------------------------------------------------------
# Text Preprocessor
# ---------------------------------------------------------------------------


class TextPreprocessor:
    """Clean and segment legal text.

    Example::

        preprocessor = TextPreprocessor()
        cleaned = preprocessor.clean(raw_text)
        text = preprocessor.normalize(pasted_text)
    """

    def __init__(self, fix_ocr: bool = True, normalize_unicode: bool = True) -> None:
        """Initialize the preprocessor.

        Args:
            fix_ocr: Remove common OCR artifacts (pipes, broken hyphens).
            normalize_unicode: Apply NFC Unicode normalization in ``clean``.
        """
        self.fix_ocr = fix_ocr
        self.normalize_unicode = normalize_unicode

    def normalize(self, text: str | None) -> str:
        """Replace typographic quotes, dashes and spaces one-for-one.

        The result has the same length as the input, so offsets computed
        on it point into the original text.
        """
        if not text:
            return ""
        return text.translate(_TYPOGRAPHIC_MAP)

    def clean(self, text: str | None) -> str:
        """Apply all configured cleaning steps to the text.

        Processing order:
        1. Unicode normalization (NFC) and typographic replacements
        2. OCR artifact removal
        3. Whitespace normalization

        Args:
            text: Raw document text.

        Returns:
            Cleaned text ready for analysis.
        """
        if not text:
            return ""

        if self.normalize_unicode:
            text = unicodedata.normalize("NFC", text)
        text = text.translate(_TYPOGRAPHIC_MAP)
        text = text.replace("\u2026", "...")

        if self.fix_ocr:
            for pattern, replacement in _OCR_ARTIFACT_PATTERNS:
                text = pattern.sub(replacement, text)

        # Collapse multiple blank lines into at most two (preserve paragraphs)
        text = re.sub(r"\n{3,}", "\n\n", text)
        text = re.sub(r"[ \t]+", " ", text)
        lines = [line.strip() for line in text.split("\n")]
        return "\n".join(lines).strip()

