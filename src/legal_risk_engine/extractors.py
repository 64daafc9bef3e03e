"""Legal metadata extraction.

Pulls the parties, dates, monetary amounts and governing jurisdiction out
of free-form legal text with regex patterns, and tags the document type
with the keyword classifier. No ML model is involved; everything works on
plain strings.

Every collection preserves first-occurrence order and never repeats the
exact same string. Degenerate input (``None``, empty, whitespace) yields
empty collections, ``other`` and ``unknown`` rather than an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .classifier import DocumentClassifier
from .models import DocumentType, ExtractedLegalMetadata

logger = logging.getLogger(__name__)

UNKNOWN_JURISDICTION = "unknown"


# ---------------------------------------------------------------------------
# Shared pattern fragments
# ---------------------------------------------------------------------------

_ROLE_WORDS: tuple[str, ...] = (
    "landlord",
    "tenant",
    "lessor",
    "lessee",
    "lender",
    "borrower",
    "buyer",
    "seller",
    "employer",
    "employee",
    "licensor",
    "licensee",
    "contractor",
    "client",
    "guarantor",
)

# Words that never stand alone as a party name
_NON_NAME_WORDS: frozenset[str] = frozenset(
    _ROLE_WORDS
    + (
        "the",
        "and",
        "this",
        "that",
        "party",
        "parties",
        "agreement",
        "lease",
        "contract",
        "policy",
        "terms",
        "note",
        "company",
    )
)

# Capitalized words joined by spaces or tabs; an initial ("J.") counts as a word
_NAME_WORD = r"(?:[A-Z]\.|[A-Z][A-Za-z'\-]+)"
_NAME = (
    rf"{_NAME_WORD}(?:[ \t]+{_NAME_WORD}){{0,5}}"
    r"(?:,?[ \t]+(?:Inc|LLC|Ltd|Corp|LLP|PLC)\b\.?)?"
)

_MONTHS = (
    r"(?:January|February|March|April|May|June|July|August|September|"
    r"October|November|December|"
    r"Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)"
)

_NUMBER = r"(?:\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)"
_MAGNITUDE = r"(?:[ \t]*(?:million|billion|thousand))?"


# ---------------------------------------------------------------------------
# Jurisdiction lexicon
# ---------------------------------------------------------------------------

_US_STATES: dict[str, str] = {
    "alabama": "US-AL",
    "alaska": "US-AK",
    "arizona": "US-AZ",
    "arkansas": "US-AR",
    "california": "US-CA",
    "colorado": "US-CO",
    "connecticut": "US-CT",
    "delaware": "US-DE",
    "florida": "US-FL",
    "georgia": "US-GA",
    "hawaii": "US-HI",
    "idaho": "US-ID",
    "illinois": "US-IL",
    "indiana": "US-IN",
    "iowa": "US-IA",
    "kansas": "US-KS",
    "kentucky": "US-KY",
    "louisiana": "US-LA",
    "maine": "US-ME",
    "maryland": "US-MD",
    "massachusetts": "US-MA",
    "michigan": "US-MI",
    "minnesota": "US-MN",
    "mississippi": "US-MS",
    "missouri": "US-MO",
    "montana": "US-MT",
    "nebraska": "US-NE",
    "nevada": "US-NV",
    "new hampshire": "US-NH",
    "new jersey": "US-NJ",
    "new mexico": "US-NM",
    "new york": "US-NY",
    "north carolina": "US-NC",
    "north dakota": "US-ND",
    "ohio": "US-OH",
    "oklahoma": "US-OK",
    "oregon": "US-OR",
    "pennsylvania": "US-PA",
    "rhode island": "US-RI",
    "south carolina": "US-SC",
    "south dakota": "US-SD",
    "tennessee": "US-TN",
    "texas": "US-TX",
    "utah": "US-UT",
    "vermont": "US-VT",
    "virginia": "US-VA",
    "washington": "US-WA",
    "west virginia": "US-WV",
    "wisconsin": "US-WI",
    "wyoming": "US-WY",
    "district of columbia": "US-DC",
}

_OTHER_JURISDICTIONS: dict[str, str] = {
    "united states": "US",
    "united states of america": "US",
    "united kingdom": "UK",
    "england": "UK",
    "england and wales": "UK",
    "wales": "UK",
    "scotland": "UK",
    "northern ireland": "UK",
    "canada": "CA",
    "ontario": "CA-ON",
    "quebec": "CA-QC",
    "british columbia": "CA-BC",
    "alberta": "CA-AB",
    "manitoba": "CA-MB",
    "nova scotia": "CA-NS",
    "saskatchewan": "CA-SK",
    "australia": "AU",
    "new zealand": "NZ",
    "ireland": "IE",
    "germany": "DE",
    "france": "FR",
    "singapore": "SG",
    "india": "IN",
}

JURISDICTION_LEXICON: dict[str, str] = {**_US_STATES, **_OTHER_JURISDICTIONS}

# Longest names first so "west virginia" wins over "virginia"
_PLACE = "|".join(
    r"\s+".join(re.escape(word) for word in name.split())
    for name in sorted(JURISDICTION_LEXICON, key=len, reverse=True)
)

_GOVERNING_LAW_RE = re.compile(
    rf"""
    \blaws?\s+of\s+(?:the\s+)?(?:(?:state|commonwealth|province)\s+of\s+)?(?P<laws>{_PLACE})\b
    |\b(?:state|commonwealth|province)\s+of\s+(?P<state>{_PLACE})\b
    |\bcourts?\s+(?:located\s+)?(?:of|in)\s+(?:the\s+)?(?:(?:state|province)\s+of\s+)?(?P<courts>{_PLACE})\b
    |\b(?P<law>{_PLACE})\s+law\b
    """,
    re.IGNORECASE | re.VERBOSE,
)

# Fallback when no governing-law phrase names a place
_TERMINOLOGY_HINTS: tuple[tuple[str, re.Pattern], ...] = (
    ("US", re.compile(r"\bfederal\s+court\b|\bu\.s\.\s+district\s+court\b", re.IGNORECASE)),
    (
        "UK",
        re.compile(
            r"\bsolicitors?\b|\bbarristers?\b|\bcrown\s+court\b|\bhigh\s+court\s+of\s+justice\b",
            re.IGNORECASE,
        ),
    ),
    ("CA", re.compile(r"\bsupreme\s+court\s+of\s+canada\b|\bprovincial\s+court\b", re.IGNORECASE)),
)


@dataclass(frozen=True)
class JurisdictionMatch:
    """How a jurisdiction was determined.

    Attributes:
        code: Jurisdiction code such as ``US-CA`` or ``unknown``.
        indicator: The text that decided it, if any.
        source: ``governing_law``, ``terminology`` or ``none``.
    """

    code: str
    indicator: Optional[str] = None
    source: str = "none"

    def to_dict(self) -> dict:
        return {"code": self.code, "indicator": self.indicator, "source": self.source}


# ---------------------------------------------------------------------------
# Metadata Extractor
# ---------------------------------------------------------------------------


class MetadataExtractor:
    """Extract parties, dates, amounts and jurisdiction from legal text.

    Example::

        extractor = MetadataExtractor()
        metadata = extractor.extract(document_text)
        print(metadata.document_type, metadata.parties, metadata.jurisdiction)

    Args:
        classifier: Document classifier. A keyword classifier by default.
    """

    _PARTY_PATTERNS: list[re.Pattern] = [
        # "landlord John Smith" / "Tenant: Jane Doe"
        re.compile(
            r"\b(?i:" + "|".join(_ROLE_WORDS) + r")\b[ \t]*[:,]?[ \t]*"
            rf"(?:(?i:the)[ \t]+)?({_NAME})"
        ),
        # "between Acme Corp ("Seller") and Beta LLC"
        re.compile(
            rf"\b(?i:between)[ \t]+(?:(?i:the)[ \t]+)?({_NAME})"
            r"(?:[ \t]*\([^)\n]{0,60}\))?,?[ \t]+and[ \t]+"
            rf"(?:(?i:the)[ \t]+)?({_NAME})"
        ),
        # "party of the first part: John Smith"
        re.compile(
            r"\b(?i:party[ \t]+of[ \t]+the[ \t]+(?:first|second)[ \t]+part)"
            rf"[ \t]*[:,]?[ \t]*({_NAME})"
        ),
        # 'Acme Corp. (the "Company")' / 'Jane Doe (hereinafter "Tenant")'
        re.compile(
            rf"({_NAME})[ \t]*\((?:(?i:the|hereinafter)[ \t]+)?"
            r"(?:(?i:referred[ \t]+to[ \t]+as)[ \t]+)?(?:(?i:the)[ \t]+)?[\"'][A-Za-z \-]{1,40}[\"']\)"
        ),
    ]

    _DATE_PATTERNS: list[re.Pattern] = [
        # "01/15/2024" / "1-5-2024"
        re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b"),
        re.compile(r"\b\d{1,2}-\d{1,2}-\d{4}\b"),
        # "2024-01-15"
        re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
        # "December 31, 2024" / "Dec. 1st 2024"
        re.compile(
            rf"\b{_MONTHS}\.?[ \t]+\d{{1,2}}(?:st|nd|rd|th)?,?[ \t]+\d{{4}}\b",
            re.IGNORECASE,
        ),
        # "31 December 2024" / "1st of May, 2024"
        re.compile(
            rf"\b\d{{1,2}}(?:st|nd|rd|th)?[ \t]+(?:of[ \t]+)?{_MONTHS}\.?,?[ \t]+\d{{4}}\b",
            re.IGNORECASE,
        ),
    ]

    _AMOUNT_PATTERNS: list[re.Pattern] = [
        # "$1,500.00" / "€2 million"
        re.compile(rf"[$£€¥][ \t]?{_NUMBER}{_MAGNITUDE}\b", re.IGNORECASE),
        # "USD 500"
        re.compile(rf"\b(?:USD|GBP|EUR|CAD|AUD|JPY)[ \t]?{_NUMBER}{_MAGNITUDE}\b"),
        # "3000 dollars"
        re.compile(
            rf"(?<![\d,.]){_NUMBER}{_MAGNITUDE}[ \t]+(?:dollars?|pounds?|euros?)\b",
            re.IGNORECASE,
        ),
    ]

    def __init__(self, classifier: Optional[DocumentClassifier] = None) -> None:
        self.classifier = classifier or DocumentClassifier()

    def extract(self, text: Optional[str]) -> ExtractedLegalMetadata:
        """Extract all metadata from the given text.

        Args:
            text: Document text to analyze.

        Returns:
            ExtractedLegalMetadata; never raises for degenerate input.
        """
        if not text or not text.strip():
            return ExtractedLegalMetadata(document_type=DocumentType.OTHER)

        metadata = ExtractedLegalMetadata(
            document_type=self.classifier.classify(text).document_type,
            parties=tuple(self.extract_parties(text)),
            dates=tuple(self.extract_dates(text)),
            amounts=tuple(self.extract_amounts(text)),
            jurisdiction=self.detect_jurisdiction(text),
        )
        logger.debug(
            "Extracted metadata: type=%s parties=%d dates=%d amounts=%d jurisdiction=%s",
            metadata.document_type.value,
            len(metadata.parties),
            len(metadata.dates),
            len(metadata.amounts),
            metadata.jurisdiction,
        )
        return metadata

    def extract_parties(self, text: str) -> list[str]:
        """Extract party names in order of first appearance."""
        found: list[tuple[int, str]] = []
        for pattern in self._PARTY_PATTERNS:
            for match in pattern.finditer(text):
                for index in range(1, (match.lastindex or 0) + 1):
                    raw = match.group(index)
                    if not raw:
                        continue
                    name = self._clean_party(raw)
                    if name:
                        found.append((match.start(index), name))
        return self._ordered_unique(found)

    def extract_dates(self, text: str) -> list[str]:
        """Extract date strings as written, in order of appearance."""
        return self._ordered_unique(self._collect(self._DATE_PATTERNS, text))

    def extract_amounts(self, text: str) -> list[str]:
        """Extract monetary amounts as written, in order of appearance."""
        return self._ordered_unique(self._collect(self._AMOUNT_PATTERNS, text))

    def detect_jurisdiction(self, text: str) -> str:
        """Return the governing jurisdiction code, or ``unknown``."""
        return self.detect_jurisdiction_details(text).code

    def detect_jurisdiction_details(self, text: Optional[str]) -> JurisdictionMatch:
        """Resolve the jurisdiction and report the phrase that decided it.

        The earliest governing-law phrase naming a known place wins. When
        there is none, the earliest jurisdiction-specific legal term is
        used instead.
        """
        if not text:
            return JurisdictionMatch(code=UNKNOWN_JURISDICTION)

        match = _GOVERNING_LAW_RE.search(text)
        if match:
            place = next(value for value in match.groupdict().values() if value)
            key = " ".join(place.lower().split())
            return JurisdictionMatch(
                code=JURISDICTION_LEXICON[key],
                indicator=" ".join(match.group().split()),
                source="governing_law",
            )

        best: Optional[tuple[int, str, str]] = None
        for code, pattern in _TERMINOLOGY_HINTS:
            hint = pattern.search(text)
            if hint and (best is None or hint.start() < best[0]):
                best = (hint.start(), code, hint.group())
        if best:
            return JurisdictionMatch(code=best[1], indicator=best[2], source="terminology")

        return JurisdictionMatch(code=UNKNOWN_JURISDICTION)

    @staticmethod
    def _collect(patterns: list[re.Pattern], text: str) -> list[tuple[int, str]]:
        return [
            (match.start(), match.group().strip())
            for pattern in patterns
            for match in pattern.finditer(text)
        ]

    @staticmethod
    def _ordered_unique(found: list[tuple[int, str]]) -> list[str]:
        seen: set[str] = set()
        result: list[str] = []
        for _, value in sorted(found, key=lambda item: item[0]):
            if value not in seen:
                seen.add(value)
                result.append(value)
        return result

    @staticmethod
    def _clean_party(raw: str) -> Optional[str]:
        words = raw.strip().rstrip(",. ").split()
        # Drop leading articles and role labels ("The Tenant Jane Doe")
        while words and words[0].lower().rstrip(".") in _NON_NAME_WORDS:
            words = words[1:]
        if not words or words[-1].lower() in _NON_NAME_WORDS:
            return None
        name = " ".join(words)
        return name if len(name) > 2 else None
