"""Keyword-voting document classifier.

Assigns one of the coarse ``DocumentType`` categories by counting how many
DISTINCT indicator keywords of each candidate type occur in the text.
Keywords are matched on word boundaries, case-insensitively, so "rent"
does not fire on "current" and repeated mentions do not inflate a score.

Ties are broken by a fixed priority order (lease, loan agreement, privacy
policy, terms of service, contract): the specific types outrank the generic
``contract`` bucket whose keywords ("agreement", "party") appear in almost
every legal text. A document with no indicator at all is ``other``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .models import DocumentType

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Indicator keywords
# ---------------------------------------------------------------------------

# Declaration order is the tie-break priority
_TYPE_KEYWORDS: dict[DocumentType, tuple[str, ...]] = {
    DocumentType.LEASE: (
        "lease",
        "lease agreement",
        "rental agreement",
        "rental",
        "tenancy",
        "landlord",
        "tenant",
        "lessee",
        "lessor",
        "premises",
        "rent",
        "monthly rent",
        "security deposit",
        "lease term",
    ),
    DocumentType.LOAN_AGREEMENT: (
        "loan",
        "loan agreement",
        "promissory note",
        "borrower",
        "lender",
        "principal",
        "interest rate",
        "loan amount",
        "repayment",
        "payment schedule",
        "collateral",
    ),
    DocumentType.PRIVACY_POLICY: (
        "privacy policy",
        "personal information",
        "personal data",
        "data collection",
        "cookies",
        "we collect",
        "your information",
        "data protection",
        "opt out",
    ),
    DocumentType.TERMS_OF_SERVICE: (
        "terms of service",
        "terms and conditions",
        "terms of use",
        "user agreement",
        "acceptable use",
        "by using this service",
        "these terms",
        "your account",
    ),
    DocumentType.CONTRACT: (
        "contract",
        "agreement",
        "party",
        "parties",
        "whereas",
        "consideration",
        "hereinafter",
        "in witness whereof",
    ),
}

# Sub-type hints, checked in order; the first hit wins
_SUB_TYPE_KEYWORDS: dict[DocumentType, tuple[tuple[str, tuple[str, ...]], ...]] = {
    DocumentType.LEASE: (
        ("residential", ("residential", "apartment", "dwelling", "residence")),
        ("commercial", ("commercial", "office space", "retail", "business premises")),
    ),
    DocumentType.CONTRACT: (
        ("employment", ("employment", "employee", "employer", "salary")),
        ("service", ("services", "service provider", "statement of work", "consultant")),
    ),
}


def _keyword_regex(keyword: str) -> re.Pattern:
    body = r"\s+".join(re.escape(word) for word in keyword.split())
    return re.compile(rf"\b{body}\b", re.IGNORECASE)


_COMPILED_KEYWORDS: dict[DocumentType, tuple[tuple[str, re.Pattern], ...]] = {
    doc_type: tuple((kw, _keyword_regex(kw)) for kw in keywords)
    for doc_type, keywords in _TYPE_KEYWORDS.items()
}

_COMPILED_SUB_TYPES: dict[DocumentType, tuple[tuple[str, tuple[re.Pattern, ...]], ...]] = {
    doc_type: tuple(
        (label, tuple(_keyword_regex(kw) for kw in keywords)) for label, keywords in entries
    )
    for doc_type, entries in _SUB_TYPE_KEYWORDS.items()
}


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


@dataclass
class ClassificationResult:
    """Result of classifying a single document.

    Attributes:
        document_type: Winning document type.
        confidence: Share of the winning type's keywords present (0.0 to 1.0).
        indicators: Keywords of the winning type found in the text.
        scores: Distinct keyword count per candidate type.
        sub_type: Finer label such as ``residential`` or ``employment``.
    """

    document_type: DocumentType
    confidence: float = 0.0
    indicators: list[str] = field(default_factory=list)
    scores: dict[str, int] = field(default_factory=dict)
    sub_type: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "document_type": self.document_type.value,
            "confidence": round(self.confidence, 4),
            "indicators": self.indicators,
            "scores": self.scores,
            "sub_type": self.sub_type,
        }


class DocumentClassifier:
    """Classify legal documents by keyword voting.

    Example::

        classifier = DocumentClassifier()
        result = classifier.classify("This lease agreement is between...")
        print(result.document_type)  # DocumentType.LEASE
        print(result.indicators)     # ['lease', 'lease agreement', ...]
    """

    def classify(self, text: Optional[str]) -> ClassificationResult:
        """Classify a single document.

        Args:
            text: Raw document text. ``None`` or empty gives ``other``.

        Returns:
            ClassificationResult with the winning type and its evidence.
        """
        if not text or not text.strip():
            return ClassificationResult(document_type=DocumentType.OTHER)

        matched: dict[DocumentType, list[str]] = {}
        for doc_type, keywords in _COMPILED_KEYWORDS.items():
            matched[doc_type] = [kw for kw, regex in keywords if regex.search(text)]

        scores = {doc_type.value: len(hits) for doc_type, hits in matched.items()}

        best_type = DocumentType.OTHER
        best_score = 0
        for doc_type, hits in matched.items():
            # Strictly greater keeps the earlier type on ties
            if len(hits) > best_score:
                best_type = doc_type
                best_score = len(hits)

        if best_type == DocumentType.OTHER:
            logger.debug("No document type indicators found")
            return ClassificationResult(document_type=DocumentType.OTHER, scores=scores)

        result = ClassificationResult(
            document_type=best_type,
            confidence=best_score / len(_TYPE_KEYWORDS[best_type]),
            indicators=matched[best_type],
            scores=scores,
            sub_type=self._detect_sub_type(text, best_type),
        )
        logger.debug(
            "Classified document as %s (score=%d, indicators=%s)",
            best_type.value,
            best_score,
            result.indicators,
        )
        return result

    def classify_batch(self, texts: list[str]) -> list[ClassificationResult]:
        """Classify multiple documents."""
        return [self.classify(text) for text in texts]

    @staticmethod
    def _detect_sub_type(text: str, doc_type: DocumentType) -> Optional[str]:
        for label, regexes in _COMPILED_SUB_TYPES.get(doc_type, ()):
            if any(regex.search(text) for regex in regexes):
                return label
        return None


def classify_document(text: Optional[str]) -> DocumentType:
    """Return only the document type for ``text``."""
    return DocumentClassifier().classify(text).document_type
