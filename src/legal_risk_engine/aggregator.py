"""Risk aggregation: deduplication, scoring, summary and recommendations.

Everything here is a pure function of its arguments. ``RiskAggregator``
bundles them with a catalog and settings so the analyzer can turn a raw
list of findings into a ``RiskAssessmentResult`` in one call.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Optional

from .config import DEFAULT_SETTINGS, EngineSettings
from .models import DocumentType, Risk, RiskAssessmentResult, RiskCategory, Severity
from .patterns import PatternCatalog
from .preprocessing import content_tokens

logger = logging.getLogger(__name__)

NO_RISKS_SUMMARY = "No significant risks identified in this document."

# Scaffolding words of clause-level descriptions; not part of any concept
_SIGNATURE_IGNORED: frozenset[str] = frozenset({"found", "clause"})
_QUOTED_RE = re.compile(r'"[^"]*"')


# ---------------------------------------------------------------------------
# Recommendation tables
# ---------------------------------------------------------------------------

_DOCUMENT_NOUNS: dict[DocumentType, str] = {
    DocumentType.CONTRACT: "contract",
    DocumentType.LEASE: "lease",
    DocumentType.TERMS_OF_SERVICE: "terms of service",
    DocumentType.PRIVACY_POLICY: "privacy policy",
    DocumentType.LOAN_AGREEMENT: "loan agreement",
    DocumentType.OTHER: "document",
}

_SCORE_BANNERS: dict[Severity, Optional[str]] = {
    Severity.HIGH: (
        "This {noun} contains high-risk terms. Have a qualified legal professional "
        "review it before signing."
    ),
    Severity.MEDIUM: (
        "This {noun} contains moderate risks. Review the flagged terms carefully "
        "before signing."
    ),
    Severity.LOW: None,
}

_CATEGORY_ADVICE: dict[RiskCategory, str] = {
    RiskCategory.FINANCIAL: (
        "Review every payment term, fee and financial obligation in this {noun}."
    ),
    RiskCategory.LEGAL: (
        "Check the liability, dispute resolution and modification terms of this "
        "{noun} with a lawyer."
    ),
    RiskCategory.PRIVACY: (
        "Review how your personal data is collected and shared under this {noun}."
    ),
    RiskCategory.OPERATIONAL: (
        "Track the deadlines and ongoing obligations this {noun} imposes on you."
    ),
}

_DOCUMENT_ADVICE: dict[DocumentType, str] = {
    DocumentType.LEASE: (
        "Before signing the lease, confirm the rent amount, security deposit terms, "
        "renewal conditions and move-out obligations."
    ),
    DocumentType.LOAN_AGREEMENT: (
        "Compare the total cost of the loan, including interest and fees, with other offers."
    ),
    DocumentType.PRIVACY_POLICY: (
        "Check which privacy settings and opt-out choices are available to you."
    ),
    DocumentType.TERMS_OF_SERVICE: (
        "Keep a copy of the terms you accept and watch for notices of changes."
    ),
    DocumentType.CONTRACT: (
        "Make sure every obligation in the contract is clearly defined and mutually agreed."
    ),
    DocumentType.OTHER: (
        "Keep a signed copy of this document and consult a legal professional if "
        "anything is unclear."
    ),
}

_NO_RISKS_NOTICE = (
    "No significant risks were detected in this {noun}. Still read it in full before signing."
)


# ---------------------------------------------------------------------------
# Deduplication
# ---------------------------------------------------------------------------


def normalize_description(text: Optional[str]) -> tuple[str, ...]:
    """Lowercase tokens of ``text`` without punctuation or stop words."""
    return content_tokens(text or "")


def description_similarity(a: Optional[str], b: Optional[str]) -> float:
    """Jaccard overlap of the normalized word sets of two descriptions."""
    left = set(normalize_description(a))
    right = set(normalize_description(b))
    if not left and not right:
        return 1.0
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)


def _contains_concept(tokens: Sequence[str], concept: Sequence[str]) -> bool:
    size = len(concept)
    for i in range(len(tokens) - size + 1):
        if all(tokens[i + j].startswith(concept[j]) for j in range(size)):
            return True
    return False


def risk_signature(
    risk: Risk, catalog: Optional[PatternCatalog] = None
) -> Optional[tuple[str, ...]]:
    """Concept signature of a risk, used to spot the same risk phrased differently.

    The concept of the risk's own pattern wins. Otherwise the description is
    searched, quoted clause titles left out, for the first catalog concept
    whose words appear contiguously (each as a word prefix).
    """
    catalog = catalog or PatternCatalog.default()
    if risk.pattern_id:
        pattern = catalog.get(risk.pattern_id)
        if pattern is not None and pattern.concept:
            return tuple(pattern.concept.split())

    tokens = [
        token
        for token in normalize_description(_QUOTED_RE.sub(" ", risk.description or ""))
        if token not in _SIGNATURE_IGNORED
    ]
    for concept in catalog.concepts():
        if _contains_concept(tokens, concept):
            return concept
    return None


def _is_duplicate(
    first: tuple[Risk, Optional[tuple[str, ...]], tuple[str, ...]],
    second: tuple[Risk, Optional[tuple[str, ...]], tuple[str, ...]],
    threshold: float,
) -> bool:
    risk_a, sig_a, tokens_a = first
    risk_b, sig_b, tokens_b = second
    if risk_a.category != risk_b.category:
        return False
    if sig_a is not None and sig_a == sig_b:
        return True
    if tokens_a == tokens_b:
        return True
    if not tokens_a or not tokens_b:
        return False
    joined_a = f" {' '.join(tokens_a)} "
    joined_b = f" {' '.join(tokens_b)} "
    if joined_a in joined_b or joined_b in joined_a:
        return True
    set_a, set_b = set(tokens_a), set(tokens_b)
    return len(set_a & set_b) / len(set_a | set_b) >= threshold


def deduplicate_risks(
    risks: Iterable[Risk],
    catalog: Optional[PatternCatalog] = None,
    threshold: float = DEFAULT_SETTINGS.similarity_threshold,
) -> list[Risk]:
    """Collapse duplicate findings and order the survivors by severity.

    Two risks are duplicates when they share a category and either carry
    the same concept signature, or their normalized descriptions overlap at
    ``threshold`` or more, or one normalized description contains the other.
    The first finding keeps its slot; a later, more severe duplicate takes
    that slot over. The result is sorted by severity, highest first, with
    ties in first-seen order.
    """
    catalog = catalog or PatternCatalog.default()
    kept: list[tuple[Risk, Optional[tuple[str, ...]], tuple[str, ...]]] = []

    for risk in risks:
        entry = (risk, risk_signature(risk, catalog), normalize_description(risk.description))
        for index, existing in enumerate(kept):
            if not _is_duplicate(existing, entry, threshold):
                continue
            if risk.severity.rank > existing[0].severity.rank:
                kept[index] = entry
            logger.debug(
                "Merged duplicate %s risk: %r", risk.category.value, risk.description[:80]
            )
            break
        else:
            kept.append(entry)

    return sorted((entry[0] for entry in kept), key=lambda r: -r.severity.rank)


# ---------------------------------------------------------------------------
# Scoring, summary, recommendations
# ---------------------------------------------------------------------------


def calculate_overall_risk_score(
    risks: Sequence[Risk], settings: Optional[EngineSettings] = None
) -> Severity:
    """Overall score from severity counts; independent of order."""
    settings = settings or DEFAULT_SETTINGS
    counts = Counter(risk.severity for risk in risks)

    if counts[Severity.HIGH] or counts[Severity.MEDIUM] >= settings.medium_escalation_count:
        return Severity.HIGH
    if not risks:
        return Severity.LOW
    if counts[Severity.LOW] == len(risks) and len(risks) < settings.low_count_ceiling:
        return Severity.LOW
    return Severity.MEDIUM


def generate_risk_summary(risks: Sequence[Risk], score: Severity) -> str:
    """One-sentence overview of the findings."""
    if not risks:
        return NO_RISKS_SUMMARY

    counts = Counter(risk.severity for risk in risks)
    breakdown = ", ".join(
        f"{counts[level]} {level.value}"
        for level in (Severity.HIGH, Severity.MEDIUM, Severity.LOW)
        if counts[level]
    )

    # most_common keeps first-seen order for equal counts
    categories = Counter(risk.category.value for risk in risks)
    top = [name for name, _ in categories.most_common(2)]

    noun = "risk" if len(risks) == 1 else "risks"
    return (
        f"Overall risk level is {score.value.upper()} with {len(risks)} {noun} "
        f"identified ({breakdown}), mainly {' and '.join(top)}."
    )


def generate_recommendations(
    risks: Sequence[Risk],
    document_type: DocumentType | str = DocumentType.OTHER,
    score: Optional[Severity] = None,
    settings: Optional[EngineSettings] = None,
) -> list[str]:
    """Actionable advice: score banner, category advice, document advice, top risks."""
    settings = settings or DEFAULT_SETTINGS
    doc_type = DocumentType.parse(document_type)
    noun = _DOCUMENT_NOUNS[doc_type]

    if not risks:
        return [_NO_RISKS_NOTICE.format(noun=noun), _DOCUMENT_ADVICE[doc_type]]

    if score is None:
        score = calculate_overall_risk_score(risks, settings)

    candidates: list[str] = []
    banner = _SCORE_BANNERS[score]
    if banner:
        candidates.append(banner.format(noun=noun))

    seen_categories: list[RiskCategory] = []
    for risk in risks:
        if risk.category not in seen_categories:
            seen_categories.append(risk.category)
    candidates.extend(_CATEGORY_ADVICE[c].format(noun=noun) for c in seen_categories)

    candidates.append(_DOCUMENT_ADVICE[doc_type])

    top_high = [
        risk.recommendation
        for risk in risks
        if risk.severity == Severity.HIGH and risk.recommendation
    ][: settings.top_risk_recommendations]
    candidates.extend(top_high)

    recommendations: list[str] = []
    for text in candidates:
        if text not in recommendations:
            recommendations.append(text)
    return recommendations[: settings.max_recommendations]


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------


class RiskAggregator:
    """Turn raw findings into a ``RiskAssessmentResult``.

    Args:
        catalog: Pattern catalog used for concept signatures.
        settings: Engine thresholds.
    """

    def __init__(
        self,
        catalog: Optional[PatternCatalog] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.catalog = catalog or PatternCatalog.default()
        self.settings = settings or DEFAULT_SETTINGS

    def aggregate(
        self,
        risks: Iterable[Risk],
        document_type: DocumentType | str = DocumentType.OTHER,
        jurisdiction: str = "unknown",
    ) -> RiskAssessmentResult:
        doc_type = DocumentType.parse(document_type)
        unique = deduplicate_risks(risks, self.catalog, self.settings.similarity_threshold)
        score = calculate_overall_risk_score(unique, self.settings)
        result = RiskAssessmentResult(
            risks=tuple(unique),
            overall_risk_score=score,
            risk_summary=generate_risk_summary(unique, score),
            recommendations=tuple(
                generate_recommendations(unique, doc_type, score, self.settings)
            ),
            document_type=doc_type,
            jurisdiction=jurisdiction or "unknown",
        )
        logger.debug(
            "Aggregated %d risk(s) for %s: overall %s",
            result.risk_count,
            doc_type.value,
            score.value,
        )
        return result
