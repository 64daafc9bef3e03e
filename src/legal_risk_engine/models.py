"""Data models for legal risk analysis."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .preprocessing import sentence_window


class RiskCategory(str, Enum):
    """Risk categories."""

    FINANCIAL = "financial"
    LEGAL = "legal"
    PRIVACY = "privacy"
    OPERATIONAL = "operational"


class Severity(str, Enum):
    """Severity levels, used for single findings and the overall score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
}


class DocumentType(str, Enum):
    """Coarse legal document categories."""

    CONTRACT = "contract"
    LEASE = "lease"
    TERMS_OF_SERVICE = "terms_of_service"
    PRIVACY_POLICY = "privacy_policy"
    LOAN_AGREEMENT = "loan_agreement"
    OTHER = "other"

    @classmethod
    def parse(cls, value: DocumentType | str | None) -> DocumentType:
        """Map a caller-supplied hint to a member; unknown values become OTHER."""
        if isinstance(value, DocumentType):
            return value
        if not value:
            return cls.OTHER
        key = re.sub(r"[\s\-]+", "_", str(value).strip().lower())
        try:
            return cls(key)
        except ValueError:
            return cls.OTHER


class MatchMode(str, Enum):
    """How the triggers of a pattern combine."""

    ANY = "any"
    ALL = "all"
    ABSENT = "absent"


@dataclass(frozen=True)
class RiskPattern:
    """A declarative rule describing one known risky phrasing.

    Triggers and exclusions are regular expressions matched
    case-insensitively. A trigger hit is discarded when an exclusion
    matches in the sentence around it, which keeps benign phrasings
    such as "unlimited support" from firing.

    Args:
        id: Stable identifier.
        name: Short display name.
        category: Risk category of the finding.
        severity: Fixed severity of the finding.
        triggers: One or more regular expressions.
        description: Template; ``{match}`` is replaced by the matched text.
        recommendation: Direct remediation text for the finding.
        document_types: Applicable document types, ``None`` for any.
        match_mode: Whether any or all triggers must match, or whether the
            pattern fires when no trigger matches at all.
        exclusions: Negative-context regular expressions.
        concept: Stop-word-free signature phrase used for deduplication.
    """

    id: str
    name: str
    category: RiskCategory
    severity: Severity
    triggers: tuple[str, ...]
    description: str
    recommendation: str
    document_types: Optional[frozenset[DocumentType]] = None
    match_mode: MatchMode = MatchMode.ANY
    exclusions: tuple[str, ...] = ()
    concept: str = ""
    _compiled: tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)
    _compiled_exclusions: tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.triggers:
            raise ValueError(f"Risk pattern '{self.id}' has no triggers")
        try:
            compiled = tuple(re.compile(t, re.IGNORECASE) for t in self.triggers)
            compiled_exclusions = tuple(re.compile(x, re.IGNORECASE) for x in self.exclusions)
        except re.error as e:
            raise ValueError(f"Invalid regular expression in risk pattern '{self.id}': {e}") from e
        object.__setattr__(self, "_compiled", compiled)
        object.__setattr__(self, "_compiled_exclusions", compiled_exclusions)

    def applies_to(self, document_type: DocumentType) -> bool:
        return self.document_types is None or document_type in self.document_types

    def search(self, text: str) -> Optional[re.Match]:
        """Return the qualifying trigger hit in ``text``, or ``None``.

        With ``MatchMode.ANY`` the first trigger that has a valid hit wins.
        With ``MatchMode.ALL`` every trigger needs a valid hit and the hit
        of the first trigger is returned. ``MatchMode.ABSENT`` searches like
        ``ANY``; use ``missing_from`` to test whether it fires.
        """
        if not text:
            return None
        first: Optional[re.Match] = None
        for regex in self._compiled:
            hit = self._first_valid_hit(regex, text)
            if hit is None:
                if self.match_mode == MatchMode.ALL:
                    return None
                continue
            if self.match_mode != MatchMode.ALL:
                return hit
            if first is None:
                first = hit
        return first

    def render(self, match: Optional[re.Match] = None) -> str:
        """Fill the description template with the matched text."""
        matched = " ".join(match.group().split()) if match else self.name.lower()
        return self.description.replace("{match}", matched)

    def missing_from(self, text: str) -> bool:
        """True when an ``ABSENT`` pattern finds none of its triggers in ``text``."""
        if self.match_mode != MatchMode.ABSENT or not text or not text.strip():
            return False
        return self.search(text) is None

    def _first_valid_hit(self, regex: re.Pattern, text: str) -> Optional[re.Match]:
        for hit in regex.finditer(text):
            if not self._compiled_exclusions:
                return hit
            context = sentence_window(text, hit.start(), hit.end())
            if not any(x.search(context) for x in self._compiled_exclusions):
                return hit
        return None


@dataclass(frozen=True)
class TextLocation:
    """A character span in the source text."""

    start: int
    end: int

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class Clause:
    """A pre-segmented clause supplied by the document segmentation step."""

    id: str
    title: str
    content: str
    location: Optional[TextLocation] = None
    risk_level: Optional[Severity] = None
    explanation: Optional[str] = None

    @property
    def label(self) -> str:
        return (self.title or "").strip() or self.id

    @classmethod
    def from_dict(cls, data: dict) -> Clause:
        """Build a clause from an external record (camelCase or snake_case keys)."""
        location = None
        raw_location = data.get("location")
        if isinstance(raw_location, dict):
            start = raw_location.get("start", raw_location.get("startIndex"))
            end = raw_location.get("end", raw_location.get("endIndex"))
            if start is not None and end is not None:
                try:
                    location = TextLocation(start=int(start), end=int(end))
                except (TypeError, ValueError):
                    location = None

        raw_level = data.get("risk_level", data.get("riskLevel"))
        try:
            risk_level = Severity(str(raw_level).lower()) if raw_level else None
        except ValueError:
            risk_level = None

        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            location=location,
            risk_level=risk_level,
            explanation=data.get("explanation"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "location": self.location.to_dict() if self.location else None,
            "risk_level": self.risk_level.value if self.risk_level else None,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class Risk:
    """A detected risk."""

    category: RiskCategory
    severity: Severity
    description: str
    affected_clause: Optional[str] = None
    location: Optional[TextLocation] = None
    clause_id: Optional[str] = None
    recommendation: Optional[str] = None
    pattern_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "description": self.description,
            "affected_clause": self.affected_clause,
            "location": self.location.to_dict() if self.location else None,
            "clause_id": self.clause_id,
            "recommendation": self.recommendation,
            "pattern_id": self.pattern_id,
        }


@dataclass(frozen=True)
class ExtractedLegalMetadata:
    """Key facts extracted from a legal document."""

    document_type: DocumentType
    parties: tuple[str, ...] = ()
    dates: tuple[str, ...] = ()
    amounts: tuple[str, ...] = ()
    jurisdiction: str = "unknown"

    def to_dict(self) -> dict:
        return {
            "document_type": self.document_type.value,
            "parties": list(self.parties),
            "dates": list(self.dates),
            "amounts": list(self.amounts),
            "jurisdiction": self.jurisdiction,
        }


@dataclass(frozen=True)
class ClauseRiskAnalysis:
    """Risks found in a single clause."""

    clause: Clause
    risks: tuple[Risk, ...] = ()
    risk_score: Severity = Severity.LOW

    def to_dict(self) -> dict:
        return {
            "clause_id": self.clause.id,
            "title": self.clause.title,
            "risk_score": self.risk_score.value,
            "risks": [r.to_dict() for r in self.risks],
        }


@dataclass(frozen=True)
class RiskAssessmentResult:
    """Complete risk profile for a document."""

    risks: tuple[Risk, ...]
    overall_risk_score: Severity
    risk_summary: str
    recommendations: tuple[str, ...]
    document_type: DocumentType = DocumentType.OTHER
    jurisdiction: str = "unknown"

    @property
    def high_risks(self) -> list[Risk]:
        return [r for r in self.risks if r.severity == Severity.HIGH]

    @property
    def risk_count(self) -> int:
        return len(self.risks)

    @property
    def categories(self) -> set[RiskCategory]:
        return {r.category for r in self.risks}

    def to_dict(self) -> dict:
        return {
            "document_type": self.document_type.value,
            "jurisdiction": self.jurisdiction,
            "overall_risk_score": self.overall_risk_score.value,
            "risk_summary": self.risk_summary,
            "risks": [r.to_dict() for r in self.risks],
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class DocumentAnalysis:
    """Metadata and risk assessment of one document."""

    metadata: ExtractedLegalMetadata
    assessment: RiskAssessmentResult

    def to_dict(self) -> dict:
        return {
            "metadata": self.metadata.to_dict(),
            "assessment": self.assessment.to_dict(),
        }
