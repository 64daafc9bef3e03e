"""Pattern-based risk detection.

Two analyzers share the pattern catalog:

- ``DocumentRiskAnalyzer`` scans the full text once per catalog pattern and
  runs the document-type contextual checks.
- ``ClauseRiskAnalyzer`` scans each pre-segmented clause on its own and adds
  a structural-complexity finding for long, heavily conditioned clauses.

Both emit at most one ``Risk`` per pattern per scanned unit, regardless of
how many times the pattern occurs.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Optional

from .config import DEFAULT_SETTINGS, EngineSettings
from .models import (
    Clause,
    ClauseRiskAnalysis,
    DocumentType,
    MatchMode,
    Risk,
    RiskCategory,
    RiskPattern,
    Severity,
    TextLocation,
)
from .patterns import PatternCatalog
from .preprocessing import excerpt, sentence_window

logger = logging.getLogger(__name__)

# Conditional connectors that make a long clause hard to read
_COMPLEXITY_CONNECTORS: tuple[tuple[str, re.Pattern], ...] = tuple(
    (phrase, re.compile(r"\b" + r"\s+".join(phrase.split()) + r"\b", re.IGNORECASE))
    for phrase in ("provided that", "notwithstanding", "except", "furthermore", "unless")
)


def _max_severity(risks: Iterable[Risk], floor: Severity = Severity.LOW) -> Severity:
    best = floor
    for risk in risks:
        if risk.severity.rank > best.rank:
            best = risk.severity
    return best


# ---------------------------------------------------------------------------
# Document-level analyzer
# ---------------------------------------------------------------------------


class DocumentRiskAnalyzer:
    """Scan a full document against the catalog.

    Example::

        analyzer = DocumentRiskAnalyzer()
        risks = analyzer.scan(text, DocumentType.LEASE)
        risks += analyzer.contextual_risks(text, DocumentType.LEASE)

    Args:
        catalog: Pattern catalog. The built-in catalog by default.
        settings: Engine thresholds.
    """

    def __init__(
        self,
        catalog: Optional[PatternCatalog] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.catalog = catalog or PatternCatalog.default()
        self.settings = settings or DEFAULT_SETTINGS

    def scan(
        self, text: Optional[str], document_type: DocumentType | str = DocumentType.OTHER
    ) -> list[Risk]:
        """One risk per catalog pattern that fires anywhere in ``text``."""
        if not text:
            return []
        return self._run(self.catalog.lookup_patterns(document_type), text)

    def contextual_risks(
        self, text: Optional[str], document_type: DocumentType | str = DocumentType.OTHER
    ) -> list[Risk]:
        """Run the supplementary checks for ``document_type``."""
        if not text:
            return []
        return self._run(self.catalog.lookup_contextual(document_type), text)

    def _run(self, patterns: Iterable[RiskPattern], text: str) -> list[Risk]:
        risks: list[Risk] = []
        for pattern in patterns:
            if pattern.match_mode == MatchMode.ABSENT:
                if pattern.missing_from(text):
                    risks.append(self._absence_risk(pattern))
                continue
            hit = pattern.search(text)
            if hit is None:
                continue
            context = sentence_window(text, hit.start(), hit.end())
            risks.append(
                Risk(
                    category=pattern.category,
                    severity=pattern.severity,
                    description=pattern.render(hit),
                    affected_clause=excerpt(context, self.settings.sentence_window),
                    location=TextLocation(start=hit.start(), end=hit.end()),
                    recommendation=pattern.recommendation,
                    pattern_id=pattern.id,
                )
            )
            logger.debug("Pattern %s matched at %d: %r", pattern.id, hit.start(), hit.group())
        return risks

    @staticmethod
    def _absence_risk(pattern: RiskPattern) -> Risk:
        logger.debug("Pattern %s fired: no trigger present", pattern.id)
        return Risk(
            category=pattern.category,
            severity=pattern.severity,
            description=pattern.render(),
            affected_clause=f"Document lacks a {pattern.name.lower()} clause.",
            recommendation=pattern.recommendation,
            pattern_id=pattern.id,
        )


# ---------------------------------------------------------------------------
# Clause-level analyzer
# ---------------------------------------------------------------------------


class ClauseRiskAnalyzer:
    """Analyze pre-segmented clauses one at a time.

    Each clause is matched against the document-level patterns plus the
    clause-only patterns. A clause longer than
    ``settings.complex_clause_length`` that uses at least
    ``settings.min_complexity_connectors`` distinct conditional connectors
    also gets a ``legal`` complexity finding, at ``medium`` or the highest
    severity of anything else found in the same clause.

    Args:
        catalog: Pattern catalog. The built-in catalog by default.
        settings: Engine thresholds.
    """

    def __init__(
        self,
        catalog: Optional[PatternCatalog] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.catalog = catalog or PatternCatalog.default()
        self.settings = settings or DEFAULT_SETTINGS

    def analyze(
        self,
        clauses: Optional[Iterable[Clause]],
        document_type: DocumentType | str = DocumentType.OTHER,
    ) -> list[Risk]:
        """Flatten the findings of every clause, in clause order."""
        risks: list[Risk] = []
        for clause in clauses or ():
            risks.extend(self.assess_clause(clause, document_type).risks)
        return risks

    def assess_clause(
        self, clause: Clause, document_type: DocumentType | str = DocumentType.OTHER
    ) -> ClauseRiskAnalysis:
        """Findings and a local risk score for a single clause."""
        content = clause.content or ""
        if not content.strip():
            return ClauseRiskAnalysis(clause=clause)

        risks: list[Risk] = []
        for pattern in self.catalog.lookup_clause_patterns(document_type):
            if pattern.match_mode == MatchMode.ABSENT:
                continue
            hit = pattern.search(content)
            if hit is None:
                continue
            risks.append(
                self._clause_risk(
                    clause,
                    category=pattern.category,
                    severity=pattern.severity,
                    description=f'{pattern.render(hit)} Found in clause: "{clause.label}"',
                    recommendation=pattern.recommendation,
                    pattern_id=pattern.id,
                )
            )

        complexity = self._complexity_risk(clause, content, risks)
        if complexity is not None:
            risks.append(complexity)

        if risks:
            logger.debug("Clause %s: %d risk(s)", clause.id, len(risks))
        return ClauseRiskAnalysis(
            clause=clause,
            risks=tuple(risks),
            risk_score=_max_severity(risks),
        )

    def _complexity_risk(
        self, clause: Clause, content: str, found: list[Risk]
    ) -> Optional[Risk]:
        if len(content) <= self.settings.complex_clause_length:
            return None
        connectors = [phrase for phrase, regex in _COMPLEXITY_CONNECTORS if regex.search(content)]
        if len(connectors) < self.settings.min_complexity_connectors:
            return None
        logger.debug("Clause %s is complex (%d chars, %s)", clause.id, len(content), connectors)
        return self._clause_risk(
            clause,
            category=RiskCategory.LEGAL,
            severity=_max_severity(found, floor=Severity.MEDIUM),
            description=f'Clause "{clause.label}" is complex and may hide conditions or obligations.',
            recommendation="Have a legal professional review this complex clause.",
            pattern_id=None,
        )

    def _clause_risk(
        self,
        clause: Clause,
        *,
        category: RiskCategory,
        severity: Severity,
        description: str,
        recommendation: str,
        pattern_id: Optional[str],
    ) -> Risk:
        return Risk(
            category=category,
            severity=severity,
            description=description,
            affected_clause=excerpt(clause.content, self.settings.excerpt_length),
            location=clause.location,
            clause_id=clause.id,
            recommendation=recommendation,
            pattern_id=pattern_id,
        )

