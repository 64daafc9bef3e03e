"""Main analyzer orchestrating metadata extraction, risk detection and aggregation.

``LegalRiskAnalyzer`` is the primary entry point. It accepts document text
(and optionally the clauses a segmentation step produced), runs the
document-level scan, the clause analysis and the document-type contextual
checks, and returns a deduplicated, scored ``RiskAssessmentResult``.

The module-level functions ``assess_document_risks``,
``extract_legal_metadata`` and ``analyze_clause_risks`` wrap a default
analyzer for one-off calls.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Optional, Union

from .aggregator import RiskAggregator
from .config import DEFAULT_SETTINGS, EngineSettings
from .detectors import ClauseRiskAnalyzer, DocumentRiskAnalyzer
from .extractors import MetadataExtractor
from .models import (
    Clause,
    ClauseRiskAnalysis,
    DocumentAnalysis,
    DocumentType,
    ExtractedLegalMetadata,
    Risk,
    RiskAssessmentResult,
)
from .patterns import PatternCatalog
from .preprocessing import TextPreprocessor

logger = logging.getLogger(__name__)

ClauseInput = Union[Clause, Mapping]


class LegalRiskAnalyzer:
    """High-level legal risk analyzer.

    Example::

        analyzer = LegalRiskAnalyzer()
        result = analyzer.assess(text, document_type="lease", jurisdiction="US-CA")

        print(result.overall_risk_score.value)
        for risk in result.risks:
            print(risk.severity.value, risk.description)

    Args:
        catalog: Pattern catalog shared by every component (optional).
        settings: Engine thresholds (optional).
        extractor: Custom MetadataExtractor instance (optional).
        preprocessor: Custom TextPreprocessor instance (optional).
    """

    def __init__(
        self,
        catalog: Optional[PatternCatalog] = None,
        settings: Optional[EngineSettings] = None,
        extractor: Optional[MetadataExtractor] = None,
        preprocessor: Optional[TextPreprocessor] = None,
    ) -> None:
        self.catalog = catalog or PatternCatalog.default()
        self.settings = settings or DEFAULT_SETTINGS
        self._extractor = extractor or MetadataExtractor()
        self._preprocessor = preprocessor or TextPreprocessor()
        self._document_analyzer = DocumentRiskAnalyzer(self.catalog, self.settings)
        self._clause_analyzer = ClauseRiskAnalyzer(self.catalog, self.settings)
        self._aggregator = RiskAggregator(self.catalog, self.settings)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def assess(
        self,
        text: Optional[str],
        clauses: Optional[Iterable[ClauseInput]] = (),
        document_type: DocumentType | str | None = DocumentType.OTHER,
        jurisdiction: Optional[str] = "US",
    ) -> RiskAssessmentResult:
        """Produce the full risk profile of a document.

        Args:
            text: Document text. ``None`` or empty is treated as no text.
            clauses: Pre-segmented clauses, as ``Clause`` objects or dicts.
            document_type: Type hint; unknown values fall back to ``other``.
            jurisdiction: Jurisdiction tag carried into the result.

        Returns:
            Deduplicated, scored RiskAssessmentResult.
        """
        doc_type = DocumentType.parse(document_type)
        normalized = self._preprocessor.normalize(text)
        clause_list = self._prepare_clauses(clauses)

        risks: list[Risk] = []
        risks.extend(self._document_analyzer.scan(normalized, doc_type))
        risks.extend(self._clause_analyzer.analyze(clause_list, doc_type))
        risks.extend(self._document_analyzer.contextual_risks(normalized, doc_type))
        logger.debug(
            "Collected %d raw risk(s) from %d chars and %d clause(s)",
            len(risks),
            len(normalized),
            len(clause_list),
        )

        return self._aggregator.aggregate(risks, doc_type, jurisdiction or "unknown")

    def extract_metadata(self, text: Optional[str]) -> ExtractedLegalMetadata:
        """Extract parties, dates, amounts, jurisdiction and document type."""
        return self._extractor.extract(self._preprocessor.normalize(text))

    def analyze_clauses(
        self,
        clauses: Optional[Iterable[ClauseInput]],
        document_type: DocumentType | str | None = DocumentType.OTHER,
    ) -> list[Risk]:
        """Run clause-level detection only; findings are not deduplicated."""
        return self._clause_analyzer.analyze(
            self._prepare_clauses(clauses), DocumentType.parse(document_type)
        )

    def assess_clause(
        self,
        clause: ClauseInput,
        document_type: DocumentType | str | None = DocumentType.OTHER,
    ) -> ClauseRiskAnalysis:
        """Findings and local score for one clause."""
        prepared = self._prepare_clauses([clause])[0]
        return self._clause_analyzer.assess_clause(prepared, DocumentType.parse(document_type))

    def analyze(
        self,
        text: Optional[str],
        clauses: Optional[Iterable[ClauseInput]] = (),
        document_type: DocumentType | str | None = None,
        jurisdiction: Optional[str] = None,
    ) -> DocumentAnalysis:
        """Extract metadata, then assess using the detected type and jurisdiction.

        Explicit ``document_type`` and ``jurisdiction`` arguments override
        what was detected.
        """
        metadata = self.extract_metadata(text)
        assessment = self.assess(
            text,
            clauses,
            document_type=document_type or metadata.document_type,
            jurisdiction=jurisdiction or metadata.jurisdiction,
        )
        return DocumentAnalysis(metadata=metadata, assessment=assessment)

    def analyze_file(
        self,
        file_path: str | Path,
        clauses: Optional[Iterable[ClauseInput]] = (),
        document_type: DocumentType | str | None = None,
        jurisdiction: Optional[str] = None,
    ) -> DocumentAnalysis:
        """Run ``analyze`` on a UTF-8 text file.

        The file text goes through ``TextPreprocessor.clean`` first, so
        reported offsets refer to the cleaned text.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        text = self._preprocessor.clean(path.read_text(encoding="utf-8", errors="replace"))
        return self.analyze(text, clauses, document_type, jurisdiction)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _prepare_clauses(self, clauses: Optional[Iterable[ClauseInput]]) -> list[Clause]:
        prepared: list[Clause] = []
        for index, item in enumerate(clauses or ()):
            clause = item if isinstance(item, Clause) else Clause.from_dict(dict(item))
            if not clause.id:
                clause = dataclasses.replace(clause, id=f"clause-{index + 1}")
            prepared.append(
                dataclasses.replace(clause, content=self._preprocessor.normalize(clause.content))
            )
        return prepared


# ---------------------------------------------------------------------------
# Module-level entry points
# ---------------------------------------------------------------------------


def assess_document_risks(
    text: Optional[str],
    clauses: Optional[Iterable[ClauseInput]] = (),
    document_type: DocumentType | str | None = "other",
    jurisdiction: Optional[str] = "US",
    *,
    catalog: Optional[PatternCatalog] = None,
    settings: Optional[EngineSettings] = None,
) -> RiskAssessmentResult:
    """Assess a document with a fresh analyzer."""
    analyzer = LegalRiskAnalyzer(catalog=catalog, settings=settings)
    return analyzer.assess(text, clauses, document_type, jurisdiction)


def extract_legal_metadata(text: Optional[str]) -> ExtractedLegalMetadata:
    """Extract legal metadata with the default extractor."""
    return LegalRiskAnalyzer().extract_metadata(text)


def analyze_clause_risks(
    clauses: Optional[Iterable[ClauseInput]],
    document_type: DocumentType | str | None = "other",
) -> list[Risk]:
    """Clause-level findings with the default catalog."""
    return LegalRiskAnalyzer().analyze_clauses(clauses, document_type)
