"""Legal Risk Engine -- rule-based risk assessment for legal documents."""

__version__ = "1.0.0"

from .aggregator import (
    RiskAggregator,
    calculate_overall_risk_score,
    deduplicate_risks,
    generate_recommendations,
    generate_risk_summary,
)
from .analyzer import (
    LegalRiskAnalyzer,
    analyze_clause_risks,
    assess_document_risks,
    extract_legal_metadata,
)
from .classifier import ClassificationResult, DocumentClassifier, classify_document
from .config import DEFAULT_SETTINGS, EngineSettings
from .detectors import ClauseRiskAnalyzer, DocumentRiskAnalyzer
from .extractors import JurisdictionMatch, MetadataExtractor
from .models import (
    Clause,
    ClauseRiskAnalysis,
    DocumentAnalysis,
    DocumentType,
    ExtractedLegalMetadata,
    MatchMode,
    Risk,
    RiskAssessmentResult,
    RiskCategory,
    RiskPattern,
    Severity,
    TextLocation,
)
from .patterns import DEFAULT_CATALOG, PatternCatalog
from .preprocessing import TextPreprocessor

__all__ = [
    # Entry points
    "LegalRiskAnalyzer",
    "assess_document_risks",
    "extract_legal_metadata",
    "analyze_clause_risks",
    # Models
    "Clause",
    "ClauseRiskAnalysis",
    "DocumentAnalysis",
    "DocumentType",
    "ExtractedLegalMetadata",
    "MatchMode",
    "Risk",
    "RiskAssessmentResult",
    "RiskCategory",
    "RiskPattern",
    "Severity",
    "TextLocation",
    # Catalog and settings
    "PatternCatalog",
    "DEFAULT_CATALOG",
    "EngineSettings",
    "DEFAULT_SETTINGS",
    # Components
    "DocumentClassifier",
    "ClassificationResult",
    "classify_document",
    "MetadataExtractor",
    "JurisdictionMatch",
    "DocumentRiskAnalyzer",
    "ClauseRiskAnalyzer",
    "RiskAggregator",
    "deduplicate_risks",
    "calculate_overall_risk_score",
    "generate_risk_summary",
    "generate_recommendations",
    "TextPreprocessor",
]
