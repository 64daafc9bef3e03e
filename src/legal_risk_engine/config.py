"""Tunable thresholds for the risk engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineSettings:
    """Thresholds used by the analyzers and the aggregator.

    Args:
        medium_escalation_count: Number of medium risks that raises the
            overall score to high.
        low_count_ceiling: An all-low risk set stays ``low`` only while it
            has fewer findings than this.
        similarity_threshold: Word-overlap ratio at or above which two risk
            descriptions of the same category are duplicates.
        max_recommendations: Cap on the recommendation list.
        top_risk_recommendations: How many high risks contribute their own
            remediation text to the recommendations.
        complex_clause_length: Minimum clause length (characters, exclusive)
            before structural complexity is considered.
        min_complexity_connectors: Distinct conditional connectors a long
            clause needs to be flagged as complex.
        excerpt_length: Characters of clause text kept in ``affected_clause``.
        sentence_window: Maximum characters of context kept for a
            document-level hit.
    """

    medium_escalation_count: int = 3
    low_count_ceiling: int = 3
    similarity_threshold: float = 0.8
    max_recommendations: int = 8
    top_risk_recommendations: int = 3
    complex_clause_length: int = 1000
    min_complexity_connectors: int = 2
    excerpt_length: int = 200
    sentence_window: int = 300

    def __post_init__(self) -> None:
        if not 0.0 < self.similarity_threshold <= 1.0:
            raise ValueError(
                f"similarity_threshold must be in (0, 1], got {self.similarity_threshold}"
            )
        for name in (
            "medium_escalation_count",
            "low_count_ceiling",
            "max_recommendations",
            "min_complexity_connectors",
            "excerpt_length",
            "sentence_window",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.top_risk_recommendations < 0 or self.complex_clause_length < 0:
            raise ValueError("top_risk_recommendations and complex_clause_length must be >= 0")


DEFAULT_SETTINGS = EngineSettings()
