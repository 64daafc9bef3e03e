"""Tests for document-level and clause-level risk detection."""

from __future__ import annotations

import pytest

from legal_risk_engine.config import EngineSettings
from legal_risk_engine.detectors import ClauseRiskAnalyzer, DocumentRiskAnalyzer
from legal_risk_engine.models import (
    Clause,
    DocumentType,
    MatchMode,
    RiskCategory,
    RiskPattern,
    Severity,
    TextLocation,
)
from legal_risk_engine.patterns import PatternCatalog

FILLER = "The parties will cooperate in good faith on routine matters. " * 20


@pytest.fixture
def document_analyzer() -> DocumentRiskAnalyzer:
    return DocumentRiskAnalyzer()


@pytest.fixture
def clause_analyzer() -> ClauseRiskAnalyzer:
    return ClauseRiskAnalyzer()


# ---------------------------------------------------------------------------
# DocumentRiskAnalyzer
# ---------------------------------------------------------------------------


class TestDocumentScan:
    def test_high_risk_text(
        self, document_analyzer: DocumentRiskAnalyzer, high_risk_text: str
    ) -> None:
        risks = document_analyzer.scan(high_risk_text, DocumentType.CONTRACT)
        ids = [r.pattern_id for r in risks]
        assert {"unlimited-liability", "broad-indemnification", "binding-arbitration"} <= set(ids)
        assert all(r.severity == Severity.HIGH for r in risks)

    def test_one_risk_per_pattern(self, document_analyzer: DocumentRiskAnalyzer) -> None:
        text = "A late fee applies in May. Another late fee applies in June."
        risks = document_analyzer.scan(text)
        assert [r.pattern_id for r in risks] == ["late-fees"]
        assert risks[0].location == TextLocation(start=2, end=10)

    def test_description_interpolates_match(
        self, document_analyzer: DocumentRiskAnalyzer
    ) -> None:
        risks = document_analyzer.scan("The Client accepts Unlimited   Liability.")
        assert risks[0].description.startswith('Unlimited liability ("Unlimited Liability")')

    def test_affected_clause_is_sentence(self, document_analyzer: DocumentRiskAnalyzer) -> None:
        text = "Rent is due monthly. The Client accepts unlimited liability for losses. Done."
        risk = document_analyzer.scan(text)[0]
        assert risk.affected_clause == "The Client accepts unlimited liability for losses"
        assert text[risk.location.start : risk.location.end] == "unlimited liability"

    def test_recommendation_and_clause_id(self, document_analyzer: DocumentRiskAnalyzer) -> None:
        risk = document_analyzer.scan("Disputes go to binding arbitration.")[0]
        assert risk.recommendation
        assert risk.clause_id is None
        assert risk.category == RiskCategory.LEGAL

    def test_document_type_restrictions(self, document_analyzer: DocumentRiskAnalyzer) -> None:
        text = "A prepayment penalty of 3% applies."
        assert document_analyzer.scan(text, DocumentType.OTHER) == []
        ids = [r.pattern_id for r in document_analyzer.scan(text, DocumentType.LOAN_AGREEMENT)]
        assert ids == ["prepayment-penalty"]

    def test_benign_text(self, document_analyzer: DocumentRiskAnalyzer, benign_text: str) -> None:
        assert document_analyzer.scan(benign_text) == []

    @pytest.mark.parametrize("text", [None, ""])
    def test_empty(self, document_analyzer: DocumentRiskAnalyzer, text) -> None:
        assert document_analyzer.scan(text) == []
        assert document_analyzer.contextual_risks(text, DocumentType.LEASE) == []

    def test_injected_catalog(self) -> None:
        catalog = PatternCatalog(
            [
                RiskPattern(
                    id="widget",
                    name="Widget",
                    category=RiskCategory.OPERATIONAL,
                    severity=Severity.LOW,
                    triggers=(r"\bwidgets?\b",),
                    description="Widget mentioned.",
                    recommendation="Count the widgets.",
                )
            ]
        )
        analyzer = DocumentRiskAnalyzer(catalog=catalog)
        assert [r.pattern_id for r in analyzer.scan("Ship two widgets. Unlimited liability.")] == [
            "widget"
        ]


class TestContextualRisks:
    def test_lease_checks(self, document_analyzer: DocumentRiskAnalyzer) -> None:
        text = (
            "This lease shall automatically renew for successive terms. "
            "Tenants are jointly and severally liable. A security deposit is held."
        )
        risks = document_analyzer.contextual_risks(text, DocumentType.LEASE)
        assert [r.pattern_id for r in risks] == ["lease-automatic-renewal", "lease-joint-liability"]
        assert risks[0].category == RiskCategory.LEGAL
        assert risks[1].severity == Severity.HIGH

    def test_other_has_no_checks(self, document_analyzer: DocumentRiskAnalyzer) -> None:
        text = "This lease shall automatically renew for successive terms."
        assert document_analyzer.contextual_risks(text, DocumentType.OTHER) == []

    def test_privacy_sharing(
        self, document_analyzer: DocumentRiskAnalyzer, privacy_text: str
    ) -> None:
        risks = document_analyzer.contextual_risks(privacy_text, "privacy_policy")
        assert [r.pattern_id for r in risks] == ["privacy-data-sharing"]
        assert risks[0].category == RiskCategory.PRIVACY

    def test_loan_checks(self, document_analyzer: DocumentRiskAnalyzer) -> None:
        text = "The note bears interest at a variable rate. A prepayment penalty applies."
        risks = document_analyzer.contextual_risks(text, DocumentType.LOAN_AGREEMENT)
        assert [r.pattern_id for r in risks] == ["loan-variable-rate", "loan-prepayment-penalty"]

    def test_lease_without_deposit(self, document_analyzer: DocumentRiskAnalyzer) -> None:
        text = "Standard lease agreement with typical terms. Rent is due monthly."
        risks = document_analyzer.contextual_risks(text, DocumentType.LEASE)
        assert [r.pattern_id for r in risks] == ["lease-missing-security-deposit"]
        risk = risks[0]
        assert risk.category == RiskCategory.FINANCIAL
        assert risk.severity == Severity.MEDIUM
        assert risk.location is None
        assert risk.affected_clause == "Document lacks a security deposit clause."
        assert "security deposit" in risk.description

    @pytest.mark.parametrize(
        "text",
        [
            "The tenant pays a security deposit of $900.",
            "A deposit equal to one month of rent is due at signing.",
            "All deposits are held in trust.",
        ],
    )
    def test_deposit_mentioned(self, document_analyzer: DocumentRiskAnalyzer, text: str) -> None:
        ids = [r.pattern_id for r in document_analyzer.contextual_risks(text, DocumentType.LEASE)]
        assert "lease-missing-security-deposit" not in ids

    def test_missing_deposit_only_for_leases(
        self, document_analyzer: DocumentRiskAnalyzer
    ) -> None:
        text = "Standard agreement with typical terms. Payment is due monthly."
        assert document_analyzer.contextual_risks(text, DocumentType.CONTRACT) == []

    def test_whitespace_lease_has_no_findings(
        self, document_analyzer: DocumentRiskAnalyzer
    ) -> None:
        assert document_analyzer.contextual_risks("  \n\t ", DocumentType.LEASE) == []


# ---------------------------------------------------------------------------
# ClauseRiskAnalyzer
# ---------------------------------------------------------------------------


class TestClauseAnalysis:
    def test_lease_clauses(
        self, clause_analyzer: ClauseRiskAnalyzer, lease_clauses: list[Clause]
    ) -> None:
        risks = clause_analyzer.analyze(lease_clauses, DocumentType.LEASE)
        assert [(r.clause_id, r.pattern_id) for r in risks] == [
            ("c1", "late-fees"),
            ("c2", "time-sensitive-obligation"),
        ]

    def test_clause_risk_fields(
        self, clause_analyzer: ClauseRiskAnalyzer, lease_clauses: list[Clause]
    ) -> None:
        risk = clause_analyzer.analyze(lease_clauses[:1], DocumentType.LEASE)[0]
        assert risk.description.endswith('Found in clause: "Rent"')
        assert risk.location == TextLocation(start=0, end=80)
        assert risk.affected_clause == lease_clauses[0].content
        assert risk.recommendation

    def test_time_sensitive_is_low(
        self, clause_analyzer: ClauseRiskAnalyzer, lease_clauses: list[Clause]
    ) -> None:
        analysis = clause_analyzer.assess_clause(lease_clauses[1], DocumentType.LEASE)
        assert analysis.risk_score == Severity.LOW
        assert analysis.risks[0].category == RiskCategory.OPERATIONAL

    def test_clean_clause(
        self, clause_analyzer: ClauseRiskAnalyzer, lease_clauses: list[Clause]
    ) -> None:
        analysis = clause_analyzer.assess_clause(lease_clauses[2])
        assert analysis.risks == ()
        assert analysis.risk_score == Severity.LOW

    def test_clause_score_is_highest_severity(self, clause_analyzer: ClauseRiskAnalyzer) -> None:
        clause = Clause(
            id="c9",
            title="Liability",
            content="Tenant accepts unlimited liability and must pay within 3 days.",
        )
        analysis = clause_analyzer.assess_clause(clause)
        assert analysis.risk_score == Severity.HIGH
        assert len(analysis.risks) == 2

    def test_long_content_excerpted(self, clause_analyzer: ClauseRiskAnalyzer) -> None:
        clause = Clause(id="c1", title="Fees", content="A late fee applies. " + FILLER)
        risk = clause_analyzer.assess_clause(clause).risks[0]
        assert risk.affected_clause.endswith("...")
        assert len(risk.affected_clause) <= 203

    def test_label_falls_back_to_id(self, clause_analyzer: ClauseRiskAnalyzer) -> None:
        clause = Clause(id="clause-7", title="", content="A late fee applies.")
        risk = clause_analyzer.assess_clause(clause).risks[0]
        assert risk.description.endswith('Found in clause: "clause-7"')

    @pytest.mark.parametrize("content", ["", "   "])
    def test_empty_content(self, clause_analyzer: ClauseRiskAnalyzer, content: str) -> None:
        clause = Clause(id="c1", title="Empty", content=content)
        assert clause_analyzer.assess_clause(clause).risks == ()

    def test_no_clauses(self, clause_analyzer: ClauseRiskAnalyzer) -> None:
        assert clause_analyzer.analyze([]) == []
        assert clause_analyzer.analyze(None) == []

    def test_absence_patterns_ignored_for_clauses(self) -> None:
        catalog = PatternCatalog(
            [
                RiskPattern(
                    id="missing-widget",
                    name="Widget",
                    category=RiskCategory.OPERATIONAL,
                    severity=Severity.LOW,
                    triggers=(r"\bwidgets?\b",),
                    match_mode=MatchMode.ABSENT,
                    description="No widget terms.",
                    recommendation="Add widget terms.",
                )
            ]
        )
        clause = Clause(id="c1", title="Rent", content="Rent is due monthly.")
        assert ClauseRiskAnalyzer(catalog=catalog).assess_clause(clause).risks == ()
        risks = DocumentRiskAnalyzer(catalog=catalog).scan("Rent is due.")
        assert [r.pattern_id for r in risks] == ["missing-widget"]

    def test_clause_without_title(self, clause_analyzer: ClauseRiskAnalyzer) -> None:
        clause = Clause(id="c5", title=None, content="A late fee applies.")  # type: ignore[arg-type]
        risk = clause_analyzer.assess_clause(clause).risks[0]
        assert risk.description.endswith('Found in clause: "c5"')


class TestClauseComplexity:
    def test_long_conditional_clause(self, clause_analyzer: ClauseRiskAnalyzer) -> None:
        content = (
            "Tenant may sublet the unit provided that Landlord consents in writing. "
            "Notwithstanding the foregoing, subletting to relatives is allowed. " + FILLER
        )
        clause = Clause(id="c5", title="Subletting", content=content)
        risks = clause_analyzer.assess_clause(clause).risks
        assert len(risks) == 1
        risk = risks[0]
        assert "complex" in risk.description
        assert risk.category == RiskCategory.LEGAL
        assert risk.severity == Severity.MEDIUM
        assert risk.pattern_id is None
        assert risk.clause_id == "c5"

    def test_raised_to_highest_severity(self, clause_analyzer: ClauseRiskAnalyzer) -> None:
        content = (
            "Tenant accepts unlimited liability for damage, except normal wear. "
            "Furthermore, Tenant pays for repairs. " + FILLER
        )
        clause = Clause(id="c6", title="Damage", content=content)
        risks = clause_analyzer.assess_clause(clause).risks
        complexity = [r for r in risks if r.pattern_id is None]
        assert len(complexity) == 1
        assert complexity[0].severity == Severity.HIGH

    def test_single_connector_not_complex(self, clause_analyzer: ClauseRiskAnalyzer) -> None:
        content = "Tenant may sublet the unit provided that Landlord consents. " + FILLER
        clause = Clause(id="c7", title="Subletting", content=content)
        assert clause_analyzer.assess_clause(clause).risks == ()

    def test_short_clause_not_complex(self, clause_analyzer: ClauseRiskAnalyzer) -> None:
        content = "Unless agreed otherwise, and provided that notice is given, rent is due."
        clause = Clause(id="c8", title="Rent", content=content)
        assert clause_analyzer.assess_clause(clause).risks == ()

    def test_threshold_from_settings(self) -> None:
        analyzer = ClauseRiskAnalyzer(settings=EngineSettings(complex_clause_length=50))
        content = "Unless agreed otherwise, and provided that notice is given, rent is due."
        clause = Clause(id="c8", title="Rent", content=content)
        risks = analyzer.assess_clause(clause).risks
        assert len(risks) == 1
        assert "complex" in risks[0].description
