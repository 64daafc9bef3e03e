"""Shared test fixtures for legal-risk-engine tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from legal_risk_engine.analyzer import LegalRiskAnalyzer
from legal_risk_engine.models import Clause, TextLocation


@pytest.fixture
def sample_lease_path() -> Path:
    """Path to the sample lease text file."""
    return Path(__file__).parent.parent / "examples" / "sample_lease.txt"


@pytest.fixture
def sample_lease_text(sample_lease_path: Path) -> str:
    """Full text of the sample lease."""
    return sample_lease_path.read_text(encoding="utf-8")


@pytest.fixture
def analyzer() -> LegalRiskAnalyzer:
    return LegalRiskAnalyzer()


@pytest.fixture
def high_risk_text() -> str:
    """Contract text with three distinct high-severity phrasings."""
    return (
        "The Client accepts unlimited liability for all losses arising from its use "
        "of the deliverables. The Client shall indemnify and hold harmless the "
        "Provider against any third-party claim. Any dispute shall be settled by "
        "binding arbitration in New York."
    )


@pytest.fixture
def benign_text() -> str:
    """Phrasings that look risky out of context but are harmless."""
    return (
        "Premium members receive unlimited support from our help desk. "
        "We automatically renew your subscription benefits each month. "
        "Our staff cannot access your private data."
    )


@pytest.fixture
def neutral_boilerplate() -> str:
    """Plain text with no risky terms at all."""
    return (
        "This document describes the general arrangement between the parties. "
        "Each party will act in good faith and keep the other informed of relevant "
        "changes. Notices should be sent to the addresses listed below."
    )


@pytest.fixture
def privacy_text() -> str:
    return (
        "This Privacy Policy explains how we collect and use your information. "
        "We share your personal information with third parties such as advertisers "
        "and analytics partners."
    )


@pytest.fixture
def lease_clauses() -> list[Clause]:
    """A handful of pre-segmented lease clauses."""
    return [
        Clause(
            id="c1",
            title="Rent",
            content="Tenant shall pay rent on the first of each month. A late fee of $75 applies.",
            location=TextLocation(start=0, end=80),
        ),
        Clause(
            id="c2",
            title="Repairs",
            content="Tenant must report any damage within 5 days of discovery.",
            location=TextLocation(start=81, end=140),
        ),
        Clause(
            id="c3",
            title="Quiet Enjoyment",
            content="Tenant may use the premises for residential purposes.",
        ),
    ]


@pytest.fixture
def minimal_text() -> str:
    """Minimal text with no legal content (for edge-case testing)."""
    return "Hello world. This is a simple note with nothing to flag."


@pytest.fixture
def tmp_text_file(tmp_path: Path, sample_lease_text: str) -> Path:
    """Create a temporary text file with lease content."""
    file = tmp_path / "lease.txt"
    file.write_text(sample_lease_text, encoding="utf-8")
    return file
