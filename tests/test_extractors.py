"""Tests for legal metadata extraction."""

from __future__ import annotations

import pytest

from legal_risk_engine.extractors import (
    JURISDICTION_LEXICON,
    JurisdictionMatch,
    MetadataExtractor,
)
from legal_risk_engine.models import DocumentType


@pytest.fixture
def extractor() -> MetadataExtractor:
    return MetadataExtractor()


# ---------------------------------------------------------------------------
# Full extraction
# ---------------------------------------------------------------------------


class TestExtract:
    """Tests for MetadataExtractor.extract."""

    def test_lease_parties_scenario(self, extractor: MetadataExtractor) -> None:
        metadata = extractor.extract(
            "This lease agreement is between the landlord John Smith and tenant Jane Doe "
            "for the premises at 12 Main Street."
        )
        assert metadata.document_type == DocumentType.LEASE
        assert "John Smith" in metadata.parties
        assert "Jane Doe" in metadata.parties

    def test_dates_scenario(self, extractor: MetadataExtractor) -> None:
        metadata = extractor.extract(
            "This lease is effective from 01/15/2024 and expires on December 31, 2024."
        )
        assert "01/15/2024" in metadata.dates
        assert "December 31, 2024" in metadata.dates

    def test_amounts_scenario(self, extractor: MetadataExtractor) -> None:
        metadata = extractor.extract(
            "The monthly rent is $1,500.00 and the security deposit is $3000 dollars."
        )
        assert "$1,500.00" in metadata.amounts
        assert "3000 dollars" in metadata.amounts

    def test_jurisdiction_scenario(self, extractor: MetadataExtractor) -> None:
        metadata = extractor.extract(
            "This agreement shall be governed by the laws of the State of California."
        )
        assert metadata.jurisdiction == "US-CA"

    def test_sample_lease(self, extractor: MetadataExtractor, sample_lease_text: str) -> None:
        metadata = extractor.extract(sample_lease_text)
        assert metadata.document_type == DocumentType.LEASE
        assert metadata.parties == ("Robert Greene", "Maria Lopez")
        assert metadata.dates == ("January 5, 2024", "02/01/2024", "January 31, 2025")
        assert metadata.amounts == ("$2,150.00", "$75", "$4,300.00", "$50")
        assert metadata.jurisdiction == "US-CA"

    @pytest.mark.parametrize("text", [None, "", "   \n\t  "])
    def test_degenerate_input(self, extractor: MetadataExtractor, text) -> None:
        metadata = extractor.extract(text)
        assert metadata.document_type == DocumentType.OTHER
        assert metadata.parties == ()
        assert metadata.dates == ()
        assert metadata.amounts == ()
        assert metadata.jurisdiction == "unknown"

    def test_plain_text_has_nothing(self, extractor: MetadataExtractor, minimal_text: str) -> None:
        metadata = extractor.extract(minimal_text)
        assert metadata.parties == ()
        assert metadata.amounts == ()
        assert metadata.jurisdiction == "unknown"


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------


class TestParties:
    def test_between_construct(self, extractor: MetadataExtractor) -> None:
        text = 'This Agreement is made between Acme Corp ("Seller") and Beta LLC.'
        assert extractor.extract_parties(text) == ["Acme Corp", "Beta LLC"]

    def test_party_of_the_first_part(self, extractor: MetadataExtractor) -> None:
        text = "The party of the first part: Helen Park, agrees to the terms."
        assert extractor.extract_parties(text) == ["Helen Park"]

    def test_defined_term(self, extractor: MetadataExtractor) -> None:
        text = 'Jane Doe (hereinafter "Tenant") shall occupy the unit.'
        assert extractor.extract_parties(text) == ["Jane Doe"]

    def test_role_colon(self, extractor: MetadataExtractor) -> None:
        text = "Borrower: Samuel Ortiz\nLender: First Coastal Bank"
        assert extractor.extract_parties(text) == ["Samuel Ortiz", "First Coastal Bank"]

    def test_role_words_never_reported(self, extractor: MetadataExtractor) -> None:
        assert extractor.extract_parties("The Landlord and the Tenant agree to these terms.") == []

    def test_deduplicated_in_first_occurrence_order(self, extractor: MetadataExtractor) -> None:
        text = (
            "The tenant Jane Doe signs first. The landlord John Smith signs second. "
            "Tenant Jane Doe keeps a copy."
        )
        assert extractor.extract_parties(text) == ["Jane Doe", "John Smith"]


# ---------------------------------------------------------------------------
# Dates and amounts
# ---------------------------------------------------------------------------


class TestDates:
    def test_formats(self, extractor: MetadataExtractor) -> None:
        text = (
            "Signed 03-15-2024, effective 2024-04-01, renewed on 1st of May, 2025 "
            "and again on 31 December 2025, ending Jan. 2nd 2026."
        )
        assert extractor.extract_dates(text) == [
            "03-15-2024",
            "2024-04-01",
            "1st of May, 2025",
            "31 December 2025",
            "Jan. 2nd 2026",
        ]

    def test_ordered_by_position(self, extractor: MetadataExtractor) -> None:
        text = "Starts March 1, 2024 and the first payment is due 04/01/2024."
        assert extractor.extract_dates(text) == ["March 1, 2024", "04/01/2024"]

    def test_deduplicated(self, extractor: MetadataExtractor) -> None:
        text = "Due 01/15/2024. Reminder: due 01/15/2024."
        assert extractor.extract_dates(text) == ["01/15/2024"]


class TestAmounts:
    def test_symbols_and_magnitudes(self, extractor: MetadataExtractor) -> None:
        text = "Fees of £1,000 and €2 million apply, plus ¥500."
        assert extractor.extract_amounts(text) == ["£1,000", "€2 million", "¥500"]

    def test_currency_code(self, extractor: MetadataExtractor) -> None:
        assert extractor.extract_amounts("The fee is USD 500 per year.") == ["USD 500"]

    def test_currency_words(self, extractor: MetadataExtractor) -> None:
        assert extractor.extract_amounts("A penalty of 250 euros applies.") == ["250 euros"]

    def test_bare_numbers_ignored(self, extractor: MetadataExtractor) -> None:
        assert extractor.extract_amounts("Notify us within 30 days at Suite 200.") == []


# ---------------------------------------------------------------------------
# Jurisdiction
# ---------------------------------------------------------------------------


class TestJurisdiction:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("This agreement is governed by the laws of the State of Texas.", "US-TX"),
            ("Governed by the laws of West Virginia.", "US-WV"),
            ("New York law governs this agreement.", "US-NY"),
            ("Subject to the laws of England and Wales.", "UK"),
            ("The courts of the Province of Ontario have jurisdiction.", "CA-ON"),
            ("Governed by the laws of the District of Columbia.", "US-DC"),
            ("The Commonwealth of Massachusetts governs this note.", "US-MA"),
            ("Governed by the laws of the State of Narnia.", "unknown"),
            ("Nothing about place here.", "unknown"),
        ],
    )
    def test_governing_law(self, extractor: MetadataExtractor, text: str, expected: str) -> None:
        assert extractor.detect_jurisdiction(text) == expected

    def test_earliest_phrase_wins(self, extractor: MetadataExtractor) -> None:
        text = (
            "This lease is governed by the laws of the State of Oregon. Disputes may "
            "also be heard by the courts of New York."
        )
        assert extractor.detect_jurisdiction(text) == "US-OR"

    def test_details_report_indicator(self, extractor: MetadataExtractor) -> None:
        match = extractor.detect_jurisdiction_details(
            "This lease shall be governed by the laws of the State of California."
        )
        assert match == JurisdictionMatch(
            code="US-CA",
            indicator="laws of the State of California",
            source="governing_law",
        )

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Claims are heard in federal court.", "US"),
            ("Each party may instruct a solicitor.", "UK"),
            ("Appeals go to the provincial court.", "CA"),
        ],
    )
    def test_terminology_fallback(
        self, extractor: MetadataExtractor, text: str, expected: str
    ) -> None:
        match = extractor.detect_jurisdiction_details(text)
        assert match.code == expected
        assert match.source == "terminology"

    def test_governing_law_beats_terminology(self, extractor: MetadataExtractor) -> None:
        text = "A solicitor may advise. This agreement is governed by the laws of Ontario."
        assert extractor.detect_jurisdiction(text) == "CA-ON"

    def test_none(self, extractor: MetadataExtractor) -> None:
        match = extractor.detect_jurisdiction_details(None)
        assert match.code == "unknown"
        assert match.to_dict()["source"] == "none"

    def test_lexicon_covers_all_states(self) -> None:
        us_codes = {code for code in JURISDICTION_LEXICON.values() if code.startswith("US-")}
        assert len(us_codes) == 51
