"""Command-line interface for the legal risk engine.

Provides ``assess``, ``metadata`` and ``patterns`` commands with rich
terminal output using the ``click`` and ``rich`` libraries. Input files are
plain UTF-8 text; extracting text from PDF or DOCX happens upstream.

Usage::

    legal-risk assess lease.txt
    legal-risk assess --type contract --clauses clauses.json agreement.txt
    legal-risk metadata lease.txt
    legal-risk patterns --type loan_agreement
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .analyzer import LegalRiskAnalyzer
from .models import DocumentAnalysis, DocumentType, ExtractedLegalMetadata, Severity
from .patterns import PatternCatalog

console = Console()

_DOCUMENT_TYPES = [t.value for t in DocumentType]


def _get_severity_style(level: Severity) -> str:
    """Return a rich style string for a severity level."""
    return {
        Severity.HIGH: "bold red",
        Severity.MEDIUM: "bold yellow",
        Severity.LOW: "dim green",
    }.get(level, "")


def _get_severity_icon(level: Severity) -> str:
    """Return an emoji icon for a severity level."""
    return {
        Severity.HIGH: "🔴",
        Severity.MEDIUM: "🟡",
        Severity.LOW: "🟢",
    }.get(level, "")


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _load_clauses(path: Path | None) -> list[dict]:
    if path is None:
        return []
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path.name} must contain a JSON list of clauses")
    return [item for item in data if isinstance(item, dict)]


@click.group()
@click.version_option(package_name="legal-risk-engine")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def main(verbose: bool) -> None:
    """⚖️ Legal Risk Engine — rule-based risk assessment for legal documents.

    Classify documents, extract parties, dates, amounts and jurisdiction,
    and flag risky terms with actionable recommendations.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        )


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--type", "-t", "doc_type", type=click.Choice(_DOCUMENT_TYPES), default=None,
              help="Document type. Detected from the text when omitted.")
@click.option("--jurisdiction", "-j", default=None,
              help="Jurisdiction tag (e.g. US-CA). Detected from the text when omitted.")
@click.option("--clauses", "-c", "clauses_file",
              type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
              help="JSON file with pre-segmented clauses.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.option("--save", "-s", type=click.Path(path_type=Path), default=None,
              help="Save results to a JSON file.")
def assess(
    file: Path,
    doc_type: str | None,
    jurisdiction: str | None,
    clauses_file: Path | None,
    output: str,
    save: Path | None,
) -> None:
    """Assess the risks in a legal document.

    Example: legal-risk assess --type lease lease.txt
    """
    analyzer = LegalRiskAnalyzer()

    with console.status("[bold blue]Assessing document...", spinner="dots"):
        try:
            clauses = _load_clauses(clauses_file)
            analysis = analyzer.analyze_file(
                file, clauses, document_type=doc_type, jurisdiction=jurisdiction
            )
        except (OSError, ValueError) as e:
            console.print(f"[bold red]Error:[/] {e}")
            sys.exit(1)

    if output == "json":
        click.echo(json.dumps(analysis.to_dict(), indent=2))
    else:
        _render_assessment(analysis, file.name)

    if save:
        save.write_text(json.dumps(analysis.to_dict(), indent=2), encoding="utf-8")
        console.print(f"\n[dim]Results saved to {save}[/]")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def metadata(file: Path, output: str) -> None:
    """Extract parties, dates, amounts and jurisdiction.

    Example: legal-risk metadata lease.txt
    """
    analyzer = LegalRiskAnalyzer()

    try:
        result = analyzer.extract_metadata(_read_text(file))
    except OSError as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render_metadata(result, file.name)


@main.command()
@click.option("--type", "-t", "doc_type", type=click.Choice(_DOCUMENT_TYPES), default="other",
              help="Show the patterns that apply to this document type.")
def patterns(doc_type: str) -> None:
    """List the risk patterns applied to a document type.

    Example: legal-risk patterns --type lease
    """
    catalog = PatternCatalog.default()

    table = Table(title=f"Risk Patterns — {doc_type} (catalog {catalog.version})")
    table.add_column("ID", style="cyan")
    table.add_column("Category", width=12)
    table.add_column("Severity", justify="center", width=8)
    table.add_column("Scope", width=10)

    rows = (
        [(p, "document") for p in catalog.lookup_patterns(doc_type)]
        + [(p, "clause") for p in catalog.clause_patterns]
        + [(p, "contextual") for p in catalog.lookup_contextual(doc_type)]
    )
    for pattern, scope in rows:
        table.add_row(
            pattern.id,
            pattern.category.value,
            Text(pattern.severity.value.upper(), style=_get_severity_style(pattern.severity)),
            scope,
        )

    console.print(table)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_assessment(analysis: DocumentAnalysis, filename: str) -> None:
    """Render a DocumentAnalysis with rich formatting."""
    result = analysis.assessment
    score_style = _get_severity_style(result.overall_risk_score)

    console.print()
    console.print(Panel(
        f"[bold]{filename}[/]\n"
        f"Type: {result.document_type.value} | "
        f"Jurisdiction: {result.jurisdiction} | "
        f"Risks: {result.risk_count} | "
        f"Overall: [{score_style}]{result.overall_risk_score.value.upper()}[/]",
        title="⚖️ Legal Risk Assessment",
        border_style="blue",
    ))

    console.print(Panel(result.risk_summary, title="Summary", border_style="dim"))

    if result.risks:
        table = Table(title="Risks", show_lines=True)
        table.add_column("Severity", justify="center", width=10)
        table.add_column("Category", style="cyan", width=12)
        table.add_column("Description", style="white", max_width=70)
        table.add_column("Clause", justify="center", width=10)

        for risk in result.risks:
            table.add_row(
                Text(
                    f"{_get_severity_icon(risk.severity)} {risk.severity.value.upper()}",
                    style=_get_severity_style(risk.severity),
                ),
                risk.category.value,
                risk.description,
                risk.clause_id or "-",
            )
        console.print(table)
        console.print()

    console.print("[bold]Recommendations[/]")
    for rec in result.recommendations:
        console.print(f"  💡 {rec}")
    console.print()


def _render_metadata(result: ExtractedLegalMetadata, filename: str) -> None:
    """Render extracted metadata as a rich table."""
    table = Table(title=f"Metadata — {filename}", show_lines=False)
    table.add_column("Field", style="cyan", width=14)
    table.add_column("Value", style="white")

    table.add_row("Document type", result.document_type.value)
    table.add_row("Jurisdiction", result.jurisdiction)
    table.add_row("Parties", ", ".join(result.parties) or "-")
    table.add_row("Dates", ", ".join(result.dates) or "-")
    table.add_row("Amounts", ", ".join(result.amounts) or "-")

    console.print(table)
    console.print()


if __name__ == "__main__":
    main()
