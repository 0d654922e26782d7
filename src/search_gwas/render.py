"""Print query reports as rich tables, plain lists or CSV."""

from __future__ import annotations

import csv as csv_module
import io
from collections.abc import Sequence

from rich.console import Console
from rich.padding import Padding
from rich.table import Table

from search_gwas.report import QueryReport, ReportShape

NO_RESULTS_MESSAGE = "No significant associations found"


def _line(console: Console, text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _csv_lines(columns: Sequence[str], rows: Sequence[Sequence[str]]) -> list[str]:
    buffer = io.StringIO()
    writer = csv_module.writer(buffer, lineterminator="\n")
    writer.writerow(columns)
    writer.writerows(rows)
    return buffer.getvalue().splitlines()


def _print_rows(
    console: Console,
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    indent: int,
    csv: bool,
) -> None:
    if csv:
        for line in _csv_lines(columns, rows):
            _line(console, " " * indent + line)
        return

    table = Table(*columns)
    for row in rows:
        table.add_row(*row)
    console.print(Padding(table, (0, 0, 0, indent)))


def _print_genes(console: Console, genes: Sequence[str], *, indent: int, csv: bool) -> None:
    if csv:
        _line(console, " " * indent + ",".join(genes))
        return
    for gene in genes:
        _line(console, " " * indent + gene)


def render_report(report: QueryReport, *, csv: bool = False, console: Console | None = None) -> None:
    """Print ``report`` under its title line."""

    console = console or Console()
    _line(console, f"{report.title}:")

    if report.shape is ReportShape.NO_RESULTS:
        _line(console, f"  {NO_RESULTS_MESSAGE}")

    elif report.shape is ReportShape.ASSOCIATION_TABLE:
        _print_rows(console, report.columns, report.rows, indent=2, csv=csv)

    elif report.shape is ReportShape.GENE_LIST:
        # CSV gene lists are printed flush left so they can be piped directly.
        _print_genes(console, report.genes, indent=0 if csv else 2, csv=csv)

    elif report.shape is ReportShape.PER_GENE_TABLES:
        for gene, rows in report.per_gene:
            _line(console, f"  {gene}:")
            if rows:
                _print_rows(console, report.columns, rows, indent=4, csv=csv)
            elif not csv:
                _line(console, "    NONE")

    elif report.shape is ReportShape.PARTITION:
        for heading, genes in (
            ("ASSOCIATED", report.associated),
            ("NOT ASSOCIATED", report.not_associated),
        ):
            if genes:
                _line(console, f"  {heading}:")
                _print_genes(console, genes, indent=4, csv=csv)
