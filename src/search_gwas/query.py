"""Significance and gene association queries over a loaded snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import TypeVar

import numpy as np
from rich.console import Console

from search_gwas.adapters import AzDatasetAdapter
from search_gwas.config import ACCESSION_PREFIX, PUBMED_URL, SIGNIFICANCE_THRESHOLD
from search_gwas.models import Association, AzAssociation, TraitNode
from search_gwas.render import render_report
from search_gwas.report import QueryReport, ReportShape, Row

logger = logging.getLogger("search_gwas.query")

R = TypeVar("R")


def format_p_value(p_value: float) -> str:
    """Shortest scientific notation, e.g. ``1e-10`` or ``4.9e-8``."""

    return np.format_float_scientific(p_value, trim="-", exp_digits=1)


def format_accession(accession_id: int) -> str:
    return f"{ACCESSION_PREFIX}{accession_id:06d}"


def format_pubmed(pubmed: int, with_links: bool) -> str:
    return PUBMED_URL.format(pubmed=pubmed) if with_links else str(pubmed)


def parse_genes(values: Iterable[str]) -> list[str]:
    """Split comma-separated gene arguments into upper-cased names, keeping order."""

    genes: list[str] = []
    for value in values:
        for gene in value.split(","):
            cleaned = gene.strip().upper()
            if cleaned:
                genes.append(cleaned)
    return genes


def find_trait(nodes: Sequence[TraitNode], label: str) -> TraitNode | None:
    """Resolve a label: exact label match first, then the first synonym hit."""

    wanted = label.strip().upper()
    for node in nodes:
        if node.label == wanted:
            return node
    for node in nodes:
        if wanted in node.synonyms:
            return node
    return None


def _evaluate(
    title: str,
    results: list[R],
    gene_filter: Sequence[str],
    show_associations: bool,
    *,
    genes_of: Callable[[R], Sequence[str]],
    full_columns: tuple[str, ...],
    full_row: Callable[[R], Row],
    gene_columns: tuple[str, ...],
    gene_row: Callable[[R], Row],
) -> QueryReport:
    if not results:
        return QueryReport(title=title, shape=ReportShape.NO_RESULTS)

    if not gene_filter:
        if show_associations:
            return QueryReport(
                title=title,
                shape=ReportShape.ASSOCIATION_TABLE,
                columns=full_columns,
                rows=[full_row(result) for result in results],
            )
        union = dict.fromkeys(gene for result in results for gene in genes_of(result))
        return QueryReport(title=title, shape=ReportShape.GENE_LIST, genes=list(union))

    if show_associations:
        per_gene = [
            (gene, [gene_row(result) for result in results if gene in genes_of(result)])
            for gene in gene_filter
        ]
        return QueryReport(
            title=title,
            shape=ReportShape.PER_GENE_TABLES,
            columns=gene_columns,
            per_gene=per_gene,
        )

    associated: list[str] = []
    not_associated: list[str] = []
    for gene in gene_filter:
        if any(gene in genes_of(result) for result in results):
            associated.append(gene)
        else:
            not_associated.append(gene)
    return QueryReport(
        title=title,
        shape=ReportShape.PARTITION,
        associated=associated,
        not_associated=not_associated,
    )


def evaluate_query(
    trait_node: TraitNode,
    gene_filter: Sequence[str],
    associations: Sequence[Association],
    *,
    show_associations: bool = False,
    show_pubmed_links: bool = False,
    threshold: float = SIGNIFICANCE_THRESHOLD,
) -> QueryReport:
    results = [
        association
        for association in associations
        if association.is_significant(threshold) and association.is_associated_with(trait_node.id)
    ]
    logger.debug("EFO %d: %d significant associations", trait_node.id, len(results))

    return _evaluate(
        trait_node.label,
        results,
        gene_filter,
        show_associations,
        genes_of=lambda association: association.mapped_gene,
        full_columns=("Genes", "P-value", "Accession ID", "PubMed ID"),
        full_row=lambda association: (
            ", ".join(association.mapped_gene),
            format_p_value(association.p_value),
            format_accession(association.accession_id),
            format_pubmed(association.pubmed, show_pubmed_links),
        ),
        gene_columns=("P-value", "Accession ID", "PubMed ID"),
        gene_row=lambda association: (
            format_p_value(association.p_value),
            format_accession(association.accession_id),
            format_pubmed(association.pubmed, show_pubmed_links),
        ),
    )


def evaluate_az_query(
    term: str,
    gene_filter: Sequence[str],
    associations: Sequence[AzAssociation],
    *,
    show_associations: bool = False,
    threshold: float = SIGNIFICANCE_THRESHOLD,
) -> QueryReport:
    results = [
        association
        for association in associations
        if association.is_significant(threshold) and association.is_associated_with(term)
    ]
    logger.debug("AZ trait %r: %d significant associations", term, len(results))

    return _evaluate(
        term,
        results,
        gene_filter,
        show_associations,
        genes_of=lambda association: (association.mapped_gene,),
        full_columns=("Trait", "Genes", "P-value"),
        full_row=lambda association: (
            association.trait,
            association.mapped_gene,
            format_p_value(association.p_value),
        ),
        gene_columns=("Trait", "P-value"),
        gene_row=lambda association: (association.trait, format_p_value(association.p_value)),
    )


def query(
    trait_node: TraitNode,
    gene_filter: Sequence[str],
    associations: Sequence[Association],
    show_associations: bool,
    show_pubmed_links: bool,
    csv: bool,
    *,
    threshold: float = SIGNIFICANCE_THRESHOLD,
    console: Console | None = None,
) -> QueryReport:
    """Evaluate a GWAS trait query and print it as a table, list or CSV."""

    report = evaluate_query(
        trait_node,
        gene_filter,
        associations,
        show_associations=show_associations,
        show_pubmed_links=show_pubmed_links,
        threshold=threshold,
    )
    render_report(report, csv=csv, console=console)
    return report


def query_az(
    term: str,
    gene_filter: Sequence[str],
    show_associations: bool,
    csv: bool,
    *,
    associations: Sequence[AzAssociation] | None = None,
    az_dir: str | Path | None = None,
    threshold: float = SIGNIFICANCE_THRESHOLD,
    console: Console | None = None,
) -> QueryReport:
    """Same as :func:`query` over the AZ PheWAS dataset, matching the trait by name."""

    if associations is None:
        if az_dir is None:
            raise ValueError("query_az needs either associations or az_dir")
        associations = AzDatasetAdapter(az_dir).read()

    report = evaluate_az_query(
        term,
        gene_filter,
        associations,
        show_associations=show_associations,
        threshold=threshold,
    )
    render_report(report, csv=csv, console=console)
    return report
