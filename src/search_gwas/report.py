"""Result structures produced by the query engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

Row = tuple[str, ...]


class ReportShape(str, Enum):
    """Which of the query result layouts a report carries."""

    NO_RESULTS = "no_results"
    ASSOCIATION_TABLE = "association_table"
    GENE_LIST = "gene_list"
    PER_GENE_TABLES = "per_gene_tables"
    PARTITION = "partition"


@dataclass
class QueryReport:
    """Evaluated query, independent of how it is printed."""

    title: str
    shape: ReportShape
    columns: tuple[str, ...] = ()
    rows: list[Row] = field(default_factory=list)
    genes: list[str] = field(default_factory=list)
    per_gene: list[tuple[str, list[Row]]] = field(default_factory=list)
    associated: list[str] = field(default_factory=list)
    not_associated: list[str] = field(default_factory=list)
