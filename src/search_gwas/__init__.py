"""Local GWAS Catalog + EFO snapshot with significance queries.

This package keeps a cache directory of processed GWAS Catalog associations
and EFO trait nodes up to date, and answers trait/gene association queries
against it.
"""

from .config import SIGNIFICANCE_THRESHOLD, SearchGwasSettings
from .errors import (
    FilesystemError,
    FormatMismatchError,
    ParseError,
    RemoteIOError,
    SearchGwasError,
)
from .models import Association, AzAssociation, Metadata, TraitNode
from .pipeline import RefreshPipeline, RefreshReport, refresh
from .query import (
    evaluate_az_query,
    evaluate_query,
    find_trait,
    parse_genes,
    query,
    query_az,
)
from .report import QueryReport, ReportShape
from .storage import ArchiveStore, CacheLayout

__all__ = [
    "Association",
    "AzAssociation",
    "Metadata",
    "TraitNode",
    "SIGNIFICANCE_THRESHOLD",
    "SearchGwasSettings",
    "SearchGwasError",
    "RemoteIOError",
    "ParseError",
    "FormatMismatchError",
    "FilesystemError",
    "RefreshPipeline",
    "RefreshReport",
    "refresh",
    "QueryReport",
    "ReportShape",
    "evaluate_query",
    "evaluate_az_query",
    "find_trait",
    "parse_genes",
    "query",
    "query_az",
    "ArchiveStore",
    "CacheLayout",
]
