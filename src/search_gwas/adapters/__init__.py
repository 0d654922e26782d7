"""Ingestion adapters for the GWAS Catalog, EFO and the AZ PheWAS dataset."""

from .az import AzDatasetAdapter
from .base import DocumentAdapter
from .efo import EFOOntologyAdapter, backfill_children
from .gwas import GWASCatalogAdapter

__all__ = [
    "DocumentAdapter",
    "GWASCatalogAdapter",
    "EFOOntologyAdapter",
    "AzDatasetAdapter",
    "backfill_children",
]
