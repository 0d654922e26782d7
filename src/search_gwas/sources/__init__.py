"""Remote source manifests, HTTP access and refresh connectors."""

from .connectors import (
    EFOConnector,
    GWASCatalogConnector,
    SourceConnector,
    build_default_connectors,
    parse_last_modified,
    parse_release_date,
)
from .http import HttpClient
from .manifest import EFO_MANIFEST, GWAS_CATALOG_MANIFEST, SourceManifest

__all__ = [
    "SourceManifest",
    "GWAS_CATALOG_MANIFEST",
    "EFO_MANIFEST",
    "HttpClient",
    "SourceConnector",
    "GWASCatalogConnector",
    "EFOConnector",
    "build_default_connectors",
    "parse_last_modified",
    "parse_release_date",
]
