"""Static descriptions of the remote sources mirrored into the cache."""

from __future__ import annotations

from dataclasses import dataclass

from search_gwas.config import (
    CONTENT_DISPOSITION_HEADER,
    EFO_URL,
    GWAS_CATALOG_URL,
    LAST_MODIFIED_HEADER,
)


@dataclass(frozen=True)
class SourceManifest:
    """Immutable metadata for one remotely hosted raw document."""

    source_id: str
    display_name: str
    download_url: str
    freshness_header: str


GWAS_CATALOG_MANIFEST = SourceManifest(
    source_id="gwas_catalog",
    display_name="GWAS Catalog",
    download_url=GWAS_CATALOG_URL,
    freshness_header=CONTENT_DISPOSITION_HEADER,
)

EFO_MANIFEST = SourceManifest(
    source_id="efo",
    display_name="Experimental Factor Ontology",
    download_url=EFO_URL,
    freshness_header=LAST_MODIFIED_HEADER,
)
