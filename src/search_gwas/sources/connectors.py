"""Source connectors tying a remote document to its adapter and archive."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from search_gwas.adapters import EFOOntologyAdapter, GWASCatalogAdapter
from search_gwas.config import LAST_MODIFIED_FORMAT
from search_gwas.errors import RemoteIOError
from search_gwas.sources.http import HttpClient
from search_gwas.sources.manifest import EFO_MANIFEST, GWAS_CATALOG_MANIFEST, SourceManifest
from search_gwas.storage import ArchiveStore, CacheLayout


def parse_release_date(content_disposition: str) -> date:
    """Extract the release date from a catalog download's Content-Disposition.

    ``attachment; filename=gwas-catalog-download-associations-alt-full_r2024-01-19.tsv``
    yields ``2024-01-19``.
    """

    filename = content_disposition.rsplit("=", 1)[-1].strip().strip('"')
    stamp = filename.rsplit("_", 1)[-1][1:].split(".", 1)[0]
    try:
        return date.fromisoformat(stamp)
    except ValueError as exc:
        raise RemoteIOError(
            f"Unrecognized release stamp in Content-Disposition: {content_disposition!r}"
        ) from exc


def parse_last_modified(value: str) -> datetime:
    """Parse an HTTP ``Last-Modified`` value as a UTC datetime."""

    try:
        parsed = datetime.strptime(value.strip(), LAST_MODIFIED_FORMAT)
    except ValueError as exc:
        raise RemoteIOError(f"Unrecognized Last-Modified header: {value!r}") from exc
    return parsed.replace(tzinfo=timezone.utc)


class SourceConnector(ABC):
    """Base contract for one refreshable source."""

    @property
    @abstractmethod
    def manifest(self) -> SourceManifest:
        """Return source metadata."""

    @abstractmethod
    def raw_path(self, layout: CacheLayout) -> Path:
        """Where the last downloaded raw document is kept."""

    @abstractmethod
    def archive_path(self, layout: CacheLayout) -> Path:
        """Where the processed archive is kept."""

    @abstractmethod
    def is_stale(self, client: HttpClient, archive_modified: datetime) -> bool:
        """Compare the remote freshness signal with the archive's mtime."""

    @abstractmethod
    def ingest(self, text: str, *, workers: int) -> Sequence[Any]:
        """Normalize the raw document into entities."""

    @abstractmethod
    def persist(self, store: ArchiveStore, entities: Sequence[Any]) -> None:
        """Commit the entities through the archive store."""

    def download(self, client: HttpClient) -> str:
        return client.get_text(self.manifest.download_url)


class GWASCatalogConnector(SourceConnector):
    """GWAS Catalog associations, versioned by release date."""

    @property
    def manifest(self) -> SourceManifest:
        return GWAS_CATALOG_MANIFEST

    def raw_path(self, layout: CacheLayout) -> Path:
        return layout.associations_tsv_path

    def archive_path(self, layout: CacheLayout) -> Path:
        return layout.associations_path

    def latest_release(self, client: HttpClient) -> date:
        header = client.head_header(self.manifest.download_url, self.manifest.freshness_header)
        return parse_release_date(header)

    def is_stale(self, client: HttpClient, archive_modified: datetime) -> bool:
        return archive_modified.astimezone(timezone.utc).date() < self.latest_release(client)

    def ingest(self, text: str, *, workers: int) -> Sequence[Any]:
        return GWASCatalogAdapter(workers=workers).parse(text)

    def persist(self, store: ArchiveStore, entities: Sequence[Any]) -> None:
        store.save_associations(entities)


class EFOConnector(SourceConnector):
    """EFO OWL document, versioned by its Last-Modified header."""

    @property
    def manifest(self) -> SourceManifest:
        return EFO_MANIFEST

    def raw_path(self, layout: CacheLayout) -> Path:
        return layout.efo_owl_path

    def archive_path(self, layout: CacheLayout) -> Path:
        return layout.efo_path

    def latest_release(self, client: HttpClient) -> datetime:
        header = client.head_header(self.manifest.download_url, self.manifest.freshness_header)
        return parse_last_modified(header)

    def is_stale(self, client: HttpClient, archive_modified: datetime) -> bool:
        return archive_modified < self.latest_release(client)

    def ingest(self, text: str, *, workers: int) -> Sequence[Any]:
        return EFOOntologyAdapter(workers=workers).parse(text)

    def persist(self, store: ArchiveStore, entities: Sequence[Any]) -> None:
        store.save_trait_nodes(entities)


def build_default_connectors() -> list[SourceConnector]:
    """Catalog first, then ontology, matching refresh order."""

    return [GWASCatalogConnector(), EFOConnector()]
