"""Staleness-controlled refresh of the local GWAS/EFO snapshot."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from search_gwas.config import FRESHNESS_WINDOW, SearchGwasSettings
from search_gwas.errors import FilesystemError
from search_gwas.models import Metadata, as_utc
from search_gwas.sources import HttpClient, SourceConnector, build_default_connectors
from search_gwas.storage import ArchiveStore, CacheLayout, write_text_atomic

logger = logging.getLogger("search_gwas.refresh")


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class RefreshReport:
    """Outcome of one refresh call."""

    skipped: bool
    refreshed_sources: list[str] = field(default_factory=list)
    checked_at: datetime | None = None


class RefreshPipeline:
    """Decide which sources need re-ingestion and commit the results atomically.

    Sources are processed one after another (download or local read, parse,
    commit). Each commit replaces a whole file, so an interrupted or failed run
    leaves every previously committed archive intact.
    """

    def __init__(
        self,
        *,
        settings: SearchGwasSettings,
        client: HttpClient | None = None,
        connectors: list[SourceConnector] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings
        self.layout = CacheLayout(Path(settings.cache_dir))
        self.store = ArchiveStore(self.layout)
        self.connectors = connectors if connectors is not None else build_default_connectors()
        self._clock = clock or _utcnow
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> HttpClient:
        # Created on first use so the freshness short-circuit never opens a session.
        if self._client is None:
            self._client = HttpClient(timeout=self.settings.request_timeout)
        return self._client

    def clock(self) -> datetime:
        return as_utc(self._clock())

    def run(self, *, use_local_raw_files: bool = False, force_level: int = 0) -> RefreshReport:
        if force_level not in (0, 1, 2):
            raise ValueError(f"force_level must be 0, 1 or 2, got {force_level}")

        self.layout.ensure()

        metadata = self.store.load_metadata()
        if (
            metadata is not None
            and force_level == 0
            and self.clock() - metadata.last_updated < FRESHNESS_WINDOW
        ):
            logger.info("Snapshot refreshed at %s; skipping update check", metadata.last_updated)
            return RefreshReport(skipped=True, checked_at=metadata.last_updated)

        try:
            refreshed = [
                connector.manifest.source_id
                for connector in self.connectors
                if self._refresh_source(connector, use_local_raw_files, force_level)
            ]
        finally:
            if self._owns_client and self._client is not None:
                self._client.close()
                self._client = None

        checked_at = self.clock()
        self.store.save_metadata(Metadata(last_updated=checked_at))
        logger.info("Refresh complete: refreshed=%s", ",".join(refreshed) or "none")
        return RefreshReport(skipped=False, refreshed_sources=refreshed, checked_at=checked_at)

    def _refresh_source(
        self,
        connector: SourceConnector,
        use_local_raw_files: bool,
        force_level: int,
    ) -> bool:
        name = connector.manifest.display_name
        archive = connector.archive_path(self.layout)

        if not archive.exists():
            logger.info("No processed %s archive; downloading", name)
            self._ingest(connector, local=False)
            return True

        if use_local_raw_files:
            if force_level < 2:
                logger.info("%s: local mode without force, keeping archive", name)
                return False
            self._ingest(connector, local=True)
            return True

        if force_level == 2 or connector.is_stale(self.client, _modified_at(archive)):
            self._ingest(connector, local=False)
            return True

        logger.info("%s archive is current", name)
        return False

    def _ingest(self, connector: SourceConnector, *, local: bool) -> None:
        name = connector.manifest.display_name
        raw_path = connector.raw_path(self.layout)

        if local:
            logger.info("Loading local %s file %s", name, raw_path)
            text = _read_text(raw_path)
        else:
            logger.info("Downloading new %s file", name)
            text = connector.download(self.client)

        logger.info("Processing %s file", name)
        entities = connector.ingest(text, workers=self.settings.workers)
        # Raw document is only kept once it has parsed cleanly.
        if not local:
            write_text_atomic(raw_path, text)
        connector.persist(self.store, entities)
        logger.info("Processed %s file: %d entities", name, len(entities))


def _modified_at(path: Path) -> datetime:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    except OSError as exc:
        raise FilesystemError(f"Could not stat {path}: {exc}") from exc


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Could not read raw document {path}: {exc}") from exc


def refresh(
    cache_dir: str | Path,
    use_local_raw_files: bool = False,
    force_level: int = 0,
    *,
    settings: SearchGwasSettings | None = None,
    client: HttpClient | None = None,
    clock: Callable[[], datetime] | None = None,
) -> RefreshReport:
    """Bring ``cache_dir`` up to date, or leave it exactly as it was on failure."""

    if settings is None:
        settings = SearchGwasSettings.from_env(cache_dir=cache_dir)
    else:
        settings = dataclasses.replace(settings, cache_dir=Path(cache_dir))

    return RefreshPipeline(settings=settings, client=client, clock=clock).run(
        use_local_raw_files=use_local_raw_files,
        force_level=force_level,
    )
