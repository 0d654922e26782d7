"""Configuration constants and runtime settings for search-gwas."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Mapping


GWAS_CATALOG_URL = "https://www.ebi.ac.uk/gwas/api/search/downloads/alternative"
EFO_URL = "https://www.ebi.ac.uk/efo/efo.owl"
PUBMED_URL = "https://pubmed.ncbi.nlm.nih.gov/{pubmed}"

ONTOLOGY_ID_PREFIX = "EFO_"
ACCESSION_PREFIX = "GCST"

SIGNIFICANCE_THRESHOLD = 5e-8
FRESHNESS_WINDOW = timedelta(days=1)

CONTENT_DISPOSITION_HEADER = "Content-Disposition"
LAST_MODIFIED_HEADER = "Last-Modified"
LAST_MODIFIED_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"

GWAS_REQUIRED_COLUMNS: tuple[str, ...] = (
    "MAPPED_TRAIT_URI",
    "P-VALUE",
    "MAPPED_GENE",
    "STUDY ACCESSION",
    "LINK",
)

AZ_FILENAMES: tuple[str, ...] = (
    "binary.csv.gz",
    "proteomics.csv.gz",
    "quantitative.csv.gz",
)

# Header candidates per secondary-dataset field, first match wins.
AZ_COLUMN_CANDIDATES: Mapping[str, tuple[str, ...]] = {
    "trait": ("trait", "Phenotype"),
    "gene": ("gene", "Gene"),
    "p_value": ("p_value", "pValue", "p-value"),
}

GLOBAL_SHARE_DIR = Path("/usr/local/share/search-gwas")
AZ_DIRNAME = "az470k-proteomics"

DEFAULT_REQUEST_TIMEOUT = 120.0


def default_cache_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the per-user data directory used when no cache dir is given."""

    env = os.environ if environ is None else environ
    xdg = env.get("XDG_DATA_HOME")
    base = Path(os.path.expanduser(xdg)) if xdg else Path.home() / ".local" / "share"
    return base / "search-gwas"


def default_az_dir(cache_dir: Path) -> Path:
    """Prefer the system-wide share directory, falling back to the cache dir."""

    if GLOBAL_SHARE_DIR.exists():
        return GLOBAL_SHARE_DIR / AZ_DIRNAME
    return cache_dir / AZ_DIRNAME


@dataclass(frozen=True)
class SearchGwasSettings:
    """Runtime settings passed explicitly into refresh and query operations."""

    cache_dir: Path
    az_dir: Path
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    workers: int = 4
    significance_threshold: float = SIGNIFICANCE_THRESHOLD

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        cache_dir: str | Path | None = None,
        request_timeout: float | None = None,
    ) -> "SearchGwasSettings":
        """Build settings from ``SEARCH_GWAS_*`` variables and explicit overrides."""

        env = os.environ if environ is None else environ

        if cache_dir is None:
            cache_dir = env.get("SEARCH_GWAS_DIR") or default_cache_dir(env)
        resolved_cache = Path(os.path.expandvars(os.path.expanduser(str(cache_dir))))

        az_raw = env.get("SEARCH_GWAS_AZ_DIR")
        az_dir = (
            Path(os.path.expandvars(os.path.expanduser(az_raw)))
            if az_raw
            else default_az_dir(resolved_cache)
        )

        if request_timeout is None:
            request_timeout = float(env.get("SEARCH_GWAS_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))
        if request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")

        workers = int(env.get("SEARCH_GWAS_WORKERS", os.cpu_count() or 4))
        if workers < 1:
            raise ValueError("SEARCH_GWAS_WORKERS must be >= 1")

        return cls(
            cache_dir=resolved_cache,
            az_dir=az_dir,
            request_timeout=request_timeout,
            workers=workers,
        )
