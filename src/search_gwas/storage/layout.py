"""File layout of a search-gwas cache directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from search_gwas.errors import FilesystemError


ARCHIVE_SUFFIX = ".parquet"


@dataclass(frozen=True)
class CacheLayout:
    """Resolve every cache path from one explicitly passed root directory."""

    root: Path

    @property
    def associations_path(self) -> Path:
        return self.root / f"associations{ARCHIVE_SUFFIX}"

    @property
    def associations_tsv_path(self) -> Path:
        return self.root / "associations.tsv"

    @property
    def efo_path(self) -> Path:
        return self.root / f"efo{ARCHIVE_SUFFIX}"

    @property
    def efo_owl_path(self) -> Path:
        return self.root / "efo.owl"

    @property
    def metadata_path(self) -> Path:
        return self.root / f"metadata{ARCHIVE_SUFFIX}"

    def ensure(self) -> "CacheLayout":
        """Create the root directory if it does not exist yet."""

        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"Could not create cache directory {self.root}: {exc}") from exc
        return self
