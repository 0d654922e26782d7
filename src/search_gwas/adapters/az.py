"""Reader for the optional AstraZeneca PheWAS secondary dataset."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from search_gwas.config import AZ_COLUMN_CANDIDATES, AZ_FILENAMES
from search_gwas.errors import FilesystemError, ParseError
from search_gwas.models import AzAssociation

logger = logging.getLogger("search_gwas.ingest.az")


class AzDatasetAdapter:
    """Concatenate the gzipped CSV exports found in the secondary directory.

    Each of ``binary``, ``proteomics`` and ``quantitative`` is optional; the
    ones present are read in that order. Trait names are lower-cased and gene
    names upper-cased so that they compare equal to normalized query input.
    """

    name = "az_phewas"

    def __init__(self, az_dir: str | Path) -> None:
        self.az_dir = Path(az_dir)

    def available_paths(self) -> list[Path]:
        return [self.az_dir / name for name in AZ_FILENAMES if (self.az_dir / name).is_file()]

    def read(self) -> list[AzAssociation]:
        associations: list[AzAssociation] = []
        for path in self.available_paths():
            associations.extend(self._read_file(path))
        logger.debug("Loaded %d AZ associations from %s", len(associations), self.az_dir)
        return associations

    def _read_file(self, path: Path) -> list[AzAssociation]:
        try:
            frame = pd.read_csv(path, dtype=str, keep_default_na=False)
        except OSError as exc:
            raise FilesystemError(f"Could not read {path}: {exc}") from exc
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise ParseError(f"Malformed AZ dataset {path}: {exc}") from exc

        columns = [
            self._resolve_column(frame, field_name, path)
            for field_name in ("trait", "gene", "p_value")
        ]

        rows: list[AzAssociation] = []
        dropped = 0
        for trait, gene, p_value in frame[columns].itertuples(index=False, name=None):
            parsed = self._to_float(p_value)
            if parsed is None or not trait.strip() or not gene.strip():
                dropped += 1
                continue
            rows.append(
                AzAssociation(
                    trait=trait.strip().lower(),
                    mapped_gene=gene.strip().upper(),
                    p_value=parsed,
                )
            )

        logger.info("AZ file %s: rows=%d dropped=%d", path.name, len(rows), dropped)
        return rows

    @staticmethod
    def _resolve_column(frame: pd.DataFrame, field_name: str, path: Path) -> str:
        for candidate in AZ_COLUMN_CANDIDATES[field_name]:
            if candidate in frame.columns:
                return candidate
        raise ParseError(
            f"{path.name} has no column for {field_name}; "
            f"expected one of: {', '.join(AZ_COLUMN_CANDIDATES[field_name])}"
        )

    @staticmethod
    def _to_float(value: str) -> float | None:
        try:
            return float(value.strip())
        except ValueError:
            return None
