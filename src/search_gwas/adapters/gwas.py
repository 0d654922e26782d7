"""GWAS Catalog TSV ingestion."""

from __future__ import annotations

import csv
import io
import logging

import pandas as pd

from search_gwas.adapters.base import DocumentAdapter
from search_gwas.adapters.common import (
    parallel_map,
    parse_float,
    parse_int,
    parse_prefixed_id,
    trailing_segment,
)
from search_gwas.config import ACCESSION_PREFIX, GWAS_REQUIRED_COLUMNS
from search_gwas.errors import ParseError
from search_gwas.models import Association

logger = logging.getLogger("search_gwas.ingest.gwas")

GwasRow = tuple[str, str, str, str, str]


class GWASCatalogAdapter(DocumentAdapter[Association]):
    """Normalize the GWAS Catalog "alternative" download into associations."""

    name = "gwas_catalog"

    def parse(self, text: str) -> list[Association]:
        frame = self._read_frame(text)
        rows: list[GwasRow] = list(
            frame[list(GWAS_REQUIRED_COLUMNS)].itertuples(index=False, name=None)
        )

        parsed = parallel_map(self.parse_row, rows, workers=self.workers)
        emitted = [association for association in parsed if association is not None]
        associations = list(dict.fromkeys(sorted(emitted)))

        logger.info(
            "GWAS catalog parsed: rows=%d emitted=%d unique=%d",
            len(rows),
            len(emitted),
            len(associations),
        )
        return associations

    @staticmethod
    def _read_frame(text: str) -> pd.DataFrame:
        try:
            frame = pd.read_csv(
                io.StringIO(text),
                sep="\t",
                index_col=False,
                dtype=str,
                keep_default_na=False,
                na_filter=False,
                quoting=csv.QUOTE_NONE,
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise ParseError(f"Malformed GWAS catalog document: {exc}") from exc

        missing = [column for column in GWAS_REQUIRED_COLUMNS if column not in frame.columns]
        if missing:
            raise ParseError(f"GWAS catalog is missing required columns: {', '.join(missing)}")
        return frame

    @staticmethod
    def parse_row(row: GwasRow) -> Association | None:
        """Normalize one catalog row; rows without a mapped gene yield ``None``."""

        trait_uris, p_value, mapped_gene, accession, link = row

        trait_ids = set()
        for uri in trait_uris.split(","):
            trait_id = parse_prefixed_id(trailing_segment(uri))
            if trait_id is not None:
                trait_ids.add(trait_id)

        # Separator-joined values ("A - B", "A, B") stay one literal entry.
        gene = mapped_gene.strip()
        if not gene:
            return None

        return Association(
            traits=tuple(sorted(trait_ids)),
            p_value=parse_float(p_value, "P-VALUE"),
            mapped_gene=(gene.upper(),),
            accession_id=parse_int(accession.strip()[len(ACCESSION_PREFIX):], "STUDY ACCESSION"),
            pubmed=parse_int(trailing_segment(link), "LINK"),
        )
