"""Canonical in-memory entities built during ingestion and loaded for queries."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import total_ordering


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _float_bits(value: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", value))[0]


@total_ordering
@dataclass(frozen=True, eq=False)
class Association:
    """Single normalized GWAS Catalog association.

    ``traits`` and ``mapped_gene`` are sorted tuples. Equality and hashing are
    structural over all five fields, with the p-value compared by bit pattern
    so that equal records always hash alike.
    """

    traits: tuple[int, ...]
    p_value: float
    mapped_gene: tuple[str, ...]
    accession_id: int
    pubmed: int

    def _identity(self) -> tuple[tuple[int, ...], int, tuple[str, ...], int, int]:
        return (
            self.traits,
            _float_bits(self.p_value),
            self.mapped_gene,
            self.accession_id,
            self.pubmed,
        )

    def sort_key(self) -> tuple[tuple[int, ...], float, tuple[str, ...], int, int]:
        """Ordering key used for the global sort before deduplication."""

        return (self.traits, self.p_value, self.mapped_gene, self.accession_id, self.pubmed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Association):
            return NotImplemented
        return self._identity() == other._identity()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Association):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash(self._identity())

    def is_significant(self, threshold: float) -> bool:
        return self.p_value < threshold

    def is_associated_with(self, trait_id: int) -> bool:
        return trait_id in self.traits


@dataclass(eq=False)
class TraitNode:
    """One EFO class.

    Identity is the numeric id only. ``children`` stays empty until the
    ontology backfill pass has seen every node.
    """

    id: int
    label: str
    parent: int | None = None
    children: set[int] = field(default_factory=set)
    synonyms: set[str] = field(default_factory=set)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TraitNode):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class Metadata:
    """Cache-wide refresh marker; ``last_updated`` is always stored in UTC."""

    last_updated: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "last_updated", as_utc(self.last_updated))


@dataclass(frozen=True)
class AzAssociation:
    """Row from the secondary AstraZeneca PheWAS dataset."""

    trait: str
    mapped_gene: str
    p_value: float

    def is_significant(self, threshold: float) -> bool:
        return self.p_value < threshold

    def is_associated_with(self, term: str) -> bool:
        return self.trait == term
