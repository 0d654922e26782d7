"""Parquet archive codec for associations, EFO nodes and cache metadata.

Archives are plain Parquet documents written with pyarrow. The schema metadata
carries the entity kind and an encoding version; beyond that, decoding trusts
the archive. A truncated or foreign file either raises whatever pyarrow raises
or decodes into unspecified data.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from search_gwas.errors import FilesystemError, FormatMismatchError
from search_gwas.models import Association, Metadata, TraitNode
from search_gwas.storage.atomic import write_bytes_atomic
from search_gwas.storage.layout import CacheLayout


FORMAT_VERSION = "1"

_KIND_KEY = b"search_gwas.kind"
_VERSION_KEY = b"search_gwas.format_version"

ASSOCIATION_SCHEMA = pa.schema(
    [
        pa.field("traits", pa.list_(pa.int64())),
        pa.field("p_value", pa.float64()),
        pa.field("mapped_gene", pa.list_(pa.string())),
        pa.field("accession_id", pa.int64()),
        pa.field("pubmed", pa.int64()),
    ]
)

TRAIT_NODE_SCHEMA = pa.schema(
    [
        pa.field("id", pa.int64()),
        pa.field("label", pa.string()),
        pa.field("parent", pa.int64()),
        pa.field("children", pa.list_(pa.int64())),
        pa.field("synonyms", pa.list_(pa.string())),
    ]
)

METADATA_SCHEMA = pa.schema([pa.field("last_updated", pa.timestamp("us", tz="UTC"))])


def _tagged(schema: pa.Schema, kind: str) -> pa.Schema:
    return schema.with_metadata({_KIND_KEY: kind.encode(), _VERSION_KEY: FORMAT_VERSION.encode()})


def _write_table(table: pa.Table) -> bytes:
    sink = pa.BufferOutputStream()
    pq.write_table(table, sink, compression="zstd")
    return sink.getvalue().to_pybytes()


def _read_table(data: bytes, kind: str) -> pa.Table:
    try:
        table = pq.read_table(pa.BufferReader(data))
    except pa.ArrowInvalid as exc:
        raise FormatMismatchError(f"Unreadable {kind} archive: {exc}") from exc
    metadata = table.schema.metadata or {}
    found_kind = metadata.get(_KIND_KEY, b"").decode()
    found_version = metadata.get(_VERSION_KEY, b"").decode()
    if found_version != FORMAT_VERSION or found_kind != kind:
        raise FormatMismatchError(
            f"Expected {kind} archive v{FORMAT_VERSION}, "
            f"found {found_kind or 'unknown'} archive v{found_version or '?'}"
        )
    return table


def encode_associations(associations: Sequence[Association]) -> bytes:
    columns = {
        "traits": [list(item.traits) for item in associations],
        "p_value": [item.p_value for item in associations],
        "mapped_gene": [list(item.mapped_gene) for item in associations],
        "accession_id": [item.accession_id for item in associations],
        "pubmed": [item.pubmed for item in associations],
    }
    table = pa.Table.from_pydict(columns, schema=_tagged(ASSOCIATION_SCHEMA, "association"))
    return _write_table(table)


def decode_associations(data: bytes) -> list[Association]:
    columns = _read_table(data, "association").to_pydict()
    return [
        Association(
            traits=tuple(traits),
            p_value=p_value,
            mapped_gene=tuple(mapped_gene),
            accession_id=accession_id,
            pubmed=pubmed,
        )
        for traits, p_value, mapped_gene, accession_id, pubmed in zip(
            columns["traits"],
            columns["p_value"],
            columns["mapped_gene"],
            columns["accession_id"],
            columns["pubmed"],
        )
    ]


def encode_trait_nodes(nodes: Sequence[TraitNode]) -> bytes:
    columns = {
        "id": [node.id for node in nodes],
        "label": [node.label for node in nodes],
        "parent": [node.parent for node in nodes],
        "children": [sorted(node.children) for node in nodes],
        "synonyms": [sorted(node.synonyms) for node in nodes],
    }
    table = pa.Table.from_pydict(columns, schema=_tagged(TRAIT_NODE_SCHEMA, "trait_node"))
    return _write_table(table)


def decode_trait_nodes(data: bytes) -> list[TraitNode]:
    columns = _read_table(data, "trait_node").to_pydict()
    return [
        TraitNode(
            id=node_id,
            label=label,
            parent=parent,
            children=set(children),
            synonyms=set(synonyms),
        )
        for node_id, label, parent, children, synonyms in zip(
            columns["id"],
            columns["label"],
            columns["parent"],
            columns["children"],
            columns["synonyms"],
        )
    ]


def encode_metadata(metadata: Metadata) -> bytes:
    table = pa.Table.from_pydict(
        {"last_updated": [metadata.last_updated]},
        schema=_tagged(METADATA_SCHEMA, "metadata"),
    )
    return _write_table(table)


def decode_metadata(data: bytes) -> Metadata:
    columns = _read_table(data, "metadata").to_pydict()
    return Metadata(last_updated=columns["last_updated"][0])


class ArchiveStore:
    """Load and atomically persist the archives of one cache directory."""

    def __init__(self, layout: CacheLayout) -> None:
        self.layout = layout

    def load_associations(self) -> list[Association]:
        return decode_associations(self._read(self.layout.associations_path))

    def save_associations(self, associations: Sequence[Association]) -> None:
        write_bytes_atomic(self.layout.associations_path, encode_associations(associations))

    def load_trait_nodes(self) -> list[TraitNode]:
        return decode_trait_nodes(self._read(self.layout.efo_path))

    def save_trait_nodes(self, nodes: Sequence[TraitNode]) -> None:
        write_bytes_atomic(self.layout.efo_path, encode_trait_nodes(nodes))

    def load_metadata(self) -> Metadata | None:
        """Return the refresh marker, or ``None`` if the cache was never refreshed."""

        if not self.layout.metadata_path.exists():
            return None
        return decode_metadata(self._read(self.layout.metadata_path))

    def save_metadata(self, metadata: Metadata) -> None:
        write_bytes_atomic(self.layout.metadata_path, encode_metadata(metadata))

    @staticmethod
    def _read(path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FilesystemError(f"Could not read archive {path}: {exc}") from exc
