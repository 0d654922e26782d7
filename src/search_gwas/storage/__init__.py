"""Cache storage: directory layout, atomic commits and archive codec."""

from .atomic import PendingFile, atomic_write, write_bytes_atomic, write_text_atomic
from .codec import (
    ArchiveStore,
    decode_associations,
    decode_metadata,
    decode_trait_nodes,
    encode_associations,
    encode_metadata,
    encode_trait_nodes,
)
from .layout import CacheLayout

__all__ = [
    "ArchiveStore",
    "CacheLayout",
    "PendingFile",
    "atomic_write",
    "write_bytes_atomic",
    "write_text_atomic",
    "encode_associations",
    "decode_associations",
    "encode_trait_nodes",
    "decode_trait_nodes",
    "encode_metadata",
    "decode_metadata",
]
