"""Shared helpers for the catalog and ontology adapters."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from search_gwas.config import ONTOLOGY_ID_PREFIX
from search_gwas.errors import ParseError

T = TypeVar("T")
R = TypeVar("R")


def trailing_segment(uri: str) -> str:
    """Return the final ``/``-separated segment of a URI or path."""

    return uri.strip().rsplit("/", 1)[-1]


def parse_int(value: str, field_name: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ParseError(f"Invalid {field_name} value: {value!r}") from exc


def parse_float(value: str, field_name: str) -> float:
    try:
        return float(value.strip())
    except ValueError as exc:
        raise ParseError(f"Invalid {field_name} value: {value!r}") from exc


def parse_prefixed_id(segment: str, prefix: str = ONTOLOGY_ID_PREFIX) -> int | None:
    """Parse ``EFO_0001360`` style segments; other prefixes yield ``None``."""

    if not segment.startswith(prefix):
        return None
    return parse_int(segment[len(prefix):], f"{prefix} id")


def parallel_map(
    func: Callable[[T], R],
    items: Sequence[T],
    *,
    workers: int,
    chunk_size: int | None = None,
) -> list[R]:
    """Map ``func`` over ``items`` on a bounded thread pool.

    Items are split into contiguous chunks, each chunk is mapped by one worker,
    and the results are joined back in input order. The first exception raised
    by any worker propagates once the join reaches its chunk.
    """

    if not items:
        return []

    size = chunk_size or max(1, math.ceil(len(items) / (workers * 4)))
    chunks = [items[start:start + size] for start in range(0, len(items), size)]

    def run_chunk(chunk: Sequence[T]) -> list[R]:
        return [func(item) for item in chunk]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        mapped = list(executor.map(run_chunk, chunks))

    return [result for chunk in mapped for result in chunk]
