"""Error taxonomy for refresh, ingestion and archive handling."""

from __future__ import annotations


class SearchGwasError(Exception):
    """Base class for every failure surfaced by search-gwas."""


class RemoteIOError(SearchGwasError):
    """Network failure or a malformed response from a remote source."""


class ParseError(SearchGwasError, ValueError):
    """Raw catalog or ontology content could not be normalized."""


class FormatMismatchError(SearchGwasError):
    """An archive was written by an incompatible encoding version or for another entity kind."""


class FilesystemError(SearchGwasError, OSError):
    """Creating, reading, renaming or removing a cache path failed."""
