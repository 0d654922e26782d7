"""Base interface for raw-document ingestion adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class DocumentAdapter(ABC, Generic[T]):
    """Adapter that normalizes one full raw source document into entities."""

    name: str

    def __init__(self, *, workers: int = 4) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.workers = workers

    @abstractmethod
    def parse(self, text: str) -> list[T]:
        """Return the normalized entity collection for ``text``."""
