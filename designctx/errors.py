"""Fault taxonomy for context extraction."""

from __future__ import annotations


class ExtractionFault(RuntimeError):
    """Raised when one facet extractor cannot produce its result."""

    def __init__(self, facet: str, message: str) -> None:
        super().__init__(f"{facet}: {message}")
        self.facet = facet


class OrchestrationFault(RuntimeError):
    """Raised when facet results cannot be merged into a context."""


class CacheFault(RuntimeError):
    """Raised when the cache store cannot be read or written."""


__all__ = ["CacheFault", "ExtractionFault", "OrchestrationFault"]
