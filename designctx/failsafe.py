"""Fail-safe results returned when extraction cannot complete."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Mapping, Optional

from .extractors.style_models import StyleSystem
from .models import DesignContext, DesignDocument, ExtractionInfo

FALLBACK_CONFIDENCE = 0.1


def build_fallback_style_system(reason: object) -> StyleSystem:
    """Return an all-empty style system carrying the captured error."""
    return StyleSystem(
        confidence=FALLBACK_CONFIDENCE,
        timestamp=utc_timestamp(),
        error=format_reason(reason) or "Style extraction failed",
    )


def build_fallback_context(
    document: DesignDocument | Mapping[str, Any] | None, reason: object
) -> DesignContext:
    """Return the minimal renderable context used when orchestration fails."""
    file_id, name = _identify(document)
    return DesignContext(
        file={"id": file_id, "name": name, "error": "Context extraction failed"},
        nodes=[],
        styles={},
        components={},
        layout={},
        prototypes={},
        extraction=ExtractionInfo(
            timestamp=utc_timestamp(),
            confidence=FALLBACK_CONFIDENCE,
            error=format_reason(reason) or "Context extraction failed",
        ),
    )


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def format_reason(reason: object) -> Optional[str]:
    if reason is None:
        return None
    cleaned = " ".join(str(reason).strip().split())
    if not cleaned:
        return None
    return cleaned[:200] + ("…" if len(cleaned) > 200 else "")


def _identify(document: DesignDocument | Mapping[str, Any] | None) -> tuple[str, str]:
    if isinstance(document, DesignDocument):
        return document.metadata.id, document.metadata.name
    if isinstance(document, Mapping):
        raw_root = document.get("document")
        root_id = raw_root.get("id") if isinstance(raw_root, Mapping) else None
        file_id = document.get("id") or root_id or "unknown"
        return str(file_id), str(document.get("name") or "Untitled")
    return "unknown", "Untitled"


__all__ = [
    "FALLBACK_CONFIDENCE",
    "build_fallback_context",
    "build_fallback_style_system",
    "format_reason",
    "utc_timestamp",
]
