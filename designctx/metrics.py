"""Bounded accumulator of per-request extraction metrics."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import threading
from typing import Any, Deque, Dict

DEFAULT_MAX_SAMPLES = 500


@dataclass(frozen=True)
class ExtractionSample:
    processing_time: float
    cached: bool
    context_size: int


class ExtractionMetrics:
    """Keeps the most recent samples only; older ones fall off the end."""

    def __init__(self, max_samples: int = DEFAULT_MAX_SAMPLES) -> None:
        self._samples: Deque[ExtractionSample] = deque(maxlen=max(1, max_samples))
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._samples)

    def record(self, processing_time: float, *, cached: bool, context_size: int) -> None:
        with self._lock:
            self._samples.append(ExtractionSample(processing_time, cached, context_size))

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()

    def summary(self) -> Dict[str, Any]:
        with self._lock:
            samples = list(self._samples)
        total = len(samples)
        if not total:
            return {
                "total_extractions": 0,
                "average_time": 0.0,
                "cache_hit_rate": 0.0,
                "average_context_size": 0.0,
            }
        return {
            "total_extractions": total,
            "average_time": sum(sample.processing_time for sample in samples) / total,
            "cache_hit_rate": sum(1 for sample in samples if sample.cached) / total,
            "average_context_size": sum(sample.context_size for sample in samples) / total,
        }


__all__ = ["DEFAULT_MAX_SAMPLES", "ExtractionMetrics", "ExtractionSample"]
