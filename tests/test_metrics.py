"""Tests for the extraction metrics accumulator."""

from __future__ import annotations

import pytest

from designctx.metrics import ExtractionMetrics


def test_summary_of_empty_accumulator() -> None:
    assert ExtractionMetrics().summary() == {
        "total_extractions": 0,
        "average_time": 0.0,
        "cache_hit_rate": 0.0,
        "average_context_size": 0.0,
    }


def test_summary_averages_samples() -> None:
    metrics = ExtractionMetrics()
    metrics.record(0.2, cached=False, context_size=100)
    metrics.record(0.4, cached=True, context_size=300)

    summary = metrics.summary()

    assert summary["total_extractions"] == 2
    assert summary["average_time"] == pytest.approx(0.3)
    assert summary["cache_hit_rate"] == 0.5
    assert summary["average_context_size"] == 200


def test_accumulator_is_bounded() -> None:
    metrics = ExtractionMetrics(max_samples=3)
    for index in range(10):
        metrics.record(float(index), cached=False, context_size=1)

    assert len(metrics) == 3
    assert metrics.summary()["average_time"] == pytest.approx(8.0)

    metrics.clear()
    assert len(metrics) == 0
