"""Tests for the FastAPI service mode."""

from __future__ import annotations

from typing import Any, Dict

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi test client not installed", allow_module_level=True)

from designctx.orchestrator import ContextOrchestrator
from designctx.service import create_app
from designctx.stores import ContextCache


@pytest.fixture
def client() -> TestClient:
    app = create_app(lambda: ContextOrchestrator(cache=ContextCache()))
    with TestClient(app) as test_client:
        yield test_client


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_context_endpoint_reuses_orchestrator_cache(
    client: TestClient, sample_payload: Dict[str, Any]
) -> None:
    first = client.post("/context", json={"document": sample_payload})
    second = client.post("/context", json={"document": sample_payload})

    assert first.status_code == 200
    body = first.json()
    assert body["file"]["id"] == "file-1"
    assert body["extraction"]["cached"] is False
    assert body["extraction"]["confidence"] == 1.0
    assert second.json()["extraction"]["cached"] is True


def test_context_endpoint_passes_options(client: TestClient, sample_payload: Dict[str, Any]) -> None:
    response = client.post(
        "/context",
        json={"document": sample_payload, "options": {"techStack": "react", "enableCaching": False}},
    )

    assert response.json()["technical"]["framework"] == "react"


def test_context_endpoint_returns_fallback_for_bad_document(client: TestClient) -> None:
    response = client.post("/context", json={"document": {"id": "broken"}})

    assert response.status_code == 200
    body = response.json()
    assert body["extraction"]["confidence"] == 0.1
    assert body["file"]["error"] == "Context extraction failed"


def test_complexity_endpoint(client: TestClient, sample_payload: Dict[str, Any]) -> None:
    response = client.post("/complexity", json={"document": sample_payload, "tech_stack": "react"})

    assert response.status_code == 200
    body = response.json()
    assert body["architecture"] == "functional-components"
    assert body["metrics"]["node_count"] == 11


def test_complexity_endpoint_rejects_missing_tree(client: TestClient) -> None:
    response = client.post("/complexity", json={"document": {"id": "broken"}})

    assert response.status_code == 422


def test_metrics_endpoint(client: TestClient, sample_payload: Dict[str, Any]) -> None:
    client.post("/context", json={"document": sample_payload})

    body = client.get("/metrics").json()

    assert body["status"] == "healthy"
    assert body["cache"]["connected"] is True
    assert body["cache"]["entries"] == 1
    assert body["metrics"]["total_extractions"] == 1
