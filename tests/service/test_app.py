"""Tests for the FastAPI preview service."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from velcro.compose import CircularIncludeError
from velcro.models import BuildReport
from velcro.service import create_app


class _StubOrchestrator:
    def __init__(self, output_dir: Path, error: Exception | None = None) -> None:
        self.output_dir = output_dir
        self.error = error
        self.build_calls: list[dict[str, object]] = []

    def run_build(self, path, *, include_drafts: bool = False, clean: bool = False) -> BuildReport:
        self.build_calls.append({"path": path, "include_drafts": include_drafts, "clean": clean})
        if self.error is not None:
            raise self.error
        self.output_dir.mkdir(parents=True, exist_ok=True)
        index = self.output_dir / "index.html"
        index.write_text("<h1>preview</h1>", encoding="utf-8")
        return BuildReport(output_dir=self.output_dir, written=[index], skipped_drafts=["posts/_wip"])


@pytest.fixture
def stub(tmp_path: Path) -> _StubOrchestrator:
    return _StubOrchestrator(tmp_path.resolve() / "dist")


@pytest.fixture
def client(tmp_path: Path, stub: _StubOrchestrator) -> TestClient:
    return TestClient(create_app(tmp_path, lambda: stub))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_build_endpoint_reports_summary(client: TestClient, stub: _StubOrchestrator, tmp_path: Path) -> None:
    response = client.post("/build", json={"include_drafts": True})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["written"] == 1
    assert data["skipped_drafts"] == ["posts/_wip"]
    assert stub.build_calls == [{"path": tmp_path.resolve(), "include_drafts": True, "clean": False}]


def test_built_output_is_served(client: TestClient) -> None:
    client.post("/build", json={})
    response = client.get("/")
    assert response.status_code == 200
    assert "<h1>preview</h1>" in response.text


def test_build_errors_map_to_422(tmp_path: Path) -> None:
    stub = _StubOrchestrator(tmp_path / "dist", error=CircularIncludeError("nav", ["nav"]))
    client = TestClient(create_app(tmp_path, lambda: stub))

    response = client.post("/build", json={})

    assert response.status_code == 422
    assert "nav" in response.json()["detail"]
