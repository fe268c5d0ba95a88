"""Integration tests for API endpoints."""
import asyncio
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from maestro import __version__
from maestro.handlers.registry import HandlerRegistry
from maestro.main import create_app

MANIFEST = """# Sprint

**Task 1**: Fix crash
- Status: Not Started
**Goal:** Stop the launch crash
**Skills Needed:** swift development

**Task 2**: Design tokens
- Status: Not Started
**Goal:** Define colours
**Skills Needed:** graphic design
"""


@pytest.fixture
def app(make_handler):
    application = create_app()
    # Lifespan doesn't run under ASGITransport; install the registry directly.
    application.state.handler_registry = HandlerRegistry(
        [
            make_handler(
                "developer",
                "Swift Developer",
                ["swift development"],
                generated_files=["out/Fix_crash.md"],
            ),
            make_handler("research", "Market Research Specialist", ["market research"]),
        ]
    )
    return application


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "maestro", "version": __version__}


@pytest.mark.asyncio
async def test_list_handlers(client):
    response = await client.get("/api/v1/handlers")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [h["name"] for h in data["handlers"]] == ["developer", "research"]
    assert data["handlers"][0]["skills"] == ["swift development"]


@pytest.mark.asyncio
async def test_run_manifest(client, tmp_path):
    manifest = tmp_path / "sprint.md"
    manifest.write_text(MANIFEST, encoding="utf-8")

    response = await client.post(
        "/api/v1/runs",
        json={"manifest_path": str(manifest), "reports_dir": str(tmp_path / "reports")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total_tasks"] == 2
    assert data["success_count"] == 1
    assert data["failure_count"] == 1
    assert data["success_rate"] == 50
    assert Path(data["run_dir"]).parent == tmp_path / "reports"

    by_title = {r["title"]: r for r in data["results"]}
    assert by_title["Fix crash"]["status"] == "Completed"
    assert by_title["Fix crash"]["generated_files"] == ["out/Fix_crash.md"]
    assert by_title["Design tokens"]["status"] == "Failed"
    assert by_title["Design tokens"]["notes"].startswith("NoSuitableHandler:")

    assert "- Status: Completed" in manifest.read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_run_missing_manifest(client, tmp_path):
    response = await client.post(
        "/api/v1/runs", json={"manifest_path": str(tmp_path / "absent.md")}
    )
    assert response.status_code == 404
    assert response.json()["error"] == "ManifestNotFoundError"


@pytest.mark.asyncio
async def test_run_unusable_reports_dir(client, tmp_path):
    manifest = tmp_path / "sprint.md"
    manifest.write_text(MANIFEST, encoding="utf-8")
    blocker = tmp_path / "blocked"
    blocker.write_text("", encoding="utf-8")

    response = await client.post(
        "/api/v1/runs",
        json={"manifest_path": str(manifest), "reports_dir": str(blocker / "reports")},
    )

    assert response.status_code == 500
    assert response.json()["error"] == "OutputDirectoryUnavailableError"


@pytest.mark.asyncio
async def test_run_rejects_empty_path(client):
    response = await client.post("/api/v1/runs", json={"manifest_path": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_request_id_echoed(client):
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"

    generated = await client.get("/api/v1/health")
    assert len(generated.headers["X-Request-ID"]) == 32


def test_error_status_follows_class_hierarchy():
    from maestro.api.v1.middleware.error_handler import status_for
    from maestro.utils.exceptions import GitError, ManifestNotFoundError, MissingGoalError

    class PushRejected(GitError):
        pass

    assert status_for(ManifestNotFoundError("m.md")) == 404
    assert status_for(PushRejected("git push", "rejected")) == 502
    assert status_for(MissingGoalError("t")) == 500


@pytest.mark.asyncio
async def test_concurrent_runs_on_same_manifest_keep_every_update(
    app, client, make_handler, tmp_path
):
    app.state.handler_registry = HandlerRegistry(
        [make_handler("developer", "Swift Developer", ["swift development"], max_delay=0.02)]
    )
    manifest = tmp_path / "sprint.md"
    manifest.write_text(
        "".join(
            f"**Task {i}**: Job {i}\n- Status: Not Started\n**Goal:** do {i}\n"
            f"**Skills Needed:** swift development\n\n"
            for i in range(6)
        ),
        encoding="utf-8",
    )
    body = {"manifest_path": str(manifest), "reports_dir": str(tmp_path / "reports")}

    first, second = await asyncio.gather(
        client.post("/api/v1/runs", json=body),
        client.post("/api/v1/runs", json=body),
    )

    assert first.status_code == second.status_code == 200
    text = manifest.read_text(encoding="utf-8")
    assert "Not Started" not in text
    assert text.count("- Status: Completed") == 6
    assert text.count("✓ **Task") == 6
    assert len(app.state.manifest_locks) == 1
