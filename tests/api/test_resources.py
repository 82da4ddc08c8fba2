"""API resource tests."""

from unittest.mock import AsyncMock
from uuid import uuid4

from falcon.testing import TestClient

from docbundle.domain.exceptions import StoreUnavailable

from tests.api.conftest import JOB_ID


class TestHealth:
    def test_health_ok(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/health")
        assert result.status_code == 200
        assert result.json["status"] == "ok"


class TestPresets:
    def test_list_presets(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets")
        assert result.status_code == 200
        items = result.json["items"]
        assert [p["key"] for p in items] == ["docs", "blog", "docs-distilled"]
        assert items[0]["source"] == "acme/docs"
        assert items[2]["distilled"] is True

    def test_preset_text(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/docs")
        assert result.status_code == 200
        assert result.headers["content-type"].startswith("text/plain")
        assert result.text == (
            "## index.md\n\n# Home\n\n## guide/routing.md\n\n# Routing"
            "\n\nInstructions for LLMs: <SYSTEM>Be brief.</SYSTEM>"
        )

    def test_unknown_preset(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/nope")
        assert result.status_code == 404
        assert "nope" in result.json["error"]

    def test_empty_preset(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/blog")
        assert result.status_code == 404
        assert "No content" in result.json["error"]

    def test_distilled_preset_serves_latest_artifact(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/docs-distilled")
        assert result.status_code == 200
        assert result.text == "## index.md\n\nshort"


class TestPresetSize:
    def test_size_of_materialized_preset(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/docs/size")
        assert result.status_code == 200
        assert result.json == {"size_kb": 1}

    def test_size_of_distilled_preset(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/docs-distilled/size")
        assert result.json == {"size_kb": 1}

    def test_empty_preset_not_generated(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/blog/size")
        assert result.status_code == 200
        assert result.json == {"size_kb": 0, "status": "not_generated"}

    def test_unknown_preset(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/nope/size")
        assert result.status_code == 404


class TestJobs:
    def test_preset_jobs(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/docs-distilled/jobs")
        assert result.status_code == 200
        items = result.json["items"]
        assert [j["id"] for j in items] == [str(JOB_ID)]
        assert items[0]["status"] == "completed"
        assert items[0]["successful_files"] == 1
        assert items[0]["failed_paths"] == ["docs/guide/routing.md"]

    def test_preset_without_jobs(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/docs/jobs")
        assert result.status_code == 200
        assert result.json["items"] == []

    def test_jobs_of_unknown_preset(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/presets/nope/jobs")
        assert result.status_code == 404

    def test_job_by_id(self, client: TestClient) -> None:
        result = client.simulate_get(f"/v1/jobs/{JOB_ID}")
        assert result.status_code == 200
        assert result.json["preset_key"] == "docs-distilled"
        assert result.json["failed_paths"] == ["docs/guide/routing.md"]
        assert result.json["completed_at"] is None

    def test_job_bad_id(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/jobs/not-a-uuid")
        assert result.status_code == 400

    def test_missing_job(self, client: TestClient) -> None:
        result = client.simulate_get(f"/v1/jobs/{uuid4()}")
        assert result.status_code == 404


class TestDistilled:
    def test_latest(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/distilled/docs-distilled")
        assert result.status_code == 200
        assert result.text == "## index.md\n\nshort"

    def test_dated_version(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/distilled/docs-distilled", params={"version": "2025-05-01"})
        assert result.status_code == 200

    def test_invalid_version(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/distilled/docs-distilled", params={"version": "yesterday"})
        assert result.status_code == 400

    def test_missing_version(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/distilled/docs-distilled", params={"version": "2020-01-01"})
        assert result.status_code == 404

    def test_versions(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/distilled/docs-distilled/versions")
        assert result.status_code == 200
        assert [v["version"] for v in result.json["versions"]] == ["latest", "2025-05-01"]
        assert result.json["versions"][0]["document_count"] == 1


class TestDocuments:
    def test_get_document_with_nested_path(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/documents/acme/docs/docs/guide/routing.md")
        assert result.status_code == 200
        body = result.json
        assert body["path"] == "docs/guide/routing.md"
        assert body["title"] == "Routing"
        assert body["content"] == "# Routing"

    def test_missing_document(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/documents/acme/docs/docs/missing.md")
        assert result.status_code == 404


class TestSearch:
    def test_search(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/search", params={"q": "routing"})
        assert result.status_code == 200
        results = result.json["results"]
        assert [r["path"] for r in results] == ["docs/guide/routing.md"]
        assert "content" not in results[0]

    def test_search_requires_query(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/search")
        assert result.status_code == 400

    def test_search_bad_source(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/search", params={"q": "x", "source": "acme"})
        assert result.status_code == 400


class TestStats:
    def test_stats(self, client: TestClient) -> None:
        result = client.simulate_get("/v1/stats")
        assert result.status_code == 200
        assert result.json["total_files"] == 2
        assert result.json["sources"][0]["source"] == "acme/docs"


class TestErrors:
    def test_store_unavailable_is_500(self, client: TestClient, seeded_uow) -> None:
        seeded_uow.documents.stats = AsyncMock(side_effect=StoreUnavailable("database unreachable"))
        result = client.simulate_get("/v1/stats")
        assert result.status_code == 500
        assert result.json == {"error": "database unreachable", "type": "StoreUnavailable"}
