"""API route tests with services injected through dependency overrides."""
import io
import time
import zipfile
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from ideator.core.dependencies import (
    get_production_manager_dep, get_settings_store_dep,
    get_workspace_manager_dep, get_youtube_client_dep
)
from ideator.main import app
from ideator.models.concept import Concept
from ideator.models.production import ProductionPlan
from ideator.models.video import Comment, DiscoveredVideo
from ideator.services.export_packager import ExportPackager
from ideator.services.generative_client import GenerativeContentClient
from ideator.services.media_assembler import LocalMediaAssembler
from ideator.services.production import ProductionManager
from ideator.services.workspace import WorkspaceManager
from ideator.services.youtube_client import YouTubeSearchClient


@pytest.fixture
def genai(analysis, outline):
    client = AsyncMock(spec=GenerativeContentClient)
    client.generate_concepts.return_value = [
        Concept(id=f"c{i}", title=f"Idea {i}", description="d", style="vlog",
                target_audience="all", estimated_virality=50)
        for i in range(4)
    ]
    client.analyze_concept.return_value = analysis
    client.analyze_video.return_value = analysis
    client.generate_outline.return_value = outline
    client.generate_production_plan.return_value = ProductionPlan(
        full_script="Narration.", image_prompts=[f"prompt {i}" for i in range(6)]
    )
    client.generate_speech.return_value = b"\x00\x00" * 10
    client.generate_image.return_value = b"png"
    return client


@pytest.fixture
def youtube():
    client = AsyncMock(spec=YouTubeSearchClient)
    client.search.return_value = [DiscoveredVideo(id="v1", title="Trending", view_count=10)]
    client.fetch_comments.return_value = [Comment(text="nice")]
    return client


@pytest.fixture
def workspaces(store, genai, youtube):
    return WorkspaceManager(store, genai, youtube)


@pytest.fixture
def productions(genai, tmp_path):
    assembler = AsyncMock(spec=LocalMediaAssembler)
    return ProductionManager(genai, assembler, ExportPackager(), work_root=str(tmp_path / "work"))


@pytest.fixture
def client(store, youtube, workspaces, productions):
    app.dependency_overrides[get_settings_store_dep] = lambda: store
    app.dependency_overrides[get_youtube_client_dep] = lambda: youtube
    app.dependency_overrides[get_workspace_manager_dep] = lambda: workspaces
    app.dependency_overrides[get_production_manager_dep] = lambda: productions
    # Context manager keeps one event loop alive so pipeline tasks run between requests
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _wait_until_idle(client, production_id: str) -> dict:
    for _ in range(200):
        data = client.get(f"/productions/{production_id}").json()["data"]
        if not data["busy"]:
            return data
        time.sleep(0.01)
    raise AssertionError("production did not settle")


def _create_workspace(client) -> str:
    response = client.post("/workspaces", json={"language": "en"})
    assert response.status_code == 201
    return response.json()["data"]["id"]


class TestSettingsRoutes:
    def test_settings_options(self, client):
        response = client.get("/settings")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["credentials"] == {"genai": False, "youtube": False}
        assert "Korean" in data["languages"]
        assert data["formats"]["short"]["aspect_ratio"] == "9:16"
        assert data["formats"]["long"]["aspect_ratio"] == "16:9"

    def test_update_credentials(self, client, store):
        response = client.put("/settings/credentials", json={"genai_api_key": "sk-test"})

        assert response.json()["data"]["credentials"]["genai"] is True
        assert store.get_credential(store.GENAI_KEY) == "sk-test"

    def test_delete_unknown_favorite(self, client):
        response = client.delete("/favorites/nope")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND"


class TestDiscoveryRoutes:
    def test_search(self, client, youtube):
        response = client.get("/search", params={"q": " pasta ", "duration": "short"})

        assert response.status_code == 200
        assert response.json()["data"][0]["id"] == "v1"
        youtube.search.assert_awaited_once_with("pasta", "short")

    def test_search_requires_query(self, client):
        response = client.get("/search")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_comments(self, client):
        response = client.get("/videos/v1/comments")

        assert response.json()["data"][0]["text"] == "nice"


class TestWorkspaceRoutes:
    def test_create_and_get(self, client):
        workspace_id = _create_workspace(client)

        response = client.get(f"/workspaces/{workspace_id}")

        assert response.status_code == 200
        assert response.json()["data"]["language"] == "English"

    def test_unknown_workspace(self, client):
        response = client.get("/workspaces/missing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_concepts_without_credentials(self, client):
        workspace_id = _create_workspace(client)

        response = client.post(f"/workspaces/{workspace_id}/concepts", json={"topic": "cafe"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CONFIG_ERROR"

    def test_concept_flow(self, client, store):
        store.set_credentials(genai_api_key="sk-test")
        workspace_id = _create_workspace(client)

        response = client.post(f"/workspaces/{workspace_id}/concepts", json={"topic": "cafe"})
        assert len(response.json()["data"]["concepts"]) == 4

        response = client.post(f"/workspaces/{workspace_id}/concepts/c2/select")
        data = response.json()["data"]
        assert data["selected_concept"]["id"] == "c2"
        assert data["analysis"]["frequent_keywords"] == ["recipe", "quick"]

        response = client.post(f"/workspaces/{workspace_id}/outline", json={"keyword": "5 minute pasta"})
        assert response.json()["data"]["outline"]["title"] == "Quick Pasta"

        response = client.post(f"/workspaces/{workspace_id}/favorite")
        assert response.json()["data"] == {"is_favorite": True, "favorite_count": 1}

    def test_malformed_body(self, client):
        workspace_id = _create_workspace(client)

        response = client.put(f"/workspaces/{workspace_id}/language", json={})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_production_requires_outline(self, client):
        workspace_id = _create_workspace(client)

        response = client.post(f"/workspaces/{workspace_id}/productions", json={})

        assert response.status_code == 400

    def test_close(self, client, workspaces):
        workspace_id = _create_workspace(client)

        response = client.delete(f"/workspaces/{workspace_id}")

        assert response.json()["data"] == {"closed": workspace_id}
        assert len(workspaces) == 0


class TestProductionRoutes:
    @pytest.fixture
    def production_id(self, client, store):
        store.set_credentials(genai_api_key="sk-test")
        workspace_id = _create_workspace(client)
        client.post(f"/workspaces/{workspace_id}/videos/select",
                    json={"video": {"id": "v1", "title": "Trending"}})
        client.post(f"/workspaces/{workspace_id}/outline", json={"keyword": "pasta"})

        response = client.post(
            f"/workspaces/{workspace_id}/productions",
            json={"parameters": {"is_short_form": True, "image_count": 6}}
        )

        assert response.status_code == 202
        assert response.json()["data"]["parameters"]["language"] == "English"
        return response.json()["data"]["id"]

    def test_status_and_export(self, client, production_id):
        status = _wait_until_idle(client, production_id)
        assert status["state"] == "review_images"
        assert len(status["assets"]) == 7

        response = client.get(f"/productions/{production_id}/export")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert "Quick_Pasta_assets.zip" in response.headers["content-disposition"]
        archive = zipfile.ZipFile(io.BytesIO(response.content))
        assert "script.txt" in archive.namelist()

    def test_unknown_asset(self, client, production_id):
        response = client.get(f"/productions/{production_id}/assets/99")

        assert response.status_code == 404

    def test_invalid_image_count(self, client, store):
        store.set_credentials(genai_api_key="sk-test")
        workspace_id = _create_workspace(client)
        client.post(f"/workspaces/{workspace_id}/outline", json={"keyword": "pasta"})

        response = client.post(
            f"/workspaces/{workspace_id}/productions",
            json={"parameters": {"is_short_form": True, "image_count": 40}}
        )

        assert response.status_code == 400

    def test_unknown_production(self, client):
        assert client.get("/productions/missing").status_code == 404

    def test_delete(self, client, production_id, productions):
        response = client.delete(f"/productions/{production_id}")

        assert response.json()["data"] == {"deleted": production_id}
        assert len(productions) == 0
