import logging
from datetime import datetime, timezone

import pytest

from artifacts import filters, schemas, service
from auth.sessions import Principal
from core.errors import AuthError, NotFoundError


def _row(**overrides):
    row = {
        "id": 1,
        "title": "Bronze ding",
        "image_path": "ding.jpg",
        "period": "",
        "dynasty": "Shang",
        "location": "",
        "description": "",
        "detailed_description": "",
        "material": "bronze",
        "dimensions": "",
        "discovery_location": "",
        "collection": "",
        "category": "bronze",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "is_favorite": True,
    }
    row.update(overrides)
    return row


@pytest.fixture()
def images(tmp_path, monkeypatch):
    (tmp_path / "ding.jpg").write_bytes(b"jpg")
    monkeypatch.setenv("IMAGES_DIR", str(tmp_path))
    monkeypatch.setenv("DEFAULT_IMAGE", "placeholder.jpg")
    return tmp_path


def test_resolve_image_path(images):
    assert service.resolve_image_path("ding.jpg") == "ding.jpg"
    assert service.resolve_image_path("missing.jpg") == "placeholder.jpg"
    assert service.resolve_image_path("") == "placeholder.jpg"


def test_resolve_image_path_does_not_warn(images, caplog):
    caplog.set_level(logging.DEBUG, logger="artifacts.service")

    service.resolve_image_path("")
    service.resolve_image_path("missing.jpg")

    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert [r.getMessage() for r in caplog.records if r.name == "artifacts.service"] == [
        "image_missing image_path=missing.jpg fallback=placeholder.jpg"
    ]


async def test_search_runs_composed_query(images, monkeypatch):
    seen = []

    async def fake_search(query):
        seen.append(query)
        return [_row(), _row(id=2, image_path="gone.jpg", is_favorite=False)]

    monkeypatch.setattr("artifacts.repository.search", fake_search)

    results = await service.search_artifacts(
        filters.SearchFilters(query="bronze", favorites_only=True),
        principal=Principal(user_id=42, username="alice"),
    )

    assert [r.id for r in results] == [1, 2]
    assert results[1].image_path == "placeholder.jpg"
    assert seen[0].args == (42, "%bronze%")


async def test_anonymous_favorites_search_requires_auth(monkeypatch):
    async def fake_search(query):
        raise AssertionError("must not query")

    monkeypatch.setattr("artifacts.repository.search", fake_search)

    with pytest.raises(AuthError):
        await service.search_artifacts(filters.SearchFilters(favorites_only=True), principal=None)


async def test_toggle_favorite_missing_artifact(monkeypatch):
    async def no_artifact(artifact_id):
        return False

    monkeypatch.setattr("artifacts.repository.artifact_exists", no_artifact)

    with pytest.raises(NotFoundError):
        await service.toggle_favorite(5, principal=Principal(user_id=1, username="a"))


async def test_toggle_favorite_uses_principal(monkeypatch):
    calls = []

    async def exists(artifact_id):
        return True

    async def toggle(*, user_id, artifact_id):
        calls.append((user_id, artifact_id))
        return True

    monkeypatch.setattr("artifacts.repository.artifact_exists", exists)
    monkeypatch.setattr("artifacts.repository.toggle_favorite", toggle)

    result = await service.toggle_favorite(5, principal=Principal(user_id=3, username="a"))
    assert result == schemas.FavoriteResponse(artifact_id=5, is_favorite=True)
    assert calls == [(3, 5)]


async def test_update_and_delete_missing_artifact(monkeypatch):
    async def none_update(artifact_id, fields):
        return None

    async def none_delete(artifact_id):
        return False

    monkeypatch.setattr("artifacts.repository.update_artifact", none_update)
    monkeypatch.setattr("artifacts.repository.delete_artifact", none_delete)

    with pytest.raises(NotFoundError):
        await service.update_artifact(9, schemas.ArtifactInput(title="x"), admin_id=1)
    with pytest.raises(NotFoundError):
        await service.delete_artifact(9, admin_id=1)
