"""
Tests for the identity adapter, uploads and store failure handling
"""
import io
import os
import urllib.parse
from unittest.mock import MagicMock, patch

import pytest
import requests
from sqlalchemy.exc import OperationalError

from core.config import settings
from core.errors import Conflict, StoreUnavailable, ValidationError
from core.storage import LocalStorage, SupabaseStorage, build_key
from crud import project_crud
from crud.verification_crud import issue_oauth_state


def fake_response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload or {}
    return resp


class TestGoogleLogin:
    def test_id_token_login_issues_session(self, client):
        info = {"email": "new@example.com", "name": "New Person", "aud": settings.GOOGLE_CLIENT_ID}
        with patch("routers.auth_router.requests.get", return_value=fake_response(200, info)):
            resp = client.post("/auth/login/google", json={"token": "id-token"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["user"]["email"] == "new@example.com"
        assert body["user"]["role"] is None

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.status_code == 200
        assert me.json()["email"] == "new@example.com"

    def test_rejected_token(self, client):
        with patch("routers.auth_router.requests.get", return_value=fake_response(400)):
            resp = client.post("/auth/login/google", json={"token": "bad"})
        assert resp.status_code == 400

    def test_token_for_another_client(self, client):
        info = {"email": "x@example.com", "aud": "someone-else"}
        with patch("routers.auth_router.requests.get", return_value=fake_response(200, info)):
            resp = client.post("/auth/login/google", json={"token": "id-token"})
        assert resp.status_code == 400

    def test_provider_timeout_is_retryable(self, client):
        with patch("routers.auth_router.requests.get", side_effect=requests.Timeout("slow")):
            resp = client.post("/auth/login/google", json={"token": "id-token"})
        assert resp.status_code == 503
        assert resp.json()["code"] == "store_unavailable"

    def test_login_url_carries_state(self, client):
        resp = client.get("/auth/google/login")
        query = urllib.parse.parse_qs(urllib.parse.urlparse(resp.json()["url"]).query)
        assert query["client_id"] == [settings.GOOGLE_CLIENT_ID]
        assert query["state"][0]

    def test_callback_redirects_with_token(self, client, db_session):
        state = issue_oauth_state(db_session)
        with patch("routers.auth_router.requests.post", return_value=fake_response(200, {"access_token": "at"})), \
                patch("routers.auth_router.requests.get", return_value=fake_response(200, {"email": "cb@example.com"})):
            resp = client.get(
                "/auth/google/callback",
                params={"code": "abc", "state": state},
                follow_redirects=False,
            )
        assert resp.status_code == 302
        location = resp.headers["location"]
        assert location.startswith(settings.FRONTEND_URL.rstrip("/") + "/auth/callback?")
        assert "next=onboarding" in location

        # State is one-time use
        resp = client.get("/auth/google/callback", params={"code": "abc", "state": state}, follow_redirects=False)
        assert resp.status_code == 400

    def test_logout(self, client, creator):
        assert client.post("/auth/logout", headers=creator.headers).status_code == 204
        assert client.get("/auth/me", headers=creator.headers).status_code == 401


class TestUpload:
    def test_creator_uploads_raw_footage(self, client, creator):
        resp = client.post(
            "/upload",
            files={"media": ("my clip.mp4", io.BytesIO(b"\x00" * 2048), "video/mp4")},
            data={"kind": "raw_footage"},
            headers=creator.headers,
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["bucket"] == "raw-footage"
        assert body["key"].startswith(f"{creator.id}/raw-")
        assert body["key"].endswith(".mp4")
        assert body["size_bytes"] == 2048
        assert body["url"].endswith(f"{settings.MEDIA_URL_PATH}/raw-footage/{body['key']}")
        assert os.path.exists(os.path.join(settings.MEDIA_DIR, "raw-footage", *body["key"].split("/")))

    def test_editor_cannot_upload_raw_footage(self, client, editor):
        resp = client.post(
            "/upload",
            files={"media": ("clip.mp4", io.BytesIO(b"data"), "video/mp4")},
            data={"kind": "raw_footage"},
            headers=editor.headers,
        )
        assert resp.status_code == 403

    def test_edited_video_must_be_video(self, client, editor):
        resp = client.post(
            "/upload",
            files={"media": ("still.png", io.BytesIO(b"data"), "image/png")},
            data={"kind": "edited_video"},
            headers=editor.headers,
        )
        assert resp.status_code == 422

    def test_too_large(self, client, creator, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10)
        resp = client.post(
            "/upload",
            files={"media": ("clip.mov", io.BytesIO(b"x" * 64), "video/quicktime")},
            data={"kind": "raw_footage"},
            headers=creator.headers,
        )
        assert resp.status_code == 422


class TestStorage:
    def test_build_key_keeps_only_extension(self):
        key = build_key("u1", "edit", "../My Final Cut.MOV")
        assert key.startswith("u1/edit-")
        assert key.endswith(".mov")
        assert "Final" not in key
        assert key.count("/") == 1

    def test_build_key_without_extension(self):
        key = build_key("u1", "raw", "clip")
        assert key.startswith("u1/raw-")
        assert "." not in key

    def test_local_rejects_oversize_and_cleans_up(self, tmp_path):
        storage = LocalStorage(str(tmp_path), "/media")
        with pytest.raises(ValidationError):
            storage.save("raw-footage", "u1/raw-a.mp4", io.BytesIO(b"x" * 100), "video/mp4", "http://h/", 10)
        assert not (tmp_path / "raw-footage" / "u1" / "raw-a.mp4").exists()

    def test_supabase_returns_public_url(self):
        storage = SupabaseStorage("https://proj.supabase.co/", "service-key", 5)
        with patch("core.storage.requests.post", return_value=fake_response(200)) as post:
            url, size = storage.save("edited-videos", "u1/edit-a.mp4", io.BytesIO(b"abc"), "video/mp4", "", 100)
        assert url == "https://proj.supabase.co/storage/v1/object/public/edited-videos/u1/edit-a.mp4"
        assert size == 3
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer service-key"
        assert post.call_args.kwargs["timeout"] == 5

    @pytest.mark.parametrize(
        "outcome,error",
        [
            (requests.Timeout("slow"), StoreUnavailable),
            (requests.ConnectionError("down"), StoreUnavailable),
            (fake_response(503), StoreUnavailable),
            (fake_response(409), Conflict),
            (fake_response(400), ValidationError),
        ],
    )
    def test_supabase_failures(self, outcome, error):
        storage = SupabaseStorage("https://proj.supabase.co", "k", 5)
        kwargs = {"side_effect": outcome} if isinstance(outcome, Exception) else {"return_value": outcome}
        with patch("core.storage.requests.post", **kwargs):
            with pytest.raises(error):
                storage.save("raw-footage", "u1/raw-a.mp4", io.BytesIO(b"abc"), "video/mp4", "", 100)


class TestStoreUnavailable:
    def test_database_outage_maps_to_503(self, client, creator, monkeypatch):
        def boom(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection timed out"))

        monkeypatch.setattr(project_crud, "list_projects_for", boom)
        resp = client.get("/projects/", headers=creator.headers)
        assert resp.status_code == 503
        assert resp.json()["code"] == "store_unavailable"
        assert resp.headers["retry-after"] == "5"
