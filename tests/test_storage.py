"""스토리지 테스트 — 업로드 경로, 렌더 URL 변환, 증빙 업로드 API."""

import pytest
from httpx import AsyncClient

from observations.config import settings
from observations.services.storage_service import storage_service
from tests.conftest import auth_header

UPLOAD = "/api/v1/app/storage/evidence"
HOSTED = "https://proj.supabase.co/storage/v1/object/public/evidencias/u1/1_a.jpg"


@pytest.fixture
def local_storage(tmp_path, monkeypatch):
    """로컬 모드 스토리지 — 업로드 디렉토리를 임시 경로로."""
    monkeypatch.setattr(settings, "AWS_ACCESS_KEY_ID", "")
    monkeypatch.setattr(settings, "LOCAL_UPLOADS_DIR", str(tmp_path))
    return tmp_path


class TestEvidencePath:

    def test_unsafe_characters_collapse(self):
        path = storage_service.build_evidence_path("u1", "my photo (1).jpg", now_ms=1700000000000)
        assert path == "u1/1700000000000_my_photo_1_.jpg"

    def test_empty_name(self):
        assert storage_service.build_evidence_path("u1", "  ", now_ms=5) == "u1/5_evidence"


class TestRenderTransform:

    def test_public_url_rewritten(self):
        url = storage_service.render_transform_url(HOSTED, width=160, quality=45, resize="contain")
        assert url == (
            "https://proj.supabase.co/storage/v1/render/image/public/evidencias/u1/1_a.jpg"
            "?width=160&quality=45&resize=contain"
        )

    def test_render_url_params_replaced(self):
        render = "https://proj.supabase.co/storage/v1/render/image/public/evidencias/u1/1_a.jpg?width=50"
        url = storage_service.render_transform_url(render, width=300, fmt="webp")
        assert url.endswith("?width=300&format=webp")

    def test_unknown_resize_and_format_ignored(self):
        url = storage_service.render_transform_url(HOSTED, resize="stretch", fmt="gif")
        assert "resize" not in url
        assert "format" not in url

    @pytest.mark.parametrize("url", [
        "https://example.com/a.jpg",
        "data:image/png;base64,AAAA",
        "blob:https://app/123",
        "",
        None,
    ])
    def test_other_urls_unchanged(self, url):
        assert storage_service.render_transform_url(url, width=160) == url

    def test_thumbnail(self):
        assert storage_service.thumbnail_url(None) is None
        assert "width=160" in storage_service.thumbnail_url(HOSTED)


class TestUploadApi:

    async def test_upload_image(self, client: AsyncClient, normal_user, user_token, local_storage):
        res = await client.post(
            UPLOAD,
            files={"file": ("foto obra.png", b"\x89PNG fake", "image/png")},
            headers=auth_header(user_token),
        )
        assert res.status_code == 201
        data = res.json()
        prefix = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/uploads/{settings.EVIDENCE_BUCKET}/{normal_user.id}/"
        assert data["file_url"].startswith(prefix)
        assert data["file_url"].endswith("_foto_obra.png")
        assert storage_service.is_own_url(data["file_url"])

        stored = list((local_storage / settings.EVIDENCE_BUCKET / str(normal_user.id)).iterdir())
        assert len(stored) == 1
        assert stored[0].read_bytes() == b"\x89PNG fake"

    async def test_rejects_non_image(self, client: AsyncClient, user_token, local_storage):
        res = await client.post(
            UPLOAD,
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_header(user_token),
        )
        assert res.status_code == 422
        assert res.json()["detail"]["field"] == "file"

    async def test_rejects_empty_file(self, client: AsyncClient, user_token, local_storage):
        res = await client.post(
            UPLOAD,
            files={"file": ("empty.png", b"", "image/png")},
            headers=auth_header(user_token),
        )
        assert res.status_code == 422

    async def test_requires_auth(self, client: AsyncClient, local_storage):
        res = await client.post(UPLOAD, files={"file": ("a.png", b"x", "image/png")})
        assert res.status_code == 401

    def test_external_url_is_not_own(self):
        assert not storage_service.is_own_url("https://elsewhere.com/a.jpg")
        assert not storage_service.is_own_url(None)
