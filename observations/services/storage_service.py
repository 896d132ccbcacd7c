"""스토리지 서비스 — 증빙 사진을 S3 또는 로컬 디스크에 저장.

Storage Service — Evidence photos on S3 or local disk.
AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다 (served at /uploads).
Object keys are ``<bucket>/<actor id>/<epoch ms>_<safe file name>``.

Hosted-storage public URLs (``/storage/v1/object/public/...``) can be
rewritten to the image render endpoint for thumbnails; any other URL is
returned unchanged.
"""

import re
import time
from pathlib import Path
from urllib.parse import urlencode, urlsplit, urlunsplit, parse_qsl

from observations.config import settings
from observations.utils.exceptions import UpstreamError

_SERVER_ROOT: Path = Path(__file__).resolve().parent.parent.parent

PUBLIC_MARKER: str = "/storage/v1/object/public/"
RENDER_MARKER: str = "/storage/v1/render/image/public/"
RESIZE_MODES: tuple[str, ...] = ("cover", "contain", "fill")
FORMATS: tuple[str, ...] = ("webp", "jpeg", "png")

_UNSAFE_CHARS = re.compile(r"[^\w.\-]+")


def uploads_dir() -> Path:
    """로컬 업로드 디렉토리 — LOCAL_UPLOADS_DIR 또는 <root>/uploads."""
    return Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _SERVER_ROOT / "uploads"


class StorageService:
    """파일 업로드 서비스 — S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    def _base_url(self) -> str:
        if self.is_local:
            return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/uploads/"
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/"

    def build_evidence_path(self, actor_id: str, filename: str, now_ms: int | None = None) -> str:
        """업로드 경로 — ``<actor>/<epoch_ms>_<safe name>``.

        Characters outside ``[A-Za-z0-9_.-]`` collapse to ``_``.
        """
        safe_name = _UNSAFE_CHARS.sub("_", (filename or "").strip()) or "evidence"
        stamp = now_ms if now_ms is not None else int(time.time() * 1000)
        return f"{actor_id}/{stamp}_{safe_name}"

    def upload(self, bucket: str, path: str, data: bytes, content_type: str | None = None) -> str:
        """파일을 저장하고 storage key를 반환합니다.

        Raises:
            UpstreamError: 저장 실패 (Disk or S3 failure)
        """
        key = f"{bucket}/{path}"
        if self.is_local:
            target = uploads_dir() / key
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
            except OSError as exc:
                raise UpstreamError(f"Evidence upload failed: {exc}") from exc
            return key

        from botocore.exceptions import BotoCoreError, ClientError

        try:
            self.client.put_object(
                Bucket=settings.AWS_S3_BUCKET,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as exc:
            raise UpstreamError(f"Evidence upload failed: {exc}") from exc
        return key

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self._base_url()}{bucket}/{path}"

    def is_own_url(self, url: str | None) -> bool:
        """이 서비스가 발급한 URL인지 확인합니다 (증빙 출처 정책용)."""
        if not url:
            return False
        return url.startswith(self._base_url())

    def render_transform_url(
        self,
        url: str | None,
        width: int | None = None,
        height: int | None = None,
        quality: int | None = None,
        resize: str | None = None,
        fmt: str | None = None,
    ) -> str | None:
        """공개 URL → 이미지 렌더 URL 변환.

        Rewrite a hosted-storage public object URL to its render endpoint and
        set the transform query parameters. URLs without the public or render
        marker, and ``data:``/``blob:`` URLs, are returned unchanged.
        """
        if not url or url.startswith(("data:", "blob:")):
            return url

        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            return url
        path = parts.path
        if RENDER_MARKER not in path:
            if PUBLIC_MARKER not in path:
                return url
            object_path = path[path.index(PUBLIC_MARKER) + len(PUBLIC_MARKER):]
            path = f"{RENDER_MARKER}{object_path}"

        params = dict(parse_qsl(parts.query))
        if width:
            params["width"] = str(width)
        if height:
            params["height"] = str(height)
        if quality:
            params["quality"] = str(quality)
        if resize in RESIZE_MODES:
            params["resize"] = resize
        if fmt in FORMATS:
            params["format"] = fmt
        return urlunsplit((parts.scheme, parts.netloc, path, urlencode(params), parts.fragment))

    def thumbnail_url(self, url: str | None, width: int = 160, quality: int = 45) -> str | None:
        return self.render_transform_url(url, width=max(1, round(width)), quality=quality, resize="contain")


storage_service: StorageService = StorageService()
