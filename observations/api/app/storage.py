"""앱 스토리지 라우터 — 증빙 사진 업로드.

App Storage Router — Evidence photo upload (multipart).
Returns the public file URL to put in ``evidence_url`` or
``closure_evidence_url`` plus a thumbnail URL for previews.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from observations.api.deps import get_actor
from observations.config import settings
from observations.schemas.observation import EvidenceUploadResponse
from observations.services.permission_service import Actor
from observations.services.storage_service import storage_service
from observations.utils.exceptions import ValidationError

router: APIRouter = APIRouter()

# 업로드 최대 크기 — 10MB
MAX_EVIDENCE_BYTES: int = 10 * 1024 * 1024


@router.post("/evidence", response_model=EvidenceUploadResponse, status_code=201)
async def upload_evidence(
    actor: Annotated[Actor, Depends(get_actor)],
    file: Annotated[UploadFile, File()],
) -> dict:
    """증빙 사진을 업로드합니다 (이미지만)."""
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError("file", "evidence must be an image")

    data = await file.read()
    if not data:
        raise ValidationError("file", "file is empty")
    if len(data) > MAX_EVIDENCE_BYTES:
        raise ValidationError("file", "file exceeds 10 MB")

    path = storage_service.build_evidence_path(actor.id, file.filename or "evidence")
    storage_service.upload(settings.EVIDENCE_BUCKET, path, data, content_type)
    file_url = storage_service.public_url(settings.EVIDENCE_BUCKET, path)
    return {
        "file_url": file_url,
        "thumbnail_url": storage_service.thumbnail_url(file_url),
    }
