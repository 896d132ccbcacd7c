"""안전 관찰 Pydantic 스키마.

Observation request/response schemas.
Request fields are all optional at the schema level; required-field checks
happen in the lifecycle layer so a missing field is reported by name as
``{"field": ..., "message": ...}``.
"""

from datetime import datetime

from pydantic import BaseModel


class ObservationCreate(BaseModel):
    area: str | None = None
    equipment_or_location: str | None = None
    severity: str | None = None  # low, medium, high
    due_date: str | None = None  # YYYY-MM-DD, ISO-8601, DD/MM/YYYY
    description: str | None = None
    evidence_url: str | None = None


class ObservationUpdate(BaseModel):
    area: str | None = None
    equipment_or_location: str | None = None
    severity: str | None = None
    due_date: str | None = None
    description: str | None = None
    evidence_url: str | None = None


class ObservationClose(BaseModel):
    closure_description: str | None = None
    closure_evidence_url: str | None = None


class UrgencyResponse(BaseModel):
    level: str  # verde, amarillo, rojo
    label: str  # En tiempo, Por vencer, Vencido


class PermissionFlags(BaseModel):
    can_edit: bool
    can_close: bool
    can_delete: bool


class ObservationResponse(BaseModel):
    """관찰 응답 스키마 — 신호등/권한/표시 라벨 포함.

    Observation response with urgency, permission flags and display labels.
    ``urgency`` is only set while the record is pending.
    """

    id: str
    state: str
    area: str
    area_label: str
    equipment_or_location: str
    severity: str
    due_date: str
    description: str
    evidence_url: str | None
    evidence_thumbnail_url: str | None
    responsible_name: str
    responsible_label: str
    created_by: str
    created_at: datetime
    closure_description: str | None
    closure_evidence_url: str | None
    closure_evidence_thumbnail_url: str | None
    closed_by: str | None
    closed_at: datetime | None
    urgency: UrgencyResponse | None
    permissions: PermissionFlags | None = None


class EvidenceUploadResponse(BaseModel):
    file_url: str
    thumbnail_url: str
