"""관찰 라이프사이클 상태 기계 — pending → closed.

Observation lifecycle state machine.
Pure functions that turn (actor, current record, payload, policy) into the
record or patch to write. They never touch the database; the caller writes
the returned dict only when no error was raised, so a failed transition
leaves nothing behind.

Order of checks for every transition:
    1. 권한 (Authorization) → AuthorizationError, before any field is read
    2. 상태 (State) → ValidationError("state")
    3. 필드 (Fields) → ValidationError(<field>)
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from observations.config import settings
from observations.services import permission_service
from observations.services.permission_service import Actor
from observations.utils.dates import ensure_aware, parse_due_date
from observations.utils.exceptions import AuthorizationError, ValidationError
from observations.utils.labels import normalize_key
from observations.utils.records import field_of

STATE_PENDING: str = "pending"
STATE_CLOSED: str = "closed"
STATES: tuple[str, ...] = (STATE_PENDING, STATE_CLOSED)

SEVERITIES: tuple[str, ...] = ("low", "medium", "high")
DEFAULT_SEVERITY: str = "medium"

# 작성 시 필수 텍스트 필드 (검사 순서대로)
REQUIRED_ON_CREATE: tuple[str, ...] = ("area", "equipment_or_location", "due_date", "description")
# 수정 가능한 필드 — 책임자/작성/종료 필드는 제외
EDITABLE_FIELDS: tuple[str, ...] = (
    "area",
    "equipment_or_location",
    "severity",
    "due_date",
    "description",
    "evidence_url",
)
CLOSURE_FIELDS: tuple[str, ...] = ("closure_description", "closure_evidence_url", "closed_by", "closed_at")

UploadCheck = Callable[[str], bool]


@dataclass(frozen=True)
class EvidencePolicy:
    """증빙 정책.

    Attributes:
        required: 증빙 필수 여부 (Whether evidence must be present)
        allow_external_url: 외부 URL 허용 여부 — False이면 자체 저장소 URL만
            (When False only URLs produced by our own storage are accepted)
    """

    required: bool = False
    allow_external_url: bool = True


@dataclass(frozen=True)
class LifecyclePolicy:
    """라이프사이클 정책 — 명시적으로 전달되는 설정 값.

    Lifecycle policy passed into every transition.

    Attributes:
        create_evidence: 작성 시 증빙 정책 (Opening evidence policy)
        close_evidence: 종료 시 증빙 정책 — 종료 증빙은 항상 필수
            (Closure evidence policy; closure evidence is always required)
        close_requires_ownership: 종료에 작성자/관리자 권한 필요 여부
            (Restrict closing to creator or admin)
        areas: 허용 구역 목록 — 비어 있으면 제한 없음 (Allowed areas; empty = any)
    """

    create_evidence: EvidencePolicy = field(default_factory=EvidencePolicy)
    close_evidence: EvidencePolicy = field(default_factory=lambda: EvidencePolicy(required=True))
    close_requires_ownership: bool = False
    areas: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls) -> "LifecyclePolicy":
        return cls(
            create_evidence=EvidencePolicy(
                required=settings.EVIDENCE_REQUIRED_ON_CREATE,
                allow_external_url=settings.CREATE_EVIDENCE_ALLOW_URL,
            ),
            close_evidence=EvidencePolicy(
                required=True,
                allow_external_url=settings.CLOSE_EVIDENCE_ALLOW_URL,
            ),
            close_requires_ownership=settings.CLOSE_REQUIRES_OWNERSHIP,
            areas=tuple(settings.OBSERVATION_AREAS),
        )


def _text(payload: Mapping[str, Any], name: str) -> str | None:
    value = payload.get(name)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require(payload: Mapping[str, Any], name: str) -> str:
    value = _text(payload, name)
    if value is None:
        raise ValidationError(name, f"{name} is required")
    return value


def _canonical_area(value: str, policy: LifecyclePolicy) -> str:
    if not policy.areas:
        return value
    key = normalize_key(value)
    for area in policy.areas:
        if normalize_key(area) == key:
            return area
    raise ValidationError("area", "area must be one of the configured areas")


def _canonical_due_date(value: str) -> str:
    parsed = parse_due_date(value)
    if parsed is None:
        raise ValidationError("due_date", "due_date must be YYYY-MM-DD, ISO-8601 or DD/MM/YYYY")
    return parsed.isoformat()


def _check_severity(value: str) -> str:
    severity = value.lower()
    if severity not in SEVERITIES:
        raise ValidationError("severity", "severity must be one of low, medium, high")
    return severity


def _check_evidence(
    url: str | None,
    name: str,
    evidence: EvidencePolicy,
    is_uploaded: UploadCheck | None,
) -> str | None:
    if url is None:
        if evidence.required:
            raise ValidationError(name, f"{name} is required")
        return None
    if not evidence.allow_external_url and not (is_uploaded is not None and is_uploaded(url)):
        raise ValidationError(name, f"{name} must be an uploaded file")
    return url


def build_create(
    actor: Actor,
    payload: Mapping[str, Any],
    policy: LifecyclePolicy,
    now: datetime,
    is_uploaded: UploadCheck | None = None,
) -> dict[str, Any]:
    """작성 전이 — pending 레코드의 INSERT 값을 만듭니다.

    Build the insert record for a new pending observation.
    ``responsible_name`` is copied from the actor's profile once and never
    re-derived later.

    Args:
        actor: 작성자 (Authenticated actor)
        payload: 입력 필드 (area, equipment_or_location, severity, due_date,
            description, evidence_url)
        policy: 라이프사이클 정책 (Lifecycle policy)
        now: 작성 시각 (Creation timestamp)
        is_uploaded: 자체 저장소 URL 판별 함수 (Predicate for our own storage URLs)

    Returns:
        dict: INSERT 할 레코드 (Record to insert)

    Raises:
        ValidationError: 필수 필드 누락/형식 오류 (Missing or malformed field)
    """
    values = {name: _require(payload, name) for name in REQUIRED_ON_CREATE}
    severity = _check_severity(_text(payload, "severity") or DEFAULT_SEVERITY)
    area = _canonical_area(values["area"], policy)
    due_date = _canonical_due_date(values["due_date"])
    evidence_url = _check_evidence(
        _text(payload, "evidence_url"), "evidence_url", policy.create_evidence, is_uploaded
    )

    return {
        "state": STATE_PENDING,
        "area": area,
        "equipment_or_location": values["equipment_or_location"],
        "severity": severity,
        "due_date": due_date,
        "description": values["description"],
        "evidence_url": evidence_url,
        "responsible_name": actor.display_name,
        "created_by": actor.email,
        "created_by_id": actor.id,
        "created_at": now,
        "closure_description": None,
        "closure_evidence_url": None,
        "closed_by": None,
        "closed_by_id": None,
        "closed_at": None,
    }


def build_edit(
    actor: Actor,
    observation: Any,
    payload: Mapping[str, Any],
    policy: LifecyclePolicy,
    is_uploaded: UploadCheck | None = None,
) -> dict[str, Any]:
    """수정 전이 — pending → pending 부분 업데이트 패치.

    Build a partial patch for a pending observation. Only keys present in
    ``payload`` and listed in ``EDITABLE_FIELDS`` are considered; anything
    else (responsible name, authorship, closure fields) is ignored.
    Evidence may be cleared only when the create policy does not require it.
    """
    if not actor.is_admin and not permission_service.is_creator(actor, observation):
        raise AuthorizationError()
    if field_of(observation, "state") != STATE_PENDING:
        raise ValidationError("state", "only pending observations can be edited")

    patch: dict[str, Any] = {}
    for name in EDITABLE_FIELDS:
        if name not in payload:
            continue
        value = _text(payload, name)
        if name == "evidence_url":
            patch[name] = _check_evidence(value, name, policy.create_evidence, is_uploaded)
            continue
        if value is None:
            raise ValidationError(name, f"{name} is required")
        if name == "area":
            value = _canonical_area(value, policy)
        elif name == "due_date":
            value = _canonical_due_date(value)
        elif name == "severity":
            value = _check_severity(value)
        patch[name] = value
    return patch


def build_close(
    actor: Actor,
    observation: Any,
    payload: Mapping[str, Any],
    policy: LifecyclePolicy,
    now: datetime,
    is_uploaded: UploadCheck | None = None,
) -> dict[str, Any]:
    """종료 전이 — pending → closed 패치 (종료 필드 4개 동시 설정).

    Build the closing patch. The four closure fields are always set together
    along with ``closed_by_id``; ``closed_at`` is clamped so it never
    precedes ``created_at``.

    Raises:
        AuthorizationError: 정책상 종료 권한 없음 (Policy forbids this actor)
        ValidationError: 이미 종료됨("state") 또는 필드 누락
    """
    owner_ok = (
        not policy.close_requires_ownership
        or actor.is_admin
        or permission_service.is_creator(actor, observation)
    )
    if not owner_ok:
        raise AuthorizationError()
    if field_of(observation, "state") != STATE_PENDING:
        raise ValidationError("state", "observation is already closed")

    closure_description = _require(payload, "closure_description")
    closure_evidence_url = _check_evidence(
        _text(payload, "closure_evidence_url"),
        "closure_evidence_url",
        EvidencePolicy(required=True, allow_external_url=policy.close_evidence.allow_external_url),
        is_uploaded,
    )

    closed_at = ensure_aware(now)
    created_at = field_of(observation, "created_at")
    if isinstance(created_at, datetime) and ensure_aware(created_at) > closed_at:
        closed_at = ensure_aware(created_at)

    return {
        "state": STATE_CLOSED,
        "closure_description": closure_description,
        "closure_evidence_url": closure_evidence_url,
        "closed_by": actor.email,
        "closed_by_id": actor.id,
        "closed_at": closed_at,
    }


def check_delete(actor: Actor, observation: Any) -> None:
    """삭제 가드 — 관리자 전용, closed 레코드만.

    Raises:
        AuthorizationError: 관리자가 아님 (Actor is not an admin)
        ValidationError: pending 레코드 삭제 시도 ("state")
    """
    if not actor.is_admin:
        raise AuthorizationError()
    if field_of(observation, "state") != STATE_CLOSED:
        raise ValidationError("state", "only closed observations can be deleted")


def check_invariants(observation: Any) -> list[str]:
    """레코드 불변식 위반 목록 — 비어 있으면 정상.

    Return the list of violated invariants (empty when the record is sound):
    closure fields all null iff pending, all set iff closed, and
    ``created_at <= closed_at``.
    """
    problems: list[str] = []
    state = field_of(observation, "state")
    if state not in STATES:
        problems.append(f"unknown state {state!r}")
        return problems

    present = [name for name in CLOSURE_FIELDS if field_of(observation, name) is not None]
    if state == STATE_PENDING and present:
        problems.append(f"pending observation has closure fields {present}")
    if state == STATE_CLOSED and len(present) != len(CLOSURE_FIELDS):
        missing = [name for name in CLOSURE_FIELDS if name not in present]
        problems.append(f"closed observation is missing {missing}")

    created_at = field_of(observation, "created_at")
    closed_at = field_of(observation, "closed_at")
    if isinstance(created_at, datetime) and isinstance(closed_at, datetime):
        if ensure_aware(created_at) > ensure_aware(closed_at):
            problems.append("closed_at precedes created_at")
    return problems
