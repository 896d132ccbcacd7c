"""권한 규칙 서비스 — 누가 관찰을 수정/종료/삭제할 수 있는지.

Authorization rules service.
Rules depend only on the actor's id, role and email; how the login email
was built (e.g. ``<dni>@domain``) is irrelevant here.

Rules:
    - can_edit: 관리자 또는 작성자, 그리고 pending 상태 (admin or creator, while pending)
    - can_delete: 관리자, 그리고 closed 상태 (admin only, closed records only)
    - can_close: pending 상태, 그리고 정책상 소유권 불필요 또는 관리자/작성자
      (pending, and ownership only when the policy demands it)
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from observations.models.user import ROLE_ADMIN, User
from observations.utils.records import field_of

if TYPE_CHECKING:
    from observations.services.lifecycle_service import LifecyclePolicy


@dataclass(frozen=True)
class Actor:
    """인증된 행위자 — 요청마다 명시적으로 전달되는 세션 컨텍스트.

    Authenticated actor passed explicitly into every rule and transition.

    Attributes:
        id: 사용자 ID 문자열 (Opaque user id)
        email: 로그인 이메일 (Login email)
        display_name: 표시 이름 (Profile display name)
        role: 역할 ("admin" or "user")
    """

    id: str
    email: str
    display_name: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(
            id=str(user.id),
            email=user.email,
            display_name=user.display_name or "",
            role=user.role,
        )


def same_identity(a: str | None, b: str | None) -> bool:
    """이메일 동일성 — 앞뒤 공백 제거 후 대소문자 무시 비교."""
    left = (a or "").strip().lower()
    right = (b or "").strip().lower()
    return bool(left) and left == right


def is_creator(actor: Actor, observation: Any) -> bool:
    return same_identity(actor.email, field_of(observation, "created_by"))


def can_edit(actor: Actor, observation: Any) -> bool:
    if field_of(observation, "state") != "pending":
        return False
    return actor.is_admin or is_creator(actor, observation)


def can_delete(actor: Actor, observation: Any) -> bool:
    return actor.is_admin and field_of(observation, "state") == "closed"


def can_close(actor: Actor, observation: Any, policy: "LifecyclePolicy") -> bool:
    if field_of(observation, "state") != "pending":
        return False
    if not policy.close_requires_ownership:
        return True
    return actor.is_admin or is_creator(actor, observation)


def can_manage_users(actor: Actor) -> bool:
    return actor.is_admin


def permissions_for(actor: Actor, observation: Any, policy: "LifecyclePolicy") -> dict[str, bool]:
    """응답에 첨부할 권한 플래그 — 클라이언트 버튼 활성화용.

    Permission flags attached to API responses so clients can enable controls.
    """
    return {
        "can_edit": can_edit(actor, observation),
        "can_close": can_close(actor, observation, policy),
        "can_delete": can_delete(actor, observation),
    }
