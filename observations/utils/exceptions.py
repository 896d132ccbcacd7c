"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the observation
error taxonomy. Services raise these directly; FastAPI renders them as
JSON ``{"detail": ...}`` responses.

Usage:
    from observations.utils.exceptions import NotFoundError, ValidationError
    raise NotFoundError("Observation not found")
    raise ValidationError("description", "Description is required")
"""

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """422 필드 검증 예외 — 필수 필드 누락/형식 오류.

    Raised when a required field is missing or malformed. The detail names
    the offending field so the client can highlight the matching control.

    Args:
        field: 문제가 된 필드 이름 (Offending field name)
        message: 오류 메시지 (Human-readable message)
    """

    def __init__(self, field: str, message: str) -> None:
        self.field: str = field
        self.message: str = message
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": field, "message": message},
        )


class AuthorizationError(HTTPException):
    """403 권한 없음 — 어떤 검사가 실패했는지 노출하지 않음.

    Raised when the actor may not perform the transition. The detail is
    always the same generic text.
    """

    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Also raised when a conditional update's match predicate excluded the row.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UpstreamError(HTTPException):
    """502 외부 연동 실패 — 스토리지/레코드 저장 실패.

    Wraps the underlying message for diagnostics. Never retried automatically.

    Args:
        detail: 원인 메시지 (Underlying error message)
    """

    def __init__(self, detail: str = "Upstream service failed") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Raised when authentication is missing, invalid, or expired.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
