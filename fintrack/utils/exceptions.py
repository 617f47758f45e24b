"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for common error patterns
and the authentication error taxonomy.

인증 오류는 외부에 노출되는 코드/메시지와 내부 원인(cause)을 분리합니다.
Auth errors separate the public projection (``code`` + ``detail``) from the
internal ``cause``, which is logged by the service but never serialized.

Usage:
    from fintrack.utils.exceptions import InvalidCredentialsError
    raise InvalidCredentialsError(cause="password_mismatch")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthError(HTTPException):
    """인증 오류 베이스 클래스.

    Base class for the authentication error taxonomy.
    Subclasses fix ``status_code``, ``code`` and the default public ``detail``.

    Attributes:
        code: 기계 판독용 오류 코드 (Stable machine-readable error code)
        cause: 내부 원인, 로그 전용 (Internal cause, logged only)
    """

    status_code_default: int = status.HTTP_401_UNAUTHORIZED
    code: str = "AUTH_ERROR"
    default_detail: str = "Authentication failed"

    def __init__(self, detail: str | None = None, cause: str | None = None) -> None:
        super().__init__(
            status_code=self.status_code_default,
            detail=detail or self.default_detail,
        )
        self.cause: str | None = cause


class DuplicateEmailError(AuthError):
    """409 — 이미 등록된 이메일로 회원가입 (Signup with an email already present)."""

    status_code_default = status.HTTP_409_CONFLICT
    code = "DUPLICATE_EMAIL"
    default_detail = "User with this email already exists"


class CreateFailedError(AuthError):
    """400 — 중복 이외의 사유로 사용자 저장 실패 (Storage rejected the user insert)."""

    status_code_default = status.HTTP_400_BAD_REQUEST
    code = "CREATE_FAILED"
    default_detail = "Failed to create user"


class InvalidCredentialsError(AuthError):
    """401 — 이메일 없음과 비밀번호 불일치를 구분하지 않음.

    Signin failure. "No such user" and "wrong password" are deliberately
    indistinguishable to the caller.
    """

    code = "INVALID_CREDENTIALS"
    default_detail = "Invalid credentials"


class InvalidRefreshTokenError(AuthError):
    """401 — 토큰 갱신 흐름의 모든 실패를 하나로 통합 (Any refresh-flow failure)."""

    code = "INVALID_REFRESH_TOKEN"
    default_detail = "Token refresh failed"


class LogoutFailedError(AuthError):
    """401 — 토큰 디코딩 또는 저장소 삭제 실패 (Token decode or storage delete failed)."""

    code = "LOGOUT_FAILED"
    default_detail = "Logout failed"


class UnauthenticatedError(AuthError):
    """401 — 액세스 토큰 검증 또는 사용자 재조회 실패 (Protected request rejected)."""

    code = "UNAUTHENTICATED"
    default_detail = "Invalid or expired token"

    def __init__(self, detail: str | None = None, cause: str | None = None) -> None:
        super().__init__(detail=detail, cause=cause)
        self.headers = {"WWW-Authenticate": "Bearer"}
