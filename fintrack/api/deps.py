"""FastAPI 의존성 주입 모듈 — 인증 가드.

FastAPI dependency injection module — Identity lookup guard.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. auth_service.validate_access_token()이 JWT 서명/만료/유형을 검증
       (Signature, expiry and token type are verified)
    4. 페이로드의 "sub"로 사용자를 재조회하여 존재 여부 확인
       (The subject is re-resolved to confirm the user still exists)
    5. 최소 프로필(AuthUser)을 라우트에 주입 (Minimal profile is injected)
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.database import get_db
from fintrack.schemas.auth import AuthUser
from fintrack.services.auth_service import auth_service
from fintrack.utils.exceptions import UnauthenticatedError

# HTTP Bearer 토큰 추출기 — 헤더 누락도 401로 처리하기 위해 auto_error 비활성화
# (auto_error=False so a missing header is reported as 401, not 403)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthUser:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Resolve the bearer token to the authenticated user's profile.

    Raises:
        UnauthenticatedError(401): 토큰 누락, 무효, 만료 또는 사용자 없음
                                   (Missing, invalid, expired token or user gone)
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError(cause="missing_token")
    return await auth_service.validate_access_token(db, credentials.credentials)
