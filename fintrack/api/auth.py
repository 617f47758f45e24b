"""인증 라우터 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 프로필 조회.

Auth Router — Signup, signin, token refresh, logout, and profile endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.deps import get_current_user
from fintrack.database import get_db
from fintrack.schemas.auth import (
    AuthResponse,
    AuthUser,
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from fintrack.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def sign_up(
    data: SignUpRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """회원가입 — 사용자 생성 후 토큰 쌍 발급.

    Signup endpoint. Creates a user and returns tokens plus profile.
    """
    result: AuthResponse = await auth_service.sign_up(db, data)
    await db.commit()
    return result


@router.post("/signin", response_model=AuthResponse)
async def sign_in(
    data: SignInRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """로그인 — 이메일/비밀번호 검증 후 토큰 쌍 발급.

    Signin endpoint.
    """
    result: AuthResponse = await auth_service.sign_in(db, data)
    await db.commit()
    return result


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신 — 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh token endpoint. Issues a new token pair using a refresh token.
    """
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.post("/logout", status_code=204)
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """로그아웃 — 리프레시 토큰 폐기.

    Logout endpoint. Revokes the given refresh token.
    """
    await auth_service.logout(db, data.refresh_token)
    await db.commit()


@router.get("/me", response_model=AuthUser)
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    """현재 사용자 프로필 조회.

    Get the profile of the currently authenticated user.
    """
    return await auth_service.get_me(db, current_user)
