"""인증 서비스 — 회원가입, 로그인, 토큰 갱신, 로그아웃 비즈니스 로직.

Auth Service — Business logic for signup, signin, token refresh and logout,
plus access-token resolution for protected requests.

Failure projection:
    로그인과 토큰 갱신 실패는 내부 원인을 로그로만 남기고 외부에는 단일
    오류로 노출합니다. 계정 존재 여부나 토큰 상태를 유출하지 않기 위함입니다.
    Signin and refresh failures collapse to one public error each; the
    detailed cause is logged, never returned. Signup distinguishes
    duplicate email from other create failures.
"""

from collections.abc import Callable
from functools import lru_cache
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import jwt
import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.models.user import User
from fintrack.repositories.user_repository import user_repository
from fintrack.schemas.auth import (
    AuthResponse,
    AuthUser,
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from fintrack.services.token_service import token_service
from fintrack.utils.exceptions import (
    CreateFailedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    LogoutFailedError,
    NotFoundError,
    UnauthenticatedError,
)
from fintrack.utils.jwt import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    decode_token,
)
from fintrack.utils.password import hash_password, verify_password

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    """없는 계정 로그인에도 같은 bcrypt 비용을 치르기 위한 고정 해시.

    Fixed hash verified against when the email is unknown, so signin costs
    one password check whether or not the account exists.
    """
    return hash_password("fintrack-nonexistent-account")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.

    Args:
        clock: 현재 시각 공급자, 테스트에서 교체 가능
               (Current-time provider, replaceable in tests)
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock: Callable[[], datetime] = clock

    @staticmethod
    def _to_auth_user(user: User) -> AuthUser:
        return AuthUser(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        )

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        """JWT 액세스 토큰 페이로드를 생성합니다.

        Build the access token identity claims from a user row.
        """
        return {
            "sub": str(user.id),
            "email": user.email,
            "firstName": user.first_name,
            "lastName": user.last_name,
        }

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 발급하고 리프레시 토큰을 저장합니다.

        Issue an access/refresh pair and store the refresh token hash,
        overwriting the user's previous record.
        """
        now: datetime = self._clock()
        access_token: str = create_access_token(self._build_jwt_payload(user), now=now)
        refresh_token: str = create_refresh_token(str(user.id), now=now)

        await token_service.store(db, user.id, refresh_token, now=now)

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def sign_up(
        self,
        db: AsyncSession,
        data: SignUpRequest,
    ) -> AuthResponse:
        """회원가입을 처리합니다.

        Create a user and issue the first token pair.

        이메일 사전 확인은 UX용 최적화일 뿐이며, 동시 가입 경쟁에서는
        저장소의 unique 제약 위반이 최종 DuplicateEmail 판정입니다.
        The email pre-check is an optimization only; under concurrent signups
        the storage unique constraint is the authoritative duplicate signal.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Signup request data)

        Returns:
            AuthResponse: 토큰 쌍과 사용자 프로필 (Token pair and profile)

        Raises:
            DuplicateEmailError: 이미 등록된 이메일 (Email already registered)
            CreateFailedError: 저장소가 사용자 생성을 거부함 (Storage rejected the insert)
        """
        password_hash: str = hash_password(data.password)

        if await user_repository.email_exists(db, data.email):
            raise DuplicateEmailError()

        try:
            user: User = await user_repository.create_user(
                db,
                email=data.email,
                password_hash=password_hash,
                first_name=data.first_name,
                last_name=data.last_name,
            )
        except IntegrityError as exc:
            await db.rollback()
            if await user_repository.email_exists(db, data.email):
                logger.info("signup_duplicate_race", reason="unique_violation")
                raise DuplicateEmailError() from exc
            logger.error("signup_failed", reason="integrity_error", error=str(exc.orig))
            raise CreateFailedError(f"Failed to create user: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("signup_failed", reason="storage_error", error=str(exc))
            raise CreateFailedError(f"Failed to create user: {exc}") from exc

        tokens: TokenResponse = await self._generate_tokens(db, user)
        logger.info("signup_succeeded", user_id=str(user.id))
        return AuthResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=self._to_auth_user(user),
        )

    async def sign_in(
        self,
        db: AsyncSession,
        data: SignInRequest,
    ) -> AuthResponse:
        """로그인을 처리합니다.

        Verify credentials and issue a new token pair.

        Raises:
            InvalidCredentialsError: 사용자 없음, 조회 실패, 비밀번호 불일치 모두 동일
                                     (No user, lookup error and wrong password alike)
        """
        try:
            user: User | None = await user_repository.get_by_email(db, data.email)
        except SQLAlchemyError as exc:
            logger.warning("signin_failed", reason="lookup_error", error=str(exc))
            raise InvalidCredentialsError(cause="lookup_error") from exc

        if user is None:
            verify_password(data.password, _dummy_password_hash())
            logger.info("signin_failed", reason="user_not_found")
            raise InvalidCredentialsError(cause="user_not_found")

        if not verify_password(data.password, user.password_hash):
            logger.info("signin_failed", reason="password_mismatch", user_id=str(user.id))
            raise InvalidCredentialsError(cause="password_mismatch")

        tokens: TokenResponse = await self._generate_tokens(db, user)
        logger.info("signin_succeeded", user_id=str(user.id))
        return AuthResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=self._to_auth_user(user),
        )

    async def refresh_tokens(
        self,
        db: AsyncSession,
        data: RefreshRequest,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다 (토큰 회전).

        Rotate tokens: verify the presented refresh token, check it against
        the store, re-fetch the user, issue a brand-new pair, overwrite the
        stored record and revoke the old token. After success only the new
        refresh token validates.

        Raises:
            InvalidRefreshTokenError: 흐름 내 모든 실패 (Any failure in the flow)
        """
        try:
            return await self._rotate(db, data.refresh_token)
        except InvalidRefreshTokenError:
            raise
        except (jwt.InvalidTokenError, SQLAlchemyError, ValueError, KeyError) as exc:
            logger.warning("refresh_failed", reason=type(exc).__name__, error=str(exc))
            raise InvalidRefreshTokenError(cause=type(exc).__name__) from exc

    async def _rotate(self, db: AsyncSession, raw_token: str) -> TokenResponse:
        payload: dict[str, Any] = decode_refresh_token(raw_token)
        user_id: UUID = UUID(str(payload["sub"]))

        if not await token_service.validate(db, user_id, raw_token, now=self._clock()):
            logger.info("refresh_failed", reason="store_mismatch", user_id=str(user_id))
            raise InvalidRefreshTokenError(cause="store_mismatch")

        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            logger.info("refresh_failed", reason="user_not_found", user_id=str(user_id))
            raise InvalidRefreshTokenError(cause="user_not_found")

        # 새 토큰 저장이 회전 시점 — storing the new token is the rotation point
        tokens: TokenResponse = await self._generate_tokens(db, user)
        # upsert가 이미 덮어썼으므로 보통 0행 삭제 (usually deletes zero rows)
        await token_service.revoke(db, raw_token)

        logger.info("refresh_succeeded", user_id=str(user.id))
        return tokens

    async def logout(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> None:
        """로그아웃 처리 — 리프레시 토큰을 폐기합니다.

        Revoke the given refresh token. A decodable token whose record is
        already gone is an idempotent success.

        Raises:
            LogoutFailedError: 디코딩 실패 또는 저장소 오류 (Decode failure or storage error)
        """
        try:
            revoked: bool = await token_service.revoke(db, refresh_token)
        except (jwt.InvalidTokenError, SQLAlchemyError, ValueError, KeyError) as exc:
            logger.warning("logout_failed", reason=type(exc).__name__, error=str(exc))
            raise LogoutFailedError(cause=type(exc).__name__) from exc

        logger.info("logout", revoked=revoked)

    async def validate_user(
        self,
        db: AsyncSession,
        user_id: str,
    ) -> AuthUser | None:
        """토큰 subject로 사용자를 재조회합니다.

        Re-resolve a token subject against the identity store.

        Returns:
            AuthUser | None: 공개 프로필 또는 None (Profile, or None if gone)
        """
        user: User | None = await user_repository.find_by_id(db, user_id)
        if user is None:
            return None
        return self._to_auth_user(user)

    async def validate_access_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> AuthUser:
        """액세스 토큰을 검증하고 현재 사용자를 반환합니다.

        Identity lookup guard: verify the access token, then confirm the
        subject still exists. "Bad token" and "user gone" are not distinguished.

        Raises:
            UnauthenticatedError: 토큰 무효, 만료, 유형 불일치, 사용자 없음
                                  (Invalid, expired, wrong type, or user gone)
        """
        try:
            payload: dict[str, Any] = decode_token(token)
        except jwt.InvalidTokenError as exc:
            logger.info("access_denied", reason=type(exc).__name__)
            raise UnauthenticatedError(cause=type(exc).__name__) from exc

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            logger.info("access_denied", reason="wrong_token_type")
            raise UnauthenticatedError(cause="wrong_token_type")

        try:
            user: AuthUser | None = await self.validate_user(db, str(payload["sub"]))
        except SQLAlchemyError as exc:
            logger.warning("access_denied", reason="lookup_error", error=str(exc))
            raise UnauthenticatedError(cause="lookup_error") from exc

        if user is None:
            logger.info("access_denied", reason="user_not_found")
            raise UnauthenticatedError(cause="user_not_found")
        return user

    async def get_me(
        self,
        db: AsyncSession,
        current_user: AuthUser,
    ) -> AuthUser:
        """현재 로그인한 사용자 프로필을 최신 상태로 반환합니다.

        Return the freshest profile of the authenticated user.

        Raises:
            NotFoundError: 요청 도중 사용자가 삭제된 경우 (User removed mid-request)
        """
        user: AuthUser | None = await self.validate_user(db, current_user.id)
        if user is None:
            raise NotFoundError("User not found")
        return user


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
