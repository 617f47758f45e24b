"""리프레시 토큰 저장소 서비스 — 저장, 검증, 폐기.

Refresh Token Store service — store, validate and revoke refresh tokens.
Only bcrypt hashes are persisted. One record per user: storing a new token
overwrites the previous one.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.config import settings
from fintrack.repositories.auth_repository import auth_repository
from fintrack.utils.jwt import decode_refresh_token
from fintrack.utils.password import hash_token, verify_token


class TokenService:
    """해시된 리프레시 토큰의 수명 주기를 관리하는 서비스.

    Service managing the lifecycle of hashed refresh token records.
    """

    async def store(
        self,
        db: AsyncSession,
        user_id: UUID,
        raw_token: str,
        now: datetime | None = None,
    ) -> None:
        """리프레시 토큰을 해시하여 사용자 레코드에 덮어씁니다.

        Hash the raw token and upsert the user's record with
        ``expires_at = now + JWT_REFRESH_TOKEN_EXPIRE_DAYS``.
        """
        issued_at: datetime = now or datetime.now(timezone.utc)
        expires_at: datetime = issued_at + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
        await auth_repository.upsert_refresh_token(
            db,
            user_id=user_id,
            token_hash=hash_token(raw_token),
            expires_at=expires_at,
        )

    async def validate(
        self,
        db: AsyncSession,
        user_id: UUID,
        raw_token: str,
        now: datetime | None = None,
    ) -> bool:
        """저장된 해시와 리프레시 토큰을 비교합니다.

        Return True only if the user has a non-expired record whose hash
        matches ``raw_token``. "Never issued" and "expired" both yield False.
        """
        reference: datetime = now or datetime.now(timezone.utc)
        token_hash: str | None = await auth_repository.get_active_token_hash(db, user_id, reference)
        if token_hash is None:
            return False
        return verify_token(raw_token, token_hash)

    async def revoke(
        self,
        db: AsyncSession,
        raw_token: str,
    ) -> bool:
        """리프레시 토큰을 폐기합니다.

        Decode the token to find its owner, then delete the record by
        ``(user_id, stored_hash)`` if the raw token matches the stored hash.
        bcrypt salts every hash, so the match is made with verify instead of
        re-hashing. Zero matching rows is not an error.

        Returns:
            bool: 레코드가 삭제되었는지 여부 (Whether a record was deleted)

        Raises:
            jwt.InvalidTokenError: 디코딩 실패 시 (Token failed to decode)
        """
        payload: dict[str, Any] = decode_refresh_token(raw_token)
        try:
            user_id: UUID = UUID(str(payload["sub"]))
        except ValueError as exc:
            raise ValueError("Refresh token subject is not a valid user id") from exc

        stored_hash: str | None = await auth_repository.get_token_hash(db, user_id)
        if stored_hash is None or not verify_token(raw_token, stored_hash):
            return False

        deleted: int = await auth_repository.delete_refresh_token(db, user_id, stored_hash)
        return deleted > 0


# 싱글턴 인스턴스 — Singleton instance
token_service: TokenService = TokenService()
