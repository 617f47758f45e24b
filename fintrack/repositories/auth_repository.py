"""인증 레포지토리 — 해시된 리프레시 토큰 레코드 CRUD.

Auth Repository — Persistence for hashed refresh token records.
Records are keyed by user: writing a new token for a user overwrites the
previous record instead of appending a history.

토큰 해시는 ORM 객체가 아닌 컬럼 단위로 조회합니다. upsert는 Core 문으로
실행되므로 세션의 identity map에 남은 객체는 갱신되지 않기 때문입니다.
Hashes are selected as plain columns: the upsert is a Core statement, so an
ORM object cached in the session's identity map would keep a stale hash.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.models.token import RefreshToken


class AuthRepository:
    """리프레시 토큰 관련 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling refresh token lifecycle queries.
    """

    async def upsert_refresh_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token_hash: str,
        expires_at: datetime,
    ) -> None:
        """사용자별 리프레시 토큰 레코드를 생성하거나 덮어씁니다.

        Insert-or-update the refresh token record for ``user_id``
        (``INSERT .. ON CONFLICT (user_id) DO UPDATE``). The previous hash is
        replaced, so the previous raw token stops validating.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 토큰 소유자 사용자 ID (Token owner user UUID)
            token_hash: bcrypt 해시된 토큰 (Hashed refresh token)
            expires_at: 토큰 만료 일시 (Token expiration timestamp)
        """
        dialect: str = db.get_bind().dialect.name
        insert_fn = sqlite_insert if dialect == "sqlite" else pg_insert
        now: datetime = datetime.now(timezone.utc)

        stmt = insert_fn(RefreshToken).values(
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
            created_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[RefreshToken.user_id],
            set_={
                "token_hash": stmt.excluded.token_hash,
                "expires_at": stmt.excluded.expires_at,
                "created_at": stmt.excluded.created_at,
            },
        )
        await db.execute(stmt)
        await db.flush()

    async def get_active_token_hash(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime,
    ) -> str | None:
        """만료되지 않은 리프레시 토큰 해시를 조회합니다.

        Return the stored hash for ``user_id`` where ``expires_at >= now``.
        None covers both "never issued" and "expired".

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 ID (User UUID)
            now: 기준 시각 (Reference time for the expiry filter)

        Returns:
            str | None: 토큰 해시 또는 None (Stored hash or None)
        """
        query: Select = select(RefreshToken.token_hash).where(
            RefreshToken.user_id == user_id,
            RefreshToken.expires_at >= now,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_token_hash(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> str | None:
        """만료 여부와 관계없이 저장된 토큰 해시를 조회합니다.

        Return the stored hash for ``user_id`` regardless of expiry.
        """
        query: Select = select(RefreshToken.token_hash).where(RefreshToken.user_id == user_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete_refresh_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token_hash: str,
    ) -> int:
        """(사용자 ID, 토큰 해시) 쌍으로 리프레시 토큰을 삭제합니다.

        Delete the record matching the ``(user_id, token_hash)`` pair.
        Matching zero rows is not an error.

        Returns:
            int: 삭제된 행 수 (Number of deleted rows)
        """
        stmt = delete(RefreshToken).where(
            RefreshToken.user_id == user_id,
            RefreshToken.token_hash == token_hash,
        )
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0


# 싱글턴 인스턴스 — Singleton instance
auth_repository: AuthRepository = AuthRepository()
