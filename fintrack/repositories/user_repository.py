"""사용자 레포지토리 — 이메일/ID 기반 사용자 조회 및 생성.

User Repository — Identity store for the authentication flows.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.models.user import User
from fintrack.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 관련 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository for user identity lookups and creation.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다 (대소문자 구분).

        Retrieve a user by email, compared exactly as stored.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 조회할 이메일 (Email to look up)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        query: Select = select(User).where(User.email == email)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def email_exists(self, db: AsyncSession, email: str) -> bool:
        """이메일 중복 여부를 확인합니다."""
        return await self.exists(db, {"email": email})

    async def create_user(
        self,
        db: AsyncSession,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> User:
        """새 사용자를 생성합니다.

        Insert a new user row. A duplicate email raises
        ``sqlalchemy.exc.IntegrityError`` from the unique constraint.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 이메일 (Email address)
            password_hash: bcrypt 해시 (Already-hashed password)
            first_name: 이름 (First name)
            last_name: 성 (Last name)

        Returns:
            User: 생성된 사용자 (Created user)
        """
        now: datetime = datetime.now(timezone.utc)
        return await self.create(
            db,
            {
                "email": email,
                "password_hash": password_hash,
                "first_name": first_name,
                "last_name": last_name,
                "created_at": now,
                "updated_at": now,
            },
        )

    async def find_by_id(self, db: AsyncSession, user_id: str) -> User | None:
        """문자열 ID로 사용자를 조회합니다. 형식 오류는 None으로 처리.

        Look up a user by a string id taken from a token ``sub`` claim.
        A malformed UUID is treated as not-found.
        """
        try:
            record_id: UUID = UUID(str(user_id))
        except ValueError:
            return None
        return await self.get_by_id(db, record_id)


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
