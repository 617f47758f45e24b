"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every model with the SQLAlchemy
metadata, which Alembic and ``Base.metadata.create_all`` rely on.

Modules:
    user: 사용자 계정 (User identities)
    token: 리프레시 토큰 (Hashed refresh token records)
"""

from fintrack.models.user import User
from fintrack.models.token import RefreshToken

__all__ = ["User", "RefreshToken"]
