"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.

Tables:
    - users: 사용자 계정 (User accounts, email is globally unique)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fintrack.database import Base


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Email is unique across all users and compared case-sensitively as stored.
    The plaintext password never reaches this table, only its bcrypt hash.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        email: 이메일, 로그인 아이디 (Email address, login identifier)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        email_verified: 이메일 인증 여부 (Email verification status)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        refresh_token: 리프레시 토큰 (At most one tracked refresh record, cascade delete)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 이메일 — 전역 고유, 중복 가입 경쟁 조건의 최종 판정 기준
    # Unique constraint is the authoritative guard against concurrent duplicate signups
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 이메일 인증 여부 — Whether email has been verified
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    refresh_token = relationship(
        "RefreshToken", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
