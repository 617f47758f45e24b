"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.
Provides functions for creating access/refresh tokens and decoding them.

JWT Payload Structure:
    액세스 토큰 (Access token, 15 min):
    {
        "sub": "user_uuid",       # 사용자 ID (User identifier)
        "email": "a@b.com",
        "firstName": "A",
        "lastName": "B",
        "type": "access",         # 토큰 유형 (Token type discriminator)
        "iat": 1234567890,
        "exp": 1234568790
    }

    리프레시 토큰 (Refresh token, 7 days):
    {
        "sub": "user_uuid",
        "type": "refresh",
        "jti": "random_uuid",     # 같은 초에 발급된 토큰도 서로 다름 (Unique per token)
        "iat": 1234567890,
        "exp": 1235172690
    }

Every failure (bad signature, malformed token, expiry, wrong type) surfaces
as ``jwt.InvalidTokenError``; expiry is its subclass ``jwt.ExpiredSignatureError``.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from fintrack.config import settings

ACCESS_TOKEN_TYPE: str = "access"
REFRESH_TOKEN_TYPE: str = "refresh"


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def create_access_token(claims: dict[str, Any], now: datetime | None = None) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a JWT access token with the given identity claims.
    Token expires after JWT_ACCESS_TOKEN_EXPIRE_MINUTES (default: 15 min).

    Args:
        claims: JWT 페이로드 데이터, 일반적으로 {"sub", "email", "firstName", "lastName"}
                (Identity claims for the token)
        now: 발급 시각, 테스트용 시계 주입 (Issue time, clock injection for tests)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    issued_at: datetime = _now(now)
    to_encode: dict[str, Any] = claims.copy()
    expire: datetime = issued_at + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"iat": issued_at, "exp": expire, "type": ACCESS_TOKEN_TYPE})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(user_id: str, now: datetime | None = None) -> str:
    """JWT 리프레시 토큰을 생성합니다.

    Generate a JWT refresh token for a user.
    Token expires after JWT_REFRESH_TOKEN_EXPIRE_DAYS (default: 7 days).
    Signed with the refresh secret, which falls back to JWT_SECRET_KEY.

    Args:
        user_id: 사용자 ID 문자열 (User identifier)
        now: 발급 시각 (Issue time, clock injection for tests)

    Returns:
        str: 인코딩된 JWT 리프레시 토큰 문자열 (Encoded JWT refresh token string)
    """
    issued_at: datetime = _now(now)
    expire: datetime = issued_at + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode: dict[str, Any] = {
        "sub": user_id,
        "type": REFRESH_TOKEN_TYPE,
        "jti": uuid.uuid4().hex,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.refresh_secret_key, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """JWT 액세스 토큰을 디코딩하고 검증합니다.

    Decode and verify a token signed with JWT_SECRET_KEY.
    Signature, structure, ``exp`` and the presence of ``sub`` are checked.

    Args:
        token: JWT 토큰 문자열 (Encoded JWT token string)

    Returns:
        dict[str, Any]: 디코딩된 페이로드 딕셔너리 (Decoded payload dictionary)

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub"]},
    )


def decode_refresh_token(token: str) -> dict[str, Any]:
    """JWT 리프레시 토큰을 디코딩하고 토큰 유형을 확인합니다.

    Decode a refresh token and require ``type == "refresh"``.

    Raises:
        jwt.InvalidTokenError: 서명/만료/형식 오류 또는 유형 불일치
                               (Bad signature, expiry, structure, or wrong type)
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.refresh_secret_key,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub"]},
    )
    if payload.get("type") != REFRESH_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Token is not a refresh token")
    return payload
