"""비밀번호 및 토큰 해싱/검증 유틸리티 모듈.

Credential hashing and verification utility module.
Uses bcrypt directly with a configurable work factor. Passwords use
PASSWORD_HASH_ROUNDS (12); refresh tokens use the cheaper TOKEN_HASH_ROUNDS (8)
since they are hashed on every refresh and already carry high entropy.

입력은 bcrypt 전에 SHA-256으로 요약합니다. bcrypt는 72바이트까지만 읽기 때문에
JWT처럼 긴 값은 앞부분이 같으면 같은 해시로 검증되어 버립니다.
Secrets are pre-digested with SHA-256 because bcrypt only reads the first
72 bytes: two JWTs sharing a prefix would otherwise verify against each other.
"""

import base64
import hashlib

import bcrypt

from fintrack.config import settings


def _prehash(secret: str) -> bytes:
    """SHA-256 요약을 base64로 인코딩 — NUL 바이트 없는 44바이트 입력."""
    if not isinstance(secret, str) or secret == "":
        raise ValueError("Secret to hash must be a non-empty string")
    digest: bytes = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_secret(secret: str, rounds: int) -> str:
    """비밀 값을 bcrypt 해시로 변환합니다.

    Hash a secret with bcrypt at the given work factor.
    Each call uses a fresh random salt, so hashing the same secret twice
    yields two different strings.

    Args:
        secret: 평문 비밀 값 (Plain secret, must be non-empty)
        rounds: bcrypt 작업 계수 (bcrypt cost, 4..31)

    Returns:
        str: bcrypt 해시 문자열 (bcrypt hash string, 60 chars)

    Raises:
        ValueError: 빈 값이거나 작업 계수가 범위를 벗어날 때
                    (Empty secret or out-of-range work factor)
    """
    return bcrypt.hashpw(_prehash(secret), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_secret(secret: str, hashed: str) -> bool:
    """평문 비밀 값과 bcrypt 해시를 비교 검증합니다.

    Verify a secret against a bcrypt hash in constant time.
    A malformed stored hash verifies as False rather than raising.

    Raises:
        ValueError: 빈 비밀 값일 때 (Empty secret)
    """
    candidate: bytes = _prehash(secret)
    try:
        return bcrypt.checkpw(candidate, hashed.encode("utf-8"))
    except ValueError:
        return False


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다 (PASSWORD_HASH_ROUNDS)."""
    return hash_secret(password, settings.PASSWORD_HASH_ROUNDS)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 저장된 해시를 비교합니다."""
    return verify_secret(plain_password, hashed_password)


def hash_token(token: str) -> str:
    """리프레시 토큰을 bcrypt 해시로 변환합니다 (TOKEN_HASH_ROUNDS)."""
    return hash_secret(token, settings.TOKEN_HASH_ROUNDS)


def verify_token(token: str, hashed_token: str) -> bool:
    """리프레시 토큰과 저장된 해시를 비교합니다."""
    return verify_secret(token, hashed_token)
