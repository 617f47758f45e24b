"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers signup, signin, token refresh/logout, and the public user profile.
The password hash never appears in any response schema.
"""

import re

from pydantic import BaseModel, Field, field_validator

# 이메일 형식 — Standard email pattern
EMAIL_PATTERN: str = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

# 강한 비밀번호 — 소문자, 대문자, 숫자, 특수문자(@$!%*?&) 각 1개 이상, 첫 글자는 허용 집합
# Other characters (#, -, _, space ...) may appear after the first position
_STRONG_PASSWORD: re.Pattern[str] = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]"
)

# 이름 — 라틴/터키어 문자로 시작하고 끝남, 중간에 공백/하이픈/아포스트로피 허용
_NAME_LETTERS: str = "a-zA-ZÇçĞğIıİiÖöŞşÜü"
_NAME: re.Pattern[str] = re.compile(
    rf"^[{_NAME_LETTERS}]+([{_NAME_LETTERS}\s'-]*[{_NAME_LETTERS}])?$"
)


class SignUpRequest(BaseModel):
    """회원가입 요청 스키마.

    Signup request schema.

    Attributes:
        email: 이메일, 로그인 아이디 (Email address used as login)
        password: 비밀번호 (Plain text, 12..128 chars, mixed character classes)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
    """

    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=12, max_length=128)  # 평문, 서버에서 bcrypt 해싱
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        if not _STRONG_PASSWORD.match(value):
            raise ValueError(
                "Password must contain lowercase, uppercase, digit and one of @$!%*?&"
            )
        return value

    @field_validator("first_name", "last_name")
    @classmethod
    def _name_characters(cls, value: str) -> str:
        if not _NAME.fullmatch(value):
            raise ValueError(
                "Name can only contain Turkish characters, letters, spaces, hyphens, and apostrophes"
            )
        return value


class SignInRequest(BaseModel):
    """로그인 요청 스키마.

    Signin request schema.

    Attributes:
        email: 이메일 (Email address)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마.

    Refresh and logout request schema.

    Attributes:
        refresh_token: 기존 리프레시 토큰 (Refresh token received at signin/signup)
    """

    refresh_token: str


class AuthUser(BaseModel):
    """공개 사용자 프로필 — 토큰 응답 및 /me 응답에 사용.

    Public user profile, also the identity injected by the auth guard.
    """

    id: str
    email: str
    first_name: str
    last_name: str


class AuthResponse(BaseModel):
    """회원가입/로그인 응답 스키마.

    Signup/signin response: token pair plus public profile.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token, 15 min)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token, 7 days)
        token_type: 토큰 유형 (Always "bearer")
        user: 공개 사용자 프로필 (Public user profile)
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: AuthUser


class TokenResponse(BaseModel):
    """토큰 갱신 응답 스키마.

    Token refresh response: a brand-new access/refresh pair.
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
