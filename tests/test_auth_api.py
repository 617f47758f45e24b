"""인증 API 테스트 — 회원가입, 로그인, 토큰 갱신, 로그아웃, /me 엔드포인트.

Auth API tests over the FastAPI app with httpx.
"""

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient

from fintrack.utils.jwt import create_access_token

AUTH = "/api/v1/auth"
EMAIL = "a@b.com"
PASSWORD = "Str0ng!Passw0rd"


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def _signup(client: AsyncClient, email: str = EMAIL) -> dict:
    res = await client.post(f"{AUTH}/signup", json={
        "email": email,
        "password": PASSWORD,
        "first_name": "A",
        "last_name": "B",
    })
    assert res.status_code == 201, res.text
    return res.json()


# ===== Sign Up =====

class TestSignUp:
    """회원가입 API 테스트."""

    async def test_signup_success(self, client: AsyncClient):
        """회원가입 성공 — 토큰 쌍과 프로필."""
        data = await _signup(client)
        assert data["user"]["email"] == "a@b.com"
        assert data["user"]["first_name"] == "A"
        assert data["user"]["last_name"] == "B"
        assert data["access_token"] and data["refresh_token"]
        assert data["access_token"] != data["refresh_token"]
        assert data["token_type"] == "bearer"
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    async def test_signup_duplicate_email(self, client: AsyncClient):
        """중복 이메일은 409."""
        await _signup(client)
        res = await client.post(f"{AUTH}/signup", json={
            "email": EMAIL,
            "password": PASSWORD,
            "first_name": "C",
            "last_name": "D",
        })
        assert res.status_code == 409
        assert res.json()["code"] == "DUPLICATE_EMAIL"

    async def test_signup_weak_password(self, client: AsyncClient):
        """약한 비밀번호는 422."""
        res = await client.post(f"{AUTH}/signup", json={
            "email": EMAIL,
            "password": "alllowercase1234",
            "first_name": "A",
            "last_name": "B",
        })
        assert res.status_code == 422

    async def test_signup_password_with_other_special_characters(self, client: AsyncClient):
        """@$!%*?& 외의 문자(#, -, 공백)가 섞인 강한 비밀번호도 허용."""
        for i, password in enumerate(["Str0ng!Passw0rd#", "Str0ng!Pass-w0rd", "Str0ng!Pass w0rd"]):
            res = await client.post(f"{AUTH}/signup", json={
                "email": f"user{i}@b.com",
                "password": password,
                "first_name": "A",
                "last_name": "B",
            })
            assert res.status_code == 201, res.text

    async def test_signup_name_with_digits(self, client: AsyncClient):
        """숫자로 된 이름은 422."""
        res = await client.post(f"{AUTH}/signup", json={
            "email": EMAIL,
            "password": PASSWORD,
            "first_name": "12345",
            "last_name": "B",
        })
        assert res.status_code == 422
        assert "Name can only contain" in res.text

    async def test_signup_name_rules(self, client: AsyncClient):
        """이름 규칙 — 터키어 문자, 하이픈, 아포스트로피 허용 / 공백만, 태그 거부."""
        ok = await client.post(f"{AUTH}/signup", json={
            "email": "ayse@b.com",
            "password": PASSWORD,
            "first_name": "Ayşe Gül",
            "last_name": "O'Neil-Şahin",
        })
        assert ok.status_code == 201, ok.text

        for bad in ["   ", "<script>", "Ali "]:
            res = await client.post(f"{AUTH}/signup", json={
                "email": "bad@b.com",
                "password": PASSWORD,
                "first_name": bad,
                "last_name": "B",
            })
            assert res.status_code == 422, bad

    async def test_signup_invalid_email(self, client: AsyncClient):
        """잘못된 이메일 형식은 422."""
        res = await client.post(f"{AUTH}/signup", json={
            "email": "not-an-email",
            "password": PASSWORD,
            "first_name": "A",
            "last_name": "B",
        })
        assert res.status_code == 422


# ===== Sign In =====

class TestSignIn:
    """로그인 API 테스트."""

    async def test_signin_success(self, client: AsyncClient):
        """로그인 성공."""
        await _signup(client)
        res = await client.post(f"{AUTH}/signin", json={"email": EMAIL, "password": PASSWORD})
        assert res.status_code == 200
        data = res.json()
        assert data["access_token"] and data["refresh_token"]
        assert data["user"]["email"] == EMAIL

    async def test_signin_wrong_password(self, client: AsyncClient):
        """잘못된 비밀번호 — 토큰 필드 없이 401."""
        await _signup(client)
        res = await client.post(f"{AUTH}/signin", json={"email": EMAIL, "password": "wrong_password"})
        assert res.status_code == 401
        body = res.json()
        assert body["code"] == "INVALID_CREDENTIALS"
        assert "access_token" not in body
        assert "refresh_token" not in body

    async def test_signin_unknown_email_matches_wrong_password(self, client: AsyncClient):
        """없는 이메일과 잘못된 비밀번호의 응답이 동일."""
        await _signup(client)
        wrong = await client.post(f"{AUTH}/signin", json={"email": EMAIL, "password": "wrong_password"})
        unknown = await client.post(f"{AUTH}/signin", json={"email": "nobody@b.com", "password": PASSWORD})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()


# ===== Token Refresh =====

class TestTokenRefresh:
    """토큰 갱신 API 테스트."""

    async def test_refresh_success(self, client: AsyncClient):
        """리프레시 토큰으로 새 토큰 발급."""
        data = await _signup(client)
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": data["refresh_token"]})
        assert res.status_code == 200
        body = res.json()
        assert body["access_token"]
        assert body["refresh_token"] != data["refresh_token"]

    async def test_refresh_same_token_twice(self, client: AsyncClient):
        """같은 원본 토큰으로 두 번 갱신 — 첫 번째 성공, 두 번째 실패."""
        data = await _signup(client)
        first = await client.post(f"{AUTH}/refresh", json={"refresh_token": data["refresh_token"]})
        second = await client.post(f"{AUTH}/refresh", json={"refresh_token": data["refresh_token"]})
        assert first.status_code == 200
        assert second.status_code == 401
        assert second.json()["code"] == "INVALID_REFRESH_TOKEN"

    async def test_refresh_with_invalid_token(self, client: AsyncClient):
        """유효하지 않은 리프레시 토큰으로 갱신 실패."""
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": "invalid.token.here"})
        assert res.status_code == 401

    async def test_refreshed_access_token_works(self, client: AsyncClient):
        """갱신된 토큰으로 /me 접근 가능."""
        data = await _signup(client)
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": data["refresh_token"]})
        me = await client.get(f"{AUTH}/me", headers=auth_header(res.json()["access_token"]))
        assert me.status_code == 200
        assert me.json()["email"] == EMAIL


# ===== Logout =====

class TestLogout:
    """로그아웃 API 테스트."""

    async def test_logout_then_refresh(self, client: AsyncClient):
        """로그아웃 후 리프레시 토큰 무효화."""
        data = await _signup(client)
        res = await client.post(f"{AUTH}/logout", json={"refresh_token": data["refresh_token"]})
        assert res.status_code == 204

        res2 = await client.post(f"{AUTH}/refresh", json={"refresh_token": data["refresh_token"]})
        assert res2.status_code == 401

    async def test_logout_twice(self, client: AsyncClient):
        """이미 로그아웃된 토큰으로 재요청해도 204."""
        data = await _signup(client)
        first = await client.post(f"{AUTH}/logout", json={"refresh_token": data["refresh_token"]})
        second = await client.post(f"{AUTH}/logout", json={"refresh_token": data["refresh_token"]})
        assert first.status_code == second.status_code == 204

    async def test_logout_invalid_token(self, client: AsyncClient):
        """디코딩 불가 토큰은 401 LOGOUT_FAILED."""
        res = await client.post(f"{AUTH}/logout", json={"refresh_token": "invalid.token.here"})
        assert res.status_code == 401
        assert res.json()["code"] == "LOGOUT_FAILED"


# ===== /me Endpoint =====

class TestGetMe:
    """현재 사용자 프로필 조회 테스트."""

    async def test_get_me_success(self, client: AsyncClient):
        """인증된 사용자 정보 조회 성공."""
        data = await _signup(client)
        res = await client.get(f"{AUTH}/me", headers=auth_header(data["access_token"]))
        assert res.status_code == 200
        assert res.json() == data["user"]

    async def test_get_me_no_token(self, client: AsyncClient):
        """토큰 없이 /me 접근 시 401."""
        res = await client.get(f"{AUTH}/me")
        assert res.status_code == 401
        assert res.json()["code"] == "UNAUTHENTICATED"

    async def test_get_me_invalid_token(self, client: AsyncClient):
        """유효하지 않은 토큰으로 /me 접근 시 401."""
        res = await client.get(f"{AUTH}/me", headers=auth_header("invalid.jwt.token"))
        assert res.status_code == 401
        assert res.headers.get("www-authenticate") == "Bearer"

    async def test_get_me_with_refresh_token(self, client: AsyncClient):
        """리프레시 토큰으로 /me 접근 시 401."""
        data = await _signup(client)
        res = await client.get(f"{AUTH}/me", headers=auth_header(data["refresh_token"]))
        assert res.status_code == 401

    async def test_get_me_expired_token(self, client: AsyncClient):
        """만료된 액세스 토큰은 401."""
        data = await _signup(client)
        user = data["user"]
        token = create_access_token(
            {"sub": user["id"], "email": user["email"], "firstName": "A", "lastName": "B"},
            now=datetime.now(timezone.utc) - timedelta(minutes=30),
        )
        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 401


class TestHealth:
    """헬스 체크 테스트."""

    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}
