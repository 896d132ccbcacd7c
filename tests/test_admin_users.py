"""관리자 사용자 API 테스트 — 목록, 생성, 역할 변경.

Admin user API tests. Only admins reach these endpoints.
"""

from httpx import AsyncClient

from observations.config import settings
from tests.conftest import auth_header

USERS = "/api/v1/admin/users"


class TestListUsers:

    async def test_admin_lists_users(self, client: AsyncClient, admin_token, normal_user, other_user):
        res = await client.get(USERS, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert {u["dni"] for u in res.json()} == {"10000001", "20000002", "30000003"}

    async def test_role_filter(self, client: AsyncClient, admin_token, normal_user):
        res = await client.get(USERS, params={"role": "admin"}, headers=auth_header(admin_token))
        assert [u["dni"] for u in res.json()] == ["10000001"]

    async def test_user_forbidden(self, client: AsyncClient, user_token):
        res = await client.get(USERS, headers=auth_header(user_token))
        assert res.status_code == 403


class TestCreateUser:

    async def test_dni_only_user_gets_synthesized_email(self, client: AsyncClient, admin_token):
        res = await client.post(USERS, json={
            "dni": "44444444",
            "display_name": "Diego Mecánico",
            "password": "secret1",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["email"] == f"44444444@{settings.LOGIN_EMAIL_DOMAIN}"
        assert data["role"] == "user"

        # 새 사용자는 DNI로 로그인 가능
        login = await client.post("/api/v1/app/auth/login", json={"login": "44444444", "password": "secret1"})
        assert login.status_code == 200

    async def test_duplicate_dni(self, client: AsyncClient, admin_token, normal_user):
        res = await client.post(USERS, json={
            "dni": "20000002",
            "display_name": "Copia",
            "password": "secret1",
        }, headers=auth_header(admin_token))
        assert res.status_code == 409

    async def test_dni_or_email_required(self, client: AsyncClient, admin_token):
        res = await client.post(USERS, json={
            "display_name": "Sin Login",
            "password": "secret1",
        }, headers=auth_header(admin_token))
        assert res.status_code == 422
        assert res.json()["detail"]["field"] == "dni"

    async def test_invalid_dni_format(self, client: AsyncClient, admin_token):
        res = await client.post(USERS, json={
            "dni": "12ab",
            "display_name": "Mal",
            "password": "secret1",
        }, headers=auth_header(admin_token))
        assert res.status_code == 422

    async def test_invalid_role(self, client: AsyncClient, admin_token):
        res = await client.post(USERS, json={
            "dni": "55555555",
            "display_name": "Rol Raro",
            "password": "secret1",
            "role": "superuser",
        }, headers=auth_header(admin_token))
        assert res.status_code == 422
        assert res.json()["detail"]["field"] == "role"


class TestSetRole:

    async def test_promote_user(self, client: AsyncClient, admin_token, normal_user):
        res = await client.put(
            f"{USERS}/{normal_user.id}/role", json={"role": "admin"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        assert res.json()["role"] == "admin"

    async def test_admin_cannot_change_own_role(self, client: AsyncClient, admin_user, admin_token):
        res = await client.put(
            f"{USERS}/{admin_user.id}/role", json={"role": "user"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 422
        assert res.json()["detail"]["field"] == "role"

    async def test_unknown_user(self, client: AsyncClient, admin_token):
        res = await client.put(
            f"{USERS}/00000000-0000-0000-0000-000000000000/role",
            json={"role": "admin"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 404

    async def test_user_forbidden(self, client: AsyncClient, user_token, other_user):
        res = await client.put(
            f"{USERS}/{other_user.id}/role", json={"role": "admin"}, headers=auth_header(user_token)
        )
        assert res.status_code == 403
