"""
TESTES - AUTENTICAÇÃO
======================
"""

from datetime import timedelta

from imobcrm.domain.entities import Profile
from imobcrm.infrastructure.services.auth_service import (
    create_profile_token,
    hash_password,
    profile_id_from_token,
    verify_password,
)


def test_password_hash_is_salted():
    first = hash_password("senha123")
    second = hash_password("senha123")

    assert first != second
    assert verify_password("senha123", first)
    assert verify_password("senha123", second)
    assert not verify_password("outra", first)


def test_malformed_hash_never_matches():
    assert verify_password("senha123", "sem-separador") is False


def test_token_carries_profile_id():
    profile = Profile(id=42, name="Ana", email="ana@imob.com", agencia="Centro")

    assert profile_id_from_token(create_profile_token(profile)) == 42
    assert profile_id_from_token("isto.nao.e-um-token") is None


def test_expired_token_is_rejected():
    profile = Profile(id=7, name="Ana", email="ana@imob.com")
    token = create_profile_token(profile, expires_delta=timedelta(minutes=-5))

    assert profile_id_from_token(token) is None


async def test_login_ignores_email_case(async_client, profile):
    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "  CORRETOR@Imob.com ", "password": "senha123"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["id"] == profile.id
    assert profile_id_from_token(body["access_token"]) == profile.id


async def test_login_wrong_password(async_client, profile):
    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "corretor@imob.com", "password": "errada"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Email ou senha incorretos"


async def test_login_inactive_profile(async_client, db_session, profile):
    profile.active = False
    await db_session.commit()

    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "corretor@imob.com", "password": "senha123"},
    )

    assert response.status_code == 403


async def test_me_returns_logged_profile(async_client, auth_headers, profile):
    response = await async_client.get("/api/v1/auth/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["email"] == "corretor@imob.com"
    assert response.json()["agencia"] == "Centro"


async def test_expired_session_is_unauthorized(async_client, profile):
    token = create_profile_token(profile, expires_delta=timedelta(minutes=-1))

    response = await async_client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Sessão expirada. Faça login novamente."


async def test_inactive_profile_token_is_unauthorized(async_client, db_session, profile, auth_headers):
    profile.active = False
    await db_session.commit()

    response = await async_client.get("/api/v1/auth/me", headers=auth_headers)

    assert response.status_code == 401
