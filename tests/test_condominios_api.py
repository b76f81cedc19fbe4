"""
TESTES - API DE CONDOMÍNIOS
============================
"""

import pytest
from sqlalchemy import select

from imobcrm.domain.entities import Condominio
from tests.utils import auth_headers_for


async def _create(async_client, headers, **fields):
    payload = {"nome": "Residencial Jardim", "bairro": "Centro"}
    payload.update(fields)
    response = await async_client.post("/api/v1/condominios", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


async def test_create_condominio(async_client, auth_headers):
    body = await _create(
        async_client, auth_headers,
        nome="Edifício Solar", estado="RS", area_terreno_m2=1250.5,
        ano_termino=2027, construtora="Construtora Sul", estagio="Em construção",
    )

    assert body["nome"] == "Edifício Solar"
    assert body["estagio"] == "Em construção"
    assert body["area_terreno_m2"] == pytest.approx(1250.5)

    response = await async_client.get(f"/api/v1/condominios/{body['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["construtora"] == "Construtora Sul"


async def test_create_rejects_unknown_stage(async_client, auth_headers):
    response = await async_client.post(
        "/api/v1/condominios",
        json={"nome": "Torre", "estagio": "Demolido"},
        headers=auth_headers,
    )

    assert response.status_code == 422


async def test_list_filters(async_client, auth_headers):
    await _create(async_client, auth_headers, nome="Residencial Jardim", estagio="Pronto")
    await _create(async_client, auth_headers, nome="Jardim das Flores", bairro="Moinhos", estagio="Na planta")
    await _create(async_client, auth_headers, nome="Torre Norte", estagio="Na planta")

    response = await async_client.get(
        "/api/v1/condominios", params={"search": "jardim"}, headers=auth_headers
    )
    # Mais recentes primeiro
    assert [c["nome"] for c in response.json()] == ["Jardim das Flores", "Residencial Jardim"]

    response = await async_client.get(
        "/api/v1/condominios", params={"bairro": "Centro", "estagio": "Na planta"}, headers=auth_headers
    )
    assert [c["nome"] for c in response.json()] == ["Torre Norte"]


async def test_list_is_per_user(async_client, auth_headers, other_profile):
    await _create(async_client, auth_headers)

    response = await async_client.get("/api/v1/condominios", headers=auth_headers_for(other_profile))

    assert response.status_code == 200
    assert response.json() == []


async def test_bulk_delete(async_client, auth_headers, db_session, other_profile):
    first = await _create(async_client, auth_headers, nome="A")
    kept = await _create(async_client, auth_headers, nome="B")

    response = await async_client.request(
        "DELETE", "/api/v1/condominios", json={"ids": [first["id"]]},
        headers=auth_headers_for(other_profile),
    )
    assert response.status_code == 404

    response = await async_client.request(
        "DELETE", "/api/v1/condominios", json={"ids": [first["id"]]}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["deleted"] == 1

    remaining = await db_session.execute(select(Condominio.id))
    assert remaining.scalars().all() == [kept["id"]]
