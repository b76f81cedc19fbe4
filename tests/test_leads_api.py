"""
TESTES - API DE LEADS
======================
"""

from tests.utils import auth_headers_for


async def _create(async_client, headers, **fields):
    payload = {"nome": "Carlos Lima", "telefone": "51 98888-1111", "origem": "Site"}
    payload.update(fields)
    response = await async_client.post("/api/v1/leads", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_lead_with_responsible(async_client, auth_headers, profile):
    body = await _create(async_client, auth_headers, responsavel_id=profile.id)

    assert body["status"] == "Novo"
    assert body["origem"] == "Site"
    assert body["responsavel_nome"] == "Corretor Teste"


async def test_create_rejects_unknown_responsible(async_client, auth_headers):
    response = await async_client.post(
        "/api/v1/leads",
        json={"nome": "Carlos", "responsavel_id": 9999},
        headers=auth_headers,
    )

    assert response.status_code == 422
    assert "9999" in response.json()["detail"]


async def test_list_filters_and_search(async_client, auth_headers, profile):
    await _create(async_client, auth_headers, nome="Carlos Lima", origem="Site")
    await _create(
        async_client, auth_headers, nome="Beatriz Souza", telefone="51 97777-2222",
        email="bia@exemplo.com", origem="Instagram", status="Qualificado",
        responsavel_id=profile.id,
    )
    await _create(async_client, auth_headers, nome="Daniel Rocha", origem="Instagram")

    response = await async_client.get(
        "/api/v1/leads", params={"origem": "Instagram"}, headers=auth_headers
    )
    assert [lead["nome"] for lead in response.json()] == ["Daniel Rocha", "Beatriz Souza"]

    response = await async_client.get(
        "/api/v1/leads", params={"status": "Qualificado"}, headers=auth_headers
    )
    assert [lead["nome"] for lead in response.json()] == ["Beatriz Souza"]

    response = await async_client.get(
        "/api/v1/leads", params={"responsavel_id": profile.id}, headers=auth_headers
    )
    assert [lead["nome"] for lead in response.json()] == ["Beatriz Souza"]

    # Busca por telefone e por email
    for term in ("97777", "BIA@"):
        response = await async_client.get(
            "/api/v1/leads", params={"search": term}, headers=auth_headers
        )
        assert [lead["nome"] for lead in response.json()] == ["Beatriz Souza"]


async def test_update_changes_only_sent_fields(async_client, auth_headers):
    lead = await _create(async_client, auth_headers, observacoes="Quer 2 dormitórios")

    response = await async_client.patch(
        f"/api/v1/leads/{lead['id']}", json={"status": "Contatado"}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Contatado"
    assert body["observacoes"] == "Quer 2 dormitórios"
    assert body["telefone"] == "51 98888-1111"


async def test_update_rejects_unknown_responsible(async_client, auth_headers):
    lead = await _create(async_client, auth_headers)

    response = await async_client.patch(
        f"/api/v1/leads/{lead['id']}", json={"responsavel_id": 9999}, headers=auth_headers
    )

    assert response.status_code == 422


async def test_other_users_lead_is_not_found(async_client, auth_headers, other_profile):
    lead = await _create(async_client, auth_headers)
    headers = auth_headers_for(other_profile)

    assert (await async_client.get(f"/api/v1/leads/{lead['id']}", headers=headers)).status_code == 404
    response = await async_client.patch(
        f"/api/v1/leads/{lead['id']}", json={"status": "Contatado"}, headers=headers
    )
    assert response.status_code == 404
    assert (await async_client.delete(f"/api/v1/leads/{lead['id']}", headers=headers)).status_code == 404


async def test_delete_lead(async_client, auth_headers):
    lead = await _create(async_client, auth_headers)

    response = await async_client.delete(f"/api/v1/leads/{lead['id']}", headers=auth_headers)
    assert response.status_code == 200

    response = await async_client.get(f"/api/v1/leads/{lead['id']}", headers=auth_headers)
    assert response.status_code == 404
