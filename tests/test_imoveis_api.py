"""
TESTES - API DE IMÓVEIS
========================
"""

from sqlalchemy import func, select

from imobcrm.domain.entities import ImagemImovel, Imovel, ImovelChave, KeyStatus
from tests.utils import auth_headers_for, create_imovel_with_key


async def test_create_imovel_creates_available_key(async_client, auth_headers, db_session):
    response = await async_client.post(
        "/api/v1/imoveis",
        json={
            "codigo": "AP100",
            "tipo_imovel": "Apartamento",
            "logradouro": "Rua Padre Chagas",
            "numero": "55",
            "bairro": "Moinhos",
            "dados_contrato": {"venda_ativo": True},
            "dormitorios": 2,
        },
        headers=auth_headers,
    )

    assert response.status_code == 201
    imovel_id = response.json()["id"]

    result = await db_session.execute(select(ImovelChave).where(ImovelChave.imovel_id == imovel_id))
    chave = result.scalar_one()
    assert chave.status == "Disponível"
    assert chave.codigo_chave == "AP100"
    # Agência do perfil
    assert chave.agencia == "Centro"


async def test_create_imovel_uses_explicit_agency(async_client, auth_headers, db_session):
    response = await async_client.post(
        "/api/v1/imoveis",
        json={
            "codigo": "CA200",
            "tipo_imovel": "Casa",
            "logradouro": "Rua Dom Pedro II",
            "codigo_chave": "K-200",
            "agencia": "Zona Sul",
        },
        headers=auth_headers,
    )

    assert response.status_code == 201
    result = await db_session.execute(
        select(ImovelChave).where(ImovelChave.imovel_id == response.json()["id"])
    )
    chave = result.scalar_one()
    assert chave.codigo_chave == "K-200"
    assert chave.agencia == "Zona Sul"


async def test_list_filters_server_and_in_process(async_client, auth_headers, db_session, profile):
    await create_imovel_with_key(
        db_session, profile.id, codigo="AP001", bairro="Centro",
        dados_contrato={"venda_ativo": True}, dormitorios=2,
    )
    await create_imovel_with_key(
        db_session, profile.id, codigo="AP002", bairro="Centro",
        dados_contrato={"locacao_ativo": True}, dormitorios=3,
    )
    await create_imovel_with_key(
        db_session, profile.id, codigo="CA003", bairro="Moinhos",
        tipo_imovel="Casa", dados_contrato={"venda_ativo": True}, dormitorios=2,
    )

    response = await async_client.get(
        "/api/v1/imoveis", params={"bairro": "Centro"}, headers=auth_headers
    )
    assert sorted(i["codigo"] for i in response.json()) == ["AP001", "AP002"]

    response = await async_client.get(
        "/api/v1/imoveis", params={"contrato": "Venda", "dormitorios": [2]}, headers=auth_headers
    )
    assert sorted(i["codigo"] for i in response.json()) == ["AP001", "CA003"]

    response = await async_client.get(
        "/api/v1/imoveis", params={"codigo": "ap", "tipo_imovel": "Apartamento"}, headers=auth_headers
    )
    assert sorted(i["codigo"] for i in response.json()) == ["AP001", "AP002"]


async def test_get_imovel_of_another_user_is_404(async_client, db_session, profile, other_profile):
    chave = await create_imovel_with_key(db_session, profile.id)

    response = await async_client.get(
        f"/api/v1/imoveis/{chave.imovel_id}", headers=auth_headers_for(other_profile)
    )
    assert response.status_code == 404


async def test_bulk_delete_removes_media_keys_and_properties(async_client, auth_headers, db_session, profile):
    first = await create_imovel_with_key(db_session, profile.id, codigo="AP001")
    second = await create_imovel_with_key(db_session, profile.id, codigo="AP002")
    kept = await create_imovel_with_key(db_session, profile.id, codigo="AP003")

    db_session.add(ImagemImovel(imovel_id=first.imovel_id, url="https://cdn.exemplo.com/1.jpg"))
    await db_session.commit()

    response = await async_client.request(
        "DELETE",
        "/api/v1/imoveis",
        json={"ids": [first.imovel_id, second.imovel_id]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["deleted"] == 2

    remaining = await db_session.execute(select(Imovel.id))
    assert list(remaining.scalars().all()) == [kept.imovel_id]

    keys = await db_session.execute(select(ImovelChave.imovel_id))
    assert list(keys.scalars().all()) == [kept.imovel_id]

    images = await db_session.execute(select(func.count()).select_from(ImagemImovel))
    assert images.scalar() == 0


async def test_bulk_delete_ignores_other_users(async_client, db_session, profile, other_profile):
    chave = await create_imovel_with_key(db_session, profile.id)

    response = await async_client.request(
        "DELETE",
        "/api/v1/imoveis",
        json={"ids": [chave.imovel_id]},
        headers=auth_headers_for(other_profile),
    )

    assert response.status_code == 404
    still_there = await db_session.get(Imovel, chave.imovel_id)
    assert still_there is not None


# =============================================================================
# CADASTRO DE CHAVES DO IMÓVEL
# =============================================================================

async def test_sync_keys_adds_updates_and_removes(async_client, auth_headers, db_session, profile):
    chave = await create_imovel_with_key(db_session, profile.id, codigo="AP001")
    extra = ImovelChave(
        user_id=profile.id,
        imovel_id=chave.imovel_id,
        codigo_chave="CH-EXTRA",
        agencia="Centro",
        status="Disponível",
    )
    db_session.add(extra)
    await db_session.commit()
    extra_id = extra.id

    response = await async_client.put(
        f"/api/v1/imoveis/{chave.imovel_id}/chaves",
        json={"keys": [
            {
                "id": chave.id,
                "codigo_chave": "CH-PORTARIA",
                "responsavel_tipo": "Porteiro",
                "nome_contato": "Seu João",
                "telefone_contato": "51 99999-0000",
            },
            {"codigo_chave": "CH-NOVA", "disponivel_emprestimo": False},
        ]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert [k["codigo_chave"] for k in body] == ["CH-PORTARIA", "CH-NOVA"]
    assert body[0]["id"] == chave.id
    assert body[0]["responsavel_tipo"] == "Porteiro"
    assert body[0]["nome_contato"] == "Seu João"
    assert body[1]["status"] == "Disponível"
    assert body[1]["disponivel_emprestimo"] is False
    # Agência do perfil
    assert body[1]["agencia"] == "Centro"

    ids = await db_session.execute(
        select(ImovelChave.id).where(ImovelChave.imovel_id == chave.imovel_id)
    )
    assert extra_id not in ids.scalars().all()

    listed = await async_client.get(
        f"/api/v1/imoveis/{chave.imovel_id}/chaves", headers=auth_headers
    )
    assert [k["codigo_chave"] for k in listed.json()] == ["CH-PORTARIA", "CH-NOVA"]


async def test_sync_keys_keeps_custody(async_client, auth_headers, db_session, profile):
    chave = await create_imovel_with_key(
        db_session, profile.id, status=KeyStatus.WITHDRAWN, retirada_por="Ana",
    )

    response = await async_client.put(
        f"/api/v1/imoveis/{chave.imovel_id}/chaves",
        json={"keys": [{"id": chave.id, "codigo_chave": "CH-RENOMEADA"}]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    stored = await db_session.execute(
        select(ImovelChave.codigo_chave, ImovelChave.status, ImovelChave.retirada_por)
        .where(ImovelChave.id == chave.id)
    )
    assert stored.one() == ("CH-RENOMEADA", KeyStatus.WITHDRAWN.value, "Ana")


async def test_sync_keys_rejects_key_from_another_property(async_client, auth_headers, db_session, profile):
    chave = await create_imovel_with_key(db_session, profile.id, codigo="AP001")
    foreign = await create_imovel_with_key(db_session, profile.id, codigo="AP002")

    response = await async_client.put(
        f"/api/v1/imoveis/{chave.imovel_id}/chaves",
        json={"keys": [{"id": foreign.id, "codigo_chave": "ROUBADA"}]},
        headers=auth_headers,
    )

    assert response.status_code == 422
    assert str(foreign.id) in response.json()["detail"]

    # Nada mudou
    remaining = await db_session.execute(
        select(ImovelChave.id).where(ImovelChave.imovel_id == chave.imovel_id)
    )
    assert remaining.scalars().all() == [chave.id]


async def test_keys_of_other_users_property_are_hidden(async_client, db_session, profile, other_profile):
    chave = await create_imovel_with_key(db_session, profile.id)
    headers = auth_headers_for(other_profile)

    listed = await async_client.get(f"/api/v1/imoveis/{chave.imovel_id}/chaves", headers=headers)
    assert listed.status_code == 404

    synced = await async_client.put(
        f"/api/v1/imoveis/{chave.imovel_id}/chaves", json={"keys": []}, headers=headers
    )
    assert synced.status_code == 404
