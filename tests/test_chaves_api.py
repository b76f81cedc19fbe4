"""
TESTES - API DE CHAVES
=======================

Listagem com status derivado, retirada, devolução, termo e isolamento
por usuário.
"""

from datetime import time, timedelta

import httpx
import pytest
from sqlalchemy import select

from imobcrm.config import get_settings
from imobcrm.domain.entities import ImovelChave, KeyStatus
from imobcrm.domain.services.key_custody import local_now
from tests.utils import auth_headers_for, create_imovel_with_key


def _today():
    return local_now(get_settings().timezone).date()


@pytest.fixture
async def overdue_key(db_session, profile):
    return await create_imovel_with_key(
        db_session,
        profile.id,
        codigo="AP001",
        status=KeyStatus.WITHDRAWN,
        retirada_por="Ana Paula",
        previsao_entrega=_today() - timedelta(days=1),
        hora_entrega=time(17, 0),
    )


@pytest.fixture
async def available_key(db_session, profile):
    return await create_imovel_with_key(db_session, profile.id, codigo="CA002", bairro="Moinhos")


async def test_list_requires_authentication(async_client: httpx.AsyncClient):
    response = await async_client.get("/api/v1/chaves")
    assert response.status_code in (401, 403)


async def test_list_derives_overdue_status(async_client, auth_headers, overdue_key, available_key):
    response = await async_client.get("/api/v1/chaves", headers=auth_headers)

    assert response.status_code == 200
    by_code = {item["codigo_chave"]: item for item in response.json()}

    assert by_code["CH-AP001"]["status"] == "Atrasada"
    assert by_code["CH-CA002"]["status"] == "Disponível"
    assert by_code["CH-CA002"]["previsao_display"] == "N/A"
    assert by_code["CH-AP001"]["imovel_label"].startswith("AP001 - Rua das Flores")


async def test_overdue_is_never_persisted(async_client, auth_headers, overdue_key, db_session):
    await async_client.get("/api/v1/chaves", headers=auth_headers)

    stored = await db_session.get(ImovelChave, overdue_key.id, populate_existing=True)
    assert stored.status == "Retirada"


async def test_list_filters_by_derived_status(async_client, auth_headers, overdue_key, available_key):
    response = await async_client.get(
        "/api/v1/chaves", params={"status": "Atrasada"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [overdue_key.id]


async def test_withdrawal_with_empty_holder_returns_422_without_changes(
    async_client, auth_headers, available_key, db_session
):
    response = await async_client.post(
        f"/api/v1/chaves/{available_key.id}/retirada",
        json={"retirada_por": "", "previsao_entrega": None, "hora_entrega": None},
        headers=auth_headers,
    )

    assert response.status_code == 422
    assert "obrigatório" in response.json()["detail"]

    stored = await db_session.get(ImovelChave, available_key.id, populate_existing=True)
    assert stored.status == "Disponível"
    assert stored.retirada_por is None


async def test_withdrawal_updates_key(async_client, auth_headers, available_key):
    due = _today() + timedelta(days=2)

    response = await async_client.post(
        f"/api/v1/chaves/{available_key.id}/retirada",
        json={
            "retirada_por": "  Carlos  ",
            "previsao_entrega": due.isoformat(),
            "hora_entrega": "17:00",
            "tipo_retirada": "Temporária",
            "motivo": "Vistoria",
            "imprimir_termo": True,
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["key"]["status"] == "Retirada"
    assert data["key"]["retirada_por"] == "Carlos"
    assert data["key"]["motivo"] == "Vistoria"
    assert data["termo_url"] == f"/api/v1/chaves/{available_key.id}/termo"


async def test_withdrawal_without_receipt_has_no_link(async_client, auth_headers, available_key):
    response = await async_client.post(
        f"/api/v1/chaves/{available_key.id}/retirada",
        json={
            "retirada_por": "Carlos",
            "previsao_entrega": (_today() + timedelta(days=1)).isoformat(),
            "hora_entrega": "09:30",
            "imprimir_termo": False,
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["termo_url"] is None
    assert response.json()["message"] == "Retirada registrada com sucesso!"


async def test_return_resets_all_withdrawal_fields(async_client, auth_headers, overdue_key, db_session):
    response = await async_client.post(
        f"/api/v1/chaves/{overdue_key.id}/devolucao", headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["key"]["status"] == "Disponível"

    result = await db_session.execute(
        select(ImovelChave)
        .where(ImovelChave.id == overdue_key.id)
        .execution_options(populate_existing=True)
    )
    stored = result.scalar_one()
    assert stored.status == "Disponível"
    assert stored.retirada_por is None
    assert stored.tipo_retirada is None
    assert stored.motivo is None
    assert stored.previsao_entrega is None
    assert stored.hora_entrega is None


async def test_keys_of_another_user_are_not_found(async_client, overdue_key, other_profile):
    headers = auth_headers_for(other_profile)

    listing = await async_client.get("/api/v1/chaves", headers=headers)
    assert listing.json() == []

    response = await async_client.post(f"/api/v1/chaves/{overdue_key.id}/devolucao", headers=headers)
    assert response.status_code == 404


async def test_receipt_pdf_for_withdrawn_key(async_client, auth_headers, overdue_key):
    response = await async_client.get(f"/api/v1/chaves/{overdue_key.id}/termo", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


async def test_receipt_for_available_key_is_rejected(async_client, auth_headers, available_key):
    response = await async_client.get(f"/api/v1/chaves/{available_key.id}/termo", headers=auth_headers)
    assert response.status_code == 400
