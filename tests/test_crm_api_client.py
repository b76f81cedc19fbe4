from datetime import date, time, timedelta

import httpx
import pytest

from imobcrm.api.main import app
from imobcrm.domain.entities import KeyStatus
from imobcrm.infrastructure.services.crm_api_client import CrmApiClient, RETURN_CONFIRMATION
from tests.utils import create_imovel_with_key


def _recording_transport(requests: list) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"success": True})

    return httpx.MockTransport(handler)


async def test_declined_confirmation_sends_nothing():
    requests = []
    asked = []

    def confirm(message):
        asked.append(message)
        return False

    async with CrmApiClient("http://test", token="t", transport=_recording_transport(requests)) as client:
        result = await client.return_key(10, confirm=confirm)

    assert result is None
    assert asked == [RETURN_CONFIRMATION]
    assert requests == []


async def test_async_confirmation_accepted_sends_return():
    requests = []

    async def confirm(message):
        return True

    async with CrmApiClient("http://test", token="abc", transport=_recording_transport(requests)) as client:
        result = await client.return_key(10, confirm=confirm)

    assert result == {"success": True}
    assert len(requests) == 1
    assert requests[0].url.path == "/api/v1/chaves/10/devolucao"
    assert requests[0].headers["Authorization"] == "Bearer abc"


async def test_login_and_key_flow(session_factory, db_session, profile):
    chave = await create_imovel_with_key(db_session, profile.id, codigo="AP777")

    async with CrmApiClient("http://test", transport=httpx.ASGITransport(app=app)) as client:
        data = await client.login("corretor@imob.com", "senha123")
        assert client.token == data["access_token"]
        assert (await client.me())["email"] == "corretor@imob.com"

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await client.withdraw_key(chave.id, retirada_por="", previsao_entrega=None, hora_entrega=None)
        assert exc_info.value.response.status_code == 422

        withdrawn = await client.withdraw_key(
            chave.id,
            retirada_por="Ana",
            previsao_entrega=date.today() + timedelta(days=3),
            hora_entrega=time(17, 0),
        )
        assert withdrawn["key"]["status"] == KeyStatus.WITHDRAWN.value

        keys = await client.list_keys(status="Retirada")
        assert [k["id"] for k in keys] == [chave.id]

        receipt = await client.download_key_receipt(chave.id)
        assert receipt.startswith(b"%PDF")

        returned = await client.return_key(chave.id, confirm=lambda message: True)
        assert returned["key"]["status"] == KeyStatus.AVAILABLE.value


async def test_wrong_password_raises(session_factory, profile):
    async with CrmApiClient("http://test", transport=httpx.ASGITransport(app=app)) as client:
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await client.login("corretor@imob.com", "errada")

    assert exc_info.value.response.status_code == 401
    assert client.token is None


async def test_imoveis_through_client(session_factory, profile):
    async with CrmApiClient("http://test", transport=httpx.ASGITransport(app=app)) as client:
        await client.login("corretor@imob.com", "senha123")

        created = await client.create_imovel({
            "codigo": "SB010",
            "tipo_imovel": "Sobrado",
            "logradouro": "Rua Mostardeiro",
            "dados_contrato": {"locacao_ativo": True},
        })
        listed = await client.list_imoveis(contrato="Locacao")
        assert [i["id"] for i in listed] == [created["id"]]

        deleted = await client.delete_imoveis([created["id"]])
        assert deleted["deleted"] == 1
        assert await client.list_imoveis() == []
