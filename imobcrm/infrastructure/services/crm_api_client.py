"""
CLIENTE DA API DO CRM
======================

Cliente assíncrono (httpx) usado pela planilha de imóveis importados e
pelas telas de chaves e imóveis.

Erros HTTP sobem como ``httpx.HTTPStatusError``; quem chama decide o
que fazer (a planilha, por exemplo, recarrega a página).
"""

import inspect
import logging
from datetime import date, time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

import httpx

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Pergunta ao usuário antes da devolução; False cancela
ConfirmCallback = Callable[[str], Union[bool, Awaitable[bool]]]

RETURN_CONFIRMATION = "Confirmar devolução da chave?"


def _clean_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Remove parâmetros vazios (None ou string vazia)."""
    return {k: v for k, v in params.items() if v is not None and v != ""}


class CrmApiClient:
    """
    Cliente da API.

    Uso:
        async with CrmApiClient("http://localhost:8000") as client:
            await client.login("admin@imob.com", "senha")
            page = await client.list_imported(page=1, limit=20)
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport)

    async def __aenter__(self) -> "CrmApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = await self._client.request(
            method,
            f"{API_PREFIX}{path}",
            headers=self._headers(),
            **kwargs,
        )
        if response.is_error:
            logger.warning(f"{method} {path} -> {response.status_code}")
        response.raise_for_status()
        return response

    # =========================================================================
    # AUTH
    # =========================================================================

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        response = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        data = response.json()
        self.token = data["access_token"]
        return data

    async def me(self) -> Dict[str, Any]:
        response = await self._request("GET", "/auth/me")
        return response.json()

    # =========================================================================
    # CHAVES
    # =========================================================================

    async def list_keys(
        self,
        codigo: str = "",
        imovel: str = "",
        retirada_por: str = "",
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = _clean_params({
            "codigo": codigo,
            "imovel": imovel,
            "retirada_por": retirada_por,
            "status": status,
        })
        response = await self._request("GET", "/chaves", params=params)
        return response.json()

    async def withdraw_key(
        self,
        key_id: int,
        retirada_por: str,
        previsao_entrega: Optional[date],
        hora_entrega: Optional[time],
        tipo_retirada: str = "Temporária",
        motivo: str = "Visita",
        imprimir_termo: bool = True,
    ) -> Dict[str, Any]:
        payload = {
            "retirada_por": retirada_por,
            "previsao_entrega": previsao_entrega.isoformat() if previsao_entrega else None,
            "hora_entrega": hora_entrega.strftime("%H:%M") if hora_entrega else None,
            "tipo_retirada": tipo_retirada,
            "motivo": motivo,
            "imprimir_termo": imprimir_termo,
        }
        response = await self._request("POST", f"/chaves/{key_id}/retirada", json=payload)
        return response.json()

    async def return_key(
        self,
        key_id: int,
        confirm: Optional[ConfirmCallback] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Devolve a chave.

        Com ``confirm``, a devolução só é enviada se o callback aceitar.

        Returns:
            Resposta da API ou None se cancelada
        """
        if confirm is not None:
            accepted = confirm(RETURN_CONFIRMATION)
            if inspect.isawaitable(accepted):
                accepted = await accepted
            if not accepted:
                logger.info(f"Devolução da chave {key_id} cancelada")
                return None

        response = await self._request("POST", f"/chaves/{key_id}/devolucao")
        return response.json()

    async def download_key_receipt(self, key_id: int) -> bytes:
        response = await self._request("GET", f"/chaves/{key_id}/termo")
        return response.content

    # =========================================================================
    # IMÓVEIS
    # =========================================================================

    async def list_imoveis(self, **filters) -> List[Dict[str, Any]]:
        response = await self._request("GET", "/imoveis", params=_clean_params(filters))
        return response.json()

    async def create_imovel(self, data: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("POST", "/imoveis", json=data)
        return response.json()

    async def delete_imoveis(self, ids: Sequence[int]) -> Dict[str, Any]:
        response = await self._request("DELETE", "/imoveis", json={"ids": list(ids)})
        return response.json()

    # =========================================================================
    # IMÓVEIS IMPORTADOS
    # =========================================================================

    async def list_imported(self, **params) -> Dict[str, Any]:
        response = await self._request("GET", "/imoveis-importados", params=_clean_params(params))
        return response.json()

    async def update_imported_cell(self, row_id: int, column: str, value: Any) -> Dict[str, Any]:
        response = await self._request(
            "PATCH",
            f"/imoveis-importados/{row_id}",
            json={"column": column, "value": value},
        )
        return response.json()

    async def export_imported(
        self,
        file_format: str,
        ids: Sequence[int] = (),
        filters: Optional[Dict[str, Any]] = None,
        sort_column: str = "id",
        sort_direction: str = "asc",
    ) -> httpx.Response:
        """Exporta (csv/pdf). Retorna a resposta para ler conteúdo e nome do arquivo."""
        payload = {
            "ids": list(ids),
            "filters": _clean_params(filters or {}),
            "sort_column": sort_column,
            "sort_direction": sort_direction,
        }
        return await self._request("POST", f"/imoveis-importados/export/{file_format}", json=payload)
