"""
PLANILHA DE IMÓVEIS IMPORTADOS
===============================

Sessão da planilha: junta o estado (página, ordenação, filtros,
seleção), o autosave das células e o cliente da API.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from imobcrm.application.grid_state import GridState
from imobcrm.application.services.cell_autosave import CellAutosaver, CellKey
from imobcrm.domain.entities.imovel_importado import IMPORTED_COLUMNS
from imobcrm.domain.services.currency import parse_currency_to_number
from imobcrm.infrastructure.services.crm_api_client import CrmApiClient

logger = logging.getLogger(__name__)

# Filtros digitados como moeda ("R$ 1.500,00")
CURRENCY_FILTERS = ("min_venda", "max_venda", "min_aluguel", "max_aluguel")


@dataclass
class ExportFile:
    filename: str
    content: bytes
    media_type: str


def _filename_from(disposition: str, default: str) -> str:
    for part in disposition.split(";"):
        part = part.strip()
        if part.startswith("filename="):
            return part[len("filename="):].strip('"')
    return default


def prepare_filters(filters: Dict[str, Any]) -> Dict[str, Any]:
    """Converte os filtros de valor (moeda) para número antes de enviar."""
    prepared = {}
    for name, value in filters.items():
        if name in CURRENCY_FILTERS and isinstance(value, str):
            value = parse_currency_to_number(value)
        if value is None or value == "":
            continue
        prepared[name] = value
    return prepared


class ImportedListingGrid:
    """Planilha de imóveis importados."""

    def __init__(
        self,
        client: CrmApiClient,
        state: Optional[GridState] = None,
        autosave_delay: Optional[float] = None,
    ):
        self.client = client
        self.state = state or GridState()
        self.rows: List[Dict[str, Any]] = []
        self.last_error: Optional[Exception] = None
        self.autosaver = CellAutosaver(
            commit=self._commit_cell,
            delay=autosave_delay,
            on_error=self._on_commit_error,
        )

    # =========================================================================
    # CARGA
    # =========================================================================

    async def load(self) -> List[Dict[str, Any]]:
        """Busca a página atual (descarta edições pendentes)."""
        data = await self.client.list_imported(**self.state.query_params())
        self.rows = data["items"]
        self.state.loaded([row["id"] for row in self.rows], data["total"])
        self.autosaver.load(self.rows, IMPORTED_COLUMNS.keys())
        return self.rows

    async def apply_filters(self, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        self.state.apply_filters(prepare_filters(filters))
        return await self.load()

    async def clear_filters(self) -> List[Dict[str, Any]]:
        self.state.clear_filters()
        return await self.load()

    async def search(self, text: str) -> List[Dict[str, Any]]:
        self.state.set_search(text.strip())
        return await self.load()

    async def sort_by(self, column: str) -> List[Dict[str, Any]]:
        self.state.sort_by(column)
        return await self.load()

    async def set_page_size(self, limit: int) -> List[Dict[str, Any]]:
        self.state.set_limit(limit)
        return await self.load()

    async def next_page(self) -> List[Dict[str, Any]]:
        if self.state.next_page():
            return await self.load()
        return self.rows

    async def previous_page(self) -> List[Dict[str, Any]]:
        if self.state.previous_page():
            return await self.load()
        return self.rows

    # =========================================================================
    # EDIÇÃO
    # =========================================================================

    async def edit_cell(self, row_id: int, column: str, value: Any) -> None:
        """Digitação na célula; seletores gravam na hora."""
        if column in self.autosaver.immediate_columns:
            await self.autosaver.select(row_id, column, value)
        else:
            self.autosaver.input(row_id, column, value)

    async def blur_cell(self, row_id: int, column: str) -> bool:
        return await self.autosaver.blur(row_id, column)

    def cell_value(self, row_id: int, column: str) -> Any:
        return self.autosaver.value(row_id, column)

    async def _commit_cell(self, row_id: int, column: str, value: Any) -> Dict[str, Any]:
        updated = await self.client.update_imported_cell(row_id, column, value)
        for index, row in enumerate(self.rows):
            if row["id"] == row_id:
                self.rows[index] = updated
                break
        return updated

    async def _on_commit_error(self, key: CellKey, error: Exception) -> None:
        self.last_error = error
        logger.warning(f"Falha ao salvar {key}; recarregando página")
        await self.load()

    # =========================================================================
    # SELEÇÃO E EXPORTAÇÃO
    # =========================================================================

    def toggle_row(self, row_id: int) -> None:
        self.state.toggle_row(row_id)

    def toggle_select_page(self) -> None:
        self.state.toggle_select_page()

    async def export(self, file_format: str) -> ExportFile:
        """Exporta a seleção ou, sem seleção, o conjunto filtrado."""
        ids = self.state.selected_ids() or []
        response = await self.client.export_imported(
            file_format,
            ids=ids,
            filters=self.state.export_filters(),
            sort_column=self.state.sort_column,
            sort_direction=self.state.sort_direction.value,
        )
        default = f"imoveis_importados.{file_format}"
        return ExportFile(
            filename=_filename_from(response.headers.get("content-disposition", ""), default),
            content=response.content,
            media_type=response.headers.get("content-type", ""),
        )
