"""
ESTADO DA PLANILHA DE IMÓVEIS IMPORTADOS
=========================================

Página, tamanho de página, ordenação, filtros, busca rápida e seleção.

Regras:
- Qualquer mudança de filtro, busca, ordenação ou tamanho de página
  volta para a página 1
- Clicar na coluna já ordenada inverte a direção; coluna nova começa
  ascendente
- A seleção é um conjunto de ids, independente de filtro/ordem/página
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

from imobcrm.config import get_settings
from imobcrm.domain.entities.enums import SortDirection

DEFAULT_PAGE_SIZE = 20
DEFAULT_SORT_COLUMN = "id"


@dataclass
class GridState:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_column: str = DEFAULT_SORT_COLUMN
    sort_direction: SortDirection = SortDirection.ASC
    filters: Dict[str, Any] = field(default_factory=dict)
    search: str = ""
    total: int = 0
    page_ids: List[int] = field(default_factory=list)
    selected: Set[int] = field(default_factory=set)

    # =========================================================================
    # FILTROS E BUSCA
    # =========================================================================

    def apply_filters(self, filters: Dict[str, Any]) -> None:
        """Aplica filtros (valores vazios são descartados)."""
        self.filters = {k: v for k, v in filters.items() if v is not None and v != ""}
        self.page = 1

    def clear_filters(self) -> None:
        self.filters = {}
        self.page = 1

    def set_search(self, search: str) -> None:
        self.search = search
        self.page = 1

    # =========================================================================
    # ORDENAÇÃO E PAGINAÇÃO
    # =========================================================================

    def sort_by(self, column: str) -> None:
        if column == self.sort_column:
            self.sort_direction = (
                SortDirection.DESC if self.sort_direction == SortDirection.ASC else SortDirection.ASC
            )
        else:
            self.sort_column = column
            self.sort_direction = SortDirection.ASC
        self.page = 1

    def set_limit(self, limit: int) -> None:
        if limit not in get_settings().imported_page_sizes:
            raise ValueError(f"Tamanho de página inválido: {limit}")
        self.limit = limit
        self.page = 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def has_next(self) -> bool:
        return self.page < self.total_pages

    def has_previous(self) -> bool:
        return self.page > 1

    def next_page(self) -> bool:
        if not self.has_next():
            return False
        self.page += 1
        return True

    def previous_page(self) -> bool:
        if not self.has_previous():
            return False
        self.page -= 1
        return True

    def go_to(self, page: int) -> None:
        self.page = max(1, min(page, self.total_pages or 1))

    def loaded(self, ids: Iterable[int], total: int) -> None:
        """Registra o resultado da última consulta."""
        self.page_ids = list(ids)
        self.total = total

    # =========================================================================
    # SELEÇÃO
    # =========================================================================

    def toggle_row(self, row_id: int) -> None:
        if row_id in self.selected:
            self.selected.discard(row_id)
        else:
            self.selected.add(row_id)

    def all_page_selected(self) -> bool:
        return bool(self.page_ids) and all(row_id in self.selected for row_id in self.page_ids)

    def toggle_select_page(self) -> None:
        """Seleciona (ou desmarca) todas as linhas da página atual."""
        if self.all_page_selected():
            self.selected.difference_update(self.page_ids)
        else:
            self.selected.update(self.page_ids)

    def clear_selection(self) -> None:
        self.selected.clear()

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def query_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "page": self.page,
            "limit": self.limit,
            "sort_column": self.sort_column,
            "sort_direction": self.sort_direction.value,
        }
        if self.search:
            params["search"] = self.search
        params.update(self.filters)
        return params

    def export_filters(self) -> Dict[str, Any]:
        """Filtros ativos (incluindo a busca) para exportar o conjunto filtrado."""
        filters = dict(self.filters)
        if self.search:
            filters["search"] = self.search
        return filters

    def selected_ids(self) -> Optional[List[int]]:
        return sorted(self.selected) if self.selected else None
