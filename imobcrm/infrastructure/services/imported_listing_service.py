"""
SERVIÇO: IMÓVEIS IMPORTADOS
============================

Consulta paginada da planilha de imóveis importados e edição célula a
célula.

A consulta leva todos os filtros como parâmetros de uma única instrução
e devolve, em cada linha, a contagem total (`total_count`) via função de
janela. Assim uma ida ao banco traz a página e o total para paginar.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import Numeric, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement

from imobcrm.config import get_settings
from imobcrm.domain.entities import ImovelImportado, SortDirection
from imobcrm.domain.entities.imovel_importado import (
    CURRENCY_COLUMNS,
    IMPORTED_COLUMNS,
    NUMERIC_COLUMNS,
    RESPONSIBLE_COLUMN,
)
from imobcrm.domain.exceptions import InvalidCellValueError
from imobcrm.domain.services.currency import format_text_to_currency

logger = logging.getLogger(__name__)

settings = get_settings()


# =============================================================================
# SQL: TEXTO DE MOEDA -> NÚMERO
# =============================================================================

class currency_to_numeric(FunctionElement):
    """
    Valor numérico de uma coluna de moeda em texto livre.

    Mesma regra de ``parse_currency_to_number``: mantém dígitos e
    vírgulas, a primeira vírgula vira ponto e vale o número inicial.

    "R$ 150.000,00" -> 150000.00 ; "1,5 mi, negociável" -> 1.5 ;
    texto sem dígitos -> NULL
    """
    type = Numeric()
    name = "currency_to_numeric"
    inherit_cache = True


@compiles(currency_to_numeric, "postgresql")
def _currency_to_numeric_pg(element, compiler, **kw):
    arg = compiler.process(element.clauses, **kw)
    digits = f"REGEXP_REPLACE(REGEXP_REPLACE({arg}, '[^0-9,]', '', 'g'), ',', '.')"
    return f"CAST(SUBSTRING({digits} FROM '^([0-9]+(?:\\.[0-9]+)?)') AS NUMERIC)"


@compiles(currency_to_numeric)
def _currency_to_numeric_default(element, compiler, **kw):
    # Função registrada na conexão (ver database.connection.register_sqlite_functions)
    return f"currency_to_numeric({compiler.process(element.clauses, **kw)})"


# =============================================================================
# FILTROS
# =============================================================================

@dataclass
class ImportedListingFilters:
    """Parâmetros de filtro da planilha (todos opcionais)."""
    search: Optional[str] = None
    min_venda: Optional[float] = None
    max_venda: Optional[float] = None
    min_aluguel: Optional[float] = None
    max_aluguel: Optional[float] = None
    min_dorms: Optional[int] = None
    max_dorms: Optional[int] = None
    categoria: Optional[str] = None
    bairro: Optional[str] = None
    andar: Optional[int] = None
    responsavel: Optional[str] = None
    endereco_search: Optional[str] = None
    referencia_search: Optional[str] = None

    def is_active(self) -> bool:
        return any(getattr(self, f.name) not in (None, "") for f in fields(self))


# Colunas varridas pela busca rápida
SEARCH_COLUMNS = (
    ImovelImportado.endereco,
    ImovelImportado.bairro,
    ImovelImportado.categoria,
    ImovelImportado.referencia,
    ImovelImportado.nome_proprietario,
    ImovelImportado.fones,
    ImovelImportado.email,
    ImovelImportado.feedback,
    ImovelImportado.responsaveis,
)

SORTABLE_COLUMNS = {"id", *IMPORTED_COLUMNS.keys()}
DEFAULT_SORT_COLUMN = "id"


def _blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_conditions(filters: ImportedListingFilters) -> list:
    """Traduz os filtros em condições SQL."""
    conditions = []

    search = _blank(filters.search)
    if search:
        conditions.append(or_(
            *(column.icontains(search, autoescape=True) for column in SEARCH_COLUMNS)
        ))

    venda = currency_to_numeric(ImovelImportado.venda)
    aluguel = currency_to_numeric(ImovelImportado.aluguel)

    if filters.min_venda is not None:
        conditions.append(venda >= filters.min_venda)
    if filters.max_venda is not None:
        conditions.append(venda <= filters.max_venda)
    if filters.min_aluguel is not None:
        conditions.append(aluguel >= filters.min_aluguel)
    if filters.max_aluguel is not None:
        conditions.append(aluguel <= filters.max_aluguel)

    if filters.min_dorms is not None:
        conditions.append(ImovelImportado.dorms >= filters.min_dorms)
    if filters.max_dorms is not None:
        conditions.append(ImovelImportado.dorms <= filters.max_dorms)

    if _blank(filters.categoria):
        conditions.append(ImovelImportado.categoria == filters.categoria.strip())
    if _blank(filters.bairro):
        conditions.append(ImovelImportado.bairro == filters.bairro.strip())
    if filters.andar is not None:
        conditions.append(ImovelImportado.andar == filters.andar)
    if _blank(filters.responsavel):
        conditions.append(ImovelImportado.responsaveis == filters.responsavel.strip())

    endereco = _blank(filters.endereco_search)
    if endereco:
        conditions.append(ImovelImportado.endereco.icontains(endereco, autoescape=True))

    referencia = _blank(filters.referencia_search)
    if referencia:
        conditions.append(ImovelImportado.referencia.icontains(referencia, autoescape=True))

    return conditions


def _sort_expressions(sort_column: str, descending: bool) -> list:
    """Coluna pedida (moeda pelo valor) e `id` como desempate."""
    if sort_column not in SORTABLE_COLUMNS:
        sort_column = DEFAULT_SORT_COLUMN

    column = getattr(ImovelImportado, sort_column)
    if sort_column in CURRENCY_COLUMNS:
        column = currency_to_numeric(column)

    expressions = [column]
    if sort_column != "id":
        expressions.append(ImovelImportado.id)
    return [expr.desc() if descending else expr.asc() for expr in expressions]


def build_filter_query(
    filters: ImportedListingFilters,
    limit: Optional[int],
    offset: int = 0,
    sort_column: str = DEFAULT_SORT_COLUMN,
    sort_direction: str = SortDirection.ASC.value,
):
    """Monta a instrução única: linhas da página + total_count repetido."""
    total_count = func.count().over().label("total_count")

    query = select(ImovelImportado, total_count).where(*build_conditions(filters))

    query = query.order_by(
        *_sort_expressions(sort_column, sort_direction == SortDirection.DESC.value)
    )

    if limit is not None:
        query = query.limit(limit)
    if offset:
        query = query.offset(offset)

    return query


# =============================================================================
# CONSULTAS
# =============================================================================

async def filter_imported_listings(
    db: AsyncSession,
    filters: ImportedListingFilters,
    limit: Optional[int] = 20,
    offset: int = 0,
    sort_column: str = DEFAULT_SORT_COLUMN,
    sort_direction: str = SortDirection.ASC.value,
) -> Tuple[List[ImovelImportado], int]:
    """
    Busca uma página de imóveis importados.

    Returns:
        (linhas da página, total de linhas que atendem aos filtros)
    """
    query = build_filter_query(filters, limit, offset, sort_column, sort_direction)
    result = await db.execute(query)
    rows = result.all()

    if not rows:
        return [], 0

    total = int(rows[0].total_count)
    return [row[0] for row in rows], total


async def count_imported_listings(db: AsyncSession, filters: ImportedListingFilters) -> int:
    """Total que atende aos filtros (uma linha basta, o total vem repetido)."""
    _, total = await filter_imported_listings(db, filters, limit=1)
    return total


async def fetch_all_filtered(
    db: AsyncSession,
    filters: ImportedListingFilters,
    sort_column: str = DEFAULT_SORT_COLUMN,
    sort_direction: str = SortDirection.ASC.value,
) -> List[ImovelImportado]:
    """Reexecuta a consulta com tamanho de página = total de linhas."""
    total = await count_imported_listings(db, filters)
    if total == 0:
        return []

    rows, _ = await filter_imported_listings(
        db, filters, limit=total, offset=0,
        sort_column=sort_column, sort_direction=sort_direction,
    )
    return rows


async def fetch_imported_listings_by_ids(
    db: AsyncSession,
    ids: Sequence[int],
) -> List[ImovelImportado]:
    """Busca linhas selecionadas (dados atuais, sem filtros)."""
    if not ids:
        return []

    result = await db.execute(
        select(ImovelImportado)
        .where(ImovelImportado.id.in_(list(ids)))
        .order_by(ImovelImportado.id)
    )
    return list(result.scalars().all())


# =============================================================================
# EDIÇÃO DE CÉLULA
# =============================================================================

def normalize_cell_value(column: str, raw_value: Any) -> Any:
    """
    Converte o valor digitado para o tipo da coluna.

    - numéricas: vazio -> NULL, senão número
    - moeda: texto com máscara R$
    - responsável: só opções configuradas
    - demais: vazio -> NULL
    """
    if column not in IMPORTED_COLUMNS:
        raise InvalidCellValueError(f"Coluna inválida: {column}")

    text = "" if raw_value is None else str(raw_value)

    if column in NUMERIC_COLUMNS:
        if text.strip() == "":
            return None
        caster = NUMERIC_COLUMNS[column]
        try:
            number = float(text.strip().replace(",", "."))
        except ValueError:
            raise InvalidCellValueError(f"Valor numérico inválido para {IMPORTED_COLUMNS[column]}: {text}")
        return caster(number)

    if text.strip() == "":
        return None

    if column in CURRENCY_COLUMNS:
        return format_text_to_currency(text)

    if column == RESPONSIBLE_COLUMN and text not in settings.imported_responsible_options:
        raise InvalidCellValueError(f"Responsável inválido: {text}")

    return text


async def update_imported_cell(
    db: AsyncSession,
    row_id: int,
    column: str,
    raw_value: Any,
) -> Optional[ImovelImportado]:
    """
    Atualiza uma única coluna de uma linha.

    Returns:
        Linha atualizada ou None se o id não existe
    """
    value = normalize_cell_value(column, raw_value)

    result = await db.execute(
        update(ImovelImportado)
        .where(ImovelImportado.id == row_id)
        .values({getattr(ImovelImportado, column): value})
    )
    if result.rowcount == 0:
        return None

    await db.commit()

    row = await db.get(ImovelImportado, row_id, populate_existing=True)
    logger.info(f"Célula atualizada: linha={row_id} coluna={column}")
    return row


def listing_to_dict(row: ImovelImportado) -> dict:
    """Linha como dict (atributos), usada na API e na exportação."""
    data = {"id": row.id}
    for attr in IMPORTED_COLUMNS:
        data[attr] = getattr(row, attr)
    return data
