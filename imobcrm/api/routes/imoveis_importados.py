"""
ROTAS: IMÓVEIS IMPORTADOS
==========================

Planilha de imóveis importados: consulta paginada com filtros e
ordenação, edição célula a célula e exportação CSV/PDF.
"""

import io
import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.infrastructure.database import get_db
from imobcrm.infrastructure.services.imported_listing_service import (
    DEFAULT_SORT_COLUMN,
    ImportedListingFilters,
    fetch_all_filtered,
    fetch_imported_listings_by_ids,
    filter_imported_listings,
    update_imported_cell,
)
from imobcrm.infrastructure.services.export_service import (
    CSV_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    export_filename,
    export_imported_to_csv,
    export_imported_to_pdf,
)
from imobcrm.domain.entities import Profile, SortDirection
from imobcrm.domain.exceptions import InvalidCellValueError
from imobcrm.api.dependencies import get_current_user
from imobcrm.api.schemas import (
    CellUpdateRequest,
    ImportedExportRequest,
    ImportedListingPage,
    ImportedListingResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imoveis-importados", tags=["Imóveis Importados"])


def _direction(value: str) -> str:
    return SortDirection.DESC.value if value == SortDirection.DESC.value else SortDirection.ASC.value


@router.get("", response_model=ImportedListingPage)
async def list_imported(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=500),
    sort_column: str = Query(DEFAULT_SORT_COLUMN),
    sort_direction: str = Query(SortDirection.ASC.value),
    search: Optional[str] = None,
    min_venda: Optional[float] = None,
    max_venda: Optional[float] = None,
    min_aluguel: Optional[float] = None,
    max_aluguel: Optional[float] = None,
    min_dorms: Optional[int] = None,
    max_dorms: Optional[int] = None,
    categoria: Optional[str] = None,
    bairro: Optional[str] = None,
    andar: Optional[int] = None,
    responsavel: Optional[str] = None,
    endereco_search: Optional[str] = None,
    referencia_search: Optional[str] = None,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Página da planilha.

    Uma única consulta devolve as linhas e o total que atende aos
    filtros.
    """
    filters = ImportedListingFilters(
        search=search,
        min_venda=min_venda,
        max_venda=max_venda,
        min_aluguel=min_aluguel,
        max_aluguel=max_aluguel,
        min_dorms=min_dorms,
        max_dorms=max_dorms,
        categoria=categoria,
        bairro=bairro,
        andar=andar,
        responsavel=responsavel,
        endereco_search=endereco_search,
        referencia_search=referencia_search,
    )

    try:
        rows, total = await filter_imported_listings(
            db,
            filters,
            limit=limit,
            offset=(page - 1) * limit,
            sort_column=sort_column,
            sort_direction=_direction(sort_direction),
        )
    except Exception as e:
        logger.error(f"Erro ao buscar imóveis importados: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao buscar imóveis importados")

    return ImportedListingPage(
        items=[ImportedListingResponse.model_validate(row) for row in rows],
        total=total,
        page=page,
        per_page=limit,
        total_pages=math.ceil(total / limit) if total else 0,
    )


@router.patch("/{row_id}", response_model=ImportedListingResponse)
async def update_cell(
    row_id: int,
    payload: CellUpdateRequest,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Grava uma única célula."""
    try:
        row = await update_imported_cell(db, row_id, payload.column, payload.value)

        if not row:
            raise HTTPException(status_code=404, detail="Imóvel importado não encontrado")

        return ImportedListingResponse.model_validate(row)

    except InvalidCellValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Erro ao atualizar célula {row_id}/{payload.column}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao atualizar célula")


@router.post("/export/{file_format}")
async def export_imported(
    file_format: str,
    payload: ImportedExportRequest,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Exporta a seleção ou, sem seleção, todo o conjunto filtrado.

    Formatos: csv, pdf
    """
    if file_format not in ("csv", "pdf"):
        raise HTTPException(status_code=400, detail="Formato inválido. Use csv ou pdf.")

    selected = bool(payload.ids)

    try:
        if selected:
            rows = await fetch_imported_listings_by_ids(db, payload.ids)
        else:
            filters = ImportedListingFilters(**payload.filters.model_dump())
            rows = await fetch_all_filtered(
                db,
                filters,
                sort_column=payload.sort_column,
                sort_direction=_direction(payload.sort_direction),
            )
    except Exception as e:
        logger.error(f"Erro ao buscar dados para exportação: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao exportar dados")

    if not rows:
        raise HTTPException(status_code=400, detail="Nenhum dado para exportar.")

    try:
        if file_format == "csv":
            content = export_imported_to_csv(rows)
            media_type = CSV_MEDIA_TYPE
        else:
            content = export_imported_to_pdf(rows, selected=selected)
            media_type = PDF_MEDIA_TYPE
    except Exception as e:
        logger.error(f"Erro ao gerar {file_format}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao exportar dados")

    filename = export_filename(file_format, selected)
    logger.info(f"Exportação {file_format}: {len(rows)} linhas ({filename})")

    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
