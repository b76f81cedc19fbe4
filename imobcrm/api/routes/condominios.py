"""
ROTAS: CONDOMÍNIOS
===================

Cadastro de condomínios e lançamentos.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.infrastructure.database import get_db
from imobcrm.infrastructure.services import condominio_service
from imobcrm.domain.entities import Profile, ConstructionStage
from imobcrm.api.dependencies import get_current_user
from imobcrm.api.schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    CondominioCreate,
    CondominioResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/condominios", tags=["Condomínios"])


@router.get("", response_model=List[CondominioResponse])
async def list_condominios(
    search: str = Query("", description="Parte do nome"),
    bairro: str = Query("", description="Bairro exato"),
    estagio: Optional[ConstructionStage] = Query(None),
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Lista os condomínios do usuário (mais recentes primeiro)."""
    try:
        return await condominio_service.list_condominios(
            db,
            user.id,
            search=search.strip(),
            bairro=bairro.strip(),
            estagio=estagio.value if estagio else "",
        )

    except Exception as e:
        logger.error(f"Erro ao listar condomínios: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao listar condomínios")


@router.get("/{condominio_id}", response_model=CondominioResponse)
async def get_condominio(
    condominio_id: int,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    condominio = await condominio_service.get_condominio(db, user.id, condominio_id)
    if not condominio:
        raise HTTPException(status_code=404, detail="Condomínio não encontrado")
    return condominio


@router.post("", response_model=CondominioResponse, status_code=201)
async def create_condominio(
    payload: CondominioCreate,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        condominio = await condominio_service.create_condominio(
            db, user.id, payload.model_dump(mode="json")
        )
        await db.commit()
        await db.refresh(condominio)
        return condominio

    except Exception as e:
        logger.error(f"Erro ao criar condomínio: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao criar condomínio")


@router.delete("", response_model=BulkDeleteResponse)
async def delete_condominios(
    payload: BulkDeleteRequest,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Exclui os condomínios selecionados."""
    try:
        deleted = await condominio_service.delete_condominios(db, user.id, payload.ids)

        if deleted == 0:
            raise HTTPException(status_code=404, detail="Nenhum condomínio encontrado")

        await db.commit()
        return BulkDeleteResponse(
            deleted=deleted,
            message=f"{deleted} condomínio(s) excluído(s) com sucesso",
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Erro ao excluir condomínios: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao excluir condomínios")
