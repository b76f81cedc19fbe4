"""
ROTAS: OPORTUNIDADES
=====================

Funil de vendas: listagem (lista ou por etapa), cadastro, mudança de
etapa e exclusão.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.infrastructure.database import get_db
from imobcrm.infrastructure.services import oportunidade_service
from imobcrm.domain.entities import Profile, OpportunityStage
from imobcrm.domain.exceptions import RelatedRecordNotFoundError
from imobcrm.api.dependencies import get_current_user
from imobcrm.api.schemas import (
    FunnelColumn,
    OportunidadeCreate,
    OportunidadeResponse,
    StageUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oportunidades", tags=["Oportunidades"])


@router.get("", response_model=List[OportunidadeResponse])
async def list_oportunidades(
    etapa: Optional[OpportunityStage] = Query(None),
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await oportunidade_service.list_oportunidades(
            db, user.id, etapa=etapa.value if etapa else ""
        )

    except Exception as e:
        logger.error(f"Erro ao listar oportunidades: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao listar oportunidades")


@router.get("/funil", response_model=List[FunnelColumn])
async def get_funnel(
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Uma coluna por etapa, na ordem do funil."""
    try:
        oportunidades = await oportunidade_service.list_oportunidades(db, user.id)
        funnel = oportunidade_service.group_by_stage(oportunidades)
        return [
            FunnelColumn(
                etapa=etapa,
                total=len(items),
                items=[OportunidadeResponse.model_validate(item) for item in items],
            )
            for etapa, items in funnel.items()
        ]

    except Exception as e:
        logger.error(f"Erro ao montar funil: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao montar funil")


@router.post("", response_model=OportunidadeResponse, status_code=201)
async def create_oportunidade(
    payload: OportunidadeCreate,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        data = payload.model_dump()
        data["etapa"] = payload.etapa.value
        oportunidade = await oportunidade_service.create_oportunidade(db, user.id, data)
        await db.commit()
        return oportunidade

    except RelatedRecordNotFoundError as e:
        await db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Erro ao criar oportunidade: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao criar oportunidade")


@router.patch("/{oportunidade_id}/etapa", response_model=OportunidadeResponse)
async def move_oportunidade(
    oportunidade_id: int,
    payload: StageUpdateRequest,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Move o card para outra etapa do funil."""
    try:
        oportunidade = await oportunidade_service.move_to_stage(
            db, user.id, oportunidade_id, payload.etapa
        )
        if not oportunidade:
            raise HTTPException(status_code=404, detail="Oportunidade não encontrada")

        await db.commit()
        return oportunidade

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Erro ao mover oportunidade {oportunidade_id}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao mover oportunidade")


@router.delete("/{oportunidade_id}")
async def delete_oportunidade(
    oportunidade_id: int,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        if not await oportunidade_service.delete_oportunidade(db, user.id, oportunidade_id):
            raise HTTPException(status_code=404, detail="Oportunidade não encontrada")

        await db.commit()
        return {"success": True, "message": "Oportunidade excluída com sucesso"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Erro ao excluir oportunidade {oportunidade_id}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao excluir oportunidade")
