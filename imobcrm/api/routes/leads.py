"""
ROTAS: LEADS
=============

Leads do corretor: filtros por status, origem e responsável, busca
rápida por nome/telefone/email.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.infrastructure.database import get_db
from imobcrm.infrastructure.services import lead_service
from imobcrm.domain.entities import Profile, LeadSource, LeadStatus
from imobcrm.domain.exceptions import UnknownResponsibleError
from imobcrm.api.dependencies import get_current_user
from imobcrm.api.schemas import LeadCreate, LeadResponse, LeadUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["Leads"])


@router.get("", response_model=List[LeadResponse])
async def list_leads(
    status: Optional[LeadStatus] = Query(None),
    origem: Optional[LeadSource] = Query(None),
    responsavel_id: Optional[int] = Query(None),
    search: str = Query("", description="Nome, telefone ou email"),
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await lead_service.list_leads(
            db,
            user.id,
            status=status.value if status else "",
            origem=origem.value if origem else "",
            responsavel_id=responsavel_id,
            search=search.strip(),
        )

    except Exception as e:
        logger.error(f"Erro ao listar leads: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao listar leads")


@router.get("/{lead_id}", response_model=LeadResponse)
async def get_lead(
    lead_id: int,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    lead = await lead_service.get_lead(db, user.id, lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead não encontrado")
    return lead


@router.post("", response_model=LeadResponse, status_code=201)
async def create_lead(
    payload: LeadCreate,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        lead = await lead_service.create_lead(db, user.id, payload.model_dump(mode="json"))
        await db.commit()
        return lead

    except UnknownResponsibleError as e:
        await db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Erro ao criar lead: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao criar lead")


@router.patch("/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: int,
    payload: LeadUpdate,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Altera os campos enviados (ex: status depois do contato)."""
    try:
        changes = payload.model_dump(exclude_unset=True, mode="json")
        lead = await lead_service.update_lead(db, user.id, lead_id, changes)
        if not lead:
            raise HTTPException(status_code=404, detail="Lead não encontrado")

        await db.commit()
        return lead

    except HTTPException:
        raise
    except UnknownResponsibleError as e:
        await db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Erro ao atualizar lead {lead_id}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao atualizar lead")


@router.delete("/{lead_id}")
async def delete_lead(
    lead_id: int,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        if not await lead_service.delete_lead(db, user.id, lead_id):
            raise HTTPException(status_code=404, detail="Lead não encontrado")

        await db.commit()
        return {"success": True, "message": "Lead excluído com sucesso"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Erro ao excluir lead {lead_id}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao excluir lead")
