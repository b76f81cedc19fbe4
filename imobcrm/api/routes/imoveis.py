"""
ROTAS: IMÓVEIS
===============

Catálogo de imóveis do corretor.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.infrastructure.database import get_db
from imobcrm.infrastructure.services import imovel_service, key_service
from imobcrm.domain.entities import Profile, ContractType
from imobcrm.domain.exceptions import KeyNotInPropertyError
from imobcrm.domain.services.listing_filters import ImovelFilters
from imobcrm.api.dependencies import get_current_user
from imobcrm.api.schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    ImovelCreate,
    ImovelKeyResponse,
    ImovelKeysSync,
    ImovelResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imoveis", tags=["Imóveis"])


@router.get("", response_model=List[ImovelResponse])
async def list_imoveis(
    codigo: str = Query("", description="Parte do código"),
    bairro: str = Query("", description="Bairro exato"),
    tipo_imovel: str = Query("", description="Tipo exato"),
    contrato: Optional[ContractType] = Query(None, description="Venda, Locacao ou Temporada"),
    dormitorios: Optional[List[int]] = Query(None),
    suites: Optional[List[int]] = Query(None),
    vagas: Optional[List[int]] = Query(None),
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Lista os imóveis do usuário (mais recentes primeiro)."""
    try:
        filters = ImovelFilters(
            contract=contrato.value if contrato else "",
            bedrooms=dormitorios or [],
            suites=suites or [],
            garages=vagas or [],
        )
        return await imovel_service.list_imoveis(
            db,
            user.id,
            codigo=codigo.strip(),
            bairro=bairro.strip(),
            tipo_imovel=tipo_imovel.strip(),
            filters=filters,
        )

    except Exception as e:
        logger.error(f"Erro ao listar imóveis: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao listar imóveis")


@router.get("/{imovel_id}", response_model=ImovelResponse)
async def get_imovel(
    imovel_id: int,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    imovel = await imovel_service.get_imovel(db, user.id, imovel_id)
    if not imovel:
        raise HTTPException(status_code=404, detail="Imóvel não encontrado")
    return imovel


@router.post("", response_model=ImovelResponse, status_code=201)
async def create_imovel(
    payload: ImovelCreate,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cadastra imóvel; a chave nasce Disponível."""
    try:
        data = payload.model_dump(exclude={"codigo_chave", "agencia"})
        imovel = await imovel_service.create_imovel(
            db,
            user,
            data,
            codigo_chave=payload.codigo_chave,
            agencia=payload.agencia,
        )
        await db.commit()
        await db.refresh(imovel)
        return imovel

    except Exception as e:
        logger.error(f"Erro ao criar imóvel: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao criar imóvel")


@router.delete("", response_model=BulkDeleteResponse)
async def delete_imoveis(
    payload: BulkDeleteRequest,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Exclui imóveis selecionados (com fotos e chaves)."""
    try:
        deleted = await imovel_service.delete_imoveis(db, user.id, payload.ids)

        if deleted == 0:
            raise HTTPException(status_code=404, detail="Nenhum imóvel encontrado")

        await db.commit()
        return BulkDeleteResponse(
            deleted=deleted,
            message=f"{deleted} imóvel(is) excluído(s) com sucesso",
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Erro ao excluir imóveis: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao excluir imóveis")


# =============================================================================
# CHAVES DO IMÓVEL
# =============================================================================

@router.get("/{imovel_id}/chaves", response_model=List[ImovelKeyResponse])
async def list_imovel_keys(
    imovel_id: int,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    imovel = await imovel_service.get_imovel(db, user.id, imovel_id)
    if not imovel:
        raise HTTPException(status_code=404, detail="Imóvel não encontrado")
    return await key_service.list_imovel_keys(db, user.id, imovel_id)


@router.put("/{imovel_id}/chaves", response_model=List[ImovelKeyResponse])
async def sync_imovel_keys(
    imovel_id: int,
    payload: ImovelKeysSync,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Grava a lista de chaves do imóvel: exclui as que saíram, atualiza as
    que vieram com id e cria as novas.
    """
    try:
        imovel = await imovel_service.get_imovel(db, user.id, imovel_id)
        if not imovel:
            raise HTTPException(status_code=404, detail="Imóvel não encontrado")

        keys = [item.model_dump(exclude_unset=True, mode="json") for item in payload.keys]
        chaves = await key_service.sync_imovel_keys(db, user, imovel_id, keys)
        await db.commit()
        return chaves

    except HTTPException:
        raise
    except KeyNotInPropertyError as e:
        await db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Erro ao salvar chaves do imóvel {imovel_id}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao salvar chaves do imóvel")
