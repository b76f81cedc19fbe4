"""
SERVIÇO: OPORTUNIDADES
=======================

Funil de vendas do corretor. Cada oportunidade está numa etapa; mover o
card de coluna grava só a nova etapa.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from imobcrm.domain.entities import Imovel, Lead, Oportunidade, OpportunityStage
from imobcrm.domain.exceptions import RelatedRecordNotFoundError

logger = logging.getLogger(__name__)


def _opportunity_query(user_id: int):
    return (
        select(Oportunidade)
        .options(selectinload(Oportunidade.lead), selectinload(Oportunidade.imovel))
        .where(Oportunidade.user_id == user_id)
    )


async def list_oportunidades(
    db: AsyncSession,
    user_id: int,
    etapa: str = "",
) -> List[Oportunidade]:
    """Oportunidades do usuário, mais recentes primeiro."""
    query = _opportunity_query(user_id)
    if etapa:
        query = query.where(Oportunidade.etapa == etapa)
    query = query.order_by(Oportunidade.created_at.desc(), Oportunidade.id.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


def group_by_stage(oportunidades: List[Oportunidade]) -> Dict[str, List[Oportunidade]]:
    """Colunas do funil na ordem das etapas (etapas vazias incluídas)."""
    funnel: Dict[str, List[Oportunidade]] = {stage.value: [] for stage in OpportunityStage}
    for oportunidade in oportunidades:
        funnel.setdefault(oportunidade.etapa, []).append(oportunidade)
    return funnel


async def get_oportunidade(db: AsyncSession, user_id: int, oportunidade_id: int) -> Optional[Oportunidade]:
    result = await db.execute(
        _opportunity_query(user_id)
        .where(Oportunidade.id == oportunidade_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _check_owned(db: AsyncSession, model, record_id: Optional[int], user_id: int, label: str) -> None:
    if record_id is None:
        return
    result = await db.execute(
        select(model.id).where(model.id == record_id).where(model.user_id == user_id)
    )
    if result.scalar_one_or_none() is None:
        raise RelatedRecordNotFoundError(f"{label} {record_id} não encontrado")


async def create_oportunidade(db: AsyncSession, user_id: int, data: dict) -> Oportunidade:
    """
    Raises:
        RelatedRecordNotFoundError: lead ou imóvel de outro usuário/inexistente
    """
    await _check_owned(db, Lead, data.get("lead_id"), user_id, "Lead")
    await _check_owned(db, Imovel, data.get("imovel_id"), user_id, "Imóvel")

    oportunidade = Oportunidade(user_id=user_id, **data)
    db.add(oportunidade)
    await db.flush()

    logger.info(f"Oportunidade criada: {oportunidade.nome} (etapa {oportunidade.etapa})")
    return await get_oportunidade(db, user_id, oportunidade.id)


async def move_to_stage(
    db: AsyncSession,
    user_id: int,
    oportunidade_id: int,
    etapa: OpportunityStage,
) -> Optional[Oportunidade]:
    result = await db.execute(
        update(Oportunidade)
        .where(Oportunidade.id == oportunidade_id)
        .where(Oportunidade.user_id == user_id)
        .values(etapa=etapa.value)
    )
    if result.rowcount == 0:
        return None

    logger.info(f"Oportunidade {oportunidade_id} movida para {etapa.value}")
    return await get_oportunidade(db, user_id, oportunidade_id)


async def delete_oportunidade(db: AsyncSession, user_id: int, oportunidade_id: int) -> bool:
    result = await db.execute(
        delete(Oportunidade)
        .where(Oportunidade.id == oportunidade_id)
        .where(Oportunidade.user_id == user_id)
    )
    return bool(result.rowcount)
