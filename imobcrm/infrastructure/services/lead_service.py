"""
SERVIÇO: LEADS
===============

Leads do corretor: listagem com filtros e busca rápida, cadastro,
edição e exclusão.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from imobcrm.domain.entities import Lead, Profile
from imobcrm.domain.exceptions import UnknownResponsibleError

logger = logging.getLogger(__name__)


def _lead_query(user_id: int):
    return (
        select(Lead)
        .options(selectinload(Lead.responsavel))
        .where(Lead.user_id == user_id)
    )


async def list_leads(
    db: AsyncSession,
    user_id: int,
    status: str = "",
    origem: str = "",
    responsavel_id: Optional[int] = None,
    search: str = "",
) -> List[Lead]:
    """
    Leads do usuário, mais recentes primeiro.

    A busca rápida procura em nome, telefone e email.
    """
    query = _lead_query(user_id)

    if status:
        query = query.where(Lead.status == status)
    if origem:
        query = query.where(Lead.origem == origem)
    if responsavel_id is not None:
        query = query.where(Lead.responsavel_id == responsavel_id)
    if search:
        query = query.where(or_(
            Lead.nome.icontains(search, autoescape=True),
            Lead.telefone.icontains(search, autoescape=True),
            Lead.email.icontains(search, autoescape=True),
        ))

    query = query.order_by(Lead.created_at.desc(), Lead.id.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def get_lead(db: AsyncSession, user_id: int, lead_id: int) -> Optional[Lead]:
    result = await db.execute(
        _lead_query(user_id)
        .where(Lead.id == lead_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _check_responsible(db: AsyncSession, responsavel_id: Optional[int]) -> None:
    if responsavel_id is None:
        return
    result = await db.execute(
        select(Profile.id).where(Profile.id == responsavel_id).where(Profile.active.is_(True))
    )
    if result.scalar_one_or_none() is None:
        raise UnknownResponsibleError(f"Responsável {responsavel_id} não encontrado")


async def create_lead(db: AsyncSession, user_id: int, data: dict) -> Lead:
    """
    Raises:
        UnknownResponsibleError: responsavel_id inválido
    """
    await _check_responsible(db, data.get("responsavel_id"))

    lead = Lead(user_id=user_id, **data)
    db.add(lead)
    await db.flush()

    logger.info(f"Lead criado: {lead.nome} (id={lead.id})")
    return await get_lead(db, user_id, lead.id)


async def update_lead(db: AsyncSession, user_id: int, lead_id: int, changes: dict) -> Optional[Lead]:
    """
    Altera só os campos enviados.

    Returns:
        Lead atualizado ou None se não existe
    """
    if "responsavel_id" in changes:
        await _check_responsible(db, changes["responsavel_id"])

    if changes:
        result = await db.execute(
            update(Lead)
            .where(Lead.id == lead_id)
            .where(Lead.user_id == user_id)
            .values(**changes)
        )
        if result.rowcount == 0:
            return None

    return await get_lead(db, user_id, lead_id)


async def delete_lead(db: AsyncSession, user_id: int, lead_id: int) -> bool:
    result = await db.execute(
        delete(Lead).where(Lead.id == lead_id).where(Lead.user_id == user_id)
    )
    if result.rowcount:
        logger.info(f"Lead {lead_id} excluído")
    return bool(result.rowcount)
