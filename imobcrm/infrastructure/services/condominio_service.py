"""
SERVIÇO: CONDOMÍNIOS
=====================

Cadastro de condomínios e lançamentos do corretor.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.domain.entities import Condominio

logger = logging.getLogger(__name__)


async def list_condominios(
    db: AsyncSession,
    user_id: int,
    search: str = "",
    bairro: str = "",
    estagio: str = "",
) -> List[Condominio]:
    """Condomínios do usuário, mais recentes primeiro."""
    query = select(Condominio).where(Condominio.user_id == user_id)

    if search:
        query = query.where(Condominio.nome.icontains(search, autoescape=True))
    if bairro:
        query = query.where(Condominio.bairro == bairro)
    if estagio:
        query = query.where(Condominio.estagio == estagio)

    query = query.order_by(Condominio.created_at.desc(), Condominio.id.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def get_condominio(db: AsyncSession, user_id: int, condominio_id: int) -> Optional[Condominio]:
    result = await db.execute(
        select(Condominio)
        .where(Condominio.id == condominio_id)
        .where(Condominio.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_condominio(db: AsyncSession, user_id: int, data: dict) -> Condominio:
    condominio = Condominio(user_id=user_id, **data)
    db.add(condominio)
    await db.flush()

    logger.info(f"Condomínio criado: {condominio.nome} (id={condominio.id})")
    return condominio


async def delete_condominios(db: AsyncSession, user_id: int, ids: Sequence[int]) -> int:
    """
    Exclui condomínios em lote (só os do usuário).

    Returns:
        Quantidade excluída
    """
    result = await db.execute(
        delete(Condominio)
        .where(Condominio.id.in_(list(ids)))
        .where(Condominio.user_id == user_id)
    )
    logger.info(f"{result.rowcount} condomínio(s) excluído(s)")
    return result.rowcount
