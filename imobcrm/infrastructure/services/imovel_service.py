"""
SERVIÇO: IMÓVEIS
=================

Catálogo de imóveis do corretor. Filtros simples vão para o banco;
contrato e características são filtrados em memória
(ver ``domain.services.listing_filters``).
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.config import get_settings
from imobcrm.domain.entities import Imovel, ImagemImovel, ImovelChave, KeyStatus, Profile
from imobcrm.domain.services.listing_filters import ImovelFilters, filter_imoveis

logger = logging.getLogger(__name__)
settings = get_settings()


async def list_imoveis(
    db: AsyncSession,
    user_id: int,
    codigo: str = "",
    bairro: str = "",
    tipo_imovel: str = "",
    filters: Optional[ImovelFilters] = None,
) -> List[Imovel]:
    query = select(Imovel).where(Imovel.user_id == user_id)

    if codigo:
        query = query.where(Imovel.codigo.icontains(codigo, autoescape=True))
    if bairro:
        query = query.where(Imovel.bairro == bairro)
    if tipo_imovel:
        query = query.where(Imovel.tipo_imovel == tipo_imovel)

    query = query.order_by(Imovel.created_at.desc(), Imovel.id.desc())

    result = await db.execute(query)
    imoveis = list(result.scalars().all())

    if filters is None:
        return imoveis
    return filter_imoveis(imoveis, filters)


async def get_imovel(db: AsyncSession, user_id: int, imovel_id: int) -> Optional[Imovel]:
    result = await db.execute(
        select(Imovel).where(Imovel.id == imovel_id).where(Imovel.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_imovel(
    db: AsyncSession,
    user: Profile,
    data: dict,
    codigo_chave: Optional[str] = None,
    agencia: Optional[str] = None,
) -> Imovel:
    """
    Cria o imóvel e a sua chave (Disponível).

    A agência da chave é a informada, ou a do perfil, ou a padrão.
    """
    imovel = Imovel(user_id=user.id, **data)
    db.add(imovel)
    await db.flush()

    chave = ImovelChave(
        user_id=user.id,
        imovel_id=imovel.id,
        codigo_chave=codigo_chave or imovel.codigo,
        agencia=agencia or user.agencia or settings.default_agency,
        status=KeyStatus.AVAILABLE.value,
    )
    db.add(chave)
    await db.flush()

    logger.info(f"Imóvel criado: {imovel.codigo} (chave {chave.codigo_chave})")
    return imovel


async def delete_imoveis(db: AsyncSession, user_id: int, ids: Sequence[int]) -> int:
    """
    Exclui imóveis em lote.

    Ordem: fotos, chaves e por fim os imóveis. Os comandos rodam na
    mesma transação da requisição.

    Returns:
        Quantidade de imóveis excluídos
    """
    owned = await db.execute(
        select(Imovel.id).where(Imovel.id.in_(list(ids))).where(Imovel.user_id == user_id)
    )
    owned_ids = list(owned.scalars().all())

    if not owned_ids:
        return 0

    await db.execute(delete(ImagemImovel).where(ImagemImovel.imovel_id.in_(owned_ids)))
    await db.execute(
        delete(ImovelChave)
        .where(ImovelChave.imovel_id.in_(owned_ids))
        .where(ImovelChave.user_id == user_id)
    )
    result = await db.execute(
        delete(Imovel).where(Imovel.id.in_(owned_ids)).where(Imovel.user_id == user_id)
    )

    logger.info(f"{result.rowcount} imóveis excluídos")
    return result.rowcount
