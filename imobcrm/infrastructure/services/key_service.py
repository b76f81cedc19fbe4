"""
SERVIÇO: CHAVES
================

Acesso ao banco para a custódia de chaves. Toda função recebe o
``user_id`` do perfil autenticado e filtra por ele.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from imobcrm.config import get_settings
from imobcrm.domain.entities import ImovelChave, KeyStatus, Profile
from imobcrm.domain.exceptions import KeyNotInPropertyError
from imobcrm.domain.services.key_custody import (
    RETURN_CHANGES,
    KeyListing,
    WithdrawalData,
    to_key_listing,
    withdrawal_changes,
)
from imobcrm.domain.services.listing_filters import KeyFilters, filter_keys

logger = logging.getLogger(__name__)
settings = get_settings()


def _owned_key_query(user_id: int, key_id: int):
    return (
        select(ImovelChave)
        .options(selectinload(ImovelChave.imovel))
        .where(ImovelChave.id == key_id)
        .where(ImovelChave.user_id == user_id)
    )


async def list_keys(
    db: AsyncSession,
    user_id: int,
    now: datetime,
    filters: Optional[KeyFilters] = None,
) -> List[KeyListing]:
    """
    Lista as chaves do usuário (mais recentes primeiro) com o status
    derivado e os filtros aplicados.
    """
    result = await db.execute(
        select(ImovelChave)
        .options(selectinload(ImovelChave.imovel))
        .where(ImovelChave.user_id == user_id)
        .order_by(ImovelChave.created_at.desc(), ImovelChave.id.desc())
    )
    keys = [to_key_listing(chave, now) for chave in result.scalars().all()]

    if filters is None:
        return keys
    return filter_keys(keys, filters)


async def get_key(db: AsyncSession, user_id: int, key_id: int) -> Optional[ImovelChave]:
    result = await db.execute(_owned_key_query(user_id, key_id))
    return result.scalar_one_or_none()


async def _apply_changes(
    db: AsyncSession,
    user_id: int,
    key_id: int,
    changes: dict,
) -> Optional[ImovelChave]:
    result = await db.execute(
        update(ImovelChave)
        .where(ImovelChave.id == key_id)
        .where(ImovelChave.user_id == user_id)
        .values(**changes)
    )
    if result.rowcount == 0:
        return None

    refreshed = await db.execute(
        _owned_key_query(user_id, key_id).execution_options(populate_existing=True)
    )
    return refreshed.scalar_one()


async def withdraw_key(
    db: AsyncSession,
    user_id: int,
    key_id: int,
    data: WithdrawalData,
) -> Optional[ImovelChave]:
    """
    Registra a retirada.

    A validação roda antes de qualquer acesso ao banco.

    Raises:
        KeyWithdrawalValidationError: campos obrigatórios ausentes
    """
    changes = withdrawal_changes(data)

    chave = await _apply_changes(db, user_id, key_id, changes)
    if chave:
        logger.info(f"Chave {key_id} retirada por {changes['retirada_por']}")
    return chave


async def return_key(db: AsyncSession, user_id: int, key_id: int) -> Optional[ImovelChave]:
    """Devolve a chave: status Disponível e campos da retirada zerados."""
    chave = await _apply_changes(db, user_id, key_id, dict(RETURN_CHANGES))
    if chave:
        logger.info(f"Chave {key_id} devolvida")
    return chave


# =============================================================================
# CADASTRO DE CHAVES DO IMÓVEL
# =============================================================================

# Campos do cadastro; a custódia (status e retirada) só muda por retirada/devolução
REGISTRATION_FIELDS = (
    "codigo_chave",
    "responsavel_tipo",
    "disponivel_emprestimo",
    "nome_contato",
    "telefone_contato",
    "observacoes",
)


async def list_imovel_keys(db: AsyncSession, user_id: int, imovel_id: int) -> List[ImovelChave]:
    """Chaves do imóvel na ordem de cadastro."""
    result = await db.execute(
        select(ImovelChave)
        .where(ImovelChave.imovel_id == imovel_id)
        .where(ImovelChave.user_id == user_id)
        .order_by(ImovelChave.created_at.asc(), ImovelChave.id.asc())
    )
    return list(result.scalars().all())


async def sync_imovel_keys(
    db: AsyncSession,
    user: Profile,
    imovel_id: int,
    keys: Sequence[dict],
) -> List[ImovelChave]:
    """
    Sincroniza as chaves do imóvel com a lista do formulário.

    - chave gravada que não veio na lista: excluída
    - item com ``id``: atualiza só os campos de cadastro
    - item sem ``id``: nova chave, Disponível

    Raises:
        KeyNotInPropertyError: algum ``id`` não é chave deste imóvel
    """
    current = {chave.id: chave for chave in await list_imovel_keys(db, user.id, imovel_id)}

    submitted_ids = [item["id"] for item in keys if item.get("id") is not None]
    unknown = [key_id for key_id in submitted_ids if key_id not in current]
    if unknown:
        raise KeyNotInPropertyError(unknown)

    removed = [key_id for key_id in current if key_id not in set(submitted_ids)]
    if removed:
        await db.execute(
            delete(ImovelChave)
            .where(ImovelChave.id.in_(removed))
            .where(ImovelChave.user_id == user.id)
        )

    for item in keys:
        registration = {field: item[field] for field in REGISTRATION_FIELDS if field in item}
        key_id = item.get("id")

        if key_id is not None:
            if not registration:
                continue
            await db.execute(
                update(ImovelChave)
                .where(ImovelChave.id == key_id)
                .where(ImovelChave.user_id == user.id)
                .values(**registration)
            )
        else:
            db.add(ImovelChave(
                user_id=user.id,
                imovel_id=imovel_id,
                agencia=item.get("agencia") or user.agencia or settings.default_agency,
                status=KeyStatus.AVAILABLE.value,
                **registration,
            ))

    await db.flush()
    logger.info(
        f"Chaves do imóvel {imovel_id} sincronizadas: "
        f"{len(removed)} excluída(s), {len(keys) - len(submitted_ids)} nova(s)"
    )

    result = await db.execute(
        select(ImovelChave)
        .where(ImovelChave.imovel_id == imovel_id)
        .where(ImovelChave.user_id == user.id)
        .order_by(ImovelChave.created_at.asc(), ImovelChave.id.asc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
