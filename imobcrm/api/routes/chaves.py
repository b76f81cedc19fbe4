"""
ROTAS: CHAVES
==============

Custódia das chaves físicas dos imóveis.

Fluxo:
- Disponível -> Retirada (retirada com quem/quando devolve)
- Retirada -> Disponível (devolução)
- "Atrasada" é calculada na listagem, nunca gravada
"""

import io
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.config import get_settings
from imobcrm.infrastructure.database import get_db
from imobcrm.infrastructure.services import key_service
from imobcrm.infrastructure.services.export_service import export_key_receipt_pdf, PDF_MEDIA_TYPE
from imobcrm.domain.entities import Profile, KeyStatus
from imobcrm.domain.exceptions import KeyWithdrawalValidationError
from imobcrm.domain.services.key_custody import (
    KeyListing,
    WithdrawalData,
    local_now,
    to_key_listing,
    withdrawal_message,
)
from imobcrm.domain.services.listing_filters import KeyFilters
from imobcrm.api.dependencies import get_current_user
from imobcrm.api.schemas import (
    KeyActionResponse,
    KeyPropertyResponse,
    KeyResponse,
    KeyWithdrawalRequest,
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/chaves", tags=["Chaves"])


# ============================================
# HELPERS
# ============================================

def _key_response(key: KeyListing) -> KeyResponse:
    imovel = None
    if key.imovel:
        imovel = KeyPropertyResponse(
            id=key.imovel.id,
            codigo=key.imovel.codigo,
            logradouro=key.imovel.logradouro,
            numero=key.imovel.numero,
            bairro=key.imovel.bairro,
        )

    return KeyResponse(
        id=key.id,
        codigo_chave=key.codigo_chave,
        agencia=key.agencia,
        status=key.status,
        retirada_por=key.retirada_por,
        tipo_retirada=key.tipo_retirada,
        motivo=key.motivo,
        previsao_entrega=key.previsao_entrega,
        hora_entrega=key.hora_entrega,
        previsao_display=key.previsao_display,
        imovel_id=key.imovel_id,
        imovel=imovel,
        imovel_label=key.imovel_label,
    )


def _termo_url(key_id: int) -> str:
    return f"/api/v1/chaves/{key_id}/termo"


# ============================================
# ROTAS
# ============================================

@router.get("", response_model=List[KeyResponse])
async def list_keys(
    codigo: str = Query("", description="Código da chave"),
    imovel: str = Query("", description="Código, logradouro ou bairro do imóvel"),
    retirada_por: str = Query("", description="Quem retirou"),
    status_filter: Optional[KeyStatus] = Query(None, alias="status"),
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Lista as chaves do usuário com o status atual (inclui Atrasada)."""
    try:
        filters = KeyFilters(
            codigo=codigo.strip(),
            imovel=imovel.strip(),
            retirada_por=retirada_por.strip(),
            status=status_filter,
        )
        keys = await key_service.list_keys(db, user.id, local_now(settings.timezone), filters)
        return [_key_response(key) for key in keys]

    except Exception as e:
        logger.error(f"Erro ao listar chaves: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao listar chaves")


@router.post("/{key_id}/retirada", response_model=KeyActionResponse)
async def withdraw_key(
    key_id: int,
    payload: KeyWithdrawalRequest,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Registra a retirada da chave.

    Quem retirou, previsão de entrega e hora são obrigatórios; faltando
    qualquer um, nada é gravado e a resposta é 422 com todas as
    mensagens.
    """
    data = WithdrawalData(
        retirada_por=payload.retirada_por,
        previsao_entrega=payload.previsao_entrega,
        hora_entrega=payload.hora_entrega,
        tipo_retirada=payload.tipo_retirada,
        motivo=payload.motivo,
        imprimir_termo=payload.imprimir_termo,
    )

    try:
        chave = await key_service.withdraw_key(db, user.id, key_id, data)

        if not chave:
            raise HTTPException(status_code=404, detail="Chave não encontrada")

        key = to_key_listing(chave, local_now(settings.timezone))

        return KeyActionResponse(
            message=withdrawal_message(payload.imprimir_termo),
            key=_key_response(key),
            termo_url=_termo_url(key_id) if payload.imprimir_termo else None,
        )

    except KeyWithdrawalValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Erro ao registrar retirada da chave {key_id}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao registrar retirada")


@router.post("/{key_id}/devolucao", response_model=KeyActionResponse)
async def return_key(
    key_id: int,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Registra a devolução da chave."""
    try:
        chave = await key_service.return_key(db, user.id, key_id)

        if not chave:
            raise HTTPException(status_code=404, detail="Chave não encontrada")

        key = to_key_listing(chave, local_now(settings.timezone))
        return KeyActionResponse(
            message="Chave devolvida com sucesso!",
            key=_key_response(key),
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Erro ao registrar devolução da chave {key_id}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(status_code=500, detail="Erro ao registrar devolução")


@router.get("/{key_id}/termo")
async def key_receipt(
    key_id: int,
    user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Termo de empréstimo da chave retirada (PDF)."""
    chave = await key_service.get_key(db, user.id, key_id)

    if not chave:
        raise HTTPException(status_code=404, detail="Chave não encontrada")

    key = to_key_listing(chave, local_now(settings.timezone))
    if key.status == KeyStatus.AVAILABLE:
        raise HTTPException(status_code=400, detail="Chave não está retirada")

    try:
        content = export_key_receipt_pdf(key, agency_name=user.agencia)
    except Exception as e:
        logger.error(f"Erro ao gerar termo da chave {key_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Erro ao gerar termo de empréstimo")

    filename = f"termo_chave_{key.codigo_chave}.pdf"
    return StreamingResponse(
        io.BytesIO(content),
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
