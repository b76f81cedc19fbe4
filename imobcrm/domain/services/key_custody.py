"""
CUSTÓDIA DE CHAVES
==================

Regras do ciclo de vida da chave:

    Disponível --(retirada)--> Retirada --(devolução)--> Disponível
                                   |
                                   +-- prazo vencido: exibida como Atrasada

"Atrasada" nunca é gravada. É uma projeção feita a cada leitura,
comparando previsão de entrega (data + hora) com o horário atual.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, Optional, Union
from zoneinfo import ZoneInfo

from imobcrm.domain.entities.enums import KeyStatus, WithdrawalType, WithdrawalReason
from imobcrm.domain.exceptions import KeyWithdrawalValidationError


# Campos zerados na devolução
RETURN_CHANGES: Dict[str, Any] = {
    "status": KeyStatus.AVAILABLE.value,
    "retirada_por": None,
    "tipo_retirada": None,
    "motivo": None,
    "previsao_entrega": None,
    "hora_entrega": None,
}


@dataclass
class WithdrawalData:
    """Dados do formulário de retirada."""
    retirada_por: str = ""
    previsao_entrega: Optional[date] = None
    hora_entrega: Optional[time] = None
    tipo_retirada: WithdrawalType = WithdrawalType.TEMPORARY
    motivo: WithdrawalReason = WithdrawalReason.VISIT
    imprimir_termo: bool = True


def derive_key_status(
    status: Union[KeyStatus, str],
    previsao_entrega: Optional[date],
    hora_entrega: Optional[time],
    now: datetime,
) -> KeyStatus:
    """
    Calcula o status exibido da chave.

    Args:
        status: Status gravado (Disponível ou Retirada)
        previsao_entrega: Data prevista de devolução
        hora_entrega: Hora prevista de devolução
        now: Horário atual no fuso local (sem tzinfo)

    Returns:
        Atrasada se retirada e com prazo estritamente no passado;
        caso contrário o próprio status gravado.
    """
    current = KeyStatus(status)

    if current != KeyStatus.WITHDRAWN:
        return current

    if previsao_entrega is None or hora_entrega is None:
        return current

    expected = datetime.combine(previsao_entrega, hora_entrega)
    if now.tzinfo is not None:
        now = now.replace(tzinfo=None)

    if expected < now:
        return KeyStatus.OVERDUE

    return current


def validate_withdrawal(data: WithdrawalData) -> None:
    """
    Valida presença dos campos obrigatórios da retirada.

    Raises:
        KeyWithdrawalValidationError: com todas as mensagens juntas
    """
    errors = []
    if not (data.retirada_por or "").strip():
        errors.append("Quem retirou é obrigatório.")
    if not data.previsao_entrega:
        errors.append("Previsão de entrega é obrigatória.")
    if not data.hora_entrega:
        errors.append("Hora é obrigatória.")

    if errors:
        raise KeyWithdrawalValidationError(errors)


def withdrawal_changes(data: WithdrawalData) -> Dict[str, Any]:
    """Campos gravados na retirada (valida antes)."""
    validate_withdrawal(data)
    return {
        "status": KeyStatus.WITHDRAWN.value,
        "retirada_por": data.retirada_por.strip(),
        "tipo_retirada": WithdrawalType(data.tipo_retirada).value,
        "motivo": WithdrawalReason(data.motivo).value,
        "previsao_entrega": data.previsao_entrega,
        "hora_entrega": data.hora_entrega,
    }


def withdrawal_message(imprimir_termo: bool) -> str:
    if imprimir_termo:
        return "Retirada registrada! Termo de empréstimo disponível para impressão."
    return "Retirada registrada com sucesso!"


def format_expected_return(previsao_entrega: Optional[date], hora_entrega: Optional[time]) -> str:
    """Formata previsão de entrega: 18/10/2026 às 17:00"""
    if not previsao_entrega:
        return "N/A"

    formatted = previsao_entrega.strftime("%d/%m/%Y")
    if hora_entrega:
        return f"{formatted} às {hora_entrega.strftime('%H:%M')}"
    return formatted


def local_now(timezone_name: str) -> datetime:
    """Horário atual no fuso da imobiliária, sem tzinfo."""
    return datetime.now(ZoneInfo(timezone_name)).replace(tzinfo=None)


# =============================================================================
# PROJEÇÃO PARA LISTAGEM
# =============================================================================

MISSING_PROPERTY_LABEL = "Imóvel não encontrado"


@dataclass
class KeyPropertySummary:
    """Dados básicos do imóvel da chave."""
    id: int
    codigo: str
    logradouro: str
    numero: Optional[str]
    bairro: Optional[str]

    @property
    def label(self) -> str:
        return f"{self.codigo} - {self.logradouro}, {self.numero or 's/n'} ({self.bairro or '-'})"


@dataclass
class KeyListing:
    """Chave pronta para exibição, com o status já derivado."""
    id: int
    codigo_chave: str
    agencia: Optional[str]
    status: KeyStatus
    retirada_por: Optional[str]
    tipo_retirada: Optional[str]
    motivo: Optional[str]
    previsao_entrega: Optional[date]
    hora_entrega: Optional[time]
    imovel_id: Optional[int]
    imovel: Optional[KeyPropertySummary]

    @property
    def imovel_label(self) -> str:
        return self.imovel.label if self.imovel else MISSING_PROPERTY_LABEL

    @property
    def previsao_display(self) -> str:
        if self.status == KeyStatus.AVAILABLE:
            return "N/A"
        return format_expected_return(self.previsao_entrega, self.hora_entrega)


def to_key_listing(chave: Any, now: datetime) -> KeyListing:
    """Monta a visão de listagem de uma chave (ORM com imovel carregado)."""
    imovel = getattr(chave, "imovel", None)
    summary = None
    if imovel is not None:
        summary = KeyPropertySummary(
            id=imovel.id,
            codigo=imovel.codigo,
            logradouro=imovel.logradouro,
            numero=imovel.numero,
            bairro=imovel.bairro,
        )

    return KeyListing(
        id=chave.id,
        codigo_chave=chave.codigo_chave,
        agencia=chave.agencia,
        status=derive_key_status(chave.status, chave.previsao_entrega, chave.hora_entrega, now),
        retirada_por=chave.retirada_por,
        tipo_retirada=chave.tipo_retirada,
        motivo=chave.motivo,
        previsao_entrega=chave.previsao_entrega,
        hora_entrega=chave.hora_entrega,
        imovel_id=chave.imovel_id,
        imovel=summary,
    )
