"""
TESTES - CUSTÓDIA DE CHAVES
============================

Regras puras do ciclo de vida da chave: status derivado (Atrasada),
validação da retirada e payloads de retirada/devolução.
"""

import pytest
from datetime import date, datetime, time, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

from imobcrm.domain.entities import KeyStatus, WithdrawalType, WithdrawalReason
from imobcrm.domain.exceptions import KeyWithdrawalValidationError
from imobcrm.domain.services.key_custody import (
    MISSING_PROPERTY_LABEL,
    RETURN_CHANGES,
    WithdrawalData,
    derive_key_status,
    format_expected_return,
    to_key_listing,
    validate_withdrawal,
    withdrawal_changes,
    withdrawal_message,
)
from imobcrm.infrastructure.services import key_service


NOW = datetime(2026, 10, 19, 10, 30)


# =============================================================================
# STATUS DERIVADO
# =============================================================================

def test_withdrawn_key_due_yesterday_is_overdue():
    yesterday = NOW.date() - timedelta(days=1)

    status = derive_key_status(KeyStatus.WITHDRAWN.value, yesterday, time(17, 0), NOW)

    assert status == KeyStatus.OVERDUE


def test_withdrawn_key_due_later_today_stays_withdrawn():
    status = derive_key_status("Retirada", NOW.date(), time(17, 0), NOW)
    assert status == KeyStatus.WITHDRAWN


def test_due_exactly_now_is_not_overdue():
    status = derive_key_status("Retirada", NOW.date(), NOW.time(), NOW)
    assert status == KeyStatus.WITHDRAWN


def test_available_key_ignores_stale_dates():
    long_ago = date(2020, 1, 1)
    status = derive_key_status("Disponível", long_ago, time(8, 0), NOW)
    assert status == KeyStatus.AVAILABLE


def test_withdrawn_without_time_is_not_overdue():
    status = derive_key_status("Retirada", date(2020, 1, 1), None, NOW)
    assert status == KeyStatus.WITHDRAWN


def test_aware_now_is_compared_as_local_time():
    aware_now = NOW.replace(tzinfo=timezone(timedelta(hours=-3)))
    status = derive_key_status("Retirada", NOW.date(), time(10, 0), aware_now)
    assert status == KeyStatus.OVERDUE


# =============================================================================
# VALIDAÇÃO DA RETIRADA
# =============================================================================

def test_empty_holder_is_rejected():
    data = WithdrawalData(retirada_por="", previsao_entrega=date(2026, 10, 20), hora_entrega=time(17, 0))

    with pytest.raises(KeyWithdrawalValidationError) as exc_info:
        validate_withdrawal(data)

    assert "obrigatório" in str(exc_info.value)
    assert exc_info.value.errors == ["Quem retirou é obrigatório."]


def test_all_missing_messages_are_joined():
    with pytest.raises(KeyWithdrawalValidationError) as exc_info:
        validate_withdrawal(WithdrawalData(retirada_por="   "))

    assert str(exc_info.value) == (
        "Quem retirou é obrigatório. Previsão de entrega é obrigatória. Hora é obrigatória."
    )


def test_withdrawal_changes_trim_holder_and_set_status():
    data = WithdrawalData(
        retirada_por="  João Corretor ",
        previsao_entrega=date(2026, 10, 20),
        hora_entrega=time(17, 0),
        tipo_retirada=WithdrawalType.PERMANENT,
        motivo=WithdrawalReason.INSPECTION,
    )

    changes = withdrawal_changes(data)

    assert changes == {
        "status": "Retirada",
        "retirada_por": "João Corretor",
        "tipo_retirada": "Definitiva",
        "motivo": "Vistoria",
        "previsao_entrega": date(2026, 10, 20),
        "hora_entrega": time(17, 0),
    }


def test_return_changes_null_withdrawal_fields():
    assert RETURN_CHANGES["status"] == "Disponível"
    for field_name in ("retirada_por", "tipo_retirada", "motivo", "previsao_entrega", "hora_entrega"):
        assert RETURN_CHANGES[field_name] is None


def test_withdrawal_message_depends_on_receipt_flag():
    assert "Termo" in withdrawal_message(True)
    assert withdrawal_message(False) == "Retirada registrada com sucesso!"


async def test_invalid_withdrawal_issues_no_database_call():
    """Retirada sem responsável não chega ao banco."""
    db = AsyncMock()

    with pytest.raises(KeyWithdrawalValidationError):
        await key_service.withdraw_key(db, user_id=1, key_id=1, data=WithdrawalData(retirada_por=""))

    db.execute.assert_not_awaited()
    db.commit.assert_not_awaited()


# =============================================================================
# EXIBIÇÃO
# =============================================================================

def test_format_expected_return():
    assert format_expected_return(date(2026, 10, 18), time(17, 0)) == "18/10/2026 às 17:00"
    assert format_expected_return(date(2026, 10, 18), None) == "18/10/2026"
    assert format_expected_return(None, None) == "N/A"


def test_listing_without_property_uses_placeholder_label():
    chave = SimpleNamespace(
        id=7,
        codigo_chave="CH-7",
        agencia="Centro",
        status="Retirada",
        retirada_por="Ana",
        tipo_retirada="Temporária",
        motivo="Visita",
        previsao_entrega=NOW.date() - timedelta(days=1),
        hora_entrega=time(17, 0),
        imovel_id=None,
        imovel=None,
    )

    listing = to_key_listing(chave, NOW)

    assert listing.imovel_label == MISSING_PROPERTY_LABEL
    assert listing.status == KeyStatus.OVERDUE
    assert listing.previsao_display.endswith("às 17:00")
