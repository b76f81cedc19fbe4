"""
Máscara de moeda (R$)
=====================

Os valores de "Venda" e "Aluguel" da planilha são texto livre. Na edição
o texto digitado vira "R$ 150.000,00"; é esse texto que vai para o banco.
"""

import re
from typing import Optional

_NON_NUMERIC = re.compile(r"[^\d,]")
_LEADING_NUMBER = re.compile(r"^\d+(?:\.\d+)?")


def _clean(text: str) -> str:
    """Mantém dígitos e vírgula; a primeira vírgula vira ponto decimal."""
    return _NON_NUMERIC.sub("", text).replace(",", ".", 1)


def parse_currency_to_number(value: Optional[str]) -> Optional[float]:
    """
    Converte texto de moeda em número.

    Exemplo:
        "R$ 150.000,00" -> 150000.0
        "1.500"         -> 1500.0
        "abc"           -> None
    """
    if not value:
        return None
    match = _LEADING_NUMBER.match(_clean(value))
    if not match:
        return None
    return float(match.group(0))


def format_brl(number: float) -> str:
    """Formata número no padrão brasileiro: R$ 1.234,56"""
    formatted = f"{number:,.2f}"
    return "R$ " + formatted.replace(",", "X").replace(".", ",").replace("X", ".")


def format_text_to_currency(text: Optional[str]) -> str:
    """
    Formata texto livre como moeda.

    Texto vazio vira "" e texto sem número volta como veio.
    """
    if not text:
        return ""
    number = parse_currency_to_number(text)
    if number is None:
        return text
    return format_brl(number)
