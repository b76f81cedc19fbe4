"""
Filtros em memória das listagens
================================

Aplicados depois da busca no banco, quando o critério depende de algo
calculado na leitura (status derivado da chave) ou de campos JSON do
imóvel.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from imobcrm.domain.entities.enums import KeyStatus
from imobcrm.domain.services.key_custody import KeyListing


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term.lower() in value.lower()


# =============================================================================
# CHAVES
# =============================================================================

@dataclass
class KeyFilters:
    codigo: str = ""
    imovel: str = ""
    retirada_por: str = ""
    status: Optional[KeyStatus] = None


def key_matches(key: KeyListing, filters: KeyFilters) -> bool:
    if filters.codigo and not _contains(key.codigo_chave, filters.codigo):
        return False

    # Código, logradouro ou bairro. Chave sem imóvel não é descartada aqui.
    if filters.imovel and key.imovel:
        prop = key.imovel
        if not (
            _contains(prop.codigo, filters.imovel)
            or _contains(prop.logradouro, filters.imovel)
            or _contains(prop.bairro, filters.imovel)
        ):
            return False

    if filters.retirada_por and not _contains(key.retirada_por, filters.retirada_por):
        return False

    if filters.status and key.status != filters.status:
        return False

    return True


def filter_keys(keys: Iterable[KeyListing], filters: KeyFilters) -> List[KeyListing]:
    """Filtra chaves já com status derivado."""
    return [key for key in keys if key_matches(key, filters)]


# =============================================================================
# IMÓVEIS
# =============================================================================

@dataclass
class ImovelFilters:
    contract: str = ""
    bedrooms: List[int] = field(default_factory=list)
    suites: List[int] = field(default_factory=list)
    garages: List[int] = field(default_factory=list)


def imovel_matches(imovel, filters: ImovelFilters) -> bool:
    if filters.contract:
        contract_key = f"{filters.contract.lower()}_ativo"
        if (imovel.dados_contrato or {}).get(contract_key) is not True:
            return False

    if filters.bedrooms and imovel.dormitorios not in filters.bedrooms:
        return False

    if filters.suites and imovel.suites not in filters.suites:
        return False

    if filters.garages and imovel.vagas not in filters.garages:
        return False

    return True


def filter_imoveis(imoveis: Iterable, filters: ImovelFilters) -> list:
    """Filtros de contrato e características (campos JSON/listas)."""
    return [imovel for imovel in imoveis if imovel_matches(imovel, filters)]
