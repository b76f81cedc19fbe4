"""Entidades do domínio."""
from .base import Base, TimestampMixin
from .enums import (
    KeyStatus,
    WithdrawalType,
    WithdrawalReason,
    ContractType,
    SortDirection,
    KeyHolderType,
    ConstructionStage,
    LeadStatus,
    LeadSource,
    OpportunityStage,
)
from .profile import Profile
from .imovel import Imovel, ImagemImovel
from .chave import ImovelChave
from .imovel_importado import ImovelImportado
from .condominio import Condominio
from .lead import Lead
from .oportunidade import Oportunidade

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Enums
    "KeyStatus",
    "WithdrawalType",
    "WithdrawalReason",
    "ContractType",
    "SortDirection",
    "KeyHolderType",
    "ConstructionStage",
    "LeadStatus",
    "LeadSource",
    "OpportunityStage",
    # Models
    "Profile",
    "Imovel",
    "ImagemImovel",
    "ImovelChave",
    "ImovelImportado",
    "Condominio",
    "Lead",
    "Oportunidade",
]
