"""Enums - valores fixos que se repetem no sistema."""

from enum import Enum


class KeyStatus(str, Enum):
    """Situação da chave exibida na listagem."""
    AVAILABLE = "Disponível"   # Na imobiliária
    WITHDRAWN = "Retirada"     # Com alguém
    OVERDUE = "Atrasada"       # Retirada e com devolução vencida (só exibição)


class WithdrawalType(str, Enum):
    """Tipo de retirada da chave."""
    TEMPORARY = "Temporária"
    PERMANENT = "Definitiva"


class WithdrawalReason(str, Enum):
    """Motivo da retirada da chave."""
    VISIT = "Visita"
    INSPECTION = "Vistoria"
    MAINTENANCE = "Manutenção"


class ContractType(str, Enum):
    """Modalidades de contrato de um imóvel."""
    SALE = "Venda"
    RENT = "Locacao"
    SEASON = "Temporada"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class KeyHolderType(str, Enum):
    """Quem guarda a chave cadastrada do imóvel."""
    AGENCY = "Imobiliária"
    LISTING_AGENT = "Agenciador"
    OWNER = "Proprietário"
    EXTERNAL_BROKER = "Corretor Externo"
    RELATIVE = "Familiar"
    DOORMAN = "Porteiro"
    BUILDING_MANAGER = "Síndico"
    CARETAKER = "Zelador"


class ConstructionStage(str, Enum):
    """Estágio da obra de um condomínio."""
    OFF_PLAN = "Na planta"
    UNDER_CONSTRUCTION = "Em construção"
    READY = "Pronto"


class LeadStatus(str, Enum):
    NEW = "Novo"
    CONTACTED = "Contatado"
    QUALIFIED = "Qualificado"
    DISQUALIFIED = "Desqualificado"


class LeadSource(str, Enum):
    """Origem do lead."""
    REFERRAL = "Indicação"
    WEBSITE = "Site"
    INSTAGRAM = "Instagram"
    WHATSAPP = "WhatsApp"
    PORTAL = "Portal Imobiliário"
    OTHER = "Outro"


class OpportunityStage(str, Enum):
    """Etapas do funil de oportunidades (ordem de exibição)."""
    NEW_LEADS = "Novos Leads"
    IN_SERVICE = "Em Atendimento"
    VISIT_SCHEDULED = "Visita Agendada"
    NEGOTIATING = "Em Negociação"
    PROPOSAL_SENT = "Proposta Enviada"
    WON = "Venda Ganha"
    LOST = "Venda Perdida"
