"""
SCHEMAS DE VALIDAÇÃO
=====================

Define a estrutura de dados de entrada e saída da API.
Pydantic valida automaticamente os dados.
"""

from datetime import date, datetime, time
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from imobcrm.domain.entities.enums import (
    ConstructionStage,
    KeyHolderType,
    KeyStatus,
    LeadSource,
    LeadStatus,
    OpportunityStage,
    WithdrawalReason,
    WithdrawalType,
)


# ============================================
# AUTH
# ============================================

class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    agencia: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: ProfileResponse


# ============================================
# CHAVES
# ============================================

class KeyPropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    codigo: str
    logradouro: str
    numero: Optional[str] = None
    bairro: Optional[str] = None


class KeyResponse(BaseModel):
    """Chave com status já derivado."""
    id: int
    codigo_chave: str
    agencia: Optional[str] = None
    status: KeyStatus
    retirada_por: Optional[str] = None
    tipo_retirada: Optional[str] = None
    motivo: Optional[str] = None
    previsao_entrega: Optional[date] = None
    hora_entrega: Optional[time] = None
    previsao_display: str
    imovel_id: Optional[int] = None
    imovel: Optional[KeyPropertyResponse] = None
    imovel_label: str


class KeyWithdrawalRequest(BaseModel):
    """
    Formulário de retirada.

    Os obrigatórios são checados pela regra de domínio, para que a
    resposta traga todas as mensagens juntas.
    """
    retirada_por: str = ""
    previsao_entrega: Optional[date] = None
    hora_entrega: Optional[time] = None
    tipo_retirada: WithdrawalType = WithdrawalType.TEMPORARY
    motivo: WithdrawalReason = WithdrawalReason.VISIT
    imprimir_termo: bool = True


class KeyActionResponse(BaseModel):
    success: bool = True
    message: str
    key: KeyResponse
    termo_url: Optional[str] = None


# ============================================
# IMÓVEIS
# ============================================

class ImovelCreate(BaseModel):
    codigo: str = Field(..., min_length=1, max_length=50)
    tipo_imovel: str = Field(..., min_length=1, max_length=50)
    logradouro: str = Field(..., min_length=1, max_length=300)
    numero: Optional[str] = None
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    dados_contrato: dict = Field(default_factory=dict)
    dormitorios: Optional[int] = None
    suites: Optional[int] = None
    vagas: Optional[int] = None
    valor_venda: Optional[float] = None
    valor_locacao: Optional[float] = None

    # Chave criada junto com o imóvel
    codigo_chave: Optional[str] = None
    agencia: Optional[str] = None


class ImovelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    codigo: str
    tipo_imovel: str
    logradouro: str
    numero: Optional[str] = None
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    dados_contrato: dict = Field(default_factory=dict)
    dormitorios: Optional[int] = None
    suites: Optional[int] = None
    vagas: Optional[int] = None
    valor_venda: Optional[float] = None
    valor_locacao: Optional[float] = None
    status_aprovacao: str
    created_at: datetime


class ImovelKeyInput(BaseModel):
    """Chave no formulário do imóvel (sem id = nova)."""
    id: Optional[int] = None
    codigo_chave: str = Field(..., min_length=1, max_length=50)
    responsavel_tipo: Optional[KeyHolderType] = None
    disponivel_emprestimo: bool = True
    nome_contato: Optional[str] = None
    telefone_contato: Optional[str] = None
    observacoes: Optional[str] = None
    agencia: Optional[str] = None


class ImovelKeysSync(BaseModel):
    keys: List[ImovelKeyInput] = Field(default_factory=list)


class ImovelKeyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    imovel_id: Optional[int] = None
    codigo_chave: str
    agencia: Optional[str] = None
    responsavel_tipo: Optional[str] = None
    disponivel_emprestimo: bool
    nome_contato: Optional[str] = None
    telefone_contato: Optional[str] = None
    observacoes: Optional[str] = None
    status: str


class BulkDeleteRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1)


class BulkDeleteResponse(BaseModel):
    success: bool = True
    deleted: int
    message: str


# ============================================
# IMÓVEIS IMPORTADOS
# ============================================

class ImportedListingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    responsaveis: Optional[str] = None
    feedback: Optional[str] = None
    referencia: Optional[str] = None
    categoria: Optional[str] = None
    endereco: Optional[str] = None
    bairro: Optional[str] = None
    andar: Optional[int] = None
    area_total: Optional[str] = None
    area_privada: Optional[float] = None
    dorms: Optional[int] = None
    suites: Optional[str] = None
    vagas: Optional[str] = None
    venda: Optional[str] = None
    aluguel: Optional[str] = None
    nome_proprietario: Optional[str] = None
    fones: Optional[str] = None
    email: Optional[str] = None
    exclusivo: Optional[str] = None
    id_externo: Optional[int] = None


class ImportedListingPage(BaseModel):
    items: List[ImportedListingResponse]
    total: int
    page: int
    per_page: int
    total_pages: int


class CellUpdateRequest(BaseModel):
    """Edição de uma única célula."""
    column: str
    value: Any = None


class ImportedFiltersInput(BaseModel):
    search: Optional[str] = None
    min_venda: Optional[float] = None
    max_venda: Optional[float] = None
    min_aluguel: Optional[float] = None
    max_aluguel: Optional[float] = None
    min_dorms: Optional[int] = None
    max_dorms: Optional[int] = None
    categoria: Optional[str] = None
    bairro: Optional[str] = None
    andar: Optional[int] = None
    responsavel: Optional[str] = None
    endereco_search: Optional[str] = None
    referencia_search: Optional[str] = None


class ImportedExportRequest(BaseModel):
    """Exporta a seleção (ids) ou, sem seleção, todo o conjunto filtrado."""
    ids: List[int] = Field(default_factory=list)
    filters: ImportedFiltersInput = Field(default_factory=ImportedFiltersInput)
    sort_column: str = "id"
    sort_direction: str = "asc"


# ============================================
# CONDOMÍNIOS
# ============================================

class CondominioCreate(BaseModel):
    nome: str = Field(..., min_length=1, max_length=200)
    logo_url: Optional[str] = None
    endereco: Optional[str] = None
    numero: Optional[str] = None
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    estado: Optional[str] = Field(None, max_length=2)
    area_terreno_m2: Optional[float] = Field(None, ge=0)
    ano_termino: Optional[int] = None
    construtora: Optional[str] = None
    incorporadora: Optional[str] = None
    estagio: Optional[ConstructionStage] = None


class CondominioResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    logo_url: Optional[str] = None
    endereco: Optional[str] = None
    numero: Optional[str] = None
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    estado: Optional[str] = None
    area_terreno_m2: Optional[float] = None
    ano_termino: Optional[int] = None
    construtora: Optional[str] = None
    incorporadora: Optional[str] = None
    estagio: Optional[str] = None
    created_at: datetime


# ============================================
# LEADS
# ============================================

class LeadCreate(BaseModel):
    nome: str = Field(..., min_length=1, max_length=200)
    telefone: Optional[str] = None
    email: Optional[str] = None
    origem: Optional[LeadSource] = None
    status: LeadStatus = LeadStatus.NEW
    observacoes: Optional[str] = None
    responsavel_id: Optional[int] = None


class LeadUpdate(BaseModel):
    """Campos enviados são alterados; os demais ficam como estão."""
    nome: Optional[str] = Field(None, min_length=1, max_length=200)
    telefone: Optional[str] = None
    email: Optional[str] = None
    origem: Optional[LeadSource] = None
    status: Optional[LeadStatus] = None
    observacoes: Optional[str] = None
    responsavel_id: Optional[int] = None


class LeadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    telefone: Optional[str] = None
    email: Optional[str] = None
    origem: Optional[str] = None
    status: str
    observacoes: Optional[str] = None
    responsavel_id: Optional[int] = None
    responsavel_nome: Optional[str] = None
    created_at: datetime


# ============================================
# OPORTUNIDADES
# ============================================

class OportunidadeCreate(BaseModel):
    nome: str = Field(..., min_length=1, max_length=200)
    etapa: OpportunityStage = OpportunityStage.NEW_LEADS
    valor_estimado: Optional[float] = Field(None, ge=0)
    data_fechamento_estimada: Optional[date] = None
    observacoes: Optional[str] = None
    lead_id: Optional[int] = None
    imovel_id: Optional[int] = None


class StageUpdateRequest(BaseModel):
    etapa: OpportunityStage


class OportunidadeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    etapa: str
    valor_estimado: Optional[float] = None
    data_fechamento_estimada: Optional[date] = None
    observacoes: Optional[str] = None
    lead_id: Optional[int] = None
    lead_nome: Optional[str] = None
    imovel_id: Optional[int] = None
    imovel: Optional[KeyPropertyResponse] = None
    created_at: datetime


class FunnelColumn(BaseModel):
    etapa: str
    total: int
    items: List[OportunidadeResponse]
