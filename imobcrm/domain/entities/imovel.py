"""
Imovel - Imóvel agenciado
=========================

Catálogo de imóveis do corretor. Cada imóvel nasce com uma chave
(``ImovelChave``) e pode ter fotos (``ImagemImovel``).

Campos principais:
- Identificação (código, tipo)
- Localização (logradouro, número, bairro, cidade)
- Contrato (JSON com venda_ativo, locacao_ativo, temporada_ativo)
- Características (dormitórios, suítes, vagas)
- Valores (venda, locação)
"""
from typing import Optional, TYPE_CHECKING, List
from sqlalchemy import String, Integer, ForeignKey, Numeric, Index
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, JSONType

if TYPE_CHECKING:
    from .chave import ImovelChave


class Imovel(Base, TimestampMixin):
    """Imóvel do catálogo."""

    __tablename__ = "imoveis"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id", ondelete="CASCADE"), index=True)

    codigo: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    tipo_imovel: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    # Localização
    logradouro: Mapped[str] = mapped_column(String(300), nullable=False)
    numero: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    bairro: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    cidade: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Contrato: {"venda_ativo": bool, "locacao_ativo": bool, "temporada_ativo": bool}
    dados_contrato: Mapped[dict] = mapped_column(
        MutableDict.as_mutable(JSONType),
        default=dict,
    )

    # Características
    dormitorios: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    suites: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    vagas: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Valores
    valor_venda: Mapped[Optional[float]] = mapped_column(Numeric(15, 2), nullable=True)
    valor_locacao: Mapped[Optional[float]] = mapped_column(Numeric(15, 2), nullable=True)

    status_aprovacao: Mapped[str] = mapped_column(String(30), default="pendente")

    chaves: Mapped[List["ImovelChave"]] = relationship(back_populates="imovel")

    __table_args__ = (
        Index("ix_imoveis_user_bairro", "user_id", "bairro"),
    )

    def __repr__(self) -> str:
        return f"<Imovel(id={self.id}, codigo='{self.codigo}', bairro='{self.bairro}')>"


class ImagemImovel(Base, TimestampMixin):
    """Metadados de uma foto do imóvel."""

    __tablename__ = "imagens_imovel"

    id: Mapped[int] = mapped_column(primary_key=True)
    imovel_id: Mapped[int] = mapped_column(ForeignKey("imoveis.id", ondelete="CASCADE"), index=True)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    legenda: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    ordem: Mapped[int] = mapped_column(Integer, default=0)
