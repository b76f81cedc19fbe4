"""
Oportunidade - Negócio em andamento
===================================

Card do funil de vendas. Pode estar ligada a um lead (o cliente) e a um
imóvel do catálogo; a etapa muda conforme o atendimento avança.
"""
from datetime import date
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Text, Date, ForeignKey, Numeric, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from .enums import OpportunityStage

if TYPE_CHECKING:
    from .imovel import Imovel
    from .lead import Lead


class Oportunidade(Base, TimestampMixin):
    """Oportunidade do funil."""

    __tablename__ = "oportunidades"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id", ondelete="CASCADE"), index=True)

    nome: Mapped[str] = mapped_column(String(200), nullable=False)
    etapa: Mapped[str] = mapped_column(
        String(30), default=OpportunityStage.NEW_LEADS.value, nullable=False
    )
    valor_estimado: Mapped[Optional[float]] = mapped_column(Numeric(15, 2), nullable=True)
    data_fechamento_estimada: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    observacoes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    lead_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("leads.id", ondelete="SET NULL"), nullable=True
    )
    imovel_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("imoveis.id", ondelete="SET NULL"), nullable=True
    )

    lead: Mapped[Optional["Lead"]] = relationship()
    imovel: Mapped[Optional["Imovel"]] = relationship()

    __table_args__ = (
        Index("ix_oportunidades_user_etapa", "user_id", "etapa"),
    )

    @property
    def lead_nome(self) -> Optional[str]:
        return self.lead.nome if self.lead else None

    def __repr__(self) -> str:
        return f"<Oportunidade(id={self.id}, nome='{self.nome}', etapa='{self.etapa}')>"
