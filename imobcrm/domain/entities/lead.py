"""
Lead - Contato interessado
==========================

Pessoa que procurou a imobiliária e ainda não virou oportunidade.
``responsavel_id`` aponta para o corretor que atende o lead.
"""
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Text, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from .enums import LeadStatus

if TYPE_CHECKING:
    from .profile import Profile


class Lead(Base, TimestampMixin):
    """Lead do corretor."""

    __tablename__ = "leads"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id", ondelete="CASCADE"), index=True)

    nome: Mapped[str] = mapped_column(String(200), nullable=False)
    telefone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    origem: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=LeadStatus.NEW.value, nullable=False)
    observacoes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    responsavel_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    responsavel: Mapped[Optional["Profile"]] = relationship(foreign_keys=[responsavel_id])

    __table_args__ = (
        Index("ix_leads_user_status", "user_id", "status"),
    )

    @property
    def responsavel_nome(self) -> Optional[str]:
        """Nome do corretor (exige ``responsavel`` carregado)."""
        return self.responsavel.name if self.responsavel else None

    def __repr__(self) -> str:
        return f"<Lead(id={self.id}, nome='{self.nome}', status='{self.status}')>"
