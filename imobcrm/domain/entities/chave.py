"""
ImovelChave - Custódia de chaves
================================

Um imóvel pode ter várias chaves (a primeira nasce com ele; as demais
vêm do cadastro de chaves do imóvel). O status gravado é sempre
``Disponível`` ou ``Retirada``; ``Atrasada`` é calculado na leitura
(ver ``domain.services.key_custody``).
"""
from datetime import date, time
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Text, Boolean, ForeignKey, Date, Time, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from .enums import KeyStatus

if TYPE_CHECKING:
    from .imovel import Imovel


class ImovelChave(Base, TimestampMixin):
    """Chave física de um imóvel."""

    __tablename__ = "imovel_chaves"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id", ondelete="CASCADE"), index=True)
    imovel_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("imoveis.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    codigo_chave: Mapped[str] = mapped_column(String(50), nullable=False)
    agencia: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    # Cadastro: quem guarda a chave e contato
    responsavel_tipo: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    disponivel_emprestimo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    nome_contato: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    telefone_contato: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    observacoes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(20), default=KeyStatus.AVAILABLE.value, nullable=False)

    # Movimentação (nulos quando disponível)
    retirada_por: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    tipo_retirada: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    motivo: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    previsao_entrega: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    hora_entrega: Mapped[Optional[time]] = mapped_column(Time, nullable=True)

    imovel: Mapped[Optional["Imovel"]] = relationship(back_populates="chaves")

    __table_args__ = (
        Index("ix_imovel_chaves_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ImovelChave(id={self.id}, codigo='{self.codigo_chave}', status='{self.status}')>"
