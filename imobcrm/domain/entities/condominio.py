"""
Condominio - Empreendimento
===========================

Condomínio ou lançamento cadastrado pelo corretor. Os imóveis do
catálogo podem pertencer a um condomínio; aqui ficam só os dados do
empreendimento (localização, terreno e estágio da obra).
"""
from typing import Optional
from sqlalchemy import String, Integer, Float, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Condominio(Base, TimestampMixin):
    """Empreendimento do catálogo."""

    __tablename__ = "condominios"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id", ondelete="CASCADE"), index=True)

    nome: Mapped[str] = mapped_column(String(200), nullable=False)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Localização
    endereco: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    numero: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    bairro: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    cidade: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    estado: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)

    area_terreno_m2: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ano_termino: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    construtora: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    incorporadora: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Andamento da obra: Na planta / Em construção / Pronto
    estagio: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    __table_args__ = (
        Index("ix_condominios_user_bairro", "user_id", "bairro"),
    )

    def __repr__(self) -> str:
        return f"<Condominio(id={self.id}, nome='{self.nome}')>"
