"""
ImovelImportado - Planilha de imóveis importados
================================================

Linhas vindas de uma importação externa em massa. As colunas mantêm os
nomes da planilha de origem ("Venda", "Aluguel", "Responsáveis"...).

"Venda" e "Aluguel" são texto livre: o valor gravado é o texto já
formatado pela máscara de moeda (ex: "R$ 150.000,00").
"""
from typing import Optional
from sqlalchemy import String, Text, Integer, BigInteger, Float
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ImovelImportado(Base):
    """Linha da tabela de imóveis importados."""

    __tablename__ = "imoveis_importados"

    id: Mapped[int] = mapped_column(primary_key=True)

    responsaveis: Mapped[Optional[str]] = mapped_column("Responsáveis", String(100), nullable=True)
    feedback: Mapped[Optional[str]] = mapped_column("Feedback", Text, nullable=True)
    referencia: Mapped[Optional[str]] = mapped_column("Referencia", String(100), nullable=True)
    categoria: Mapped[Optional[str]] = mapped_column("Categoria", String(100), nullable=True)
    endereco: Mapped[Optional[str]] = mapped_column("Endereco", String(300), nullable=True)
    bairro: Mapped[Optional[str]] = mapped_column("Bairro", String(100), nullable=True)
    andar: Mapped[Optional[int]] = mapped_column("Andar", Integer, nullable=True)
    area_total: Mapped[Optional[str]] = mapped_column("AreaTotal", String(50), nullable=True)
    area_privada: Mapped[Optional[float]] = mapped_column("AreaPrivada", Float, nullable=True)
    dorms: Mapped[Optional[int]] = mapped_column("Dorms", BigInteger, nullable=True)
    suites: Mapped[Optional[str]] = mapped_column("Suites", String(50), nullable=True)
    vagas: Mapped[Optional[str]] = mapped_column("Vagas", String(50), nullable=True)
    venda: Mapped[Optional[str]] = mapped_column("Venda", String(50), nullable=True)
    aluguel: Mapped[Optional[str]] = mapped_column("Aluguel", String(50), nullable=True)
    nome_proprietario: Mapped[Optional[str]] = mapped_column("NomeProprietario", String(200), nullable=True)
    fones: Mapped[Optional[str]] = mapped_column("Fones", String(100), nullable=True)
    email: Mapped[Optional[str]] = mapped_column("Email", String(200), nullable=True)
    exclusivo: Mapped[Optional[str]] = mapped_column("Exclusivo", String(20), nullable=True)
    id_externo: Mapped[Optional[int]] = mapped_column("IDExterno", BigInteger, nullable=True)

    def __repr__(self) -> str:
        return f"<ImovelImportado(id={self.id}, referencia='{self.referencia}')>"


# Atributo -> rótulo da coluna na planilha (ordem de exibição e exportação)
IMPORTED_COLUMNS = {
    "responsaveis": "Responsáveis",
    "feedback": "Feedback",
    "referencia": "Referencia",
    "categoria": "Categoria",
    "endereco": "Endereco",
    "bairro": "Bairro",
    "andar": "Andar",
    "area_total": "AreaTotal",
    "area_privada": "AreaPrivada",
    "dorms": "Dorms",
    "suites": "Suites",
    "vagas": "Vagas",
    "venda": "Venda",
    "aluguel": "Aluguel",
    "nome_proprietario": "NomeProprietario",
    "fones": "Fones",
    "email": "Email",
    "exclusivo": "Exclusivo",
    "id_externo": "ID",
}

# Colunas numéricas no banco
NUMERIC_COLUMNS = {"area_privada": float, "dorms": int, "andar": int, "id_externo": int}

# Colunas de texto livre editadas com máscara de moeda
CURRENCY_COLUMNS = {"venda", "aluguel"}

# Coluna de valores enumerados (seletor de responsável)
RESPONSIBLE_COLUMN = "responsaveis"
