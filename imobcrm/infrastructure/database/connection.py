"""
Conexão com o banco do CRM.

Produção roda em PostgreSQL (asyncpg). SQLite (aiosqlite) serve para
desenvolvimento local e testes; nele a conversão de moeda da planilha
roda em Python, registrada em cada conexão.
"""
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from imobcrm.config import get_settings
from imobcrm.domain.services.currency import parse_currency_to_number

settings = get_settings()


def normalize_database_url(url: str) -> str:
    """postgres:// e postgresql:// viram postgresql+asyncpg://"""
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return url.replace(prefix, "postgresql+asyncpg://", 1)
    return url


def register_sqlite_functions(engine: AsyncEngine) -> None:
    """Funções SQL usadas pelas consultas da planilha, em cada nova conexão SQLite."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("currency_to_numeric", 1, parse_currency_to_number)


database_url = normalize_database_url(settings.database_url)

engine_options = {"echo": settings.debug, "pool_pre_ping": True}
if database_url.startswith("postgresql"):
    engine_options.update(pool_size=10, max_overflow=20)

engine = create_async_engine(database_url, **engine_options)
if engine.dialect.name == "sqlite":
    register_sqlite_functions(engine)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Sessão por requisição: commit no fim, rollback se a rota falhar."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Cria as tabelas que faltam (desenvolvimento; produção usa Alembic)."""
    from imobcrm.domain.entities import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
