import os

# Variáveis obrigatórias antes de importar a aplicação
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "chave-de-teste")

from typing import AsyncGenerator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.api.main import app
from imobcrm.domain.entities import Base
from imobcrm.infrastructure.database import get_db
from tests.utils import (
    auth_headers_for,
    create_profile,
    make_engine,
    make_override_get_db,
    make_sessionmaker,
)


@pytest.fixture
async def session_factory():
    """
    Banco limpo para cada teste: cria as tabelas antes e remove depois.
    """
    engine = make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = make_sessionmaker(engine)
    app.dependency_overrides[get_db] = make_override_get_db(factory)

    yield factory

    app.dependency_overrides.pop(get_db, None)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def profile(db_session):
    return await create_profile(db_session)


@pytest.fixture
async def other_profile(db_session):
    return await create_profile(db_session, email="outro@imob.com", agencia=None)


@pytest.fixture
def auth_headers(profile) -> dict:
    return auth_headers_for(profile)
