import os
from datetime import date, time
from typing import AsyncGenerator, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from imobcrm.domain.entities import Imovel, ImovelChave, ImovelImportado, KeyStatus, Profile
from imobcrm.infrastructure.database import normalize_database_url, register_sqlite_functions
from imobcrm.infrastructure.services.auth_service import create_profile_token, hash_password

# Banco de teste: SQLite em memória (uma conexão compartilhada) ou o
# PostgreSQL indicado em TEST_DATABASE_URL
TEST_DATABASE_URL = normalize_database_url(
    os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
)


def make_engine():
    if not TEST_DATABASE_URL.startswith("sqlite"):
        return create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_sqlite_functions(engine)
    return engine


def make_sessionmaker(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def make_override_get_db(session_factory: async_sessionmaker) -> Callable:
    """
    Override da dependência get_db para ser usada nos testes, garantindo
    que a sessão de teste seja usada pela aplicação.
    """
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_db


def auth_headers_for(profile: Profile) -> dict:
    token = create_profile_token(profile)
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# FÁBRICAS
# =============================================================================

async def create_profile(
    session: AsyncSession,
    email: str = "corretor@imob.com",
    password: str = "senha123",
    agencia: Optional[str] = "Centro",
) -> Profile:
    profile = Profile(
        name="Corretor Teste",
        email=email,
        password_hash=hash_password(password),
        agencia=agencia,
        active=True,
    )
    session.add(profile)
    await session.commit()
    await session.refresh(profile)
    return profile


async def create_imovel_with_key(
    session: AsyncSession,
    user_id: int,
    codigo: str = "AP001",
    bairro: str = "Centro",
    status: KeyStatus = KeyStatus.AVAILABLE,
    retirada_por: Optional[str] = None,
    previsao_entrega: Optional[date] = None,
    hora_entrega: Optional[time] = None,
    **fields,
) -> ImovelChave:
    imovel = Imovel(
        user_id=user_id,
        codigo=codigo,
        tipo_imovel=fields.pop("tipo_imovel", "Apartamento"),
        logradouro=fields.pop("logradouro", "Rua das Flores"),
        numero=fields.pop("numero", "100"),
        bairro=bairro,
        cidade="Porto Alegre",
        dados_contrato=fields.pop("dados_contrato", {}),
        **fields,
    )
    session.add(imovel)
    await session.flush()

    chave = ImovelChave(
        user_id=user_id,
        imovel_id=imovel.id,
        codigo_chave=f"CH-{codigo}",
        agencia="Centro",
        status=status.value,
        retirada_por=retirada_por,
        tipo_retirada="Temporária" if retirada_por else None,
        motivo="Visita" if retirada_por else None,
        previsao_entrega=previsao_entrega,
        hora_entrega=hora_entrega,
    )
    session.add(chave)
    await session.commit()
    await session.refresh(chave)
    return chave


async def create_imported_rows(session: AsyncSession, rows: list) -> list:
    objects = [ImovelImportado(**row) for row in rows]
    session.add_all(objects)
    await session.commit()
    return objects


IMPORTED_SAMPLE = [
    {"referencia": "REF-1", "categoria": "Apartamento", "endereco": "Rua A, 10", "bairro": "Centro",
     "dorms": 2, "venda": "R$ 300.000,00", "aluguel": "R$ 1.500,00", "responsaveis": "Tamires Torres"},
    {"referencia": "REF-2", "categoria": "Casa", "endereco": "Rua B, 20", "bairro": "Moinhos",
     "dorms": 3, "venda": "R$ 850.000,00", "aluguel": None, "responsaveis": "Elias Torres"},
    {"referencia": "REF-3", "categoria": "Apartamento", "endereco": "Av. C, 30", "bairro": "Centro",
     "dorms": 1, "venda": "R$ 180.000,00", "aluguel": "R$ 900,00", "responsaveis": None},
    {"referencia": "REF-4", "categoria": "Sala", "endereco": "Rua D, 40", "bairro": "Centro",
     "dorms": 0, "venda": None, "aluguel": "R$ 2.200,00", "nome_proprietario": "Maria Souza"},
    {"referencia": "REF-5", "categoria": "Casa", "endereco": "Rua E, 50", "bairro": "Petrópolis",
     "dorms": 4, "venda": "R$ 1.200.000,00", "aluguel": None, "email": "dono@exemplo.com"},
]
