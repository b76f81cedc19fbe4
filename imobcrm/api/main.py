"""
IMOBCRM API - Ponto de Entrada
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from imobcrm.config import get_settings
from imobcrm.logging_config import setup_logging
from imobcrm.infrastructure.database import init_db, async_session

# Routers
from imobcrm.api.routes import (
    auth_router,
    chaves_router,
    imoveis_router,
    imoveis_importados_router,
    condominios_router,
    leads_router,
    oportunidades_router,
)

# Domain
from imobcrm.domain.entities import Profile
from imobcrm.infrastructure.services.auth_service import hash_password

settings = get_settings()
logger = logging.getLogger(__name__)


# ============================================================
# Criar administrador automaticamente
# ============================================================
async def create_admin():
    if not settings.admin_configured:
        logger.info("Administrador não configurado. Pulando criação.")
        return

    async with async_session() as session:
        result = await session.execute(
            select(Profile).where(Profile.email == settings.admin_email)
        )
        if result.scalars().first():
            logger.info("Administrador já existe. Pulando criação.")
            return

        session.add(Profile(
            name=settings.admin_name,
            email=settings.admin_email,
            password_hash=hash_password(settings.admin_password),
            agencia=settings.default_agency,
            active=True,
        ))
        await session.commit()
        logger.info(f"Administrador criado: {settings.admin_email}")


# ============================================================
# LIFESPAN
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    logger.info("Iniciando ImobCRM API...")

    await init_db()
    await create_admin()

    yield

    logger.info("Encerrando ImobCRM API...")


# ============================================================
# FASTAPI APP
# ============================================================
app = FastAPI(
    title="ImobCRM API",
    description="CRM de imobiliária: chaves, imóveis, condomínios, leads, funil e planilha de imóveis importados",
    version="0.1.0",
    lifespan=lifespan,
)

# ============================================================
# CORS
# ============================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================
# ROTAS
# ============================================================
app.include_router(auth_router, prefix="/api/v1")
app.include_router(chaves_router, prefix="/api/v1")
app.include_router(imoveis_router, prefix="/api/v1")
app.include_router(imoveis_importados_router, prefix="/api/v1")
app.include_router(condominios_router, prefix="/api/v1")
app.include_router(leads_router, prefix="/api/v1")
app.include_router(oportunidades_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"name": "ImobCRM API", "status": "running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
