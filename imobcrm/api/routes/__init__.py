"""Rotas da API."""

from .auth import router as auth_router
from .chaves import router as chaves_router
from .imoveis import router as imoveis_router
from .imoveis_importados import router as imoveis_importados_router
from .condominios import router as condominios_router
from .leads import router as leads_router
from .oportunidades import router as oportunidades_router


__all__ = [
    "auth_router",
    "chaves_router",
    "imoveis_router",
    "imoveis_importados_router",
    "condominios_router",
    "leads_router",
    "oportunidades_router",
]
