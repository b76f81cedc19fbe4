"""
DEPENDÊNCIAS DAS ROTAS
=======================

Corretor autenticado a partir do token Bearer.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.infrastructure.database import get_db
from imobcrm.infrastructure.services.auth_service import profile_id_from_token
from imobcrm.domain.entities import Profile

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """
    Perfil do corretor logado.

    Todas as consultas de chaves, imóveis, condomínios, leads e
    oportunidades filtram pelo id deste perfil.
    """
    profile_id = profile_id_from_token(credentials.credentials)
    if profile_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sessão expirada. Faça login novamente.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await db.execute(
        select(Profile).where(Profile.id == profile_id).where(Profile.active.is_(True))
    )
    profile = result.scalar_one_or_none()

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Corretor não encontrado ou inativo",
        )

    return profile
