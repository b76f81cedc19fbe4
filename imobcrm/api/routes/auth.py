"""
ROTAS: AUTENTICAÇÃO
====================

Login do corretor e dados do perfil logado.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.infrastructure.database import get_db
from imobcrm.infrastructure.services.auth_service import authenticate_profile, create_profile_token
from imobcrm.domain.entities import Profile
from imobcrm.api.schemas import LoginRequest, TokenResponse, ProfileResponse
from imobcrm.api.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Autenticação"])


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Valida email e senha e devolve o token de sessão."""
    profile = await authenticate_profile(db, payload.email, payload.password)

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email ou senha incorretos",
        )

    if not profile.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Corretor inativo. Fale com a administração da imobiliária.",
        )

    logger.info(f"Login: {profile.email} ({profile.agencia or 'sem agência'})")

    return TokenResponse(
        access_token=create_profile_token(profile),
        user=ProfileResponse.model_validate(profile),
    )


@router.get("/me", response_model=ProfileResponse)
async def get_me(profile: Profile = Depends(get_current_user)):
    return ProfileResponse.model_validate(profile)
