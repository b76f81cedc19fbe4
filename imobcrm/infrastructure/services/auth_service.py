"""
SERVIÇO DE AUTENTICAÇÃO
========================

Login dos corretores: senha com salt e token JWT de sessão.

O token leva o id do perfil (``sub``) e a agência; é o id que as rotas
usam para filtrar chaves, imóveis e leads do corretor.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from imobcrm.config import get_settings
from imobcrm.domain.entities import Profile

logger = logging.getLogger(__name__)
settings = get_settings()

ALGORITHM = "HS256"


# =============================================================================
# SENHAS
# =============================================================================

def hash_password(password: str) -> str:
    """SHA-256 com salt aleatório, gravado como ``salt$hash``."""
    salt = secrets.token_hex(16)
    digest = hashlib.sha256((password + salt).encode()).hexdigest()
    return f"{salt}${digest}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    salt, sep, digest = hashed_password.partition("$")
    if not sep:
        return False
    candidate = hashlib.sha256((plain_password + salt).encode()).hexdigest()
    return secrets.compare_digest(candidate, digest)


# =============================================================================
# TOKEN DE SESSÃO
# =============================================================================

def create_profile_token(profile: Profile, expires_delta: Optional[timedelta] = None) -> str:
    """Token de sessão do corretor (expira em ``access_token_expire_minutes``)."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {
        "sub": str(profile.id),
        "email": profile.email,
        "agencia": profile.agencia,
        "exp": expire,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def profile_id_from_token(token: str) -> Optional[int]:
    """
    Id do perfil dono do token.

    Returns:
        None se o token é inválido, expirou ou não traz ``sub``
    """
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None

    subject = claims.get("sub")
    if subject is None or not str(subject).isdigit():
        return None
    return int(subject)


# =============================================================================
# LOGIN
# =============================================================================

async def authenticate_profile(db: AsyncSession, email: str, password: str) -> Optional[Profile]:
    """
    Perfil com este email e senha (ativo ou não).

    O email é comparado sem diferenciar maiúsculas.
    """
    result = await db.execute(
        select(Profile).where(func.lower(Profile.email) == email.strip().lower())
    )
    profile = result.scalar_one_or_none()

    if profile is None or not verify_password(password, profile.password_hash):
        logger.warning(f"Falha de login para {email}")
        return None
    return profile
