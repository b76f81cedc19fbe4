"""Configurações da aplicação - carrega variáveis do .env"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",  # carrega local
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # ===========================================
    # CORE
    # ===========================================
    environment: str = "development"
    database_url: str
    secret_key: str
    access_token_expire_minutes: int = 1440
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Fuso usado para decidir se uma chave está atrasada
    timezone: str = "America/Sao_Paulo"

    # ===========================================
    # ADMIN INICIAL
    # ===========================================
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    admin_name: str = "Administrador"

    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # ===========================================
    # CHAVES
    # ===========================================
    default_agency: str = "Matriz"

    # ===========================================
    # IMÓVEIS IMPORTADOS (planilha)
    # ===========================================
    autosave_delay_seconds: float = 1.0
    imported_page_sizes: List[int] = [10, 20, 50, 100]
    imported_responsible_options: List[str] = [
        "Vazio",
        "Alessandro Gomes",
        "Tamires Torres",
        "Moisez Torres",
        "Elias Torres",
    ]

    # ===========================================
    # PROPRIEDADES
    # ===========================================
    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def admin_configured(self) -> bool:
        """Verifica se o admin inicial está configurado."""
        return bool(self.admin_email and self.admin_password)


@lru_cache
def get_settings() -> Settings:
    return Settings()
