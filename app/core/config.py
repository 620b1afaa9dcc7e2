from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    AUTH_SECRET: str | None = None

    TOKEN_TTL_SECONDS: int = 60 * 60 * 24 * 5  # 5 dias
    TOKEN_ISSUER: str = "atestado-stock-app"
    TOKEN_AUDIENCE: str = "atestado-stock-users"

    # Cloudflare R2 (S3)
    R2_ENDPOINT: str | None = None
    R2_BUCKET: str | None = None
    R2_ACCESS_KEY_ID: str | None = None
    R2_SECRET_ACCESS_KEY: str | None = None
    R2_PUBLIC_BASE_URL: str | None = None

    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    AUTO_CREATE_TABLES: bool = False
    LOG_LEVEL: str = "INFO"

    BOOTSTRAP_ADMIN_EMAIL: str | None = None
    BOOTSTRAP_ADMIN_PASSWORD: str | None = None
    BOOTSTRAP_ADMIN_NAME: str = "Administrador"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
