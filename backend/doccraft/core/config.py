"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ─────────────────────────────
    POSTGRES_USER: str = "doccraft"
    POSTGRES_PASSWORD: str = "doccraft"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "doccraft_db"

    @property
    def DATABASE_URL(self) -> str:
        """Async URL for app runtime (asyncpg)."""
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def DATABASE_URL_SYNC(self) -> str:
        """Sync URL for Alembic migrations (psycopg2)."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # ── Celery (Redis) ───────────────────────
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    # ── Asset Storage ─────────────────────────
    # "local" serves assets from UPLOADS_DIR, "s3" signs object URLs.
    STORAGE_BACKEND: str = "local"
    STORAGE_ENDPOINT: str = "http://localhost:9000"
    STORAGE_ACCESS_KEY: str = "minioadmin"
    STORAGE_SECRET_KEY: str = "minioadmin"
    STORAGE_BUCKET_NAME: str = "doccraft-assets"
    AWS_REGION: str = "ap-south-1"
    ASSET_URL_TTL_SECONDS: int = Field(default=3600, ge=1)

    # ── Build Workspace ───────────────────────
    UPLOADS_DIR: str = "uploads"
    SLUGS_DIR: str = "slugs"

    # ── Renderer ──────────────────────────────
    RENDERER_BINARY: str = "pandoc"
    PDF_ENGINE: str = "xelatex"
    # None disables the timeout (renderer may block forever)
    RENDER_TIMEOUT_SECONDS: float | None = 600.0

    # ── Instances ─────────────────────────────
    SEQUENCE_PADDING: int = Field(default=4, ge=1)

    # ── Application ───────────────────────────
    APP_ENV: str = "development"

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


settings = Settings()
