from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from urllib.parse import quote_plus
import os


class Settings(BaseSettings):
    # === DATABASE ===
    DATABASE_URL: str = Field(default="", description="SQLAlchemy database URL")
    PGUSER: Optional[str] = Field(default=None, description="PostgreSQL user (used when DATABASE_URL is empty)")
    PGPASSWORD: Optional[str] = Field(default=None, description="PostgreSQL password")
    PGHOST: Optional[str] = Field(default=None, description="PostgreSQL host")
    PGPORT: int = Field(default=5432, description="PostgreSQL port")
    PGDATABASE: Optional[str] = Field(default=None, description="PostgreSQL database name")

    # === SERVER ===
    ENVIRONMENT: str = Field(default="development", description="Deployment environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")
    HOST: str = Field(default="0.0.0.0", description="Bind address for run.py")
    PORT: int = Field(default=4000, description="Bind port for run.py")
    CORS_ORIGIN: str = Field(
        default="https://pitch2angels.com,https://www.pitch2angels.com",
        description="Comma separated list of allowed CORS origins"
    )

    # === UPLOADS ===
    UPLOAD_DIR: str = Field(default=os.path.join("static", "uploads"), description="Directory for uploaded files")
    PUBLIC_BASE_URL: str = Field(default="", description="Absolute URL prefix for served uploads")
    MAX_UPLOAD_SIZE: int = Field(default=10 * 1024 * 1024, description="Maximum upload size in bytes")

    # === ADMIN ===
    ADMIN_API_KEY: Optional[str] = Field(default=None, description="Shared key required by /api/admin routes")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def database_url(self) -> str:
        url = self.DATABASE_URL.strip()
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        if url:
            return url

        if self.PGHOST and self.PGDATABASE:
            user = quote_plus(self.PGUSER or "")
            password = quote_plus(self.PGPASSWORD or "")
            auth = f"{user}:{password}@" if user else ""
            return f"postgresql://{auth}{self.PGHOST}:{self.PGPORT}/{self.PGDATABASE}"

        return "sqlite:///./pitch2angels.db"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


# Create settings instance
settings = Settings()
