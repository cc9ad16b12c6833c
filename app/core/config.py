from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pydantic import field_validator

class Settings(BaseSettings):
    # Database settings
    POSTGRES_USER: str = 'invoice_user'
    POSTGRES_PASSWORD: str = 'invoice_pass'
    POSTGRES_DB: str = 'invoice_db'
    POSTGRES_HOST: str = 'postgres'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # Sobrescribe las variables POSTGRES_* si se define

    # Storage backend: "sql", "memory" o "auto" (sql con respaldo en memoria)
    STORAGE_BACKEND: str = 'auto'

    # Redis settings
    REDIS_HOST: str = 'redis'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    # JWT settings (tokens emitidos por el proveedor de autenticación)
    APP_SECRET_STRING: str = 'your-super-secret-key-here-change-in-production-2024'
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    AUTH_DISABLED: bool = False
    DEMO_USER_ID: str = 'user_1'

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Invoicing
    DEFAULT_CURRENCY: str = 'USD'
    INVOICE_NUMBER_PREFIX: str = 'INV'

    # Email settings
    EMAIL_SMTP_SERVER: str = 'smtp.gmail.com'
    EMAIL_SMTP_PORT: int = 587
    EMAIL_USE_TLS: bool = True
    EMAIL_USERNAME: str = ''
    EMAIL_PASSWORD: str = ''
    EMAIL_FROM: str = ''
    EMAIL_FROM_NAME: str = 'Invoice Builder'
    COMPANY_NAME: str = 'Invoice Builder'
    FRONTEND_URL: str = 'http://localhost:3000'

    # Reminders
    REMINDER_DISPATCH_HOUR: int = 8

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            if self.DATABASE_URL.startswith("postgres://"):
                return self.DATABASE_URL.replace("postgres://", "postgresql+psycopg2://", 1)
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def redis_url(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", "EMAIL_USE_TLS", "AUTH_DISABLED", mode="before")
    @classmethod
    def parse_bool(cls, v):
        if isinstance(v, str):
            return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
        return bool(v)

    @field_validator("STORAGE_BACKEND", mode="before")
    @classmethod
    def parse_storage_backend(cls, v):
        value = str(v).lower().strip('"').strip("'")
        if value not in ("sql", "memory", "auto"):
            raise ValueError("STORAGE_BACKEND debe ser 'sql', 'memory' o 'auto'")
        return value

settings = Settings()
