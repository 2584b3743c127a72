import os
from pydantic import BaseModel, Field


class Settings(BaseModel):
    database_url: str = "sqlite:///./data/links.db"
    code_length: int = Field(default=6, ge=1)
    max_attempts: int = Field(default=10, ge=1)
    min_slug_length: int = Field(default=3, ge=1)
    oauth_provider_id: str = "hca"
    user_header: str = "X-User-Id"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Собирает настройки из переменных окружения."""
        environ = os.environ if environ is None else environ
        names = {
            "database_url": "DATABASE_URL",
            "code_length": "SHORTENER_CODE_LENGTH",
            "max_attempts": "SHORTENER_MAX_ATTEMPTS",
            "min_slug_length": "SHORTENER_MIN_SLUG_LENGTH",
            "oauth_provider_id": "SHORTENER_OAUTH_PROVIDER",
            "user_header": "SHORTENER_USER_HEADER",
            "log_level": "SHORTENER_LOG_LEVEL",
        }
        values = {field: environ[var] for field, var in names.items() if environ.get(var)}
        return cls(**values)
