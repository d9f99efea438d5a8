"""
Application configuration with environment-based settings.
"""
from functools import lru_cache
from typing import List, Union

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Main application settings."""

    # ============= Application Settings =============
    APP_NAME: str = "QBank Fill-in-the-Blank"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "Fill-in-the-blank question authoring and grading"
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")
    API_V1_PREFIX: str = "/v1"

    # ============= Security Settings =============
    SECRET_KEY: SecretStr = Field(default="dev-secret-change-me")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120

    # CORS Settings
    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # ============= Database Settings =============
    DATABASE_URL: str = Field(default="sqlite:///./fillblank.db")
    DATABASE_ECHO: bool = False
    TENANT_ID: str = Field(default="00000000-0000-0000-0000-000000000001")

    # ============= Blank Defaults =============
    TEXT_PLACEHOLDER_FORMAT: str = "Enter answer for blank {id}"
    TEXT_LABEL_FORMAT: str = "Blank {id}"
    DROPDOWN_LABEL_FORMAT: str = "Dropdown {id}"
    PREVIEW_MISSING_TOKEN: str = "___"
    MIN_DROPDOWN_OPTIONS: int = 2
    DEFAULT_QUESTION_POINTS: float = 1.0

    # ============= Logging Settings =============
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT.lower() == "production"

    def is_testing(self) -> bool:
        return self.ENVIRONMENT.lower() == "testing"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
