from typing import Annotated, List, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Tomatoes API"
    VERSION: str = "1.0.0"
    # tomatoes are served at /tomatoes by default
    API_PREFIX: str = ""

    # "sql" for the database backed store, "memory" for a throwaway one
    STORE_BACKEND: Literal["sql", "memory"] = "sql"

    # full SQLAlchemy url, takes precedence over the postgres credentials
    DATABASE_URL: str | None = None
    DB_ECHO: bool = False

    # postgres credentials
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "tomatoes"
    POSTGRES_USER: str = "tomatoes"
    POSTGRES_PASSWORD: str = "tomatoes"

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    # prevent unauthorized access
    RESTRICT_HOSTS: bool = False
    TRUSTED_HOSTS: Annotated[List[str], NoDecode] = []

    @field_validator('CORS_ORIGINS', 'TRUSTED_HOSTS', mode='before')
    @classmethod
    def decode_comma_separated(cls, raw: str | list[str]) -> list[str]:
        if type(raw) is str:
            return [item.strip() for item in raw.split(',') if item.strip()]
        else:
            return raw

settings = Settings()  # type: ignore
