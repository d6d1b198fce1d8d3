from sqlalchemy import Engine
from sqlmodel import create_engine, SQLModel

from core.settings import Settings
import models  # noqa: F401  registers the tables on SQLModel.metadata

def get_engine_url(settings: Settings) -> str:
    if settings.DATABASE_URL:
        return settings.DATABASE_URL

    return "postgresql+psycopg://{username}:{password}@{host}:{port}/{db_name}".format(
        username=settings.POSTGRES_USER,
        password=settings.POSTGRES_PASSWORD,
        host=settings.POSTGRES_HOST,
        port=settings.POSTGRES_PORT,
        db_name=settings.POSTGRES_DB,
    )

def create_db_engine(settings: Settings) -> Engine:
    url = get_engine_url(settings)
    connect_args = {}
    if url.startswith("postgresql"):
        connect_args["connect_timeout"] = 5  # Add connection timeout
    elif url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        url,
        echo=settings.DB_ECHO,  # Enable SQL query logging
        pool_pre_ping=True,  # Enable connection health checks
        connect_args=connect_args,
    )

def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)
