# tariffmarket/database/database.py

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from tariffmarket.core import settings, logger

Base = declarative_base()


def create_db_engine(url: str) -> Engine:
    """
    Crea el engine de SQLAlchemy. SQLite en memoria comparte una sola
    conexión entre hilos para que toda la simulación vea la misma BD.
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )
    return create_engine(
        url,
        pool_size=8,
        max_overflow=4,
        pool_timeout=20,
        pool_recycle=1800,
        pool_pre_ping=True,     # Verifica que la conexión esté viva antes de usarla
        pool_use_lifo=True,
        echo=False,
    )


engine = create_db_engine(settings.URL_DATABASE_SQL)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(bind: Engine = engine) -> None:
    """Crea las tablas del mercado si no existen."""
    # Los modelos deben estar importados para registrarse en Base.metadata
    import tariffmarket.models  # noqa: F401

    Base.metadata.create_all(bind=bind)
    logger.info("Tablas del mercado de tarifas listas.")
