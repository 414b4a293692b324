# app/infrastructure/persistence/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

import config

Base = declarative_base()


def create_session_factory(database_url: str = None) -> sessionmaker:
    """
    Crea el engine y la fábrica de sesiones, y asegura que las tablas existan.
    La URL sale de DATABASE_URL en el archivo .env.
    """
    engine = create_engine(database_url or config.DATABASE_URL)
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
