from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from encrypted_attributes.config import settings


class Base(DeclarativeBase):
    pass


def create_session_factory(url: str | None = None) -> sessionmaker:
    """Create the engine, make sure all tables exist, and return a session factory."""
    engine = create_engine(url or settings.DATABASE_URL, pool_pre_ping=True)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)
