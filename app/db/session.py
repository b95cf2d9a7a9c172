from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session
from app.core.config import settings

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")

def build_engine(database_url: str):
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    # check_same_thread is needed for SQLite
    connect_args = {"check_same_thread": False}
    if database_url in IN_MEMORY_URLS:
        return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(database_url, connect_args=connect_args)

engine = build_engine(settings.DATABASE_URL)

def get_session():
    with Session(engine) as session:
        yield session

def create_db_and_tables(bind=None):
    SQLModel.metadata.create_all(bind or engine)
