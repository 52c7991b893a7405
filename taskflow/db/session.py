# taskflow/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from taskflow.core.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """Yields one session per request and always closes it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
