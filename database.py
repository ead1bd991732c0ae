# database.py
"""
Engine and request-scoped sessions for the ledger database.

Production runs on MS SQL Server (pymssql); tests and local runs may point
DATABASE_URL at SQLite. Schema changes go through Alembic.

     @router.get("/{tenant_id}")
     def get_tenant(tenant_id: int, db: Session = Depends(get_session)):
          ...
"""
import logging
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
     if url.startswith("sqlite"):
          # Sessions move between the threadpool workers FastAPI uses
          return {"connect_args": {"check_same_thread": False}}
     return {
          "pool_size": 5,
          "max_overflow": 10,
          "pool_timeout": 30,
          "pool_recycle": 1800,
          "pool_pre_ping": True,
     }


engine = create_engine(DATABASE_URL, echo=SQL_ECHO, **_engine_options(DATABASE_URL))

# expire_on_commit=False: reconciled tenants are read again after the snapshot commit
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency yielding one session per request.

     Commits when the handler returns normally and rolls back if it raises.
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def check_connection() -> bool:
     """Run a trivial query; False (and a logged traceback) if the database is unreachable."""
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
     except SQLAlchemyError:
          logger.exception("Database connection failed")
          return False
     return True
