from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager
import os

from app.config import config

_connect_args = {"check_same_thread": False} if config.SQLALCHEMY_DATABASE_URI.startswith("sqlite") else {}
engine = create_engine(config.SQLALCHEMY_DATABASE_URI, connect_args=_connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for every model
Base = declarative_base()


from sqlalchemy.orm import Session

@contextmanager
def transactional(db: Session):
    """
    A context manager for handling database transactions that is aware of the testing environment.

    Every automation run (task completion, delay scan, card move) issues several
    writes; they either land together or not at all.

    In production, it commits or rolls back the transaction.
    In testing, it only flushes the session, leaving the final commit/rollback
    to the test runner's fixture.
    """
    is_test_mode = os.getenv("TESTING", "false").lower() == "true"

    if not is_test_mode:
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
    else:
        # Testing behavior: no commits, just flush
        try:
            yield db
            db.flush()
        except Exception:
            db.rollback()
            raise
