from contextlib import contextmanager
from sqlmodel import SQLModel, create_engine, Session
from finagent.config import settings
import os

os.makedirs(settings.DATA_DIR, exist_ok=True)
_connect_args = {"check_same_thread": False} if settings.DB_URL.startswith("sqlite") else {}
engine = create_engine(settings.DB_URL, echo=False, connect_args=_connect_args)

def get_session():
    with Session(engine) as session:
        yield session

@contextmanager
def session_scope():
    """Session for work outside a request, e.g. background generation runs."""
    with Session(engine) as session:
        yield session

def init_db():
    SQLModel.metadata.create_all(engine)
