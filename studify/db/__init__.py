from .session import Base, async_session, engine, get_db, normalize_database_url
from . import models  # noqa: F401

__all__ = ["Base", "async_session", "engine", "get_db", "normalize_database_url", "models"]
