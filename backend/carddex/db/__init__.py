"""
Database module.
"""
from carddex.db.base import Base
from carddex.db.session import async_session_maker, engine, get_db

__all__ = ["Base", "engine", "async_session_maker", "get_db"]
