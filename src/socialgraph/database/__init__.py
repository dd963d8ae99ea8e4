"""
Database module for socialgraph
"""

from .connection import get_async_session, get_session_factory, init_database

__all__ = ["get_async_session", "get_session_factory", "init_database"]
