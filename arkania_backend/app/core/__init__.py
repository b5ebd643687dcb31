"""Core module"""
from app.core.config import settings
from app.core.database import Base, get_async_db, init_db
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    verify_token,
    create_token_pair
)

__all__ = [
    "settings",
    "Base",
    "get_async_db",
    "init_db",
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "verify_token",
    "create_token_pair"
]
