"""
Core module - Configuration, database, security, errors and utilities.
"""

from volunteer_api.core.config import get_settings, settings
from volunteer_api.core.database import Base, close_db, get_db, init_db
from volunteer_api.core.errors import ErrorKind, FieldError, ServiceError
from volunteer_api.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Errors
    "ErrorKind",
    "FieldError",
    "ServiceError",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
