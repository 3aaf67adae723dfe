"""User entity module.

This module contains all User-related classes organized by responsibility:
- User: Domain entity exposed to callers (no password)
- UserTable: Database persistence model holding the password hash
- UserRepository: Data access layer
"""

from .entity import User, UserCreate, UserUpdate
from .repository import UserRepository
from .table import UserTable

__all__ = ["User", "UserCreate", "UserRepository", "UserTable", "UserUpdate"]
