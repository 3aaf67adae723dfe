"""User database table model."""

from sqlmodel import Field

from src.catalog.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "user_account"

    email: str = Field(unique=True, index=True)
    username: str = Field(unique=True, index=True)
    password: str
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None
    is_active: bool = Field(default=True)
