"""User domain entity."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.catalog.entities.core._base import Entity

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
BCRYPT_MAX_PASSWORD_BYTES = 72


def _check_password_bytes(password: str | None) -> str | None:
    if password is not None and len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValueError(
            f"password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes when UTF-8 encoded"
        )
    return password


class User(Entity):
    """User account as exposed to callers.

    The password hash lives only on the table model and is never part of
    this entity.
    """

    email: str = Field(description="Unique email address")
    username: str = Field(description="Unique username")
    first_name: str | None = Field(default=None, description="User's first name")
    last_name: str | None = Field(default=None, description="User's last name")
    avatar: str | None = Field(default=None, description="Avatar URL")
    is_active: bool = Field(default=True, description="False once soft-deleted")

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.email == other.email
            and self.username == other.username
            and self.first_name == other.first_name
            and self.last_name == other.last_name
            and self.avatar == other.avatar
            and self.is_active == other.is_active
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((self.id, self.email, self.username))


class UserCreate(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class UserUpdate(BaseModel):
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    username: str | None = Field(default=None, min_length=1)
    password: str | None = Field(default=None, min_length=1)
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None
    is_active: bool | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return _check_password_bytes(value)
