from typing import Any

from sqlalchemy import func
from sqlmodel import Session, col, select

from src.catalog.entities.core._base import utc_now
from src.catalog.entities.core.user.entity import User
from src.catalog.entities.core.user.table import UserTable


class UserRepository:
    """Data-access layer for users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, values: dict[str, Any]) -> User:
        row = UserTable(**values)
        self._session.add(row)
        self._session.flush()
        return User.model_validate(row)

    def get(self, user_id: int) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(UserTable.email == email)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row)

    def get_by_username(self, username: str) -> User | None:
        statement = select(UserTable).where(UserTable.username == username)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row)

    def get_password_hash(self, user_id: int) -> str | None:
        row = self._session.get(UserTable, user_id)
        return row.password if row is not None else None

    def list_page(self, offset: int, limit: int) -> tuple[list[User], int]:
        statement = (
            select(UserTable)
            .order_by(col(UserTable.created_at).desc(), col(UserTable.id).desc())
            .offset(offset)
            .limit(limit)
        )
        users = [User.model_validate(row) for row in self._session.exec(statement)]
        total = self._session.exec(select(func.count()).select_from(UserTable)).one()
        return users, total

    def update(self, user_id: int, changes: dict[str, Any]) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        for field_name, value in changes.items():
            setattr(row, field_name, value)
        row.updated_at = utc_now()
        self._session.add(row)
        self._session.flush()
        return User.model_validate(row)

    def delete(self, user_id: int) -> bool:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True
