import bcrypt
from loguru import logger
from sqlmodel import Session

from src.catalog.core.exceptions import CatalogValidationError, NotFoundError
from src.catalog.core.models import Pagination, UserPage, page_offset
from src.catalog.core.services.database.db_utils import store_errors
from src.catalog.entities.core.user import User, UserCreate, UserRepository, UserUpdate

BCRYPT_ROUNDS = 10
_NULLABLE_FIELDS = {"first_name", "last_name", "avatar"}


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class UserService:
    def __init__(self, db_session: Session):
        self._db_session = db_session
        self._user_repo = UserRepository(db_session)

    def create_user(self, data: UserCreate) -> User:
        """Create a user with a hashed password.

        Raises:
            ConflictError: If the email or username is already taken.
        """
        values = data.model_dump()
        values["password"] = hash_password(data.password)

        with store_errors(self._db_session, "creating user"):
            user = self._user_repo.create(values)
            self._db_session.commit()

        logger.info("Created user {}", user.id)
        return user

    def get_all_users(self, page: int, limit: int) -> UserPage:
        offset = page_offset(page, limit)
        with store_errors(self._db_session, "listing users"):
            users, total = self._user_repo.list_page(offset, limit)
        return UserPage(users=users, pagination=Pagination.build(page, limit, total))

    def get_user_by_id(self, user_id: int) -> User:
        with store_errors(self._db_session, "fetching user"):
            user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_user_by_email(self, email: str) -> User | None:
        with store_errors(self._db_session, "fetching user by email"):
            return self._user_repo.get_by_email(email)

    def get_user_by_username(self, username: str) -> User | None:
        with store_errors(self._db_session, "fetching user by username"):
            return self._user_repo.get_by_username(username)

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        changes = data.model_dump(exclude_unset=True)
        cleared = [
            name
            for name, value in changes.items()
            if value is None and name not in _NULLABLE_FIELDS
        ]
        if cleared:
            raise CatalogValidationError(f"Fields cannot be null: {', '.join(cleared)}")
        if "password" in changes:
            changes["password"] = hash_password(changes["password"])

        with store_errors(self._db_session, "updating user"):
            user = self._user_repo.update(user_id, changes)
            if user is None:
                raise NotFoundError("User", user_id)
            self._db_session.commit()

        logger.info("Updated user {}", user_id)
        return user

    def delete_user(self, user_id: int) -> User:
        """Soft delete: the account is kept but deactivated."""
        with store_errors(self._db_session, "deactivating user"):
            user = self._user_repo.update(user_id, {"is_active": False})
            if user is None:
                raise NotFoundError("User", user_id)
            self._db_session.commit()

        logger.info("Deactivated user {}", user_id)
        return user

    def hard_delete_user(self, user_id: int) -> None:
        with store_errors(self._db_session, "deleting user"):
            if not self._user_repo.delete(user_id):
                raise NotFoundError("User", user_id)
            self._db_session.commit()

        logger.info("Deleted user {}", user_id)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return verify_password(plain_password, hashed_password)

    def check_credentials(self, user_id: int, plain_password: str) -> bool:
        """Verify a password against the stored hash for a user."""
        with store_errors(self._db_session, "reading password hash"):
            hashed = self._user_repo.get_password_hash(user_id)
        if hashed is None:
            raise NotFoundError("User", user_id)
        return verify_password(plain_password, hashed)
