"""User service: use cases over the users collection."""
from typing import Optional, Tuple

from sqlmodel import Session

from todo_api.errors import UserNotFoundError
from todo_api.models.user import User
from todo_api.repositories.user_repository import UserRepository
from todo_api.utils.logger import get_logger

logger = get_logger("todo_api.users")


class UserService:
    def __init__(self, session: Session):
        self.repository = UserRepository(session)

    def find_or_create(self, email: str) -> Tuple[User, bool]:
        """
        Look up a user by email for the login flow.

        Creation is never implicit: the client confirms sign-up and then calls
        ``create_user``. An unknown email therefore raises.

        Returns:
            ``(user, False)`` for a known email

        Raises:
            UserNotFoundError: If no user has this email
        """
        user = self.repository.find_by_email(email)
        if user is None:
            raise UserNotFoundError()
        return user, False

    def create_user(self, email: str) -> User:
        user = self.repository.create(email)
        logger.info("User created", user_id=user.id)
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        return self.repository.find_by_email(email)

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.repository.find_by_id(user_id)

    def exists(self, email: str) -> bool:
        return self.repository.exists(email)
