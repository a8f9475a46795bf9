"""Repository for the ``users`` collection."""
from typing import Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from todo_api.errors import RepositoryError, UserAlreadyExistsError, UserValidationError
from todo_api.models.user import User, is_valid_email, new_user, normalize_email

logger = logging.getLogger(__name__)


class UserRepository:
    collection = "users"

    def __init__(self, session: Session):
        self.session = session

    def find_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == normalize_email(email)).limit(1)
        try:
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            logger.error(f"Error finding user by email: {e}")
            raise RepositoryError("Failed to find user by email") from e

    def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            return self.session.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error finding user by id: {e}")
            raise RepositoryError("Failed to find user by id") from e

    def create(self, email: str) -> User:
        if not is_valid_email(normalize_email(email)):
            raise UserValidationError()
        if self.find_by_email(email) is not None:
            raise UserAlreadyExistsError()

        user = new_user(email)
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except IntegrityError as e:
            # Lost a race with a concurrent sign-up for the same email
            self.session.rollback()
            raise UserAlreadyExistsError() from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error creating user: {e}")
            raise RepositoryError("Failed to create user") from e
        return user

    def exists(self, email: str) -> bool:
        try:
            return self.find_by_email(email) is not None
        except RepositoryError as e:
            logger.error(f"Error checking if user exists: {e}")
            return False
