"""
User profile management.
"""
from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from models.database import User
from error_handling.exceptions import ValidationError, NotFoundError
from error_handling.error_messages import NAME_REQUIRED, USER_NOT_FOUND
from error_handling.handlers import handle_errors


class UserService:

    def __init__(self, session: Session):
        self.session = session

    @handle_errors("list_users")
    def list_users(self) -> List[User]:
        return self.session.query(User).order_by(User.id).all()

    @handle_errors("get_user")
    def get_user(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND, resource="user", resource_id=user_id)
        return user

    @handle_errors("create_user")
    def create_user(
        self,
        name: Optional[str],
        email: Optional[str] = None,
        preferred_cuisine: Optional[str] = None,
    ) -> User:
        """
        Create a profile.

        Raises:
            ValidationError: If the name is missing or blank
        """
        if name is None or not name.strip():
            raise ValidationError(NAME_REQUIRED, field="name", value=name)

        user = User(
            name=name.strip(),
            email=(email or "").strip(),
            preferred_cuisine=(preferred_cuisine or "").strip(),
        )
        self.session.add(user)
        self.session.commit()

        logger.info(f"Created profile user={user.id}")
        return user

    @handle_errors("update_user")
    def update_user(
        self,
        user_id: int,
        name: Optional[str],
        email: Optional[str] = None,
        preferred_cuisine: Optional[str] = None,
    ) -> User:
        """
        Replace a profile's name, email and preferred cuisine.

        Raises:
            ValidationError: If the name is missing or blank
            NotFoundError: If the user does not exist
        """
        if name is None or not name.strip():
            raise ValidationError(NAME_REQUIRED, field="name", value=name)

        user = self.get_user(user_id)
        user.name = name.strip()
        user.email = (email or "").strip()
        user.preferred_cuisine = (preferred_cuisine or "").strip()
        self.session.commit()

        logger.info(f"Updated profile user={user.id}")
        return user
