"""Service for user registration, login and account updates."""

import logging
from typing import Optional, Tuple

from werkzeug.security import check_password_hash, generate_password_hash

from pizza_service.auth import generate_token
from pizza_service.enums import Role
from pizza_service.exceptions import (
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from pizza_service.extensions import db
from pizza_service.metrics import events
from pizza_service.models import AuthToken, User, UserRole

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related business operations."""

    @staticmethod
    def get_user_by_email(email: str) -> Optional[User]:
        return User.query.filter_by(email=email).first()

    @staticmethod
    def add_user(name: str, email: str, password: str, roles=(Role.DINER,)) -> User:
        """
        Create a user with the given roles.

        Args:
            name: Display name
            email: Unique login email
            password: Plain-text password, stored hashed
            roles: Iterable of Role values, or (Role, object_id) pairs

        Returns:
            Created User object

        Raises:
            ValidationError: If the email is already registered
        """
        if UserService.get_user_by_email(email) is not None:
            raise ValidationError("email already registered")

        user = User(name=name, email=email, password_hash=generate_password_hash(password))
        for role in roles:
            object_id = None
            if isinstance(role, tuple):
                role, object_id = role
            user.roles.append(UserRole(role=str(role), object_id=object_id))

        db.session.add(user)
        db.session.commit()
        logger.info(f"Created user {user.id}: {user.email}")
        return user

    @staticmethod
    def register(name: str, email: str, password: str) -> Tuple[User, str]:
        """Register a diner and log them in."""
        if not name or not email or not password:
            raise ValidationError("name, email, and password are required")

        user = UserService.add_user(name, email, password)
        token = UserService._issue_token(user)
        events.increment("authAttempts_successful")
        events.increment("activeUsers")
        return user, token

    @staticmethod
    def login(email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate a user and issue a new token.

        Raises:
            UnauthorizedError: If the credentials do not match
        """
        user = UserService.get_user_by_email(email or "")
        if user is None or not check_password_hash(user.password_hash, password or ""):
            events.increment("authAttempts_failed")
            logger.info(f"Failed login attempt for {email}")
            raise UnauthorizedError("unknown user")

        token = UserService._issue_token(user)
        events.increment("authAttempts_successful")
        events.increment("activeUsers")
        return user, token

    @staticmethod
    def logout(token: str) -> None:
        auth_token = db.session.get(AuthToken, token)
        if auth_token is None:
            raise UnauthorizedError("unauthorized")
        db.session.delete(auth_token)
        db.session.commit()
        events.decrement("activeUsers")

    @staticmethod
    def update_user(
        user_id: int,
        acting_user: User,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        """
        Update a user's email and/or password.

        Raises:
            ForbiddenError: If the caller is neither the user nor an admin
            NotFoundError: If the user does not exist
        """
        if acting_user.id != user_id and not acting_user.is_admin:
            raise ForbiddenError("unauthorized")

        user = db.session.get(User, user_id)
        if user is None:
            raise NotFoundError("unknown user")

        if email:
            existing = UserService.get_user_by_email(email)
            if existing is not None and existing.id != user.id:
                raise ValidationError("email already registered")
            user.email = email
        if password:
            user.password_hash = generate_password_hash(password)
        db.session.commit()
        return user

    @staticmethod
    def ensure_default_admin(name: str, email: str, password: str) -> Optional[User]:
        """Seed the admin account on first start."""
        if not email or not password:
            return None
        user = UserService.get_user_by_email(email)
        if user is not None:
            return user
        logger.info(f"Creating default admin user {email}")
        return UserService.add_user(name, email, password, roles=(Role.ADMIN,))

    @staticmethod
    def _issue_token(user: User) -> str:
        token = generate_token()
        db.session.add(AuthToken(token=token, user_id=user.id))
        db.session.commit()
        return token
