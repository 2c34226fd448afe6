"""Service for franchise and store administration."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pizza_service.enums import Role
from pizza_service.exceptions import ForbiddenError, NotFoundError, ValidationError
from pizza_service.extensions import db
from pizza_service.models import Franchise, Store, User, UserRole

logger = logging.getLogger(__name__)


class FranchiseService:
    """Service for franchise-related business operations."""

    @staticmethod
    def list_franchises(user: Optional[User] = None) -> List[Dict[str, Any]]:
        """All franchises with their stores; admins also see franchise admins."""
        include_admins = bool(user and user.is_admin)
        franchises = Franchise.query.order_by(Franchise.id.asc()).all()
        return [f.to_dict(include_admins=include_admins) for f in franchises]

    @staticmethod
    def get_user_franchises(user_id: int, acting_user: User) -> List[Dict[str, Any]]:
        if acting_user.id != user_id and not acting_user.is_admin:
            return []
        franchise_ids = [
            role.object_id
            for role in UserRole.query.filter_by(
                user_id=user_id, role=Role.FRANCHISEE.value
            )
            if role.object_id is not None
        ]
        if not franchise_ids:
            return []
        franchises = (
            Franchise.query.filter(Franchise.id.in_(franchise_ids))
            .order_by(Franchise.id.asc())
            .all()
        )
        return [f.to_dict(include_admins=True) for f in franchises]

    @staticmethod
    def create_franchise(name: str, admin_emails: Iterable[str]) -> Franchise:
        """
        Create a franchise and grant each listed user the franchisee role.

        Raises:
            ValidationError: If the name is missing or taken
            NotFoundError: If an admin email does not belong to a user
        """
        if not name:
            raise ValidationError("franchise name is required")
        if Franchise.query.filter_by(name=name).first() is not None:
            raise ValidationError("franchise already exists")

        admins = []
        for email in admin_emails:
            user = User.query.filter_by(email=email).first()
            if user is None:
                raise NotFoundError(f"unknown user for franchise admin {email} provided")
            admins.append(user)

        franchise = Franchise(name=name)
        db.session.add(franchise)
        db.session.flush()
        for user in admins:
            db.session.add(
                UserRole(user_id=user.id, role=Role.FRANCHISEE.value, object_id=franchise.id)
            )
        db.session.commit()

        logger.info(f"Created franchise {franchise.id}: {franchise.name}")
        return franchise

    @staticmethod
    def delete_franchise(franchise_id: int) -> None:
        franchise = db.session.get(Franchise, franchise_id)
        if franchise is None:
            raise NotFoundError("unknown franchise")
        UserRole.query.filter_by(
            role=Role.FRANCHISEE.value, object_id=franchise_id
        ).delete()
        db.session.delete(franchise)
        db.session.commit()
        logger.info(f"Deleted franchise {franchise_id}")

    @staticmethod
    def create_store(franchise_id: int, name: str, acting_user: User) -> Store:
        franchise = FranchiseService._get_managed_franchise(franchise_id, acting_user)
        if not name:
            raise ValidationError("store name is required")
        store = Store(franchise_id=franchise.id, name=name)
        db.session.add(store)
        db.session.commit()
        return store

    @staticmethod
    def delete_store(franchise_id: int, store_id: int, acting_user: User) -> None:
        FranchiseService._get_managed_franchise(franchise_id, acting_user)
        store = Store.query.filter_by(id=store_id, franchise_id=franchise_id).first()
        if store is None:
            raise NotFoundError("unknown store")
        db.session.delete(store)
        db.session.commit()

    @staticmethod
    def _get_managed_franchise(franchise_id: int, user: User) -> Franchise:
        franchise = db.session.get(Franchise, franchise_id)
        if franchise is None:
            raise NotFoundError("unknown franchise")
        is_franchise_admin = any(
            role.role == Role.FRANCHISEE.value and role.object_id == franchise.id
            for role in user.roles
        )
        if not user.is_admin and not is_franchise_admin:
            raise ForbiddenError("unable to manage this franchise")
        return franchise
