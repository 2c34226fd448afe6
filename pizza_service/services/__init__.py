"""Service layer for business logic."""

from .user_service import UserService
from .franchise_service import FranchiseService
from .order_service import FactoryError, OrderService

__all__ = [
    "UserService",
    "FranchiseService",
    "OrderService",
    "FactoryError",
]
