"""Enumeration types for type-safe constants throughout the application."""

from enum import Enum


class Role(str, Enum):
    """Roles a user can hold."""

    DINER = "diner"
    FRANCHISEE = "franchisee"
    ADMIN = "admin"

    def __str__(self) -> str:
        """Return the string value of the enum."""
        return self.value
