"""
User CRUD Operations
Database operations for user management.
"""

from typing import Any, Dict, List, Optional

from app.crud.base import BaseCRUD
from app.models.user import UserModel


class UserCRUD(BaseCRUD):
    """CRUD operations for user documents."""

    @property
    def collection_name(self) -> str:
        return "users"

    def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """
        Get user by email (case-insensitive).

        Returns:
            User document data or None if not found
        """
        return self.find_one([("email", "==", email.strip().lower())])

    def create_user(self, user: UserModel) -> Dict[str, Any]:
        return self.create(user.to_dict())

    def get_authors(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """Map of user ID to user document for the given IDs."""
        return {user["id"]: user for user in self.get_many(sorted(set(filter(None, user_ids))))}
