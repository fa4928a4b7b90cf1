"""
Base CRUD Class
Base class for document store CRUD operations.

Works against the Firestore client and the LocalStore stand-in alike:
both expose ``collection().document().get/set/update/delete`` and
``where``/``order_by``/``offset``/``limit`` query chaining.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from app.utils.dates import utcnow


class BaseCRUD(ABC):
    """
    Base CRUD class for document operations.

    Generic base class for database operations with pagination and filtering.
    """

    def __init__(self, db: Any):
        """
        Initialize CRUD with a store client.

        Args:
            db: Firestore client or LocalStore instance
        """
        self.db = db

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Get collection name. Must be implemented by subclass."""

    def get_collection(self) -> Any:
        return self.db.collection(self.collection_name)

    @staticmethod
    def _snapshot_to_dict(doc: Any) -> Dict[str, Any]:
        data = doc.to_dict()
        data["id"] = doc.id
        return data

    def _query(self, filters: Optional[List[tuple]] = None) -> Any:
        query = self.get_collection()
        for field, operator, value in filters or []:
            query = query.where(field, operator, value)
        return query

    def create(self, data: Dict[str, Any], doc_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a new document.

        Args:
            data: Document data dictionary
            doc_id: Explicit document ID, generated when omitted

        Returns:
            Stored document including its ``id``
        """
        now = utcnow()
        data.setdefault("created_at", now)
        data.setdefault("updated_at", now)
        doc_ref = self.get_collection().document(doc_id) if doc_id else self.get_collection().document()
        data["id"] = doc_ref.id
        doc_ref.set(data)
        return data

    def get_by_id(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """
        Get document by ID.

        Returns:
            Document data or None if not found
        """
        if not doc_id:
            return None
        doc = self.get_collection().document(doc_id).get()
        if doc.exists:
            return self._snapshot_to_dict(doc)
        return None

    def get_many(self, doc_ids: List[str]) -> List[Dict[str, Any]]:
        """Fetch several documents by ID, skipping missing ones and keeping order."""
        items = []
        for doc_id in doc_ids:
            item = self.get_by_id(doc_id)
            if item is not None:
                items.append(item)
        return items

    def update(self, doc_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Update a document.

        Returns:
            The updated document, or None if it does not exist
        """
        if not self.exists(doc_id):
            return None
        data["updated_at"] = utcnow()
        self.get_collection().document(doc_id).update(data)
        return self.get_by_id(doc_id)

    def delete(self, doc_id: str) -> bool:
        """
        Delete a document.

        Returns:
            True if deleted, False if not found
        """
        if not self.exists(doc_id):
            return False
        self.get_collection().document(doc_id).delete()
        return True

    def find(
        self,
        filters: Optional[List[tuple]] = None,
        order_by: Optional[str] = None,
        direction: str = "ASCENDING",
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return every document matching ``filters``."""
        query = self._query(filters)
        if order_by:
            query = query.order_by(order_by, direction=direction)
        if limit:
            query = query.limit(limit)
        return [self._snapshot_to_dict(doc) for doc in query.get()]

    def find_one(self, filters: List[tuple]) -> Optional[Dict[str, Any]]:
        docs = self._query(filters).limit(1).get()
        return self._snapshot_to_dict(docs[0]) if docs else None

    def list(
        self,
        filters: Optional[List[tuple]] = None,
        page: int = 1,
        page_size: int = 10,
        order_by: Optional[str] = None,
        direction: str = "ASCENDING",
    ) -> Dict[str, Any]:
        """
        List documents with filtering and pagination.

        Args:
            filters: List of (field, operator, value) tuples for filtering
            page: Page number (1-indexed)
            page_size: Items per page
            order_by: Field to order results by
            direction: Sort direction (ASCENDING or DESCENDING)

        Returns:
            Dictionary with items, total count, pagination info
        """
        query = self._query(filters)
        total = len(query.get())

        if order_by:
            query = query.order_by(order_by, direction=direction)

        offset = (page - 1) * page_size
        docs = query.offset(offset).limit(page_size).get()

        return {
            "items": [self._snapshot_to_dict(doc) for doc in docs],
            "total": total,
            "page": page,
            "pages": math.ceil(total / page_size) if page_size else 0,
            "limit": page_size,
        }

    def count(self, filters: Optional[List[tuple]] = None) -> int:
        return len(self._query(filters).get())

    def exists(self, doc_id: str) -> bool:
        if not doc_id:
            return False
        return self.get_collection().document(doc_id).get().exists


def paginate(items: List[Dict[str, Any]], page: int, page_size: int) -> Dict[str, Any]:
    """Paginate an already filtered and sorted list held in memory."""
    total = len(items)
    start = (page - 1) * page_size
    return {
        "items": items[start:start + page_size],
        "total": total,
        "page": page,
        "pages": math.ceil(total / page_size) if page_size else 0,
        "limit": page_size,
    }
