"""
File-backed data store that persists across process restarts.
Stands in for Firestore with a JSON-file-backed dict store.
Used when no Firebase credentials are found, and by the test-suite
in memory-only mode.
"""

import copy
import json
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from app.utils.logger import get_logger

logger = get_logger(__name__)

_DATETIME_TAG = "__datetime__"


def _json_serial(obj):
    """JSON serializer for objects not serializable by default."""
    if isinstance(obj, datetime):
        return {_DATETIME_TAG: obj.isoformat()}
    raise TypeError(f"Type {type(obj)} not serializable")


def _json_hook(obj: dict):
    if len(obj) == 1 and _DATETIME_TAG in obj:
        return datetime.fromisoformat(obj[_DATETIME_TAG])
    return obj


def _matches(doc_val: Any, op: str, value: Any) -> bool:
    if op == "==":
        return doc_val == value
    if op == "!=":
        return doc_val != value
    if op == "in":
        return doc_val in value
    if op == "not-in":
        return doc_val not in value
    if op == "array_contains":
        return isinstance(doc_val, list) and value in doc_val
    if op == "array_contains_any":
        return isinstance(doc_val, list) and any(v in doc_val for v in value)
    if doc_val is None:
        return False
    if op == ">=":
        return doc_val >= value
    if op == "<=":
        return doc_val <= value
    if op == ">":
        return doc_val > value
    if op == "<":
        return doc_val < value
    raise ValueError(f"Unsupported filter operator: {op}")


class LocalStore:
    """Data store that mimics the subset of the Firestore client the app uses."""

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self.collections: Dict[str, Dict[str, dict]] = {}
        self._lock = threading.Lock()
        self._data_dir = Path(data_dir) if data_dir else None

        if self._data_dir is not None:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self._load_data()

    @property
    def persistent(self) -> bool:
        return self._data_dir is not None

    def _load_data(self):
        """Load every *.json collection file in the data directory."""
        for path in sorted(self._data_dir.glob("*.json")):
            with open(path) as f:
                items = json.load(f, object_hook=_json_hook)
            self.collections[path.stem] = {
                item.get("id", str(uuid.uuid4())): item for item in items
            }
            logger.info("Loaded %d documents into '%s'", len(items), path.stem)

    def _persist_collection(self, name: str):
        """Write a collection to disk as JSON."""
        path = self._data_dir / f"{name}.json"
        items = list(self.collections.get(name, {}).values())
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(items, f, indent=2, default=_json_serial)
        tmp_path.replace(path)

    def _persist(self, collection_name: str):
        """Thread-safe persist after write operations."""
        if self._data_dir is None:
            return
        with self._lock:
            try:
                self._persist_collection(collection_name)
            except OSError as e:
                logger.warning("Failed to persist collection '%s': %s", collection_name, e)

    def collection(self, name: str) -> "CollectionRef":
        if name not in self.collections:
            self.collections[name] = {}
        return CollectionRef(self, name)

    def clear(self) -> None:
        """Drop all in-memory data (used by tests)."""
        self.collections.clear()


class CollectionRef:
    """Mimics Firestore collection reference."""

    def __init__(self, store: LocalStore, name: str):
        self._store = store
        self._data = store.collections[name]
        self._name = name
        self._filters: List[tuple] = []
        self._order_by: List[tuple] = []
        self._limit_val: Optional[int] = None
        self._offset_val: int = 0

    def _clone(self) -> "CollectionRef":
        new_ref = CollectionRef(self._store, self._name)
        new_ref._filters = list(self._filters)
        new_ref._order_by = list(self._order_by)
        new_ref._limit_val = self._limit_val
        new_ref._offset_val = self._offset_val
        return new_ref

    def document(self, doc_id: Optional[str] = None) -> "DocumentRef":
        return DocumentRef(self._store, self._data, self._name, doc_id or uuid.uuid4().hex)

    def where(self, field: str, op: str, value) -> "CollectionRef":
        new_ref = self._clone()
        new_ref._filters.append((field, op, value))
        return new_ref

    def order_by(self, field: str, direction: str = "ASCENDING") -> "CollectionRef":
        new_ref = self._clone()
        new_ref._order_by.append((field, direction))
        return new_ref

    def limit(self, count: int) -> "CollectionRef":
        new_ref = self._clone()
        new_ref._limit_val = count
        return new_ref

    def offset(self, count: int) -> "CollectionRef":
        new_ref = self._clone()
        new_ref._offset_val = count
        return new_ref

    def get(self) -> List["DocumentSnapshot"]:
        results = list(self._data.values())

        for field, op, value in self._filters:
            results = [doc for doc in results if _matches(doc.get(field), op, value)]

        # Stable sorts applied last-key-first give multi-key ordering
        for field, direction in reversed(self._order_by):
            present = [d for d in results if d.get(field) is not None]
            missing = [d for d in results if d.get(field) is None]
            present.sort(key=lambda d: d.get(field), reverse=direction == "DESCENDING")
            results = present + missing

        if self._offset_val:
            results = results[self._offset_val:]
        if self._limit_val:
            results = results[: self._limit_val]

        return [DocumentSnapshot(doc.get("id", ""), doc) for doc in results]


class DocumentRef:
    """Mimics Firestore document reference."""

    def __init__(self, store: LocalStore, collection_data: dict, collection_name: str, doc_id: str):
        self._store = store
        self._data = collection_data
        self._name = collection_name
        self._id = doc_id

    @property
    def id(self):
        return self._id

    def get(self) -> "DocumentSnapshot":
        return DocumentSnapshot(self._id, self._data.get(self._id))

    def set(self, data: dict, merge: bool = False):
        data = copy.deepcopy(data)
        if merge and self._id in self._data:
            self._data[self._id].update(data)
        else:
            data["id"] = self._id
            self._data[self._id] = data
        self._store._persist(self._name)

    def update(self, data: dict):
        if self._id not in self._data:
            raise KeyError(f"No document to update: {self._name}/{self._id}")
        self._data[self._id].update(copy.deepcopy(data))
        self._store._persist(self._name)

    def delete(self):
        self._data.pop(self._id, None)
        self._store._persist(self._name)


class DocumentSnapshot:
    """Mimics Firestore document snapshot."""

    def __init__(self, doc_id: str, data: Optional[dict]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict]:
        return copy.deepcopy(self._data)

    def get(self, field: str, default=None):
        if self._data is None:
            return default
        return self._data.get(field, default)


# ── Singleton ────────────────────────────────────────────────────

_local_store: Optional[LocalStore] = None


def get_local_store() -> LocalStore:
    """Get or create the singleton LocalStore instance."""
    global _local_store
    if _local_store is None:
        from app.config import get_settings
        _local_store = LocalStore(get_settings().local_data_dir)
    return _local_store
