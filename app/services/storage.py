"""
Key-value storage behind the cart and favorites repositories.

`MemoryStorage` keeps values in a dict (tests, single-process demos);
`DatabaseStorage` persists them as JSON rows in the `stored_value` table.
"""
import copy
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from fastapi import Depends
from sqlmodel import Session
from app.core.config import settings
from app.db.session import get_session
from app.models.storage import StoredValue


class KeyValueStorage:
    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self):
        self._values: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        # Copies keep callers from mutating stored state in place
        return copy.deepcopy(self._values.get(key))

    def set(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class DatabaseStorage(KeyValueStorage):
    def __init__(self, session: Session):
        self.session = session

    def get(self, key: str) -> Optional[Any]:
        row = self.session.get(StoredValue, key)
        return row.value if row else None

    def set(self, key: str, value: Any) -> None:
        row = self.session.get(StoredValue, key)
        if row:
            row.value = value
            row.updated_at = datetime.now(timezone.utc)
        else:
            row = StoredValue(key=key, value=value)
        self.session.add(row)
        self.session.commit()

    def delete(self, key: str) -> None:
        row = self.session.get(StoredValue, key)
        if row:
            self.session.delete(row)
            self.session.commit()


# Shared in-process store for the "memory" backend
memory_storage = MemoryStorage()


def get_storage(session: Session = Depends(get_session)) -> KeyValueStorage:
    if settings.CART_STORAGE_BACKEND == "memory":
        return memory_storage
    return DatabaseStorage(session)
