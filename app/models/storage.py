from typing import Any
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import JSON

class StoredValue(SQLModel, table=True):
    """Persistent backing row for the client-side cart and favorites repository."""
    __tablename__ = "stored_value"

    key: str = Field(primary_key=True)
    value: Any = Field(default=None, sa_column=Column(JSON))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
