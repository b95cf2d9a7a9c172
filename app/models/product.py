from typing import Optional, List, Dict
from sqlmodel import Field, SQLModel, Column
from pydantic import BaseModel, computed_field
from sqlalchemy import JSON
from datetime import datetime, timezone
from app.core.config import settings

def media_url(url: str) -> str:
    """Absolute URL for a stored image path; full URLs pass through."""
    if url.startswith(("http://", "https://", "data:")) or not settings.MEDIA_BASE_URL:
        return url
    return f"{settings.MEDIA_BASE_URL.rstrip('/')}/{url.lstrip('/')}"

class PricedOption(BaseModel):
    """A size or variant choice with its price delta over the base price."""
    name: str
    price: float = 0
    hex: Optional[str] = None  # colour swatch for colour-type variants

class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # Basic Info
    name: str = Field(index=True)
    slug: str = Field(index=True, unique=True)
    category: str = Field(index=True)
    description: Optional[str] = None

    # Pricing
    base_price: float = Field(ge=0)

    # Images
    images: List[str] = Field(default=[], sa_column=Column(JSON))
    variant_images: Dict[str, List[str]] = Field(default={}, sa_column=Column(JSON))

    # Options, stored as lists of PricedOption dicts
    sizes: List[dict] = Field(default=[], sa_column=Column(JSON))
    variants: List[dict] = Field(default=[], sa_column=Column(JSON))

    # Flags
    is_active: bool = Field(default=True)
    is_customizable: bool = Field(default=False)
    is_featured: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field
    @property
    def image_url(self) -> Optional[str]:
        if not self.images:
            return None
        return media_url(self.images[0])

    def size_options(self) -> List[PricedOption]:
        return [PricedOption(**option) for option in self.sizes or []]

    def variant_options(self) -> List[PricedOption]:
        return [PricedOption(**option) for option in self.variants or []]
