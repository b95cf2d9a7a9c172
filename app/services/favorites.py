from typing import List, Optional
from pydantic import BaseModel
from app.services.storage import KeyValueStorage

FAVORITES_STORAGE_KEY = "printdukan_favorites"


class FavoriteItem(BaseModel):
    id: str
    name: str
    image: Optional[str] = None
    price: float
    category: Optional[str] = None
    is_customizable: bool = False


class FavoritesRepository:
    def __init__(self, storage: KeyValueStorage, owner: str):
        self.storage = storage
        self.key = f"{FAVORITES_STORAGE_KEY}:{owner}"

    def list(self) -> List[FavoriteItem]:
        return [FavoriteItem(**item) for item in self.storage.get(self.key) or []]

    def is_favorite(self, product_id) -> bool:
        return any(item.id == str(product_id) for item in self.list())

    def toggle(self, product: FavoriteItem) -> bool:
        """Add or remove a product. Returns True if it is now a favorite."""
        favorites = self.list()
        remaining = [item for item in favorites if item.id != product.id]
        now_favorite = len(remaining) == len(favorites)
        if now_favorite:
            remaining.append(product)
        self.storage.set(self.key, [item.model_dump() for item in remaining])
        return now_favorite
