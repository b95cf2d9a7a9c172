from typing import List
from fastapi import APIRouter, Depends
from app.services.favorites import FavoriteItem, FavoritesRepository
from app.services.storage import KeyValueStorage, get_storage

router = APIRouter()

def get_favorites_repository(owner: str, storage: KeyValueStorage = Depends(get_storage)) -> FavoritesRepository:
    return FavoritesRepository(storage, owner)

@router.get("/{owner}", response_model=List[FavoriteItem])
def list_favorites(favorites: FavoritesRepository = Depends(get_favorites_repository)):
    return favorites.list()

@router.post("/{owner}/toggle")
def toggle_favorite(product: FavoriteItem, favorites: FavoritesRepository = Depends(get_favorites_repository)):
    """Add a product to the wishlist, or remove it if already there"""
    return {"id": product.id, "favorite": favorites.toggle(product)}
