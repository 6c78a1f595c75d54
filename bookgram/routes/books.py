from fastapi import APIRouter, Depends
from typing import Optional

from bookgram.schemas.book_schemas import Book, BookCreate
from bookgram.services import catalog_service, profile_service
from bookgram.services.pricing import discount_percent
from bookgram.dependencies.storefront import get_storefront
from bookgram.storefront import Storefront


router = APIRouter()


def book_response(book: Book):
    data = book.model_dump(by_alias=True)
    data["discountPercent"] = discount_percent(book)
    data["inStock"] = book.quantity > 0
    return data


@router.get("/")
async def list_books(category: Optional[str] = None, storefront: Storefront = Depends(get_storefront)):
    books = storefront.state.books
    if category and category != "All":
        books = [b for b in books if b.category == category]
    return [book_response(b) for b in books]


@router.post("/refresh")
async def refresh_books(storefront: Storefront = Depends(get_storefront)):
    books = await catalog_service.load_books(storefront)
    return {"message": "Catalogue refreshed", "count": len(books)}


@router.get("/{book_id}")
async def book_detail(book_id: str, storefront: Storefront = Depends(get_storefront)):
    book = catalog_service.open_book(storefront, book_id)
    return book_response(book)


@router.post("/")
async def create_listing(data: BookCreate, storefront: Storefront = Depends(get_storefront)):
    book = await profile_service.list_book(storefront, data)
    return {"message": "Book listed", "book": book_response(book)}


@router.post("/{book_id}/favorite")
async def toggle_favorite(book_id: str, storefront: Storefront = Depends(get_storefront)):
    catalog_service.get_book(storefront, book_id)
    user = await profile_service.toggle_favorite(storefront, book_id)
    return {"favoriteBooks": user.favorite_books, "isFavorite": book_id in user.favorite_books}
