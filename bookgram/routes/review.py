from fastapi import APIRouter, Depends

from bookgram.routes.books import book_response
from bookgram.schemas.review_schemas import ReviewSubmit
from bookgram.services import review_service
from bookgram.dependencies.storefront import get_storefront
from bookgram.storefront import Storefront


router = APIRouter()


@router.post("/books/{book_id}")
async def create_review(book_id: str, data: ReviewSubmit, storefront: Storefront = Depends(get_storefront)):
    book = await review_service.add_review(storefront, book_id, data)
    return {"message": "Review added", "book": book_response(book)}


@router.put("/books/{book_id}")
async def update_review(book_id: str, data: ReviewSubmit, storefront: Storefront = Depends(get_storefront)):
    book = await review_service.edit_review(storefront, book_id, data)
    return {"message": "Review updated successfully!", "book": book_response(book)}
