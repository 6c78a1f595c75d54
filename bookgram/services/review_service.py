# bookgram/services/review_service.py
import logging
import uuid
from datetime import datetime
from typing import List

from bookgram.errors import DuplicateReviewError, InvalidRatingError, NotFoundError, RemoteStoreError
from bookgram.mappers import book_reviews_to_row
from bookgram.schemas.book_schemas import Book, Review
from bookgram.schemas.review_schemas import ReviewSubmit
from bookgram.services.catalog_service import refresh_book
from bookgram.services.profile_service import require_user
from bookgram.state import replace_book
from bookgram.utils.rounding import rounded_mean

logger = logging.getLogger(__name__)


def average_rating(reviews: List[Review]) -> float:
    return rounded_mean(r.rating for r in reviews)


def validate_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise InvalidRatingError(rating)
    return rating


async def _save(storefront, book: Book, reviews: List[Review]) -> Book:
    updated = book.model_copy(update={
        "reviews": reviews,
        "average_rating": average_rating(reviews),
    })
    storefront.update(replace_book, updated)

    try:
        # list and average in one write so they never disagree remotely
        await storefront.store.update("books", book.id, book_reviews_to_row(updated))
    except RemoteStoreError as e:
        logger.error(f"Review DB save failed for book {book.id}: {e.message}")

    return updated


async def add_review(storefront, book_id: str, data: ReviewSubmit) -> Book:
    user = require_user(storefront, "Please login to write a review.")
    validate_rating(data.rating)
    book = await refresh_book(storefront, book_id)

    # the list was just re-read from the store
    if any(r.user_id == user.id for r in book.reviews):
        raise DuplicateReviewError()

    review = Review(
        id=uuid.uuid4().hex,
        user_id=user.id,
        user_name=user.name,
        rating=data.rating,
        comment=data.comment,
        timestamp=datetime.utcnow().isoformat(),
    )
    return await _save(storefront, book, [review, *book.reviews])


async def edit_review(storefront, book_id: str, data: ReviewSubmit) -> Book:
    user = require_user(storefront, "Please login to edit your review.")
    validate_rating(data.rating)
    book = await refresh_book(storefront, book_id)

    existing = next((r for r in book.reviews if r.user_id == user.id), None)
    if existing is None:
        raise NotFoundError("You have not reviewed this book yet.")

    edited = existing.model_copy(update={
        "rating": data.rating,
        "comment": data.comment,
        "timestamp": datetime.utcnow().isoformat(),
    })
    reviews = [edited if r.user_id == user.id else r for r in book.reviews]
    return await _save(storefront, book, reviews)
