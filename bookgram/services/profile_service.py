# bookgram/services/profile_service.py
import logging
import uuid

from bookgram.errors import AuthRequiredError, RemoteStoreError
from bookgram.mappers import book_to_row, user_from_auth, user_from_row, user_to_row
from bookgram.schemas.book_schemas import Book, BookCreate
from bookgram.schemas.user_schemas import ProfileUpdate, User
from bookgram.state import prepend_book, with_user

logger = logging.getLogger(__name__)


def require_user(storefront, message: str = "Please login to continue.") -> User:
    if storefront.user is None:
        raise AuthRequiredError(message)
    return storefront.user


async def load_profile(storefront, auth_user) -> User:
    """Load the profile row for ``auth_user``, falling back to the auth account."""
    try:
        rows = await storefront.store.select("profiles", {"id": auth_user.id})
    except RemoteStoreError as e:
        logger.error(f"Profile lookup failed for {auth_user.id}: {e.message}")
        rows = []

    user = user_from_row(rows[0], auth_user) if rows else user_from_auth(auth_user)
    storefront.update(with_user, user)
    return user


async def persist_user(storefront, user: User):
    await storefront.store.upsert("profiles", user_to_row(user))


async def update_user(storefront, user: User) -> User:
    """Adopt ``user`` locally, then save it. A failed save is only logged."""
    storefront.update(with_user, user)
    try:
        await persist_user(storefront, user)
    except RemoteStoreError as e:
        logger.error(f"Failed to update profile: {e.message}")
    return user


async def update_profile(storefront, data: ProfileUpdate) -> User:
    user = require_user(storefront)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    return await update_user(storefront, user.model_copy(update=changes))


async def toggle_favorite(storefront, book_id: str) -> User:
    user = require_user(storefront, "Please login to save favourites.")

    if book_id in user.favorite_books:
        favorites = [b for b in user.favorite_books if b != book_id]
    else:
        favorites = [*user.favorite_books, book_id]

    return await update_user(storefront, user.model_copy(update={"favorite_books": favorites}))


async def list_book(storefront, data: BookCreate) -> Book:
    """Put a book up for sale under the current user."""
    user = require_user(storefront, "Please login to list a book.")

    book = Book(
        id=uuid.uuid4().hex,
        owner_id=user.id,
        reviews=[],
        average_rating=0,
        **data.model_dump(exclude={"marked_price"}),
        marked_price=data.marked_price if data.marked_price is not None else data.price_buy,
    )

    storefront.update(prepend_book, book)
    await update_user(
        storefront,
        user.model_copy(update={"listed_books": [book.id, *user.listed_books]}),
    )

    try:
        await storefront.store.insert_one("books", book_to_row(book))
    except RemoteStoreError as e:
        logger.error(f"Error saving book to DB: {e.message}")

    return book
