import logging

from bookgram.errors import NotFoundError, RemoteStoreError
from bookgram.mappers import book_from_row
from bookgram.state import find_book, prepend_book, replace_book, select_book, with_books

logger = logging.getLogger(__name__)


async def load_books(storefront):
    """Replace the catalogue with the remote one, newest listing first."""
    try:
        rows = await storefront.store.select("books", order_by="created_at", descending=True)
    except RemoteStoreError as e:
        # keep whatever is already loaded
        logger.error(f"Using local books, catalogue load failed: {e.message}")
        return storefront.state.books

    storefront.update(with_books, [book_from_row(row) for row in rows])
    logger.info(f"Loaded {len(rows)} books")
    return storefront.state.books


def get_book(storefront, book_id: str):
    book = find_book(storefront.state, book_id)
    if book is None:
        raise NotFoundError(f"Book {book_id} not found")
    return book


async def refresh_book(storefront, book_id: str):
    """
    Adopt the stored copy of one book before acting on it.

    Other sessions change stock and reviews, so anything that writes a book
    back starts from this. When the store cannot be reached the local copy
    is used as is.
    """
    try:
        row = await storefront.store.get("books", book_id)
    except RemoteStoreError as e:
        logger.error(f"Using local copy of book {book_id}: {e.message}")
        return get_book(storefront, book_id)

    if row is None:
        return get_book(storefront, book_id)

    book = book_from_row(row)
    if find_book(storefront.state, book_id) is None:
        storefront.update(prepend_book, book)
    else:
        storefront.update(replace_book, book)
    return book


def open_book(storefront, book_id: str):
    book = get_book(storefront, book_id)
    storefront.update(select_book, book)
    return book
