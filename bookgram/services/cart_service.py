# bookgram/services/cart_service.py
"""
Cart reconciliation.

The local cart changes first and the record store follows. Only a failed
add is rolled back; a failed remove or update is logged and left for the
next full fetch to reconcile.
"""
import logging
import uuid
from typing import List

from bookgram.errors import InsufficientStockError, InvalidQuantityError, NotFoundError, RemoteStoreError
from bookgram.mappers import cart_item_changes_to_row, cart_item_from_row, cart_item_to_row
from bookgram.schemas.book_schemas import Book
from bookgram.schemas.cart_schemas import CartAddRequest, CartItem, CartItemType
from bookgram.services.catalog_service import refresh_book
from bookgram.services.pricing import line_price, reprice
from bookgram.state import (
    cart_addition,
    find_book,
    find_cart_item,
    remove_cart_item,
    replace_cart_item,
    with_cart,
)

logger = logging.getLogger(__name__)

LOCAL_ID_PREFIX = "local-"


def is_local_id(item_id: str) -> bool:
    return item_id.startswith(LOCAL_ID_PREFIX)


def _remote_key(item_id: str) -> int:
    return int(item_id)


def build_cart_item(book: Book, request: CartAddRequest) -> CartItem:
    if request.quantity < 1:
        raise InvalidQuantityError("Quantity must be at least 1.")

    if request.type == CartItemType.BUY:
        item = CartItem(
            id=f"{LOCAL_ID_PREFIX}{uuid.uuid4().hex}",
            book_id=book.id,
            title=book.title,
            author=book.author,
            image_url=book.images[0] if book.images else book.image_url,
            type=CartItemType.BUY,
            quantity=request.quantity,
            unit_price=book.price_buy,
        )
    else:
        rent_weeks = request.rent_weeks
        if request.rent_months is None and rent_weeks is None:
            rent_weeks = 1
        for duration in (rent_weeks, request.rent_months):
            if duration is not None and duration < 1:
                raise InvalidQuantityError("Rent duration must be at least 1.")

        item = CartItem(
            id=f"{LOCAL_ID_PREFIX}{uuid.uuid4().hex}",
            book_id=book.id,
            title=book.title,
            author=book.author,
            image_url=book.images[0] if book.images else book.image_url,
            type=CartItemType.RENT,
            quantity=request.quantity,
            unit_price=book.price_rent,
            rent_weeks=rent_weeks,
            rent_months=request.rent_months if rent_weeks is None else None,
            security_deposit=book.security_deposit,
        )

    return item.model_copy(update={"price": line_price(item)})


async def fetch_cart(storefront) -> List[CartItem]:
    """Replace the local cart wholesale with the user's remote cart."""
    user = storefront.user
    if user is None:
        return storefront.state.cart

    rows = await storefront.store.select(
        "cart_items", {"user_id": user.id}, order_by="created_at"
    )
    items = [cart_item_from_row(row) for row in rows]
    storefront.update(with_cart, items)
    return items


async def add_to_cart(storefront, request: CartAddRequest) -> CartItem:
    book = await refresh_book(storefront, request.book_id)

    if request.type == CartItemType.BUY and request.quantity > book.quantity:
        raise InsufficientStockError(book.title, book.quantity, request.quantity)

    item = build_cart_item(book, request)
    change = storefront.apply(cart_addition(item))

    user = storefront.user
    if user is None:
        # guest carts stay local
        return item

    try:
        row = await storefront.store.insert_one("cart_items", cart_item_to_row(item, user.id))
    except RemoteStoreError as e:
        logger.error(f"Error adding to cart DB, rolling back {item.id}: {e.message}")
        storefront.revert(change)
        raise

    saved = item.model_copy(update={"id": str(row["id"])})
    storefront.update(replace_cart_item, item.id, saved)
    logger.info(f"{saved.title} added to cart as item {saved.id}")
    return saved


async def remove_from_cart(storefront, item_id: str) -> None:
    if find_cart_item(storefront.state, item_id) is None:
        raise NotFoundError("Cart item not found")

    storefront.update(remove_cart_item, item_id)

    if storefront.user is None or is_local_id(item_id):
        return

    try:
        await storefront.store.delete("cart_items", _remote_key(item_id))
    except RemoteStoreError as e:
        # next fetch_cart reconciles
        logger.error(f"Error removing cart item {item_id} remotely: {e.message}")


async def _push_item(storefront, item: CartItem):
    if storefront.user is None or is_local_id(item.id):
        return
    try:
        await storefront.store.update(
            "cart_items", _remote_key(item.id), cart_item_changes_to_row(item)
        )
    except RemoteStoreError as e:
        logger.error(f"Error updating cart item {item.id} remotely: {e.message}")


async def update_quantity(storefront, item_id: str, quantity: int) -> CartItem:
    item = find_cart_item(storefront.state, item_id)
    if item is None:
        raise NotFoundError("Cart item not found")

    if item.type == CartItemType.BUY and quantity > item.quantity:
        book = find_book(storefront.state, item.book_id)
        if book is not None:
            book = await refresh_book(storefront, item.book_id)
        if book is not None and quantity > book.quantity:
            raise InsufficientStockError(book.title, book.quantity, quantity)

    updated = reprice(item, quantity=quantity)
    storefront.update(replace_cart_item, item_id, updated)
    await _push_item(storefront, updated)
    return updated


async def update_rent_duration(storefront, item_id: str, duration: int) -> CartItem:
    item = find_cart_item(storefront.state, item_id)
    if item is None:
        raise NotFoundError("Cart item not found")

    updated = reprice(item, duration=duration)
    storefront.update(replace_cart_item, item_id, updated)
    await _push_item(storefront, updated)
    return updated
