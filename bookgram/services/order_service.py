# bookgram/services/order_service.py
"""
Order placement.

There is no transaction across the order insert, the stock updates, the
profile save and the cart clear. Each step is attempted in turn, a failing
step is logged and recorded in ``failed_steps``, and the later steps still
run. A stock update that fails remotely has its local decrement undone so
the local catalogue matches the store; the order itself is not compensated.
"""
import asyncio
import logging
from collections import OrderedDict
from typing import Any, Dict, List

from bookgram.constants.order_status import CONFIRMED
from bookgram.constants.views import View
from bookgram.errors import EmptyCartError, RemoteStoreError
from bookgram.mappers import order_from_row, order_to_row
from bookgram.schemas.cart_schemas import CartItem, CartItemType
from bookgram.schemas.orders_schemas import OrderPlacement
from bookgram.services import profile_service
from bookgram.services.catalog_service import refresh_book
from bookgram.services.pricing import order_total
from bookgram.state import find_book, stock_decrement, with_cart, with_user, with_view

logger = logging.getLogger(__name__)

STEP_ORDER = "order"
STEP_STOCK = "stock"
STEP_PROFILE = "profile"
STEP_CART = "cart"


def purchased_quantities(items: List[CartItem]) -> Dict[str, int]:
    """Total BUY quantity per book, in cart order."""
    totals: Dict[str, int] = OrderedDict()
    for item in items:
        if item.type == CartItemType.BUY:
            totals[item.book_id] = totals.get(item.book_id, 0) + item.quantity
    return totals


async def _decrement_stock(storefront, items: List[CartItem], failed_steps: List[str]):
    changes = []
    for book_id, purchased in purchased_quantities(items).items():
        if find_book(storefront.state, book_id) is None:
            continue
        # decrement from the stored quantity, not this session's copy
        await refresh_book(storefront, book_id)
        change = storefront.apply(stock_decrement(storefront.state, book_id, purchased))
        changes.append((book_id, change, find_book(storefront.state, book_id).quantity))

    results = await asyncio.gather(
        *(storefront.store.update("books", book_id, {"quantity": quantity})
          for book_id, _, quantity in changes),
        return_exceptions=True,
    )

    for (book_id, change, _), result in zip(changes, results):
        if isinstance(result, RemoteStoreError):
            logger.error(f"Error updating stock for book {book_id}: {result.message}")
            storefront.revert(change)
            failed_steps.append(f"{STEP_STOCK}:{book_id}")
        elif isinstance(result, BaseException):
            raise result


async def place_order(storefront, address: Dict[str, Any], payment_method: str) -> OrderPlacement:
    user = profile_service.require_user(storefront, "Please login to complete purchase.")

    items = list(storefront.state.cart)
    if not items:
        raise EmptyCartError()

    total = order_total(items)
    failed_steps: List[str] = []
    order = None

    try:
        row = await storefront.store.insert_one(
            "orders",
            order_to_row(user.id, items, total, payment_method, address, CONFIRMED),
        )
        order = order_from_row(row)
        logger.info(f"Order {order.id} saved for user {user.id}, total {total}")
    except RemoteStoreError as e:
        logger.error(f"Order DB insert error: {e.message}")
        failed_steps.append(STEP_ORDER)

    await _decrement_stock(storefront, items, failed_steps)

    bought = list(user.bought_books)
    rented = list(user.rented_books)
    for item in items:
        if item.type == CartItemType.BUY:
            bought.append(item.book_id)
        else:
            rented.append(item.book_id)

    updated_user = user.model_copy(update={"bought_books": bought, "rented_books": rented})
    storefront.update(with_user, updated_user)
    try:
        await profile_service.persist_user(storefront, updated_user)
    except RemoteStoreError as e:
        logger.error(f"Failed to update profile after order: {e.message}")
        failed_steps.append(STEP_PROFILE)

    try:
        await storefront.store.delete_where("cart_items", {"user_id": user.id})
    except RemoteStoreError as e:
        logger.error(f"Error clearing cart DB: {e.message}")
        failed_steps.append(STEP_CART)

    storefront.update(with_cart, [])
    storefront.update(with_view, View.ORDER_SUCCESS)

    return OrderPlacement(order=order, total_amount=total, failed_steps=failed_steps)
