# bookgram/services/pricing.py
"""
Line-item and order pricing.

A line's price is always derived from its unit price, quantity and (for
rentals) duration and deposit. Nothing here adjusts a previous price.
"""
from typing import Iterable, Optional

from bookgram.config import settings
from bookgram.errors import InvalidQuantityError
from bookgram.schemas.book_schemas import Book
from bookgram.schemas.cart_schemas import CartItem, CartItemType
from bookgram.utils.rounding import round_half_up


def line_price(item: CartItem) -> float:
    if item.type == CartItemType.BUY:
        return item.unit_price * item.quantity

    deposit = item.security_deposit or 0
    return (item.unit_price * item.duration_units + deposit) * item.quantity


def discount_percent(book: Book) -> int:
    """Informational only, never feeds into a line price."""
    if book.marked_price and book.marked_price > book.price_buy:
        return round_half_up((book.marked_price - book.price_buy) / book.marked_price * 100)
    return 0


def reprice(
    item: CartItem,
    quantity: Optional[int] = None,
    duration: Optional[int] = None,
) -> CartItem:
    """Return a copy of ``item`` with the new quantity/duration and a fresh price."""
    changes = {}

    if quantity is not None:
        if quantity < 1:
            raise InvalidQuantityError("Quantity must be at least 1.")
        changes["quantity"] = quantity

    if duration is not None:
        if item.type != CartItemType.RENT:
            raise InvalidQuantityError("Only rented items have a rent duration.")
        if duration < 1:
            raise InvalidQuantityError("Rent duration must be at least 1.")
        if item.rent_months is not None:
            changes["rent_months"] = duration
        else:
            changes["rent_weeks"] = duration

    updated = item.model_copy(update=changes)
    return updated.model_copy(update={"price": line_price(updated)})


def subtotal(items: Iterable[CartItem]) -> float:
    return sum(item.price for item in items)


def order_total(items: Iterable[CartItem], fee_rate: Optional[float] = None) -> float:
    rate = settings.order_fee_rate if fee_rate is None else fee_rate
    amount = subtotal(items)
    return amount + round_half_up(amount * rate)
