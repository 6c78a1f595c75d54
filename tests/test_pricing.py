import pytest

from bookgram.errors import InvalidQuantityError
from bookgram.schemas.cart_schemas import CartItem, CartItemType
from bookgram.services.pricing import discount_percent, line_price, order_total, reprice
from bookgram.utils.rounding import round_half_up
from tests.conftest import make_book


def cart_item(**overrides):
    data = dict(
        id="1", book_id="book-1", title="Dune", author="Frank Herbert",
        type=CartItemType.BUY, quantity=1, unit_price=350,
    )
    data.update(overrides)
    item = CartItem(**data)
    return item.model_copy(update={"price": line_price(item)})


@pytest.mark.parametrize("quantity", [1, 2, 7])
def test_buy_price_is_unit_price_times_quantity(quantity):
    item = cart_item(quantity=quantity)
    assert item.price == 350 * quantity


def test_rent_price_includes_duration_and_deposit():
    item = cart_item(type=CartItemType.RENT, unit_price=50, rent_weeks=3, quantity=2, security_deposit=100)
    assert item.price == (50 * 3 + 100) * 2


def test_rent_price_example_and_duration_change():
    item = cart_item(type=CartItemType.RENT, unit_price=50, rent_weeks=3, quantity=2)
    assert item.price == 300

    longer = reprice(item, duration=4)
    assert longer.rent_weeks == 4
    assert longer.price == 400


def test_monthly_rent_uses_months_as_duration():
    item = cart_item(type=CartItemType.RENT, unit_price=200, rent_months=2, quantity=1)
    assert item.price == 400
    assert reprice(item, duration=3).rent_months == 3
    assert reprice(item, duration=3).price == 600


def test_reprice_recomputes_from_unit_price_not_previous_price():
    item = cart_item(quantity=2).model_copy(update={"price": 9999})
    assert reprice(item, quantity=3).price == 1050


@pytest.mark.parametrize("quantity", [0, -1])
def test_quantity_below_one_is_rejected(quantity):
    with pytest.raises(InvalidQuantityError):
        reprice(cart_item(), quantity=quantity)


def test_duration_below_one_is_rejected():
    item = cart_item(type=CartItemType.RENT, unit_price=50, rent_weeks=2)
    with pytest.raises(InvalidQuantityError):
        reprice(item, duration=0)


def test_duration_change_on_buy_item_is_rejected():
    with pytest.raises(InvalidQuantityError):
        reprice(cart_item(), duration=2)


def test_discount_percent_example():
    assert discount_percent(make_book(marked_price=500, price_buy=350)) == 30


def test_no_discount_when_marked_price_not_above_selling_price():
    assert discount_percent(make_book(marked_price=350, price_buy=350)) == 0
    assert discount_percent(make_book(marked_price=0, price_buy=350)) == 0


def test_discount_never_changes_line_price():
    book = make_book(marked_price=500, price_buy=350)
    item = cart_item(unit_price=book.price_buy, quantity=2)
    assert item.price == 700


def test_order_total_adds_rounded_five_percent_fee():
    assert order_total([cart_item(unit_price=1000)]) == 1050


def test_order_total_rounds_half_up():
    # 5% of 10 is 0.5, which rounds up
    assert order_total([cart_item(unit_price=10)]) == 11


def test_round_half_up_to_one_decimal():
    assert round_half_up(4.25, 1) == 4.3
    assert round_half_up(4.333333, 1) == 4.3
    assert round_half_up(2.5) == 3
