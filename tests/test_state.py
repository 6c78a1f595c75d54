from bookgram.constants.views import View
from bookgram.schemas.cart_schemas import CartItem, CartItemType
from bookgram.state import (
    AppState,
    cart_addition,
    find_book,
    replace_book,
    select_book,
    signed_out,
    stock_decrement,
)
from tests.conftest import make_book


def test_replace_book_updates_open_detail_view():
    book = make_book()
    state = select_book(AppState(books=[book]), book)
    assert state.view == View.BOOK_DETAILS

    updated = book.model_copy(update={"average_rating": 4.5})
    new_state = replace_book(state, updated)

    assert new_state.selected_book.average_rating == 4.5
    assert new_state.books[0].average_rating == 4.5
    # the earlier snapshot is untouched
    assert state.selected_book.average_rating == 0


def test_stock_decrement_floors_at_zero_and_reverts_exactly():
    state = AppState(books=[make_book(quantity=2)])

    change = stock_decrement(state, "book-1", 5)
    after = change.apply(state)
    assert find_book(after, "book-1").quantity == 0

    assert find_book(change.revert(after), "book-1").quantity == 2


def test_cart_addition_revert_removes_only_that_item():
    other = CartItem(id="1", book_id="b", title="t", author="a", type=CartItemType.BUY, unit_price=1, price=1)
    added = other.model_copy(update={"id": "local-2"})
    state = AppState(cart=[other])

    change = cart_addition(added)
    after = change.apply(state)
    assert [i.id for i in after.cart] == ["1", "local-2"]
    assert [i.id for i in change.revert(after).cart] == ["1"]


def test_signed_out_clears_user_and_cart():
    item = CartItem(id="1", book_id="b", title="t", author="a", type=CartItemType.BUY, unit_price=1, price=1)
    state = signed_out(AppState(cart=[item], books=[make_book()]))
    assert state.cart == []
    assert state.user is None
    assert len(state.books) == 1
