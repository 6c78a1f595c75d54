import pytest

from bookgram.errors import InsufficientStockError, InvalidQuantityError, NotFoundError, RemoteStoreError
from bookgram.schemas.cart_schemas import CartAddRequest, CartItemType
from bookgram.services import cart_service


def buy(book_id="book-1", quantity=1):
    return CartAddRequest(book_id=book_id, type=CartItemType.BUY, quantity=quantity)


def rent(book_id="book-1", weeks=None, months=None, quantity=1):
    return CartAddRequest(book_id=book_id, type=CartItemType.RENT, quantity=quantity,
                          rent_weeks=weeks, rent_months=months)


async def test_guest_add_stays_local(storefront, store):
    item = await cart_service.add_to_cart(storefront, buy(quantity=2))

    assert cart_service.is_local_id(item.id)
    assert item.price == 700
    assert storefront.state.cart == [item]
    assert await store.select("cart_items") == []


async def test_buy_above_stock_is_rejected_and_cart_unchanged(signed_in, store):
    await cart_service.add_to_cart(signed_in, buy("book-2"))
    before = signed_in.state.cart

    with pytest.raises(InsufficientStockError):
        await cart_service.add_to_cart(signed_in, buy("book-2", quantity=2))

    assert signed_in.state.cart == before
    assert len(await store.select("cart_items")) == 1


async def test_signed_in_add_adopts_server_id(signed_in, store):
    item = await cart_service.add_to_cart(signed_in, buy())

    rows = await store.select("cart_items", {"user_id": signed_in.user.id})
    assert len(rows) == 1
    assert item.id == str(rows[0]["id"])
    assert [i.id for i in signed_in.state.cart] == [item.id]


async def test_failed_remote_add_rolls_back(signed_in, store):
    store.fail("insert_one", "cart_items")

    with pytest.raises(RemoteStoreError):
        await cart_service.add_to_cart(signed_in, buy())

    assert signed_in.state.cart == []


async def test_rent_add_snapshots_price_and_deposit(signed_in):
    item = await cart_service.add_to_cart(signed_in, rent("book-2", weeks=2))

    assert item.unit_price == 60
    assert item.security_deposit == 100
    assert item.price == (60 * 2 + 100) * 1


async def test_rent_defaults_to_one_week(storefront):
    item = await cart_service.add_to_cart(storefront, rent())
    assert item.rent_weeks == 1
    assert item.price == 50


async def test_rent_is_not_limited_by_stock(storefront):
    item = await cart_service.add_to_cart(storefront, rent("book-2", weeks=1, quantity=3))
    assert item.quantity == 3


async def test_add_rejects_zero_quantity(storefront):
    with pytest.raises(InvalidQuantityError):
        await cart_service.add_to_cart(storefront, buy(quantity=0))
    assert storefront.state.cart == []


async def test_add_unknown_book(storefront):
    with pytest.raises(NotFoundError):
        await cart_service.add_to_cart(storefront, buy("missing"))


async def test_remove_is_local_first_and_not_rolled_back(signed_in, store):
    item = await cart_service.add_to_cart(signed_in, buy())
    store.fail("delete", "cart_items")

    await cart_service.remove_from_cart(signed_in, item.id)

    assert signed_in.state.cart == []
    # remote row survives until the next fetch reconciles
    assert len(await store.select("cart_items")) == 1
    await cart_service.fetch_cart(signed_in)
    assert [i.id for i in signed_in.state.cart] == [item.id]


async def test_remove_deletes_remote_row(signed_in, store):
    item = await cart_service.add_to_cart(signed_in, buy())
    await cart_service.remove_from_cart(signed_in, item.id)
    assert await store.select("cart_items") == []


async def test_update_quantity_reprices_and_persists(signed_in, store):
    item = await cart_service.add_to_cart(signed_in, buy())

    updated = await cart_service.update_quantity(signed_in, item.id, 3)

    assert updated.price == 1050
    row = (await store.select("cart_items"))[0]
    assert row["quantity"] == 3
    assert row["price"] == 1050


async def test_update_quantity_above_stock_is_rejected(signed_in):
    item = await cart_service.add_to_cart(signed_in, buy())

    with pytest.raises(InsufficientStockError):
        await cart_service.update_quantity(signed_in, item.id, 6)

    assert signed_in.state.cart[0].quantity == 1


async def test_update_quantity_below_one_is_a_no_op(signed_in):
    item = await cart_service.add_to_cart(signed_in, buy(quantity=2))

    with pytest.raises(InvalidQuantityError):
        await cart_service.update_quantity(signed_in, item.id, 0)

    assert signed_in.state.cart[0].quantity == 2


async def test_update_quantity_remote_failure_keeps_local_change(signed_in, store):
    item = await cart_service.add_to_cart(signed_in, buy())
    store.fail("update", "cart_items")

    updated = await cart_service.update_quantity(signed_in, item.id, 2)

    assert signed_in.state.cart == [updated]
    assert (await store.select("cart_items"))[0]["quantity"] == 1


async def test_rent_duration_change(signed_in, store):
    item = await cart_service.add_to_cart(signed_in, rent(weeks=3, quantity=2))
    assert item.price == 300

    updated = await cart_service.update_rent_duration(signed_in, item.id, 4)

    assert updated.price == 400
    row = (await store.select("cart_items"))[0]
    assert row["rent_weeks"] == 4
    assert row["price"] == 400


async def test_fetch_twice_is_idempotent(signed_in):
    await cart_service.add_to_cart(signed_in, buy())
    await cart_service.add_to_cart(signed_in, rent("book-2", weeks=2))

    first = await cart_service.fetch_cart(signed_in)
    second = await cart_service.fetch_cart(signed_in)

    assert first == second
    assert [i.price for i in first] == [350, 220]


async def test_sign_in_replaces_guest_cart(storefront, store):
    await storefront.auth.sign_up("Ada Reader", "ada@example.com", "secret-pass")
    await cart_service.add_to_cart(storefront, buy())
    await storefront.sign_out()

    await cart_service.add_to_cart(storefront, buy("book-2"))
    assert [i.book_id for i in storefront.state.cart] == ["book-2"]

    await storefront.auth.sign_in("ada@example.com", "secret-pass")

    assert [i.book_id for i in storefront.state.cart] == ["book-1"]
