import pytest
from sqlalchemy.exc import OperationalError

from bookgram.errors import RemoteStoreError, SchemaMismatchError, classify_store_error
from bookgram.services.record_store import RecordStore


def cart_row(**overrides):
    row = dict(user_id="u1", book_id="b1", title="Dune", author="Frank Herbert",
               type="BUY", quantity=1, unit_price=400, price=400)
    row.update(overrides)
    return row


async def test_insert_returns_row_with_identity(engine):
    store = RecordStore(engine)
    row = await store.insert_one("cart_items", cart_row())
    assert isinstance(row["id"], int)
    assert row["user_id"] == "u1"


async def test_select_filters_and_orders(engine):
    store = RecordStore(engine)
    await store.insert_one("cart_items", cart_row(book_id="b1"))
    await store.insert_one("cart_items", cart_row(book_id="b2"))
    await store.insert_one("cart_items", cart_row(user_id="u2", book_id="b3"))

    rows = await store.select("cart_items", {"user_id": "u1"}, order_by="id", descending=True)
    assert [r["book_id"] for r in rows] == ["b2", "b1"]


async def test_update_and_delete_by_key(engine):
    store = RecordStore(engine)
    row = await store.insert_one("cart_items", cart_row())

    updated = await store.update("cart_items", row["id"], {"quantity": 3, "price": 1200})
    assert updated["quantity"] == 3

    await store.delete("cart_items", row["id"])
    assert await store.get("cart_items", row["id"]) is None


async def test_update_missing_row_fails(engine):
    with pytest.raises(RemoteStoreError):
        await RecordStore(engine).update("cart_items", 999, {"quantity": 2})


async def test_delete_where_clears_only_matching_rows(engine):
    store = RecordStore(engine)
    await store.insert_one("cart_items", cart_row())
    await store.insert_one("cart_items", cart_row())
    await store.insert_one("cart_items", cart_row(user_id="u2"))

    assert await store.delete_where("cart_items", {"user_id": "u1"}) == 2
    assert len(await store.select("cart_items")) == 1


async def test_upsert_inserts_then_updates(engine):
    store = RecordStore(engine)
    await store.upsert("profiles", {"id": "u1", "name": "Ada", "bought_books": []})
    await store.upsert("profiles", {"id": "u1", "name": "Ada", "bought_books": ["b1"]})

    rows = await store.select("profiles")
    assert len(rows) == 1
    assert rows[0]["bought_books"] == ["b1"]


async def test_unknown_column_is_a_schema_mismatch(engine):
    store = RecordStore(engine)
    with pytest.raises(SchemaMismatchError) as info:
        await store.insert_one("cart_items", cart_row(gift_wrap=True))

    assert "gift_wrap" in info.value.detail
    assert "alembic upgrade head" in info.value.message


async def test_unknown_collection_fails(engine):
    with pytest.raises(RemoteStoreError):
        await RecordStore(engine).select("wishlists")


def test_database_column_errors_are_classified_as_schema_mismatch():
    exc = OperationalError("INSERT ...", {}, Exception("table cart_items has no column named rent_months"))
    assert isinstance(classify_store_error("cart_items", exc), SchemaMismatchError)


def test_other_database_errors_stay_generic():
    exc = OperationalError("SELECT ...", {}, Exception("database is locked"))
    error = classify_store_error("books", exc)
    assert type(error) is RemoteStoreError
    assert "books" in error.message
