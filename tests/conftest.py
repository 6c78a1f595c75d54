import pytest

from bookgram.database import build_engine, create_db_and_tables
from bookgram.errors import RemoteStoreError
from bookgram.mappers import book_to_row
from bookgram.schemas.book_schemas import Book
from bookgram.services import catalog_service
from bookgram.services.record_store import RecordStore
from bookgram.storefront import Storefront


class FailingStore(RecordStore):
    """Record store that can be told to fail particular calls."""

    def __init__(self, engine):
        super().__init__(engine)
        self.failures = set()

    def fail(self, operation, collection, key=None):
        self.failures.add((operation, collection, key))

    def _maybe_fail(self, operation, collection, key=None):
        if (operation, collection, None) in self.failures or (operation, collection, key) in self.failures:
            raise RemoteStoreError(collection, "connection reset by peer")

    async def insert_one(self, collection, values):
        self._maybe_fail("insert_one", collection)
        return await super().insert_one(collection, values)

    async def select(self, collection, filters=None, order_by=None, descending=False):
        self._maybe_fail("select", collection)
        return await super().select(collection, filters, order_by, descending)

    async def update(self, collection, key, values):
        self._maybe_fail("update", collection, key)
        return await super().update(collection, key, values)

    async def delete(self, collection, key):
        self._maybe_fail("delete", collection, key)
        return await super().delete(collection, key)

    async def delete_where(self, collection, filters):
        self._maybe_fail("delete_where", collection)
        return await super().delete_where(collection, filters)

    async def upsert(self, collection, values):
        self._maybe_fail("upsert", collection)
        return await super().upsert(collection, values)


def make_book(**overrides) -> Book:
    data = dict(
        id="book-1",
        title="The Name of the Wind",
        author="Patrick Rothfuss",
        description="A tale",
        category="Fantasy",
        price_buy=350,
        marked_price=500,
        price_rent=50,
        quantity=5,
        image_url="https://img.example/wind.jpg",
    )
    data.update(overrides)
    return Book(**data)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'bookgram-test.db'}")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return FailingStore(engine)


@pytest.fixture
def seed_books(store):
    async def _seed(*books):
        for book in books:
            await store.insert_one("books", book_to_row(book))
    return _seed


@pytest.fixture
async def storefront(store, seed_books):
    await seed_books(
        make_book(),
        make_book(id="book-2", title="Dune", author="Frank Herbert", price_buy=400,
                  marked_price=400, price_rent=60, quantity=1, security_deposit=100),
    )
    storefront = Storefront(store)
    await storefront.start()
    yield storefront
    storefront.close()


@pytest.fixture
async def signed_in(storefront):
    await storefront.auth.sign_up("Ada Reader", "ada@example.com", "secret-pass")
    return storefront


async def reload_books(storefront):
    return await catalog_service.load_books(storefront)


@pytest.fixture
async def open_storefront(store):
    """Open further storefronts on the same store, as other shoppers would."""
    opened = []

    async def _open():
        storefront = Storefront(store)
        await storefront.start()
        opened.append(storefront)
        return storefront

    yield _open
    for storefront in opened:
        storefront.close()
