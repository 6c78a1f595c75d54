# bookgram/state.py
"""
Application state container.

``AppState`` is a snapshot; every function below takes a snapshot and
returns a new one. Services never mutate a snapshot in place, so a held
reference (an open book, a cart listing) never changes underneath a caller.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from bookgram.constants.views import View
from bookgram.schemas.book_schemas import Book
from bookgram.schemas.cart_schemas import CartItem
from bookgram.schemas.forum_schemas import ForumPost
from bookgram.schemas.user_schemas import User


class AppState(BaseModel):
    view: View = View.STORE
    user: Optional[User] = None
    books: List[Book] = Field(default_factory=list)
    selected_book: Optional[Book] = None
    cart: List[CartItem] = Field(default_factory=list)
    posts: List[ForumPost] = Field(default_factory=list)


@dataclass(frozen=True)
class UndoableChange:
    """A state transition plus the transition that takes it back.

    Both sides are applied to whatever the state is at the time, so a revert
    only touches what the change itself touched.
    """
    apply: Callable[[AppState], AppState]
    revert: Callable[[AppState], AppState]


# ---------------------------------------------------------
# lookups
# ---------------------------------------------------------

def find_book(state: AppState, book_id: str) -> Optional[Book]:
    return next((b for b in state.books if b.id == book_id), None)


def find_cart_item(state: AppState, item_id: str) -> Optional[CartItem]:
    return next((i for i in state.cart if i.id == item_id), None)


def find_post(state: AppState, post_id: str) -> Optional[ForumPost]:
    return next((p for p in state.posts if p.id == post_id), None)


# ---------------------------------------------------------
# session / view
# ---------------------------------------------------------

def with_view(state: AppState, view: View) -> AppState:
    return state.model_copy(update={"view": view})


def with_user(state: AppState, user: Optional[User]) -> AppState:
    return state.model_copy(update={"user": user})


def signed_out(state: AppState) -> AppState:
    return state.model_copy(update={"user": None, "cart": []})


# ---------------------------------------------------------
# books
# ---------------------------------------------------------

def with_books(state: AppState, books: List[Book]) -> AppState:
    return state.model_copy(update={"books": list(books)})


def prepend_book(state: AppState, book: Book) -> AppState:
    return state.model_copy(update={"books": [book, *state.books]})


def replace_book(state: AppState, book: Book) -> AppState:
    """Swap a book everywhere it is held, including an open detail view."""
    books = [book if b.id == book.id else b for b in state.books]
    update = {"books": books}
    if state.selected_book is not None and state.selected_book.id == book.id:
        update["selected_book"] = book
    return state.model_copy(update=update)


def select_book(state: AppState, book: Optional[Book]) -> AppState:
    view = View.BOOK_DETAILS if book is not None else View.STORE
    return state.model_copy(update={"selected_book": book, "view": view})


def adjust_stock(state: AppState, book_id: str, delta: int) -> AppState:
    book = find_book(state, book_id)
    if book is None:
        return state
    return replace_book(state, book.model_copy(update={"quantity": max(0, book.quantity + delta)}))


def stock_decrement(state: AppState, book_id: str, purchased: int) -> UndoableChange:
    """Build the decrement for ``book_id``, floored at zero stock."""
    book = find_book(state, book_id)
    removed = min(book.quantity, purchased) if book is not None else 0
    return UndoableChange(
        apply=lambda s: adjust_stock(s, book_id, -removed),
        revert=lambda s: adjust_stock(s, book_id, removed),
    )


# ---------------------------------------------------------
# cart
# ---------------------------------------------------------

def with_cart(state: AppState, items: List[CartItem]) -> AppState:
    return state.model_copy(update={"cart": list(items)})


def append_cart_item(state: AppState, item: CartItem) -> AppState:
    return state.model_copy(update={"cart": [*state.cart, item]})


def remove_cart_item(state: AppState, item_id: str) -> AppState:
    return state.model_copy(update={"cart": [i for i in state.cart if i.id != item_id]})


def replace_cart_item(state: AppState, item_id: str, item: CartItem) -> AppState:
    cart = [item if i.id == item_id else i for i in state.cart]
    return state.model_copy(update={"cart": cart})


def cart_addition(item: CartItem) -> UndoableChange:
    return UndoableChange(
        apply=lambda s: append_cart_item(s, item),
        revert=lambda s: remove_cart_item(s, item.id),
    )


# ---------------------------------------------------------
# community
# ---------------------------------------------------------

def with_posts(state: AppState, posts: List[ForumPost]) -> AppState:
    return state.model_copy(update={"posts": list(posts)})


def replace_post(state: AppState, post: ForumPost) -> AppState:
    posts = [post if p.id == post.id else p for p in state.posts]
    return state.model_copy(update={"posts": posts})
