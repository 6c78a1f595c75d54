"""
Row <-> model mapping, one pair per entity.

Rows are the flat snake_case dicts the record store speaks. Models are the
in-memory pydantic objects. Read-side fallbacks for sparse rows live here
and nowhere else.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from bookgram.schemas.book_schemas import Book, Review
from bookgram.schemas.cart_schemas import CartItem
from bookgram.schemas.forum_schemas import ForumPost, ForumReply
from bookgram.schemas.orders_schemas import Order
from bookgram.schemas.user_schemas import User
from bookgram.utils.rounding import rounded_mean

Row = Dict[str, Any]


def _timestamp(value) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return value or ""


# ---------------------------------------------------------
# Book / Review
# ---------------------------------------------------------

def review_from_json(data: Row) -> Review:
    # reviews live inside the book row as camelCase JSON
    return Review.model_validate(data)


def review_to_json(review: Review) -> Row:
    return review.model_dump(by_alias=True)


def book_from_row(row: Row) -> Book:
    price_buy = row.get("price_buy") or 0
    quantity = row.get("quantity")
    reviews = [review_from_json(r) for r in row.get("reviews") or []]
    return Book(
        id=str(row["id"]),
        title=row["title"],
        author=row["author"],
        description=row.get("description") or "",
        category=row.get("category"),
        price_buy=price_buy,
        marked_price=row.get("marked_price") or price_buy,
        price_rent=row.get("price_rent") or 0,
        security_deposit=row.get("security_deposit"),
        quantity=quantity if quantity is not None else 1,
        image_url=row.get("image_url"),
        images=row.get("images") or [],
        reviews=reviews,
        # derived from the list, never trusted from the row
        average_rating=rounded_mean(r.rating for r in reviews),
        owner_id=row.get("owner_id"),
    )


def book_to_row(book: Book) -> Row:
    return {
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "description": book.description,
        "category": book.category,
        "price_buy": book.price_buy,
        "marked_price": book.marked_price,
        "price_rent": book.price_rent,
        "security_deposit": book.security_deposit,
        "quantity": book.quantity,
        "image_url": book.image_url,
        "images": list(book.images),
        "reviews": [review_to_json(r) for r in book.reviews],
        "average_rating": book.average_rating,
        "owner_id": book.owner_id,
    }


def book_reviews_to_row(book: Book) -> Row:
    """Review list and average travel together in one update."""
    return {
        "reviews": [review_to_json(r) for r in book.reviews],
        "average_rating": book.average_rating,
    }


# ---------------------------------------------------------
# Cart
# ---------------------------------------------------------

def cart_item_from_row(row: Row) -> CartItem:
    return CartItem(
        id=str(row["id"]),
        book_id=str(row["book_id"]),
        title=row["title"],
        author=row["author"],
        image_url=row.get("image_url"),
        type=row.get("type") or "BUY",
        quantity=row.get("quantity") or 1,
        unit_price=row["unit_price"],
        rent_weeks=row.get("rent_weeks"),
        rent_months=row.get("rent_months"),
        security_deposit=row.get("security_deposit"),
        price=row["price"],
    )


def cart_item_to_row(item: CartItem, user_id: str) -> Row:
    # no id: the store issues it
    return {
        "user_id": user_id,
        "book_id": item.book_id,
        "title": item.title,
        "author": item.author,
        "image_url": item.image_url,
        "type": item.type.value,
        "rent_weeks": item.rent_weeks,
        "rent_months": item.rent_months,
        "security_deposit": item.security_deposit,
        "quantity": item.quantity,
        "unit_price": item.unit_price,
        "price": item.price,
    }


def cart_item_changes_to_row(item: CartItem) -> Row:
    return {
        "quantity": item.quantity,
        "rent_weeks": item.rent_weeks,
        "rent_months": item.rent_months,
        "price": item.price,
    }


# ---------------------------------------------------------
# Profile
# ---------------------------------------------------------

def user_from_row(row: Row, auth_user=None) -> User:
    """``auth_user`` fills name/email/avatar gaps from the auth account."""
    return User(
        id=str(row["id"]),
        name=row.get("name") or getattr(auth_user, "full_name", None) or "User",
        email=getattr(auth_user, "email", None) or row.get("email"),
        avatar=row.get("avatar") or getattr(auth_user, "avatar_url", None),
        rented_books=row.get("rented_books") or [],
        bought_books=row.get("bought_books") or [],
        favorite_books=row.get("favorite_books") or [],
        listed_books=row.get("listed_books") or [],
    )


def user_from_auth(auth_user) -> User:
    """Profile stand-in when no profile row exists yet."""
    return user_from_row({"id": auth_user.id}, auth_user)


def user_to_row(user: User) -> Row:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "avatar": user.avatar,
        "rented_books": list(user.rented_books),
        "bought_books": list(user.bought_books),
        "favorite_books": list(user.favorite_books),
        "listed_books": list(user.listed_books),
    }


# ---------------------------------------------------------
# Order
# ---------------------------------------------------------

def order_to_row(user_id: str, items: List[CartItem], total_amount: float,
                 payment_method: str, address: Optional[Row], status: str) -> Row:
    return {
        "user_id": user_id,
        "items": [item.model_dump(mode="json", by_alias=True) for item in items],
        "total_amount": total_amount,
        "payment_method": payment_method,
        "address": address,
        "status": status,
    }


def order_from_row(row: Row) -> Order:
    return Order(
        id=str(row["id"]),
        items=[CartItem.model_validate(i) for i in row.get("items") or []],
        total_amount=row["total_amount"],
        payment_method=row["payment_method"],
        address=row.get("address"),
        status=row["status"],
        created_at=_timestamp(row.get("created_at")),
    )


# ---------------------------------------------------------
# Forum
# ---------------------------------------------------------

def forum_reply_from_row(row: Row) -> ForumReply:
    return ForumReply(
        id=str(row["id"]),
        post_id=str(row["post_id"]) if row.get("post_id") is not None else None,
        author_id=row["author_id"],
        author_name=row.get("author_name") or "Anonymous",
        content=row["content"],
        liked_by=row.get("liked_by") or [],
        timestamp=_timestamp(row.get("created_at")),
    )


def forum_post_from_row(row: Row, replies: Optional[List[Row]] = None) -> ForumPost:
    return ForumPost(
        id=str(row["id"]),
        author_id=row["author_id"],
        author_name=row.get("author_name") or "Anonymous",
        title=row["title"],
        content=row["content"],
        category=row["category"],
        liked_by=row.get("liked_by") or [],
        tags=row.get("tags") or [],
        replies=[forum_reply_from_row(r) for r in replies or []],
        timestamp=_timestamp(row.get("created_at")),
    )
