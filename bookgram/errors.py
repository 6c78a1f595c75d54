"""
Error taxonomy for the storefront core.

Validation errors are raised before any state is touched. Remote-store
errors come out of the record store; schema mismatches are split off from
generic failures so operators get an actionable message. Auth errors carry
a translated, user-facing message.
"""
from typing import Optional


class StorefrontError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------------------------------------------------------
# Validation
# ---------------------------------------------------------

class ValidationFailed(StorefrontError):
    status_code = 400


class InsufficientStockError(ValidationFailed):
    def __init__(self, title: str, available: int, requested: int):
        super().__init__(
            f"Not enough stock available for {title}. "
            f"Available: {available}, Requested: {requested}"
        )
        self.available = available
        self.requested = requested


class InvalidQuantityError(ValidationFailed):
    pass


class InvalidRatingError(ValidationFailed):
    def __init__(self, rating):
        super().__init__(f"Rating must be a whole number from 1 to 5, got {rating!r}")


class DuplicateReviewError(ValidationFailed):
    status_code = 409

    def __init__(self):
        super().__init__("You have already reviewed this book. Edit your review instead.")


class EmptyCartError(ValidationFailed):
    def __init__(self):
        super().__init__("Your cart is empty.")


class NotFoundError(StorefrontError):
    status_code = 404


# ---------------------------------------------------------
# Auth
# ---------------------------------------------------------

class AuthRequiredError(StorefrontError):
    status_code = 401

    def __init__(self, message: str = "Please login to continue."):
        super().__init__(message)


class AuthError(StorefrontError):
    status_code = 401


AUTH_MESSAGES = {
    "email not confirmed": "Please confirm your email address before logging in.",
    "invalid login credentials": "Invalid email or password.",
    "user already registered": "An account with this email already exists.",
}


def translate_auth_error(raw: Optional[str]) -> str:
    text = (raw or "").lower()
    for needle, message in AUTH_MESSAGES.items():
        if needle in text:
            return message
    return raw or "Authentication failed. Please check your credentials."


# ---------------------------------------------------------
# Remote store
# ---------------------------------------------------------

class RemoteStoreError(StorefrontError):
    status_code = 502

    def __init__(self, collection: str, detail: str):
        super().__init__(f"Request to '{collection}' failed: {detail}")
        self.collection = collection
        self.detail = detail


class SchemaMismatchError(RemoteStoreError):
    status_code = 500

    def __init__(self, collection: str, detail: str):
        super().__init__(collection, detail)
        self.message = (
            f"The '{collection}' table does not match the columns the storefront "
            f"writes ({detail}). Run `alembic upgrade head` or `python check_columns.py` "
            f"to find the missing column."
        )
        self.args = (self.message,)


SCHEMA_MISMATCH_MARKERS = (
    "no such column",
    "has no column",
    "does not exist",
    "undefinedcolumn",
    "schema cache",
    "unknown column",
)


def classify_store_error(collection: str, exc: Exception) -> RemoteStoreError:
    detail = str(exc).splitlines()[0] if str(exc) else exc.__class__.__name__
    text = str(exc).lower()
    if "column" in text and any(marker in text for marker in SCHEMA_MISMATCH_MARKERS):
        return SchemaMismatchError(collection, detail)
    return RemoteStoreError(collection, detail)
