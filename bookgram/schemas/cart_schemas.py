from enum import Enum
from typing import Optional

from bookgram.schemas.base import CamelModel


class CartItemType(str, Enum):
    BUY = "BUY"
    RENT = "RENT"


class CartItem(CamelModel):
    id: str
    book_id: str
    title: str
    author: str
    image_url: Optional[str] = None

    type: CartItemType
    quantity: int = 1
    unit_price: float

    # RENT only; one of the two is set depending on the rent variant
    rent_weeks: Optional[int] = None
    rent_months: Optional[int] = None
    security_deposit: Optional[float] = None

    price: float = 0.0

    @property
    def duration_units(self) -> int:
        if self.rent_weeks is not None:
            return self.rent_weeks
        if self.rent_months is not None:
            return self.rent_months
        return 1


class CartAddRequest(CamelModel):
    book_id: str
    type: CartItemType = CartItemType.BUY
    quantity: int = 1
    rent_weeks: Optional[int] = None
    rent_months: Optional[int] = None


class CartQuantityUpdate(CamelModel):
    quantity: int


class CartDurationUpdate(CamelModel):
    duration: int
