from pydantic import Field, model_validator
from typing import Optional, List

from bookgram.schemas.base import CamelModel


class Review(CamelModel):
    id: str
    user_id: str
    user_name: str
    rating: int
    comment: str = ""
    timestamp: str


class Book(CamelModel):
    id: str
    title: str
    author: str
    description: str = ""
    category: Optional[str] = None

    price_buy: float = 0.0
    marked_price: float = 0.0
    price_rent: float = 0.0
    security_deposit: Optional[float] = None
    quantity: int = 0

    image_url: Optional[str] = None
    images: List[str] = Field(default_factory=list)

    reviews: List[Review] = Field(default_factory=list)
    average_rating: float = 0.0
    owner_id: Optional[str] = None


class BookCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    author: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    category: Optional[str] = None

    price_buy: float = Field(..., ge=0)
    marked_price: Optional[float] = Field(None, ge=0)
    price_rent: float = Field(default=0, ge=0)
    security_deposit: Optional[float] = Field(None, ge=0)
    quantity: int = Field(default=1, ge=0)

    image_url: Optional[str] = None
    images: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_marked_price(self):
        if self.marked_price is not None and self.marked_price < self.price_buy:
            raise ValueError("Marked price cannot be lower than the selling price")
        return self
