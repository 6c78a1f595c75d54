from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime


class BookRow(SQLModel, table=True):
    __tablename__ = "books"

    #main info
    id: str = Field(primary_key=True)
    title: str
    author: str
    description: str = ""
    category: Optional[str] = None

    #Shop Details
    price_buy: float = 0.0
    marked_price: Optional[float] = None
    price_rent: float = 0.0
    security_deposit: Optional[float] = None
    quantity: Optional[int] = None

    #Images
    image_url: Optional[str] = None
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    #Reviews are stored inline, average kept beside them
    reviews: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    average_rating: float = 0.0

    owner_id: Optional[str] = Field(default=None, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
