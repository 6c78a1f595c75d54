from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

class CartItemRow(SQLModel, table=True):
    __tablename__ = "cart_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    book_id: str

    # denormalized for display
    title: str
    author: str
    image_url: Optional[str] = None

    type: str = "BUY"
    rent_weeks: Optional[int] = None
    rent_months: Optional[int] = None
    security_deposit: Optional[float] = None

    quantity: int = 1
    unit_price: float
    price: float
    created_at: datetime = Field(default_factory=datetime.utcnow)
