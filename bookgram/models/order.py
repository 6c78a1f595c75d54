from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime

from bookgram.constants.order_status import CONFIRMED


class OrderRow(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)

    # snapshot of the cart at placement time
    items: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    total_amount: float
    payment_method: str
    address: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    status: str = Field(default=CONFIRMED)

    created_at: datetime = Field(default_factory=datetime.utcnow)
