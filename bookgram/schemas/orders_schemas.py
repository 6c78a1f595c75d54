from pydantic import Field
from typing import Any, Dict, List, Optional

from bookgram.constants.order_status import CONFIRMED
from bookgram.schemas.base import CamelModel
from bookgram.schemas.cart_schemas import CartItem


class Order(CamelModel):
    id: str
    items: List[CartItem]
    total_amount: float
    payment_method: str
    address: Optional[Dict[str, Any]] = None
    status: str = CONFIRMED
    created_at: str


class PlaceOrderRequest(CamelModel):
    address: Dict[str, Any]
    payment_method: str


class OrderPlacement(CamelModel):
    order: Optional[Order] = None
    total_amount: float
    failed_steps: List[str] = Field(default_factory=list)
