from pydantic import EmailStr
from typing import Optional

from bookgram.schemas.base import CamelModel


class InquiryCreate(CamelModel):
    full_name: str
    email: EmailStr
    mobile: Optional[str] = None
    query: str
    time_slot: Optional[str] = None
