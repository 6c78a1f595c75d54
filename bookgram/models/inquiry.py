from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

class InquiryRow(SQLModel, table=True):
    __tablename__ = "inquiries"

    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str
    email: str
    mobile: Optional[str] = None
    query: str
    time_slot: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
