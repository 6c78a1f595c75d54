from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class AuthUserRow(SQLModel, table=True):
    __tablename__ = "auth_users"

    id: str = Field(primary_key=True)
    email: str = Field(index=True, unique=True)
    password: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    email_confirmed: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
