from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime


class ProfileRow(SQLModel, table=True):
    __tablename__ = "profiles"

    # same id as the auth user
    id: str = Field(primary_key=True)
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None

    rented_books: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    bought_books: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    favorite_books: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    listed_books: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    updated_at: datetime = Field(default_factory=datetime.utcnow)
