from pydantic import EmailStr, Field
from typing import Optional, List

from bookgram.schemas.base import CamelModel


class User(CamelModel):
    id: str
    name: str
    email: Optional[str] = None
    avatar: Optional[str] = None

    rented_books: List[str] = Field(default_factory=list)
    bought_books: List[str] = Field(default_factory=list)
    favorite_books: List[str] = Field(default_factory=list)
    listed_books: List[str] = Field(default_factory=list)


class SignUpRequest(CamelModel):
    name: str
    email: EmailStr
    password: str = Field(..., min_length=6)


class SignInRequest(CamelModel):
    email: EmailStr
    password: str


class SessionResponse(CamelModel):
    message: str
    access_token: Optional[str] = None
    token_type: str = "bearer"
    user: Optional[User] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    avatar: Optional[str] = None
