from pydantic import Field
from typing import List, Optional

from bookgram.schemas.base import CamelModel


class ForumReply(CamelModel):
    id: str
    post_id: Optional[str] = None
    author_id: str
    author_name: str
    content: str
    liked_by: List[str] = Field(default_factory=list)
    timestamp: str


class ForumPost(CamelModel):
    id: str
    author_id: str
    author_name: str
    title: str
    content: str
    category: str
    liked_by: List[str] = Field(default_factory=list)
    replies: List[ForumReply] = Field(default_factory=list)
    timestamp: str
    tags: List[str] = Field(default_factory=list)


class PostCreate(CamelModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: str = "General"


class ReplyCreate(CamelModel):
    content: str
