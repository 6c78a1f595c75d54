from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime


class ForumPostRow(SQLModel, table=True):
    __tablename__ = "forum_posts"

    id: Optional[int] = Field(default=None, primary_key=True)
    author_id: str
    author_name: Optional[str] = None
    title: str
    content: str
    category: str
    liked_by: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ForumReplyRow(SQLModel, table=True):
    __tablename__ = "forum_replies"

    id: Optional[int] = Field(default=None, primary_key=True)
    post_id: int = Field(foreign_key="forum_posts.id", index=True)
    author_id: str
    author_name: Optional[str] = None
    content: str
    liked_by: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow)
