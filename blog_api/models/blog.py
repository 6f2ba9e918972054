# blog_api/models/blog.py
from sqlmodel import SQLModel, Field, Column, Text
from typing import Optional
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class BlogPost(SQLModel, table=True):
    __tablename__ = "blogs"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=255)
    author: str = Field(max_length=100)
    cover_image: Optional[str] = Field(default=None, max_length=255)
    content: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)
