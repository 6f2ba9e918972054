# blog_api/schemas/blog.py
from pydantic import BaseModel, model_validator, field_validator
from typing import Optional, List
from datetime import datetime

from blog_api.schemas.common import PaginationMetadata

TITLE_MAX_LENGTH = 255
AUTHOR_MAX_LENGTH = 100


def _check_title(v: str) -> str:
    if len(v.strip()) == 0:
        raise ValueError('Title cannot be empty')
    if len(v) > TITLE_MAX_LENGTH:
        raise ValueError(f'Title must not exceed {TITLE_MAX_LENGTH} characters')
    return v


def _check_author(v: str) -> str:
    if len(v.strip()) == 0:
        raise ValueError('Author cannot be empty')
    if len(v) > AUTHOR_MAX_LENGTH:
        raise ValueError(f'Author name must not exceed {AUTHOR_MAX_LENGTH} characters')
    return v


class BlogPostCreate(BaseModel):
    title: str
    author: str
    content: str

    @model_validator(mode='before')
    @classmethod
    def require_fields(cls, data):
        if isinstance(data, dict):
            missing = [
                name for name in ('title', 'author', 'content')
                if not isinstance(data.get(name), str) or not data[name].strip()
            ]
            if missing:
                raise ValueError('Title, author, and content are required')
        return data

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return _check_title(v)

    @field_validator('author')
    @classmethod
    def validate_author(cls, v):
        return _check_author(v)


class BlogPostUpdate(BaseModel):
    """Partial update. Only fields that were explicitly set are written."""
    title: Optional[str] = None
    author: Optional[str] = None
    content: Optional[str] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is not None:
            _check_title(v)
        return v

    @field_validator('author')
    @classmethod
    def validate_author(cls, v):
        if v is not None:
            _check_author(v)
        return v

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if v is not None and len(v.strip()) == 0:
            raise ValueError('Content cannot be empty')
        return v


class BlogPostRead(BaseModel):
    id: int
    title: str
    author: str
    cover_image: Optional[str]
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BlogListData(BaseModel):
    """One page of blog posts"""
    blogs: List[BlogPostRead]
    pagination: PaginationMetadata


class ImageInfoRead(BaseModel):
    filename: str
    size: int
    created: datetime
    type: str
    url: str

    class Config:
        from_attributes = True
