# blog_api/routers/blogs.py
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from typing import Optional

from blog_api.core.config import settings
from blog_api.core.deps import get_blog_service
from blog_api.core.storage import ImageUpload
from blog_api.services.blog_service import BlogService
from blog_api.schemas.blog import (
    BlogPostCreate, BlogPostRead, BlogListData
)
from blog_api.schemas.common import ApiResponse

router = APIRouter(
    prefix="/blogs",
    tags=["blogs"],
    responses={404: {"description": "Not found"}},
)


async def read_upload(file: Optional[UploadFile]) -> Optional[ImageUpload]:
    """An empty file part (no filename) means no image was chosen."""
    if file is None or not file.filename:
        return None
    content = await file.read()
    return ImageUpload(
        filename=file.filename,
        content=content,
        content_type=file.content_type
    )


@router.get("", response_model=ApiResponse[BlogListData])
def get_blogs(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
    service: BlogService = Depends(get_blog_service)
):
    """
    Get a page of blog posts, newest first.

    **Query Parameters**:
    - search: Case-insensitive match on title or author
    - page: Page number (1-indexed)
    - limit: Posts per page (capped at MAX_PAGE_SIZE)
    """
    posts, pagination = service.list_blogs(search=search, page=page, limit=limit)
    return ApiResponse[BlogListData](
        data=BlogListData(
            blogs=[BlogPostRead.model_validate(p) for p in posts],
            pagination=pagination
        )
    )


@router.get("/{post_id}", response_model=ApiResponse[BlogPostRead])
def get_blog(
    post_id: int,
    service: BlogService = Depends(get_blog_service)
):
    """Get a single blog post by ID."""
    post = service.get_blog(post_id)
    return ApiResponse[BlogPostRead](data=BlogPostRead.model_validate(post))


@router.post("", response_model=ApiResponse[BlogPostRead], status_code=status.HTTP_201_CREATED)
async def create_blog(
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    cover_image: Optional[UploadFile] = File(None),
    service: BlogService = Depends(get_blog_service)
):
    """
    Create a blog post, optionally with a cover image.

    Multipart form fields: title, author, content, cover_image.
    """
    post_data = BlogPostCreate(title=title, author=author, content=content)
    upload = await read_upload(cover_image)

    post = await service.create_blog(post_data, upload)
    return ApiResponse[BlogPostRead](
        message="Blog created successfully",
        data=BlogPostRead.model_validate(post)
    )


@router.put("/{post_id}", response_model=ApiResponse[BlogPostRead])
async def update_blog(
    post_id: int,
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    cover_image: Optional[UploadFile] = File(None),
    service: BlogService = Depends(get_blog_service)
):
    """
    Update a blog post. Every field is optional; omitted fields keep their
    current value. A new cover image replaces (and deletes) the old one.
    """
    supplied = {
        name: value
        for name, value in (("title", title), ("author", author), ("content", content))
        if value is not None
    }
    upload = await read_upload(cover_image)

    post = await service.update_blog(post_id, supplied, upload)
    return ApiResponse[BlogPostRead](
        message="Blog updated successfully",
        data=BlogPostRead.model_validate(post)
    )


@router.delete("/{post_id}", response_model=ApiResponse[None])
async def delete_blog(
    post_id: int,
    service: BlogService = Depends(get_blog_service)
):
    """Delete a blog post and its cover image."""
    await service.delete_blog(post_id)
    return ApiResponse[None](message="Blog deleted successfully")
