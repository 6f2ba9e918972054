# blog_api/core/deps.py
from fastapi import Depends, Request
from sqlmodel import Session

from blog_api.core.config import settings
from blog_api.core.storage import ImageStore
from blog_api.database.engine import get_db
from blog_api.services.blog_service import BlogService


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def get_blog_service(
    db: Session = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
) -> BlogService:
    return BlogService(db, images, max_page_size=settings.MAX_PAGE_SIZE)
