"""
Blog post operations and cover image lifecycle.

The row and its cover image are kept in step without a shared transaction:

- create: the image is written before the row that references it
- update: the new image is written, the row updated, and only then is the
  previous image removed
- delete: the row is removed, then its image

A failed row write removes the image written for it. A crash between the two
steps can still leave an unreferenced file behind; ``sweep_orphan_images``
cleans those up.
"""
import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from sqlmodel import Session
from sqlalchemy.exc import SQLAlchemyError

from blog_api.core.exceptions import BlogNotFoundError, BlogValidationError
from blog_api.core.storage import ImageStore, ImageUpload
from blog_api.crud.blog import blog_crud
from blog_api.models.blog import BlogPost
from blog_api.schemas.blog import BlogPostCreate, BlogPostUpdate
from blog_api.schemas.common import PaginationMetadata, create_pagination_metadata

logger = logging.getLogger(__name__)


class BlogService:
    def __init__(self, db: Session, images: ImageStore, max_page_size: int = 100):
        self.db = db
        self.images = images
        self.max_page_size = max_page_size

    def list_blogs(
        self,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> tuple[list[BlogPost], PaginationMetadata]:
        page = int(page)
        limit = int(limit)
        if page < 1:
            raise BlogValidationError("Page must be at least 1")
        if limit < 1:
            raise BlogValidationError("Limit must be at least 1")
        limit = min(limit, self.max_page_size)

        search = search.strip() if search else None

        posts, total = blog_crud.get_blog_posts(
            self.db,
            skip=(page - 1) * limit,
            limit=limit,
            search=search
        )
        return posts, create_pagination_metadata(total, page, limit)

    def get_blog(self, post_id: int) -> BlogPost:
        post = blog_crud.get_blog_post(self.db, post_id)
        if not post:
            raise BlogNotFoundError()
        return post

    async def create_blog(
        self,
        post_data: BlogPostCreate,
        upload: Optional[ImageUpload] = None
    ) -> BlogPost:
        cover = await self.images.save(upload) if upload else None

        try:
            post = blog_crud.create_blog_post(
                self.db,
                post_data.model_dump(),
                cover_image=cover.url if cover else None
            )
        except SQLAlchemyError:
            self.db.rollback()
            if cover:
                await self.images.delete(cover)
            raise

        logger.info(f"Blog created: {post.id}")
        return self.get_blog(post.id)

    async def update_blog(
        self,
        post_id: int,
        fields: Dict[str, Any],
        upload: Optional[ImageUpload] = None
    ) -> BlogPost:
        """
        Apply a partial update. ``fields`` holds only the values the client
        sent; they are validated after the post is known to exist.
        """
        post = self.get_blog(post_id)
        previous_cover = post.cover_image

        update_data = BlogPostUpdate(**fields).model_dump(exclude_unset=True)
        if not update_data and upload is None:
            raise BlogValidationError("No fields to update")

        # Give the connection back to the pool before touching the filesystem
        self.db.close()

        cover = await self.images.save(upload) if upload else None
        if cover:
            update_data["cover_image"] = cover.url

        try:
            updated = blog_crud.update_blog_post(self.db, post_id, update_data)
        except SQLAlchemyError:
            self.db.rollback()
            if cover:
                await self.images.delete(cover)
            raise

        if updated is None:
            # Deleted while the upload was being written
            if cover:
                await self.images.delete(cover)
            raise BlogNotFoundError()

        if cover and previous_cover and previous_cover != cover.url:
            await self.images.delete(self.images.ref(previous_cover))

        logger.info(f"Blog updated: {post_id} (fields: {', '.join(sorted(update_data))})")
        return self.get_blog(post_id)

    async def delete_blog(self, post_id: int) -> None:
        post = self.get_blog(post_id)
        cover_image = post.cover_image

        if not blog_crud.delete_blog_post(self.db, post_id):
            raise BlogNotFoundError()

        if cover_image:
            await self.images.delete(self.images.ref(cover_image))

        logger.info(f"Blog deleted: {post_id}")

    def sweep_orphan_images(
        self,
        older_than: timedelta = timedelta(hours=1),
        dry_run: bool = False
    ) -> list[str]:
        """Remove uploaded images that no blog post references."""
        referenced = {
            self.images.ref(value).filename
            for value in blog_crud.get_cover_images(self.db)
        }
        return self.images.sweep_orphans(referenced, older_than=older_than, dry_run=dry_run)
