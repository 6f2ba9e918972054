# blog_api/crud/blog.py
from sqlmodel import Session, select, func, or_, col
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone

from blog_api.models.blog import BlogPost


def escape_like(text: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so the search text matches literally."""
    return (
        text.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


def search_condition(search: Optional[str]):
    """Filter predicate shared by the count and page queries."""
    if not search:
        return None
    search_pattern = f"%{escape_like(search)}%"
    return or_(
        col(BlogPost.title).ilike(search_pattern, escape="\\"),
        col(BlogPost.author).ilike(search_pattern, escape="\\"),
    )


class BlogCRUD:
    def create_blog_post(
        self,
        db: Session,
        post_data: Dict[str, Any],
        cover_image: Optional[str] = None
    ) -> BlogPost:
        """Insert a new blog post. created_at and updated_at start out equal."""
        now = datetime.now(timezone.utc)
        blog_post = BlogPost(
            **post_data,
            cover_image=cover_image,
            created_at=now,
            updated_at=now
        )

        db.add(blog_post)
        db.commit()
        db.refresh(blog_post)
        return blog_post

    def get_blog_post(self, db: Session, post_id: int) -> Optional[BlogPost]:
        """Get blog post by ID."""
        return db.get(BlogPost, post_id)

    def get_blog_posts(
        self,
        db: Session,
        skip: int = 0,
        limit: int = 10,
        search: Optional[str] = None
    ) -> tuple[List[BlogPost], int]:
        """Get a page of blog posts, newest first. Returns (posts, total_count)."""
        query = select(BlogPost)
        count_query = select(func.count(BlogPost.id))

        condition = search_condition(search)
        if condition is not None:
            query = query.where(condition)
            count_query = count_query.where(condition)

        total = db.exec(count_query).one()

        query = query.order_by(col(BlogPost.created_at).desc(), col(BlogPost.id).desc())
        query = query.offset(skip).limit(limit)

        posts = db.exec(query).all()
        return list(posts), total

    def update_blog_post(
        self,
        db: Session,
        post_id: int,
        update_data: Dict[str, Any]
    ) -> Optional[BlogPost]:
        """Overwrite the given fields and refresh updated_at."""
        blog_post = db.get(BlogPost, post_id)
        if not blog_post:
            return None

        for field, value in update_data.items():
            setattr(blog_post, field, value)

        blog_post.updated_at = datetime.now(timezone.utc)

        db.add(blog_post)
        db.commit()
        db.refresh(blog_post)
        return blog_post

    def delete_blog_post(self, db: Session, post_id: int) -> bool:
        """Delete blog post."""
        blog_post = db.get(BlogPost, post_id)
        if not blog_post:
            return False

        db.delete(blog_post)
        db.commit()
        return True

    def get_cover_images(self, db: Session) -> List[str]:
        """Every cover_image value currently stored."""
        query = select(BlogPost.cover_image).where(col(BlogPost.cover_image).is_not(None))
        return list(db.exec(query).all())


# Create singleton instance
blog_crud = BlogCRUD()
