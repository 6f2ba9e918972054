import pytest
from pydantic import ValidationError

from blog_api.schemas.blog import BlogPostCreate, BlogPostUpdate
from blog_api.schemas.common import create_pagination_metadata

class TestBlogPostCreate:
    def test_blog_post_create_valid(self):
        post = BlogPostCreate(title="Hello", author="Jane", content="Body")
        assert post.title == "Hello"
        assert post.author == "Jane"
        assert post.content == "Body"

    def test_title_at_max_length(self):
        post = BlogPostCreate(title="t" * 255, author="Jane", content="Body")
        assert len(post.title) == 255

    def test_title_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            BlogPostCreate(title="t" * 256, author="Jane", content="Body")
        assert "Title must not exceed 255 characters" in str(exc_info.value)

    def test_author_at_max_length(self):
        post = BlogPostCreate(title="Hello", author="a" * 100, content="Body")
        assert len(post.author) == 100

    def test_author_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            BlogPostCreate(title="Hello", author="a" * 101, content="Body")
        assert "Author name must not exceed 100 characters" in str(exc_info.value)

    @pytest.mark.parametrize("missing", ["title", "author", "content"])
    def test_missing_field(self, missing):
        data = {"title": "Hello", "author": "Jane", "content": "Body"}
        data[missing] = None
        with pytest.raises(ValidationError) as exc_info:
            BlogPostCreate(**data)
        assert "Title, author, and content are required" in str(exc_info.value)

    def test_blank_title_is_missing(self):
        with pytest.raises(ValidationError):
            BlogPostCreate(title="   ", author="Jane", content="Body")

class TestBlogPostUpdate:
    def test_only_supplied_fields_are_set(self):
        update = BlogPostUpdate(title="New title")
        assert update.model_dump(exclude_unset=True) == {"title": "New title"}

    def test_empty_update(self):
        assert BlogPostUpdate().model_dump(exclude_unset=True) == {}

    def test_title_too_long(self):
        with pytest.raises(ValidationError):
            BlogPostUpdate(title="t" * 256)

    def test_empty_content(self):
        with pytest.raises(ValidationError):
            BlogPostUpdate(content="")

class TestPaginationMetadata:
    def test_first_of_two_pages(self):
        meta = create_pagination_metadata(total=15, page=1, page_size=10)
        assert meta.total_pages == 2
        assert meta.has_next_page is True
        assert meta.has_prev_page is False

    def test_last_page(self):
        meta = create_pagination_metadata(total=15, page=2, page_size=10)
        assert meta.has_next_page is False
        assert meta.has_prev_page is True

    def test_no_results(self):
        meta = create_pagination_metadata(total=0, page=1, page_size=10)
        assert meta.total_pages == 0
        assert meta.has_next_page is False

    def test_serialized_with_camel_case_keys(self):
        meta = create_pagination_metadata(total=3, page=1, page_size=10)
        assert meta.model_dump(by_alias=True) == {
            "currentPage": 1,
            "totalPages": 1,
            "totalBlogs": 3,
            "hasNextPage": False,
            "hasPrevPage": False,
        }
