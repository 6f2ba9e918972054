import io
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool
from PIL import Image

from blog_api.main import app
from blog_api.core.deps import get_image_store
from blog_api.core.storage import ImageStore
from blog_api.crud.blog import blog_crud
from blog_api.database.engine import get_db
from blog_api.models.blog import BlogPost

# Test database setup
@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session

@pytest.fixture(name="upload_dir")
def upload_dir_fixture(tmp_path):
    return tmp_path / "uploads"

@pytest.fixture(name="image_store")
def image_store_fixture(upload_dir):
    return ImageStore(upload_dir=str(upload_dir), url_prefix="/uploads", max_file_size=1024 * 1024)

@pytest.fixture(name="client")
def client_fixture(session: Session, image_store: ImageStore):
    def get_session_override():
        return session

    def get_image_store_override():
        return image_store

    app.dependency_overrides[get_db] = get_session_override
    app.dependency_overrides[get_image_store] = get_image_store_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()

def make_image(fmt: str = "PNG", size=(8, 8), color=(200, 30, 30)) -> bytes:
    output = io.BytesIO()
    Image.new("RGB", size, color).save(output, format=fmt)
    return output.getvalue()

@pytest.fixture(name="png_bytes")
def png_bytes_fixture():
    return make_image("PNG")

@pytest.fixture(name="jpeg_bytes")
def jpeg_bytes_fixture():
    return make_image("JPEG", color=(30, 30, 200))

@pytest.fixture(name="make_blog")
def make_blog_fixture(session: Session):
    def _make_blog(
        title: str = "Test Blog",
        author: str = "Test Author",
        content: str = "Some content",
        cover_image=None
    ) -> BlogPost:
        return blog_crud.create_blog_post(
            session,
            {"title": title, "author": author, "content": content},
            cover_image=cover_image
        )
    return _make_blog
