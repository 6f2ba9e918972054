# blog_api/routers/images.py
from fastapi import APIRouter, Depends

from blog_api.core.deps import get_image_store
from blog_api.core.exceptions import BlogNotFoundError
from blog_api.core.storage import ImageStore
from blog_api.schemas.blog import ImageInfoRead
from blog_api.schemas.common import ApiResponse

router = APIRouter(prefix="/image", tags=["images"])


@router.get("/{filename}", response_model=ApiResponse[ImageInfoRead])
def get_image_info(
    filename: str,
    images: ImageStore = Depends(get_image_store)
):
    """Size, upload time, type and public URL of a stored cover image."""
    info = images.info(filename)
    if info is None:
        raise BlogNotFoundError("Image not found")
    return ApiResponse[ImageInfoRead](data=ImageInfoRead.model_validate(info))
