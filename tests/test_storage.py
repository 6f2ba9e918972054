import asyncio
import os
import time
import pytest
from datetime import timedelta

from blog_api.core.assets import AssetRef
from blog_api.core.exceptions import ErrorKind, UploadRejectedError
from blog_api.core.storage import ImageStore, ImageUpload

class TestImageValidation:
    def test_accepts_png(self, image_store: ImageStore, png_bytes):
        upload = ImageUpload(filename="cover.png", content=png_bytes)
        assert image_store.validate(upload) == "image/png"

    def test_accepts_jpeg(self, image_store: ImageStore, jpeg_bytes):
        upload = ImageUpload(filename="cover.jpg", content=jpeg_bytes)
        assert image_store.validate(upload) == "image/jpeg"

    def test_rejects_non_image(self, image_store: ImageStore):
        upload = ImageUpload(filename="notes.png", content=b"definitely not an image")
        with pytest.raises(UploadRejectedError) as exc_info:
            image_store.validate(upload)
        assert exc_info.value.kind == ErrorKind.upload
        assert exc_info.value.status_code == 400

    def test_rejects_empty_file(self, image_store: ImageStore):
        with pytest.raises(UploadRejectedError):
            image_store.validate(ImageUpload(filename="cover.png", content=b""))

    def test_rejects_oversized_file(self, upload_dir, png_bytes):
        store = ImageStore(upload_dir=str(upload_dir), max_file_size=len(png_bytes) - 1)
        with pytest.raises(UploadRejectedError) as exc_info:
            store.validate(ImageUpload(filename="cover.png", content=png_bytes))
        assert "exceeds maximum" in exc_info.value.message

    def test_rejects_disallowed_type(self, upload_dir, png_bytes):
        store = ImageStore(upload_dir=str(upload_dir), allowed_types=["image/jpeg"])
        with pytest.raises(UploadRejectedError):
            store.validate(ImageUpload(filename="cover.png", content=png_bytes))

class TestFilenames:
    def test_extension_follows_detected_type(self, image_store: ImageStore):
        assert image_store.generate_filename("image/png").endswith(".png")
        assert image_store.generate_filename("image/jpeg").endswith(".jpg")
        assert image_store.generate_filename("image/webp").endswith(".webp")

    def test_client_extension_is_ignored(self, image_store: ImageStore, png_bytes):
        upload = ImageUpload(filename="page.html", content=png_bytes + b"<script>alert(1)</script>")
        ref = asyncio.run(image_store.save(upload))
        assert ref.extension == ".png"

    def test_names_are_unique(self, image_store: ImageStore):
        names = {image_store.generate_filename("image/png") for _ in range(50)}
        assert len(names) == 50

class TestSaveAndDelete:
    def test_save_writes_file(self, image_store: ImageStore, upload_dir, png_bytes):
        ref = asyncio.run(image_store.save(ImageUpload(filename="cover.png", content=png_bytes)))

        assert ref.url.startswith("/uploads/")
        assert (upload_dir / ref.filename).read_bytes() == png_bytes
        assert image_store.exists(ref)

    def test_save_rejects_invalid_upload_without_writing(self, image_store: ImageStore, upload_dir):
        with pytest.raises(UploadRejectedError):
            asyncio.run(image_store.save(ImageUpload(filename="x.png", content=b"nope")))
        assert list(upload_dir.iterdir()) == []

    def test_delete_removes_file(self, image_store: ImageStore, png_bytes):
        ref = asyncio.run(image_store.save(ImageUpload(filename="cover.png", content=png_bytes)))

        assert asyncio.run(image_store.delete(ref)) is True
        assert not image_store.exists(ref)

    def test_delete_missing_file_is_not_an_error(self, image_store: ImageStore):
        assert asyncio.run(image_store.delete(AssetRef("missing.png"))) is False

    def test_ref_from_stored_value(self, image_store: ImageStore):
        assert image_store.ref("/uploads/a.png") == AssetRef("a.png", url_prefix="/uploads")

class TestImageInfo:
    def test_info_for_stored_file(self, image_store: ImageStore, png_bytes):
        ref = asyncio.run(image_store.save(ImageUpload(filename="cover.png", content=png_bytes)))

        info = image_store.info(ref.filename)
        assert info is not None
        assert info.filename == ref.filename
        assert info.size == len(png_bytes)
        assert info.type == ".png"
        assert info.url == ref.url

    def test_info_for_missing_file(self, image_store: ImageStore):
        assert image_store.info("missing.png") is None

    def test_info_ignores_directories(self, image_store: ImageStore, upload_dir):
        assert image_store.info("..") is None

class TestOrphanSweep:
    def _age(self, path, seconds: int):
        old = time.time() - seconds
        os.utime(path, (old, old))

    def test_removes_old_unreferenced_files(self, image_store: ImageStore, upload_dir):
        (upload_dir / "kept.png").write_bytes(b"a")
        (upload_dir / "orphan.png").write_bytes(b"b")
        self._age(upload_dir / "kept.png", 7200)
        self._age(upload_dir / "orphan.png", 7200)

        removed = image_store.sweep_orphans({"kept.png"}, older_than=timedelta(hours=1))

        assert removed == ["orphan.png"]
        assert (upload_dir / "kept.png").exists()
        assert not (upload_dir / "orphan.png").exists()

    def test_keeps_recent_files(self, image_store: ImageStore, upload_dir):
        (upload_dir / "fresh.png").write_bytes(b"a")

        assert image_store.sweep_orphans(set(), older_than=timedelta(hours=1)) == []
        assert (upload_dir / "fresh.png").exists()

    def test_dry_run_keeps_files(self, image_store: ImageStore, upload_dir):
        (upload_dir / "orphan.png").write_bytes(b"b")
        self._age(upload_dir / "orphan.png", 7200)

        assert image_store.sweep_orphans(set(), dry_run=True) == ["orphan.png"]
        assert (upload_dir / "orphan.png").exists()
