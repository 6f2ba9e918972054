import pytest
from pathlib import Path

from blog_api.core.assets import AssetRef

class TestAssetRef:
    @pytest.mark.parametrize("value", ["/uploads/cover.png", "uploads/cover.png", "cover.png"])
    def test_from_url_normalizes(self, value):
        ref = AssetRef.from_url(value)
        assert ref.filename == "cover.png"
        assert ref.url == "/uploads/cover.png"

    def test_custom_prefix(self):
        ref = AssetRef("cover.png", url_prefix="static/images/")
        assert ref.url == "/static/images/cover.png"

    def test_path_stays_under_root(self, tmp_path):
        ref = AssetRef.from_url("/uploads/../../etc/passwd")
        assert ref.path(tmp_path) == Path(tmp_path) / "passwd"

    def test_extension(self):
        assert AssetRef("photo.JPG").extension == ".jpg"

    @pytest.mark.parametrize("filename", ["", "..", "nested/cover.png"])
    def test_rejects_invalid_filename(self, filename):
        with pytest.raises(ValueError):
            AssetRef(filename)

    def test_equal_references(self):
        assert AssetRef.from_url("/uploads/a.png") == AssetRef("a.png")
