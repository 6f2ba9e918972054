"""
Stored asset references.

A cover image is stored on the row as its public URL (``/uploads/<file>``) and
lives on disk as ``<UPLOAD_DIR>/<file>``. ``AssetRef`` converts between the two
so callers never slice path strings by hand.
"""
from dataclasses import dataclass
from pathlib import Path, PurePosixPath


@dataclass(frozen=True)
class AssetRef:
    filename: str
    url_prefix: str = "/uploads"

    def __post_init__(self):
        name = PurePosixPath(self.filename).name
        if not name or name in (".", "..") or name != self.filename:
            raise ValueError(f"Invalid asset filename: {self.filename!r}")
        object.__setattr__(self, "url_prefix", "/" + self.url_prefix.strip("/"))

    @classmethod
    def from_url(cls, value: str, url_prefix: str = "/uploads") -> "AssetRef":
        """
        Build a reference from a stored URL or relative path.

        Only the last path component is kept, so ``/uploads/a.png``,
        ``uploads/a.png`` and ``a.png`` all refer to the same file and a stored
        value can never point outside the upload root.
        """
        name = PurePosixPath(value.replace("\\", "/")).name
        return cls(filename=name, url_prefix=url_prefix)

    @property
    def url(self) -> str:
        return f"{self.url_prefix}/{self.filename}"

    @property
    def extension(self) -> str:
        return PurePosixPath(self.filename).suffix.lower()

    def path(self, root: Path) -> Path:
        return Path(root) / self.filename

    def __str__(self) -> str:
        return self.url
