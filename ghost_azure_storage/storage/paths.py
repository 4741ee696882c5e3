"""
Blob path utilities for consistent path generation.
"""

import posixpath
from datetime import datetime, timezone


class BlobPaths:
    """
    Standardized blob path and URL generation.

    Container structure:
    - {YYYY}/{MM}/{name}.{ext}        -> Uploaded media, grouped by upload month
    - {YYYY}/{MM}/{name}-{n}.{ext}    -> Same name uploaded again in that month
    """

    PROTOCOL = "https"
    DOMAIN = "blob.core.windows.net"
    SEPARATOR = "/"

    @staticmethod
    def target_dir(now: datetime | None = None) -> str:
        """Default target directory for uploads, e.g. "2024/01"."""
        now = now or datetime.now(timezone.utc)
        return now.strftime("%Y/%m")

    @staticmethod
    def join(target_dir: str, filename: str) -> str:
        """
        Join a target directory and a file name into a blob name.

        Args:
            target_dir: Directory prefix like "2024/01" (may be empty)
            filename: File name like "photo.png"

        Returns:
            Blob name like "2024/01/photo.png"
        """
        target_dir = target_dir.replace("\\", BlobPaths.SEPARATOR).strip(BlobPaths.SEPARATOR)
        if not target_dir:
            return filename
        return posixpath.join(target_dir, filename)

    @staticmethod
    def account_url(account: str) -> str:
        """Blob service endpoint for a storage account."""
        return f"{BlobPaths.PROTOCOL}://{account}.{BlobPaths.DOMAIN}"

    @staticmethod
    def public_url(account: str, container: str, blob_name: str) -> str:
        """Public URL for a blob in a public-read container."""
        return f"{BlobPaths.account_url(account)}/{container}/{blob_name}"

    @staticmethod
    def from_request_path(path: str) -> str:
        """Blob name for a request path: drops one leading separator."""
        return path.removeprefix(BlobPaths.SEPARATOR)

    @staticmethod
    def split_name(filename: str) -> tuple[str, str]:
        """
        Split a file name into stem and extension.

        Args:
            filename: Name like "photo.png" or a path like "/tmp/photo.png"

        Returns:
            Tuple of (stem, extension) like ("photo", ".png")
        """
        base = posixpath.basename(filename.replace("\\", BlobPaths.SEPARATOR))
        stem, ext = posixpath.splitext(base)
        return stem, ext

    @staticmethod
    def get_extension(path: str) -> str:
        """Get file extension from path."""
        return path.rsplit(".", 1)[-1] if "." in path else ""

    @staticmethod
    def content_type(filename: str) -> str:
        """Get MIME type from file extension."""
        return CONTENT_TYPES.get(BlobPaths.get_extension(filename).lower(), DEFAULT_CONTENT_TYPE)


DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "svgz": "image/svg+xml",
    "ico": "image/x-icon",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "ogv": "video/ogg",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "pdf": "application/pdf",
    "json": "application/json",
}
