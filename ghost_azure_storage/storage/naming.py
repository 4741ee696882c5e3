"""
Collision-free blob naming for uploads.
"""

from collections.abc import Awaitable, Callable

import structlog

from ghost_azure_storage.storage.base import UploadedFile
from ghost_azure_storage.storage.paths import BlobPaths

logger = structlog.get_logger(__name__)

ExistsCheck = Callable[[str], Awaitable[bool]]


class UniqueNameGenerator:
    """
    Picks a blob name that does not exist yet.

    Tries "{dir}/{stem}{ext}", then "{dir}/{stem}-1{ext}", "{dir}/{stem}-2{ext}", ...
    until the exists check reports the name as free.
    """

    def __init__(self, max_attempts: int = 1000):
        self.max_attempts = max_attempts

    async def __call__(self, exists: ExistsCheck, file: UploadedFile, target_dir: str) -> str:
        """
        Generate a unique blob name for an upload.

        Args:
            exists: Coroutine function reporting whether a blob name is taken
            file: Uploaded file; only its original name is used
            target_dir: Directory prefix like "2024/01"

        Returns:
            Blob name like "2024/01/photo-1.png"
        """
        stem, ext = BlobPaths.split_name(file.name)
        for attempt in range(self.max_attempts):
            suffix = f"-{attempt}" if attempt else ""
            candidate = BlobPaths.join(target_dir, f"{stem}{suffix}{ext}")
            if not await exists(candidate):
                if attempt:
                    logger.debug("Resolved name collision", name=candidate, attempts=attempt)
                return candidate

        raise RuntimeError(
            f"Could not find a free blob name for {file.name!r} after {self.max_attempts} attempts"
        )
