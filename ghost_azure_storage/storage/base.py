"""
Storage contract shared with the content host.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from starlette.requests import Request
from starlette.responses import Response

RequestHandler = Callable[[Request], Awaitable[Response]]


@dataclass(frozen=True)
class UploadedFile:
    """A file the host has already written to local temp storage."""

    path: str
    name: str
    content_type: str | None = None


@dataclass(frozen=True)
class ServeOptions:
    """Options passed by the host when it mounts a serve handler."""

    is_theme: bool = False
    extra: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class StorageAdapter(Protocol):
    """Capabilities the host expects from any storage backend."""

    async def save(self, file: UploadedFile, target_dir: str | None = None) -> str: ...

    async def exists(self, filename: str) -> bool: ...

    def serve(self, options: ServeOptions | None = None) -> RequestHandler: ...

    async def delete(self, filename: str, target_dir: str | None = None) -> bool: ...


class LocalFileStore(Protocol):
    """Host-provided store used to serve theme assets from disk."""

    def serve(self, options: ServeOptions | None = None) -> RequestHandler: ...
