"""
Azure Blob Storage adapter.
"""

from collections.abc import AsyncIterator, Callable, Mapping
from functools import lru_cache
from typing import Any

import structlog
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient, StorageStreamDownloader
from starlette.requests import Request
from starlette.responses import Response, StreamingResponse

from ghost_azure_storage.config import Settings, StorageConfig
from ghost_azure_storage.storage.base import (
    LocalFileStore,
    RequestHandler,
    ServeOptions,
    UploadedFile,
)
from ghost_azure_storage.storage.exceptions import StorageConfigurationError
from ghost_azure_storage.storage.naming import UniqueNameGenerator
from ghost_azure_storage.storage.paths import BlobPaths

ClientFactory = Callable[[str, str], BlobServiceClient]

# Uploaded media is read anonymously straight from the blob endpoint
PUBLIC_ACCESS_LEVEL = "blob"

# Transfer sizes for the real client. The SDK defaults (32 MiB single GET,
# 64 MiB single PUT) would hold most media files whole in memory.
TRANSFER_CHUNK_SIZE = 4 * 1024 * 1024


def default_client_factory(account_url: str, access_key: str) -> BlobServiceClient:
    """Build an async BlobServiceClient authenticated with the account key."""
    return BlobServiceClient(
        account_url,
        credential=access_key,
        max_single_get_size=TRANSFER_CHUNK_SIZE,
        max_chunk_get_size=TRANSFER_CHUNK_SIZE,
        max_single_put_size=TRANSFER_CHUNK_SIZE,
        max_block_size=TRANSFER_CHUNK_SIZE,
    )


async def not_found(request: Request) -> Response:
    """Handler that answers every request with an empty 404."""
    return Response(status_code=404)


class AzureBlobStore:
    """
    Stores uploaded media in an Azure Blob Storage container.

    Implements the host's storage contract (save / exists / serve / delete).
    The service client is created lazily on first use and reused for the
    lifetime of the store.
    """

    def __init__(
        self,
        config: StorageConfig | Mapping[str, Any] | None = None,
        *,
        settings: Settings | None = None,
        local_store: LocalFileStore | None = None,
        name_generator: UniqueNameGenerator | None = None,
        client_factory: ClientFactory | None = None,
        logger=None,
    ):
        if isinstance(config, StorageConfig):
            self.config = config
        else:
            self.config = StorageConfig.resolve(config, settings)

        self.local_store = local_store
        self.name_generator = name_generator or UniqueNameGenerator()
        self.client_factory = client_factory or default_client_factory
        self.logger = logger or structlog.get_logger(__name__)
        self._service_client: BlobServiceClient | None = None

    async def __aenter__(self) -> "AzureBlobStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def ensure_client(self) -> BlobServiceClient:
        """
        Get the blob service client, creating it on first call.

        Raises:
            StorageConfigurationError: If account, access key or container is missing
        """
        missing = self.config.missing_fields
        if missing:
            raise StorageConfigurationError(missing)

        if self._service_client is None:
            self._service_client = self.client_factory(
                BlobPaths.account_url(self.config.storage_account),
                self.config.access_key_str,
            )
            self.logger.info(
                "Created blob service client",
                account=self.config.storage_account,
                container=self.config.container,
            )
        return self._service_client

    def container_client(self) -> ContainerClient:
        """Get a client for the configured container."""
        return self.ensure_client().get_container_client(self.config.container)

    async def close(self) -> None:
        """Close the underlying service client, if one was created."""
        if self._service_client is not None:
            await self._service_client.close()

    async def ensure_container_exists(self) -> None:
        """Create the container with public blob access if it doesn't exist."""
        container = self.container_client()
        try:
            await container.create_container(public_access=PUBLIC_ACCESS_LEVEL)
            self.logger.info("Created container", container=self.config.container)
        except ResourceExistsError:
            pass

    def public_url(self, blob_name: str) -> str:
        """Get the public URL for a blob in the configured container."""
        return BlobPaths.public_url(self.config.storage_account, self.config.container, blob_name)

    async def save(self, file: UploadedFile, target_dir: str | None = None) -> str:
        """
        Upload a local file under a unique name.

        Args:
            file: Temp file written by the host
            target_dir: Directory prefix (defaults to the current "YYYY/MM")

        Returns:
            Public URL of the uploaded blob
        """
        target_dir = target_dir or BlobPaths.target_dir()
        self.ensure_client()

        try:
            blob_name = await self.name_generator(self.exists, file, target_dir)
            await self.ensure_container_exists()

            blob_client = self.container_client().get_blob_client(blob_name)
            content_settings = ContentSettings(
                content_type=file.content_type or BlobPaths.content_type(file.name)
            )
            with open(file.path, "rb") as data:
                await blob_client.upload_blob(
                    data,
                    overwrite=False,
                    content_settings=content_settings,
                )
        except Exception as e:
            self.logger.error("Failed to upload file", source=file.path, error=str(e))
            raise

        self.logger.info("Uploaded file", source=file.path, blob=blob_name)
        return self.public_url(blob_name)

    async def exists(self, filename: str) -> bool:
        """Check if a blob exists; other remote errors propagate."""
        blob_client = self.container_client().get_blob_client(filename)
        try:
            await blob_client.get_blob_properties()
        except ResourceNotFoundError:
            return False
        return True

    def serve(self, options: ServeOptions | None = None) -> RequestHandler:
        """
        Build a request handler that streams blobs to the client.

        Theme requests never touch blob storage: they go to the local store,
        or get a 404 when none was given.
        """
        options = options or ServeOptions()

        if options.is_theme:
            if self.local_store is not None:
                return self.local_store.serve(options)
            return not_found

        self.ensure_client()
        store = self

        async def handle(request: Request) -> Response:
            blob_name = BlobPaths.from_request_path(
                request.path_params.get("path", request.url.path)
            )
            blob_client = store.container_client().get_blob_client(blob_name)

            try:
                properties = await blob_client.get_blob_properties()
                downloader = await blob_client.download_blob()
            except ResourceNotFoundError:
                return Response(status_code=404)
            except Exception as e:
                store.logger.error("Failed to read blob", blob=blob_name, error=str(e))
                return Response(status_code=500)

            return StreamingResponse(
                store.stream_chunks(downloader, blob_name),
                media_type=properties.content_settings.content_type,
                headers={"Content-Length": str(properties.size)},
            )

        return handle

    async def stream_chunks(
        self, downloader: StorageStreamDownloader, blob_name: str
    ) -> AsyncIterator[bytes]:
        """Yield blob content chunk by chunk, logging interrupted streams."""
        try:
            async for chunk in downloader.chunks():
                yield chunk
        except Exception as e:
            self.logger.error("Blob stream interrupted", blob=blob_name, error=str(e))
            raise

    async def delete(self, filename: str, target_dir: str | None = None) -> bool:
        """
        Delete a blob.

        Returns:
            True if deleted, False if the delete failed for any reason
        """
        target_dir = target_dir or BlobPaths.target_dir()
        blob_name = BlobPaths.join(target_dir, filename)
        container = self.container_client()

        try:
            await container.delete_blob(blob_name)
        except Exception as e:
            self.logger.error("Failed to delete blob", blob=blob_name, error=str(e))
            return False

        self.logger.info("Deleted file", blob=blob_name)
        return True


@lru_cache
def get_blob_store() -> AzureBlobStore:
    """Get cached blob store configured from the environment."""
    return AzureBlobStore()
