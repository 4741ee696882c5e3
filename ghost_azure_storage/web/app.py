"""
Media server - FastAPI application that streams uploaded media from blob storage.

Mounts the store's serve handlers:
- {images_url_prefix}/{path}  -> blobs in the configured container
- /assets/{path}              -> theme assets from the local fallback store
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ghost_azure_storage import __version__
from ghost_azure_storage.config import Settings, get_settings
from ghost_azure_storage.logging_config import configure_from_settings
from ghost_azure_storage.storage import AzureBlobStore, ServeOptions, get_blob_store


def create_app(
    store: AzureBlobStore | None = None,
    settings: Settings | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """
    Build the media server.

    Args:
        store: Blob store to serve from (defaults to the environment-configured one)
        settings: Application settings (defaults to get_settings())
        configure_logs: Set up structlog from settings
    """
    settings = settings or get_settings()
    store = store or get_blob_store()

    if configure_logs:
        configure_from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await store.close()

    app = FastAPI(
        title="Ghost Azure Storage - Media",
        description="Serve uploaded media from Azure Blob Storage",
        version=__version__,
        lifespan=lifespan,
    )

    prefix = settings.images_url_prefix.rstrip("/")
    app.add_api_route(
        f"{prefix}/{{path:path}}",
        store.serve(),
        methods=["GET"],
        include_in_schema=False,
    )
    app.add_api_route(
        "/assets/{path:path}",
        store.serve(ServeOptions(is_theme=True)),
        methods=["GET"],
        include_in_schema=False,
    )
    return app
