"""
Azure Blob Storage integration.
"""

from ghost_azure_storage.storage.base import (
    LocalFileStore,
    RequestHandler,
    ServeOptions,
    StorageAdapter,
    UploadedFile,
)
from ghost_azure_storage.storage.blob import AzureBlobStore, get_blob_store
from ghost_azure_storage.storage.exceptions import StorageConfigurationError, StorageError
from ghost_azure_storage.storage.naming import UniqueNameGenerator
from ghost_azure_storage.storage.paths import BlobPaths

__all__ = [
    # Adapter
    "AzureBlobStore",
    "get_blob_store",
    # Contract
    "StorageAdapter",
    "LocalFileStore",
    "RequestHandler",
    "ServeOptions",
    "UploadedFile",
    # Helpers
    "BlobPaths",
    "UniqueNameGenerator",
    # Errors
    "StorageError",
    "StorageConfigurationError",
]
