"""
Azure Blob Storage adapter for Ghost-style content hosts.
"""

from ghost_azure_storage.storage import AzureBlobStore, StorageConfigurationError

__all__ = ["AzureBlobStore", "StorageConfigurationError"]

__version__ = "0.3.0"
