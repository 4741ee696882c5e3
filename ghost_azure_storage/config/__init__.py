"""
Configuration management for the Azure blob storage adapter.
"""

from ghost_azure_storage.config.settings import Settings, StorageConfig, get_settings

__all__ = ["Settings", "StorageConfig", "get_settings"]
