"""
HTTP glue for serving stored media.
"""

from ghost_azure_storage.web.app import create_app

__all__ = ["create_app"]
