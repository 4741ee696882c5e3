"""
Storage adapter errors.

Remote failures are not wrapped: callers see the Azure SDK's own
``ResourceNotFoundError`` / ``HttpResponseError`` types.
"""


class StorageError(Exception):
    """Base class for adapter errors."""


class StorageConfigurationError(StorageError):
    """Raised before any network call when credentials or container are missing."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "ghost-azure-storage is not configured (missing: " + ", ".join(missing) + ")"
        )
