"""
Shared fixtures for storage adapter tests.
"""

import pytest

from ghost_azure_storage.config import Settings, StorageConfig, get_settings
from ghost_azure_storage.storage import AzureBlobStore, UploadedFile
from tests.fakes import FakeBlobServiceClient, RecordingLogger

ENV_VARS = (
    "AZURE_STORAGE_ACCOUNT",
    "AZURE_STORAGE_ACCESS_KEY",
    "AZURE_STORAGE_CONTAINER",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real Azure credentials out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def blob_service() -> FakeBlobServiceClient:
    return FakeBlobServiceClient()


@pytest.fixture
def factory_calls() -> list[tuple[str, str]]:
    return []


@pytest.fixture
def client_factory(blob_service, factory_calls):
    def factory(account_url: str, access_key: str) -> FakeBlobServiceClient:
        factory_calls.append((account_url, access_key))
        return blob_service

    return factory


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(storage_account="a", access_key="k", container="c")


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def store(storage_config, client_factory, recording_logger) -> AzureBlobStore:
    return AzureBlobStore(
        storage_config,
        client_factory=client_factory,
        logger=recording_logger,
    )


@pytest.fixture
def container(blob_service, storage_config):
    return blob_service.get_container_client(storage_config.container)


@pytest.fixture
def uploaded_file(tmp_path) -> UploadedFile:
    path = tmp_path / "upload_3f9a.tmp"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake image payload")
    return UploadedFile(path=str(path), name="x.png")
