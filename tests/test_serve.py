"""
Tests for the serve middleware and the media server app.
"""

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from ghost_azure_storage import __version__
from ghost_azure_storage.storage import AzureBlobStore, ServeOptions
from ghost_azure_storage.web import create_app
from tests.fakes import server_error


def make_request(path: str, path_params: dict | None = None) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": path,
            "path_params": path_params or {},
            "headers": [],
            "query_string": b"",
        }
    )


@pytest.fixture
def client(store, settings) -> TestClient:
    return TestClient(create_app(store=store, settings=settings, configure_logs=False))


class TestServeHandler:
    """Tests for the request handler returned by serve()."""

    @pytest.mark.asyncio
    async def test_not_found(self, store):
        """Test a missing blob gives an empty 404."""
        handler = store.serve()

        response = await handler(make_request("/img/q.png"))

        assert response.status_code == 404
        assert response.body == b""

    @pytest.mark.asyncio
    async def test_strips_leading_separator(self, store, blob_service):
        """Test the request path maps to the blob name."""
        handler = store.serve()

        await handler(make_request("/img/q.png"))

        assert blob_service.calls[0] == ("get_blob_properties", "c", "img/q.png")

    @pytest.mark.asyncio
    async def test_uses_path_param(self, store, blob_service):
        """Test a mounted route's path parameter is preferred."""
        handler = store.serve()

        await handler(make_request("/content/images/2024/01/x.png", {"path": "2024/01/x.png"}))

        assert blob_service.calls[0] == ("get_blob_properties", "c", "2024/01/x.png")

    @pytest.mark.asyncio
    async def test_found_streams(self, store, container):
        """Test an existing blob produces a streaming 200."""
        container.put("img/q.png", b"0123456789", "image/png")
        handler = store.serve()

        response = await handler(make_request("/img/q.png"))

        assert response.status_code == 200
        assert response.media_type == "image/png"
        assert response.headers["content-length"] == "10"
        body = b"".join([chunk async for chunk in response.body_iterator])
        assert body == b"0123456789"

    @pytest.mark.asyncio
    async def test_metadata_error(self, store, blob_service, recording_logger):
        """Test a non-404 metadata failure gives an empty 500."""
        blob_service.failures["get_blob_properties"] = server_error()
        handler = store.serve()

        response = await handler(make_request("/img/q.png"))

        assert response.status_code == 500
        assert response.body == b""
        assert recording_logger.events[-1][:2] == ("error", "Failed to read blob")

    @pytest.mark.asyncio
    async def test_download_error(self, store, blob_service, container):
        """Test a failure opening the download gives a 500."""
        container.put("img/q.png", b"data", "image/png")
        blob_service.failures["download_blob"] = server_error()
        handler = store.serve()

        response = await handler(make_request("/img/q.png"))

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_stream_interrupted(self, store, blob_service, container, recording_logger):
        """Test a mid-stream failure is logged and aborts the body."""
        container.put("img/q.png", b"0123456789", "image/png")
        blob_service.stream_fail_after = 1
        handler = store.serve()

        response = await handler(make_request("/img/q.png"))

        chunks = []
        with pytest.raises(OSError):
            async for chunk in response.body_iterator:
                chunks.append(chunk)

        assert chunks == [b"0123"]
        assert recording_logger.events[-1][:2] == ("error", "Blob stream interrupted")

    @pytest.mark.asyncio
    async def test_theme_without_local_store(self, store, container):
        """Test theme requests get 404 even when the blob exists."""
        container.put("img/q.png", b"data", "image/png")
        handler = store.serve(ServeOptions(is_theme=True))

        response = await handler(make_request("/img/q.png"))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_independent_handlers(self, store, container):
        """Test handlers from separate serve() calls share the client only."""
        container.put("a.png", b"a", "image/png")
        first = store.serve()
        second = store.serve()

        a = await first(make_request("/a.png"))
        b = await second(make_request("/b.png"))

        assert a.status_code == 200
        assert b.status_code == 404


class TestMediaServer:
    """Tests for the FastAPI app mounting serve()."""

    def test_serves_blob(self, client, container):
        container.put("2024/01/x.png", b"png-bytes", "image/png")

        response = client.get("/content/images/2024/01/x.png")

        assert response.status_code == 200
        assert response.content == b"png-bytes"
        assert response.headers["content-type"] == "image/png"

    def test_missing_blob(self, client):
        response = client.get("/content/images/img/q.png")

        assert response.status_code == 404
        assert response.content == b""

    def test_server_error(self, client, blob_service):
        blob_service.failures["get_blob_properties"] = server_error()

        response = client.get("/content/images/2024/01/x.png")

        assert response.status_code == 500
        assert response.content == b""

    def test_theme_assets_not_from_blob(self, client, container, blob_service):
        container.put("css/screen.css", b"body{}", "text/css")

        response = client.get("/assets/css/screen.css")

        assert response.status_code == 404
        assert blob_service.calls == []

    def test_theme_assets_from_local_store(self, storage_config, client_factory, settings):
        class LocalStore:
            def serve(self, options=None):
                async def handler(request: Request):
                    return PlainTextResponse(f"local:{request.path_params['path']}")

                return handler

        store = AzureBlobStore(storage_config, local_store=LocalStore(), client_factory=client_factory)
        client = TestClient(create_app(store=store, settings=settings, configure_logs=False))

        response = client.get("/assets/css/screen.css")

        assert response.status_code == 200
        assert response.text == "local:css/screen.css"

    def test_closes_store_on_shutdown(self, store, settings, blob_service):
        app = create_app(store=store, settings=settings, configure_logs=False)

        with TestClient(app):
            pass

        assert blob_service.closed

    def test_reports_package_version(self, store, settings):
        app = create_app(store=store, settings=settings, configure_logs=False)
        assert app.version == __version__
