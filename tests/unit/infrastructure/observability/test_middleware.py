"""Unit tests for RequestLoggingMiddleware."""

import logging
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from artcache.infrastructure.observability.middleware import RequestLoggingMiddleware


class TestRequestLoggingMiddleware:
    """Test suite for RequestLoggingMiddleware."""

    @pytest.fixture
    def app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/image.php")
        async def image_endpoint():
            return {"message": "test"}

        @app.get("/missing")
        async def missing_endpoint():
            from fastapi import HTTPException

            raise HTTPException(status_code=404)

        @app.get("/error")
        async def error_endpoint():
            raise ValueError("Test error")

        return app

    @pytest.fixture
    def client(self, app: FastAPI) -> TestClient:
        return TestClient(app)

    def test_successful_request_logs_at_debug(self, client: TestClient):
        with patch("artcache.infrastructure.observability.middleware.logger") as mock_logger:
            response = client.get("/image.php?object_id=1")

            assert response.status_code == 200
            assert mock_logger.log.call_count == 1
            level, message, *args = mock_logger.log.call_args[0]
            assert level == logging.DEBUG
            assert "/image.php" in args
            assert 200 in args

    def test_client_errors_log_at_info(self, client: TestClient):
        with patch("artcache.infrastructure.observability.middleware.logger") as mock_logger:
            response = client.get("/missing")

            assert response.status_code == 404
            assert mock_logger.log.call_args[0][0] == logging.INFO

    def test_correlation_id_from_header(self, client: TestClient):
        with (
            patch(
                "artcache.infrastructure.observability.middleware.set_correlation_id"
            ) as mock_set_correlation_id,
            patch(
                "artcache.infrastructure.observability.middleware.get_correlation_id",
                return_value="custom-correlation-id",
            ),
        ):
            response = client.get("/image.php", headers={"X-Correlation-ID": "custom-correlation-id"})

            mock_set_correlation_id.assert_called_once_with("custom-correlation-id")
            assert response.headers["X-Correlation-ID"] == "custom-correlation-id"

    def test_correlation_id_generated_without_header(self, client: TestClient):
        response = client.get("/image.php")
        assert len(response.headers["X-Correlation-ID"]) == 36

    def test_error_request_logs_exception(self, client: TestClient):
        with patch("artcache.infrastructure.observability.middleware.logger") as mock_logger:
            with pytest.raises(ValueError):
                client.get("/error")

            assert mock_logger.exception.call_count == 1
            args = mock_logger.exception.call_args[0]
            assert "GET" in args
            assert "/error" in args
