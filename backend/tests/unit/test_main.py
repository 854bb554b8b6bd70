"""
Unit tests for main FastAPI application.

Tests the root endpoints, health checks, and global exception handlers.
"""

import json

import pytest
from unittest.mock import Mock, patch
from fastapi import HTTPException
from fastapi.testclient import TestClient

from core.exceptions import DuplicateRegistrationNumberError, RecordPersistenceError
from main import (
    app,
    root,
    health_check,
    global_exception_handler,
    intake_error_handler,
    http_exception_handler,
    value_error_handler,
)


class TestRootEndpoints:
    """Test root API endpoints."""

    def test_root_endpoint(self):
        """Test the root endpoint returns correct information."""
        client = TestClient(app)
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Expediente Clínico Backend API"
        assert data["version"] == "1.0.0"
        assert data["status"] == "running"

    def test_health_endpoint(self):
        """Test the health check endpoint."""
        client = TestClient(app)
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_root_function_directly(self):
        result = await root()
        assert result["status"] == "running"

    @pytest.mark.asyncio
    async def test_health_check_function_directly(self):
        assert await health_check() == {"status": "healthy"}

    def test_unknown_route_uses_error_body(self):
        client = TestClient(app)
        response = client.get("/api/no-existe")

        assert response.status_code == 404
        assert "error" in response.json()


class TestExceptionHandlers:
    """Test global exception handlers."""

    @pytest.mark.asyncio
    async def test_global_exception_handler_hides_details_in_production(self):
        request = Mock()

        with patch("core.config.ENVIRONMENT", "production"), patch("main.logger") as mock_logger:
            response = await global_exception_handler(request, RuntimeError("connection refused"))

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body == {"error": "Error interno del servidor"}
        mock_logger.exception.assert_called_once()

    @pytest.mark.asyncio
    async def test_global_exception_handler_adds_details_in_development(self):
        request = Mock()

        with patch("core.config.ENVIRONMENT", "development"), patch("main.logger"):
            try:
                raise RuntimeError("connection refused")
            except RuntimeError as exc:
                response = await global_exception_handler(request, exc)

        body = json.loads(response.body)
        assert body["error"] == "Error interno del servidor"
        assert "RuntimeError: connection refused" in body["details"]

    @pytest.mark.asyncio
    async def test_intake_error_handler(self):
        response = await intake_error_handler(Mock(), DuplicateRegistrationNumberError("EXP-9"))

        assert response.status_code == 400
        body = json.loads(response.body)
        assert body["error"] == "El número de expediente EXP-9 ya está en uso. Por favor, use otro número."

    @pytest.mark.asyncio
    async def test_intake_error_handler_server_error(self):
        with patch("main.logger") as mock_logger:
            response = await intake_error_handler(Mock(), RecordPersistenceError("Error interno del servidor"))

        assert response.status_code == 500
        mock_logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_http_exception_handler(self):
        response = await http_exception_handler(Mock(), HTTPException(status_code=401, detail="No autenticado"))

        assert response.status_code == 401
        assert json.loads(response.body) == {"error": "No autenticado"}

    @pytest.mark.asyncio
    async def test_value_error_handler(self):
        with patch("main.logger") as mock_logger:
            response = await value_error_handler(Mock(), ValueError("Invalid date format"))

        assert response.status_code == 400
        assert json.loads(response.body) == {"error": "Invalid date format"}
        mock_logger.warning.assert_called_once()

    def test_unhandled_exception_through_app(self, doctor, auth_headers):
        client = TestClient(app, raise_server_exceptions=False)

        with patch("api.patients.PatientService.list_patients", side_effect=RuntimeError("boom")):
            response = client.get("/api/pacientes", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["error"] == "Error interno del servidor"
        assert "details" not in response.json()
