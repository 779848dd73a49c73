"""
Unit tests for api.py
Tests FastAPI endpoints with a stubbed query pipeline.
"""
import pytest
from unittest.mock import AsyncMock, Mock, patch
from fastapi.testclient import TestClient

from session_analyzer.api import app, get_pipeline
from session_analyzer.exceptions import (
    AnalysisError,
    DataStoreError,
    NotInitializedError,
    QueryExecutionError,
    QueryRepairError,
    TranslationError,
)
from session_analyzer.models import HealthResponse, QueryResponse


@pytest.fixture
def pipeline():
    pipeline = Mock()
    pipeline.process_query = AsyncMock()
    pipeline.health_check = AsyncMock()
    return pipeline


@pytest.fixture
def client(pipeline):
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestQueryEndpoint:
    """Test the /api/query endpoint."""

    def test_successful_query(self, client, pipeline):
        pipeline.process_query.return_value = QueryResponse(
            query="Average rating for Rishi Bollu",
            resultCount=1,
            analysis="Rishi Bollu averages 4.3 out of 5.",
            rawResults=[{"_id": None, "avgRating": 4.3}],
            executionTime="2024-05-01T10:00:00+00:00",
        )

        response = client.post("/api/query", json={"query": "Average rating for Rishi Bollu"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["resultCount"] == 1
        assert "4.3" in data["analysis"]
        assert data["rawResults"] == [{"_id": None, "avgRating": 4.3}]
        pipeline.process_query.assert_awaited_once_with("Average rating for Rishi Bollu")

    def test_query_is_trimmed(self, client, pipeline):
        pipeline.process_query.return_value = QueryResponse(
            query="Sessions in 2024", resultCount=0, analysis="None found.", executionTime="t"
        )

        client.post("/api/query", json={"query": "  Sessions in 2024  "})

        pipeline.process_query.assert_awaited_once_with("Sessions in 2024")

    @pytest.mark.parametrize("body", [{"query": ""}, {"query": "   "}, {}, {"question": "x"}])
    def test_missing_query(self, client, pipeline, body):
        response = client.post("/api/query", json=body)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Query is required"}
        pipeline.process_query.assert_not_called()

    def test_query_too_long(self, client, pipeline):
        response = client.post("/api/query", json={"query": "a" * 5000})

        assert response.status_code == 400
        assert "too long" in response.json()["error"]
        pipeline.process_query.assert_not_called()

    def test_invalid_json(self, client, pipeline):
        response = client.post(
            "/api/query",
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.parametrize("error", [
        TranslationError("Invalid MongoDB query generated: Query must be an array"),
        QueryExecutionError(2, "unknown operator"),
        QueryRepairError("timeout", 1, "bad stage"),
        AnalysisError("Failed to analyze results: empty response"),
        NotInitializedError("SessionRepository"),
    ])
    def test_pipeline_errors_return_user_message(self, client, pipeline, error):
        pipeline.process_query.side_effect = error

        response = client.post("/api/query", json={"query": "Average rating for Rishi Bollu"})

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error"] == error.user_message

    def test_unexpected_error(self, client, pipeline):
        pipeline.process_query.side_effect = RuntimeError("boom")

        response = client.post("/api/query", json={"query": "anything"})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "An error occurred while processing your query",
        }


class TestHealthEndpoint:

    def test_healthy(self, client, pipeline):
        pipeline.health_check.return_value = HealthResponse(
            message="Server and database are healthy",
            contextInitialized=True,
            documentCount=1113,
            timestamp="2024-05-01T10:00:00+00:00",
        )

        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["contextInitialized"] is True
        assert data["documentCount"] == 1113

    def test_database_down(self, client, pipeline):
        pipeline.health_check.side_effect = DataStoreError("Database test failed: no servers")

        response = client.get("/api/health")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Database connection failed"}


class TestUnknownRoutes:

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/unknown"),
        ("post", "/api/sessions/export"),
        ("get", "/api/query"),
    ])
    def test_unknown_api_route(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "API endpoint not found"}


class TestLifespan:

    @patch('session_analyzer.api.ServiceContainer')
    def test_startup_and_shutdown(self, mock_container_cls):
        services = Mock()
        services.startup = AsyncMock()
        services.shutdown = AsyncMock()
        services.pipeline.health_check = AsyncMock(return_value=HealthResponse(
            message="Server and database are healthy",
            contextInitialized=True,
            documentCount=3,
            timestamp="t",
        ))
        mock_container_cls.return_value = services

        with TestClient(app) as client:
            response = client.get("/api/health")
            assert response.status_code == 200
            services.startup.assert_awaited_once()

        services.shutdown.assert_awaited_once()
