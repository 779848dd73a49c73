from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from session_analyzer.config import (
    APP_ENV,
    CORS_ALLOW_CREDENTIALS,
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_MAX_AGE,
    CORS_ORIGINS,
    LOG_LEVEL,
)
from session_analyzer.exceptions import SessionAnalyzerError
from session_analyzer.logging_config import get_logger, setup_logging
from session_analyzer.models import QueryRequest
from session_analyzer.services.container import ServiceContainer
from session_analyzer.services.query_pipeline import QueryPipeline

setup_logging(log_level=LOG_LEVEL, enable_redaction=True)
logger = get_logger("session_analyzer")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build and initialize the pipeline once; disconnect on shutdown."""
    logger.info("🔄 Initializing application...")
    services = ServiceContainer()
    app.state.services = services

    try:
        await services.startup()
        logger.info("✅ Application ready!")
    except SessionAnalyzerError as e:
        logger.error(f"❌ Failed to initialize: {e}")
        # Production keeps serving so the health probe can report the failure
        if APP_ENV != "production":
            raise

    yield

    await services.shutdown()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Session Analyzer API",
    description="Ask English questions about session ratings and get analyzed answers",
    version="1.0.0",
    lifespan=lifespan
)

logger.info(f"🔒 CORS:mode - Allowing origins: {CORS_ORIGINS}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_ALLOW_CREDENTIALS,
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
    max_age=CORS_MAX_AGE,
)


def get_pipeline(request: Request) -> QueryPipeline:
    return request.app.state.services.pipeline


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.post("/api/query", response_model=Dict[str, Any])
async def process_query(http_request: Request, pipeline: QueryPipeline = Depends(get_pipeline)):
    """
    Translate the question into a pipeline, execute it, and analyze the results.
    """
    try:
        request_data = await http_request.json()
    except ValueError:
        return _error(400, "Invalid request format")

    if not isinstance(request_data, dict):
        return _error(400, "Invalid request format")

    try:
        request = QueryRequest(**request_data)
    except ValidationError as e:
        error_msg = "Query is required"
        if e.errors():
            error_detail = e.errors()[0]
            if "too long" in error_detail.get("msg", ""):
                error_msg = error_detail["msg"].replace("Value error, ", "")
        logger.warning(f"Validation failed: {error_msg}")
        return _error(400, error_msg)

    try:
        response = await pipeline.process_query(request.query)
    except SessionAnalyzerError as e:
        logger.error(f"❌ Query processing failed: {e} {e.to_dict()}")
        return _error(500, e.user_message)
    except Exception as e:
        logger.exception(f"Unexpected error processing query: {e}")
        return _error(500, "An error occurred while processing your query")

    logger.info(f"✅ Query answered with {response.resultCount} results")
    return response.model_dump()


@app.get("/api/health", response_model=Dict[str, Any])
async def health(pipeline: QueryPipeline = Depends(get_pipeline)):
    try:
        result = await pipeline.health_check()
    except SessionAnalyzerError as e:
        logger.error(f"Health check failed: {e}")
        return _error(500, "Database connection failed")

    return result.model_dump()


@app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def api_not_found(path: str):
    return _error(404, "API endpoint not found")
