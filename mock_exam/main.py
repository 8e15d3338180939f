# mock_exam/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import config
from .core.database import close_attempt_repository
from .core.ai_services import close_ai_service
from .core.exceptions import MockExamError
from .services.exam_service import get_exam_service
from .api.routes import router

# Setup logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info("🚀 Mock Exam API starting...")

    validation = config.validate()
    if not validation["valid"]:
        raise RuntimeError(f"Configuration invalid: {validation['issues']}")
    logger.info("✅ Configuration validated")

    service_health = get_exam_service().health_check()
    if service_health["status"] != "healthy":
        logger.warning(f"Exam service health warning: {service_health}")
    else:
        candidates = service_health["generation"]["candidates"]
        logger.info(f"📚 Generation chain: {candidates + ['local']}")

    logger.info("✅ All systems operational")

    yield

    # Cleanup on shutdown
    logger.info("👋 Shutting down...")
    try:
        close_attempt_repository()
        close_ai_service()
        logger.info("✅ Graceful shutdown completed")
    except Exception as e:
        logger.error(f"❌ Shutdown error: {e}")


# Create FastAPI application
app = FastAPI(
    title=config.API_TITLE,
    description=config.API_DESCRIPTION,
    version=config.API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)


# Exception handlers
@app.exception_handler(MockExamError)
async def mock_exam_error_handler(request: Request, exc: MockExamError):
    """Lifecycle errors, each with its own status code"""
    logger.warning(f"{exc.__class__.__name__}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.__class__.__name__,
            "message": str(exc),
            "type": exc.error_type
        }
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies; rejected inputs are not echoed back"""
    logger.warning(f"Request validation failed: {len(exc.errors())} error(s)")
    return JSONResponse(
        status_code=422,
        content={
            "error": "Request Validation Error",
            "detail": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()],
            "type": "request_validation_error"
        }
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle validation errors"""
    logger.warning(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation Error",
            "message": str(exc),
            "type": "validation_error"
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "type": "server_error"
        }
    )


# Health check endpoints
@app.get("/health")
async def health_check():
    """Comprehensive health check"""
    try:
        service_health = get_exam_service().health_check()
        return {
            "status": service_health["status"],
            "service": "mock_exam_api",
            "version": config.API_VERSION,
            "storage": service_health.get("storage"),
            "generation": service_health.get("generation"),
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "service": "mock_exam_api",
                "error": str(e)
            }
        )


@app.get("/info")
async def api_info():
    """API information and capabilities"""
    return {
        "name": config.API_TITLE,
        "version": config.API_VERSION,
        "description": config.API_DESCRIPTION,
        "features": {
            "provider_fallback": True,
            "local_generation": True,
            "mongodb_storage": not config.USE_MEMORY_STORE
        },
        "configuration": {
            "providers": config.configured_providers,
            "default_questions": config.DEFAULT_QUESTION_COUNT,
            "question_range": [config.MIN_QUESTIONS, config.MAX_QUESTIONS],
            "recent_attempts_limit": config.RECENT_ATTEMPTS_LIMIT
        },
        "endpoints": {
            "generate_exam": "POST /api/exams/generate",
            "create_attempt": "POST /api/attempts",
            "submit_attempt": "POST /api/attempts/{attempt_id}/submit",
            "list_attempts": "GET /api/attempts",
            "get_attempt": "GET /api/attempts/{attempt_id}",
            "health": "GET /health",
            "docs": "GET /docs"
        }
    }


if __name__ == "__main__":
    import uvicorn

    logger.info("🚀 Starting Mock Exam API")
    logger.info(f"🌐 Server: http://{config.API_HOST}:{config.API_PORT}")
    logger.info(f"📚 Docs: http://{config.API_HOST}:{config.API_PORT}/docs")

    uvicorn.run(
        "mock_exam.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower()
    )
