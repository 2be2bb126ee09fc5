"""
FastAPI Application Entry Point

Integrates:
  - LLM task endpoints (rewrite, draft, similarity, guardrail)
  - OTP issue/verify endpoints
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 6000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api import health_router, llm_router, otp_router
from api.rate_limit import RateLimitExceeded, RATE_LIMIT_MESSAGE
from config import Config
from inference import ErrorKind
from infra import bootstrap_infrastructure

# Setup logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Humanizer API starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    try:
        logger.info(f"Backends: {bootstrap_infrastructure()!r}")
    except ValueError as e:
        logger.error(f"Backend configuration invalid: {e}")
        raise
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Humanizer API shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Humanizer API",
    description="Rewrite, draft, similarity and guardrail checks backed by a hosted LLM",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Reject invalid bodies with 400, naming fields but never echoing input."""
    fields = sorted({
        ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        for err in exc.errors()
    })
    logger.info(
        f"Rejected {request.url.path}: invalid fields {fields}",
        extra={"error_kind": ErrorKind.VALIDATION.value},
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request", "fields": fields})


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"error": RATE_LIMIT_MESSAGE},
        headers={"Retry-After": str(int(exc.retry_after_s) + 1)},
    )


# Include routers
app.include_router(health_router)
app.include_router(llm_router)
app.include_router(otp_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Humanizer API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "rewrite": "POST /api/llm/rewrite",
            "draft": "POST /api/llm/draft",
            "similarity": "POST /api/llm/similarity",
            "guardrail": "POST /api/llm/guardrail",
            "otp_send": "POST /otp/send",
            "otp_verify": "POST /otp/verify",
            "health": "GET /health",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=Config.PORT)
