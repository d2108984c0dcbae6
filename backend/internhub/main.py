from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from internhub.core.config import settings
from internhub.core.database import init_db, close_db
from internhub.core.exceptions import InternHubError, RenderingError, error_response
from internhub.core.logging_config import logger
from internhub.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from internhub.api.v1.router import api_router
from internhub.services import (
    CertificateService,
    CertificateRasterizer,
    EmailService,
    InternshipService,
    RemarkService,
)


def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if settings.ENVIRONMENT == "production" and (
        not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME"
    ):
        errors.append("JWT_SECRET_KEY is not set or using default value")

    if not (settings.SENDGRID_API_KEY or (settings.SMTP_USER and settings.SMTP_PASSWORD)):
        warnings.append("No email transport configured - notifications will be skipped")

    if not settings.ADMIN_EMAIL:
        warnings.append("ADMIN_EMAIL not set - new remarks will not be emailed")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Critical configuration validated")
    return True


def build_services(app: FastAPI, email_service: EmailService = None,
                   rasterizer: CertificateRasterizer = None) -> None:
    """Construct the shared collaborators once and keep them on app.state"""
    email_service = email_service or EmailService()
    certificate_service = CertificateService()

    app.state.email_service = email_service
    app.state.certificate_service = certificate_service
    app.state.rasterizer = rasterizer or CertificateRasterizer()
    app.state.internship_service = InternshipService(email_service, certificate_service)
    app.state.remark_service = RemarkService(email_service)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")
    logger.info("=" * 60)

    validate_critical_config()

    # Create missing tables; Alembic owns schema changes after that
    await init_db()
    logger.info("[Startup] Database tables ready")

    build_services(app)

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Internship lifecycle, remarks and certificate generation",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

# Middleware (last added runs first)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time", "Content-Disposition"],
)


@app.exception_handler(InternHubError)
async def internhub_exception_handler(request: Request, exc: InternHubError):
    if isinstance(exc, RenderingError):
        logger.log_error_with_context(exc, "certificate_rendering")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "detail": "Failed to generate certificate", "error": {"code": exc.code}}
        )

    logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "internhub.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )
