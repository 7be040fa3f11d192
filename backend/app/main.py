"""
Barangay Portal — FastAPI Application Entry Point
Resident identity service: ID allocation, access control, family address
propagation and QR identity artifacts over Supabase.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.core.errors import ResidentServiceError
from app.core.supabase_client import has_supabase_config
from app.models.resident import REQUIRED_FIELD_MESSAGES
from app.utils.rate_limiter import RateLimiter
from app.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = get_settings()
    logger.info(f"🚀 Barangay Portal starting in {settings.app_env} mode...")
    logger.info(f"🗄️ Supabase: {'✅' if has_supabase_config() else '❌'}")
    if settings.is_production and settings.jwt_secret_key.startswith("dev-"):
        logger.warning("⚠️ JWT_SECRET_KEY is still the development default")

    yield

    logger.info("👋 Barangay Portal shutting down...")


settings = get_settings()

app = FastAPI(
    title="Barangay Portal",
    description="Resident records, identity and QR verification for barangay civic services.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Middleware Stack ---
app.add_middleware(RateLimiter, requests_per_minute=settings.rate_limit_per_minute)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error Handlers ---
@app.exception_handler(ResidentServiceError)
async def resident_error_handler(request: Request, exc: ResidentServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = loc[-1] if loc else "body"
        message = err.get("msg", "Invalid value")
        if err.get("type") == "missing":
            message = REQUIRED_FIELD_MESSAGES.get(field, f"{field} is required")
        elif err.get("type") == "value_error" and "error" in err.get("ctx", {}):
            # Our own validators, e.g. a blank first name
            message = str(err["ctx"]["error"])
        errors.append({"field": field, "message": message})
    return JSONResponse(
        status_code=400,
        content={"error": ", ".join(e["message"] for e in errors), "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Server error"},
    )


# --- Health Check ---
@app.get("/", tags=["Health"])
async def root():
    return {
        "status": "healthy",
        "service": "Barangay Portal",
        "version": "1.0.0",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    settings = get_settings()
    return {
        "status": "healthy",
        "environment": settings.app_env,
        "services": {
            "supabase": has_supabase_config(),
        },
    }


# --- Register Routers ---
from app.api import auth, residents, family_heads

app.include_router(auth.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(residents.router, prefix="/api/v1/residents", tags=["Residents"])
app.include_router(family_heads.router, prefix="/api/v1/family-heads", tags=["Family Heads"])


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
    )
