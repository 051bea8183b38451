from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import os
import logging

from pitch2angels import __version__
from pitch2angels.config import settings
from pitch2angels.database import check_connection, engine, init_db
from pitch2angels.routes.admin import router as admin_router
from pitch2angels.routes.applications import router as applications_router
from pitch2angels.routes.health import router as health_router

# Enable logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Init app
app = FastAPI(
    title="Pitch2Angels API",
    version=__version__,
    description="Pitch competition applications and admin review"
)

# CORS Setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept", "X-Admin-Key"],
)

# Uploaded files
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/static/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# Route Registrations
routers = [
    health_router,
    applications_router,
    admin_router,
]

for router in routers:
    app.include_router(router)
    logger.info(f"Included router: {router.prefix}")


@app.get("/", include_in_schema=False)
async def root():
    return {
        "status": "ok",
        "message": "Pitch2Angels application API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": [
            "/api/applications - Submit and fetch applications",
            "/api/admin/* - Review, export and statistics",
            "/api/health - System health check"
        ]
    }


# ------------------ Error envelopes ------------------

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        content = {"error": "Endpoint not found"}
    elif isinstance(exc.detail, dict):
        content = dict(exc.detail)
    else:
        content = {"error": exc.detail}
    content["success"] = False

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    logger.info(f"Rejected invalid request to {request.url.path}: {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": details, "success": False}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "message": "Something went wrong", "success": False}
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Pitch2Angels API starting up...")
    logger.info(f"🌍 Environment: {settings.ENVIRONMENT}")
    logger.info(f"📁 Upload directory: {settings.UPLOAD_DIR}")
    logger.info(f"🌐 CORS enabled for origins: {settings.cors_origins}")
    check_connection()
    if settings.database_url.startswith("sqlite"):
        # No migrations for local SQLite, build the tables from the models
        init_db()
    if not settings.ADMIN_API_KEY:
        logger.warning("⚠️ ADMIN_API_KEY is not set; /api/admin routes are unauthenticated")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("🔄 Shutting down gracefully...")
    engine.dispose()
    logger.info("📦 Database pool closed")
