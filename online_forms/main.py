from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime, timezone
import logging
import os
import traceback

from online_forms.config import settings
from online_forms.database import init_db
from online_forms.routes import api_routers, health_router
from online_forms.services.gateway import RazorpayGateway
from online_forms.utils.errors import AppError
from online_forms.utils.jwt_handler import JWTError, ExpiredSignatureError
from online_forms.utils.responses import error_body, success_response

# Enable logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Init app
app = FastAPI(title=settings.APP_NAME, version="1.0.0")

# One gateway client for the whole process; routes get it via get_payment_gateway
app.state.payment_gateway = RazorpayGateway.from_settings()

# CORS Setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600
)

# Uploaded documents
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
logger.info(f"Uploads mounted at /uploads from {settings.UPLOAD_DIR}")


# Custom OpenAPI
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description="Online Forms API - catalog, submissions, payments and administration",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
        "description": "Enter JWT token in the format: Bearer <token>"
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# Route Registrations
for router in api_routers:
    app.include_router(router, prefix=settings.API_PREFIX)
    logger.info(f"Included router: {settings.API_PREFIX}{router.prefix}")

app.include_router(health_router)


@app.get(settings.API_PREFIX + "/", tags=["Info"])
async def api_info():
    return success_response({
        "name": settings.APP_NAME,
        "version": app.version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": {
            "auth": f"{settings.API_PREFIX}/auth",
            "applications": f"{settings.API_PREFIX}/applications",
            "user_applications": f"{settings.API_PREFIX}/user-applications",
            "payments": f"{settings.API_PREFIX}/payments",
            "admin": f"{settings.API_PREFIX}/admin",
            "health": "/health",
        },
    }, "Online Forms API")


# ====================
# Exception handlers
# ====================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, AppError):
        message, errors = exc.message, exc.errors
    elif exc.status_code == 404 and exc.detail == "Not Found":
        message, errors = f"Route {request.url.path} not found", None
    else:
        message, errors = str(exc.detail), None

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, errors),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(location),
            "message": error.get("msg"),
        })
    return JSONResponse(status_code=400, content=error_body("Validation failed", errors))


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content=error_body("Resource already exists or references a missing resource"),
    )


@app.exception_handler(ExpiredSignatureError)
async def expired_token_handler(request: Request, exc: ExpiredSignatureError):
    return JSONResponse(status_code=401, content=error_body("Token has expired"))


@app.exception_handler(JWTError)
async def jwt_error_handler(request: Request, exc: JWTError):
    return JSONResponse(status_code=401, content=error_body("Invalid token"))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    if settings.DEBUG:
        body = error_body(str(exc))
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    else:
        body = error_body("Something went wrong!")
    return JSONResponse(status_code=500, content=body)


# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info(f"🚀 {settings.APP_NAME} starting up...")
    init_db()
    logger.info(f"🌐 CORS enabled for origins: {settings.ALLOWED_ORIGINS}")
    logger.info("✅ Server is ready to handle requests")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    app.state.payment_gateway.close()
    logger.info(f"🛑 {settings.APP_NAME} shutting down...")
