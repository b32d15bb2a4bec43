import logging
from contextlib import asynccontextmanager

import stripe
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from api.core.config import get_settings
from api.core.errors import AppError
from api.core.log import configure_logging
from api.db.create_tables import create_all
from api.routers import accounts as accounts_router
from api.routers import hooks as hooks_router

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("api.app")
# Client key for Stripe API calls; webhook verification uses the signing secret only.
stripe.api_key = settings.stripe_secret_key or None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables outside prod; prod schemas come from create_tables."""
    if settings.app_env != "prod":
        create_all()
    logger.info("Accounts API starting (env=%s)", settings.app_env)
    yield


app = FastAPI(title="Accounts API", lifespan=lifespan)

allowed_cors = sorted(set(settings.cors_origins))
if allowed_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_cors,
        allow_credentials="*" not in allowed_cors,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"success": False, "message": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request body"
    if errors and errors[0].get("type") == "json_invalid":
        message = "Request body is not valid JSON"
    elif errors and errors[0].get("type") == "dict_type":
        message = "Request body must be a JSON object"
    return JSONResponse({"success": False, "message": message}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("%s %s failed", request.method, request.url.path)
    return JSONResponse({"success": False, "message": "Internal server error"}, status_code=500)


@app.get("/", response_class=PlainTextResponse)
def health():
    return "Accounts backend is running"


app.include_router(accounts_router.router)
app.include_router(hooks_router.router)


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn."""
    return app
