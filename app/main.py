import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.router import api_router
from app.core.config import settings, validate_settings_for_production
from app.core.logging import setup_logging
from app.core.metrics import PrometheusMiddleware, metrics_response
from app.core.middleware import RequestLoggingMiddleware
from app.core.sentry import init_sentry
from app.gateway.errors import GENERIC_ERROR_MESSAGE

# Configure logging before anything else
setup_logging()
init_sentry()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_settings_for_production()
    logger.info("Starting image description service (env=%s)...", settings.app_env)
    yield
    logger.info("Image description service shut down")


app = FastAPI(
    title="Image Description Service",
    description="Alt text and long descriptions from OpenAI, Gemini and Claude vision models",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.app_debug else None,
    redoc_url="/api/redoc" if settings.app_debug else None,
)


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object with imageUrl"})


# Provider detail and exception text stay in the logs
@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled %s on %s %s:\n%s", type(exc).__name__, request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})


app.add_middleware(PrometheusMiddleware)

# Request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# CORS — parse allowed_origins from settings (comma-separated)
_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=False,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_response()
