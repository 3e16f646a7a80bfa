from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.exceptions import ApiError
from src.core.identity import REQUEST_ID_HEADER
from src.core.logging import configure_logging, request_id_var, tenant_var
from src.core.request import CurrentRequest
from src.core.settings import get_app_settings
from src.db.run_migrations import main as run_alembic
from src.db.seed import seed_all
from src.schemas.common import ErrorDocument, MessageResponse
from src.services.messaging import close_messaging_client

# Routers
from src.api.routes.authentications import router as authentications_router
from src.api.routes.container_images import router as container_images_router
from src.api.routes.endpoints import router as endpoints_router
from src.api.routes.flavors import router as flavors_router
from src.api.routes.openapi import router as openapi_router
from src.api.routes.service_instances import router as service_instances_router
from src.api.routes.service_offerings import router as service_offerings_router
from src.api.routes.service_plans import router as service_plans_router
from src.api.routes.source_types import router as source_types_router
from src.api.routes.sources import router as sources_router
from src.api.routes.tags import router as tags_router
from src.api.routes.tasks import router as tasks_router
from src.api.routes.vms import router as vms_router

API_VERSION = "v0.1"

# Configure structured logging once at import
configure_logging()
logger = logging.getLogger(__name__)

settings = get_app_settings()

openapi_tags = [
    {"name": "System", "description": "System and operational endpoints."},
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Sources", "description": "Connected providers, and everything collected from them."},
    {"name": "Endpoints", "description": "Connection endpoints of sources."},
    {"name": "Authentications", "description": "Credentials of sources and endpoints."},
    {"name": "SourceTypes", "description": "Known kinds of sources."},
    {"name": "ServiceOfferings", "description": "Service catalog items."},
    {"name": "ServicePlans", "description": "Orderable plans of service offerings."},
    {"name": "ServiceInstances", "description": "Provisioned services."},
    {"name": "Flavors", "description": "Instance types."},
    {"name": "Vms", "description": "Virtual machines."},
    {"name": "ContainerImages", "description": "Container images."},
    {"name": "Tags", "description": "Tags of container images."},
    {"name": "Tasks", "description": "Asynchronous operations such as service orders."},
]

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    openapi_tags=openapi_tags,
)

# CORS - avoid wildcard with credentials
cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
    logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
    cors_allow_credentials = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=cors_allow_credentials,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """
    Enrich the logging context with the insights request id and the account number.
    Echoes 'x-rh-insights-request-id' on every response.
    """
    current = CurrentRequest.from_request(request)
    request_id = current.request_id or str(uuid4())
    token_request_id = request_id_var.set(request_id)
    token_tenant = tenant_var.set(current.tenant_or_none())
    request.state.request_id = request_id

    logger.info(
        "Incoming request %s %s user=%s",
        request.method,
        request.url.path,
        current.username_or_none() or "-",
    )
    try:
        response = await call_next(request)
    except Exception:
        # Errors escaping the routes end up here rather than in the handlers below
        logger.exception("Unhandled error processing request")
        response = _unexpected_error_response()
    finally:
        request_id_var.reset(token_request_id)
        tenant_var.reset(token_tenant)

    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _build_error_response(document: ErrorDocument) -> JSONResponse:
    """Render an error document with the status of its first error."""
    return JSONResponse(status_code=document.status, content=document.to_dict())


def _unexpected_error_response() -> JSONResponse:
    return _build_error_response(ErrorDocument().add(500, "An unexpected error occurred"))


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """
    Handler for the API's own errors (bad parameters, missing records, identity).
    """
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return _build_error_response(exc.error_document)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Global handler for HTTPException (including unknown routes) producing an error document.
    """
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
    return _build_error_response(ErrorDocument().add(exc.status_code, str(detail)))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Global handler for request validation errors.
    """
    logger.info("Request validation failed: %s", exc.errors())
    return _build_error_response(ErrorDocument().add(400, "Request validation failed"))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler to avoid leaking stack traces and to return an error document.
    """
    logger.exception("Unhandled error processing request")
    return _unexpected_error_response()


@app.on_event("startup")
async def on_startup() -> None:
    """
    Run migrations and optional seeding on service startup.

    Both steps are opt-in via settings.
    """
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        try:
            logger.info("Running Alembic migrations: upgrade head")
            run_alembic(["upgrade", "head"])
            logger.info("Migrations completed.")
        except Exception as exc:
            logger.exception("Migration step failed: %s", exc)
            # Do not crash the app in case of transient DB issues; rely on retries or later readiness probes.

    if settings.AUTO_SEED:
        try:
            logger.info("Seeding source types...")
            await seed_all()
            logger.info("Seeding completed.")
        except Exception as exc:
            logger.exception("Seeding step failed: %s", exc)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_messaging_client()


# PUBLIC_INTERFACE
@app.get(
    "/health",
    response_model=MessageResponse,
    summary="Health Check",
    tags=["Health"],
)
def health_check() -> MessageResponse:
    """
    Basic liveness health check endpoint.

    Returns:
        MessageResponse: Simple confirmation that the service is running.
    """
    return MessageResponse(message="Healthy")


api_prefix = f"/{settings.api_prefix}"

# Build the versioned API router and include the collection routers
api_v0_1 = APIRouter(prefix=f"{api_prefix}/{API_VERSION}")
api_v0_1.include_router(openapi_router)
api_v0_1.include_router(sources_router)
api_v0_1.include_router(endpoints_router)
api_v0_1.include_router(authentications_router)
api_v0_1.include_router(source_types_router)
api_v0_1.include_router(service_offerings_router)
api_v0_1.include_router(service_plans_router)
api_v0_1.include_router(service_instances_router)
api_v0_1.include_router(flavors_router)
api_v0_1.include_router(vms_router)
api_v0_1.include_router(container_images_router)
api_v0_1.include_router(tags_router)
api_v0_1.include_router(tasks_router)

app.include_router(api_v0_1)


# PUBLIC_INTERFACE
@app.api_route(
    f"{api_prefix}/v0/{{path:path}}",
    methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
    include_in_schema=False,
)
def redirect_v0(path: str, request: Request) -> RedirectResponse:
    """The unversioned v0 namespace permanently points at the latest 0.x version."""
    target = f"{api_prefix}/{API_VERSION}/{path}"
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return RedirectResponse(url=target, status_code=301)
