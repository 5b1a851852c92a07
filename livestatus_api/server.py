"""FastAPI application exposing Livestatus tables as read-only REST resources."""

import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import AppConfig
from .errors import GatewayError
from .gateway import RESOURCES, ResourceDescriptor, ResourceGateway
from .livestatus_client import LivestatusClient
from .middleware import install_request_tracking
from .models import Record

logger = logging.getLogger(__name__)


def error_response(
    status_code: int, message: str, headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """Render an error as ``{"code": ..., "message": ...}``."""
    return JSONResponse(
        status_code=status_code,
        content={"code": status_code, "message": message},
        headers=headers,
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register handlers so every failure becomes a structured JSON status."""

    @app.exception_handler(GatewayError)
    def _handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path}: {exc}")
        return error_response(exc.status_code, exc.public_message)

    @app.exception_handler(StarletteHTTPException)
    def _handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")

    @app.exception_handler(Exception)
    def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error serving {request.method} {request.url.path}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def _collection_endpoint(
    descriptor: ResourceDescriptor, get_gateway: Callable[[], ResourceGateway]
) -> Callable[[], List[Record]]:
    def endpoint() -> List[Record]:
        return get_gateway().list(descriptor.name)

    endpoint.__name__ = f"list_{descriptor.name}"
    endpoint.__doc__ = f"List all {descriptor.name}."
    return endpoint


def _item_endpoint(
    descriptor: ResourceDescriptor, get_gateway: Callable[[], ResourceGateway]
) -> Callable[[Request], Record]:
    # path params are read from the request so one endpoint fits every key shape
    def endpoint(request: Request) -> Record:
        key: Dict[str, Any] = dict(request.path_params)
        return get_gateway().get(descriptor.name, key)

    endpoint.__name__ = f"get_{descriptor.kind}"
    endpoint.__doc__ = f"Get a single {descriptor.kind}."
    return endpoint


def register_routes(app: FastAPI, get_gateway: Callable[[], ResourceGateway]) -> None:
    """Add one collection route and one item route per resource kind."""
    for descriptor in RESOURCES.values():
        model = descriptor.contract.model
        app.add_api_route(
            descriptor.collection_path,
            _collection_endpoint(descriptor, get_gateway),
            methods=["GET"],
            response_model=List[model],
            tags=[descriptor.name],
        )
        app.add_api_route(
            descriptor.item_path,
            _item_endpoint(descriptor, get_gateway),
            methods=["GET"],
            response_model=model,
            tags=[descriptor.name],
            responses={
                404: {"description": f"{descriptor.title} not found"},
                400: {"description": f"Invalid {descriptor.kind} key"},
            },
        )


def create_app(
    config: Optional[AppConfig] = None,
    gateway: Optional[ResourceGateway] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Application configuration; defaults are used when omitted
        gateway: Resource gateway to serve from; built from ``config`` when omitted

    Returns:
        FastAPI: Configured application
    """
    config = config or AppConfig()
    if gateway is None:
        gateway = ResourceGateway(LivestatusClient(config.livestatus))

    app = FastAPI(
        title="Livestatus API",
        description="Read-only REST gateway for the Livestatus socket.",
        version=__version__,
    )
    app.state.config = config
    app.state.gateway = gateway

    install_exception_handlers(app)
    install_request_tracking(app)
    register_routes(app, lambda: app.state.gateway)
    return app
