"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic_settings import BaseSettings

from jira_query_assistant import LOGGER
from jira_query_assistant.frameworks.api.configs import (
    api_prefix,
    fastapi_information,
    fastapi_tags_metadata,
)
from jira_query_assistant.frameworks.api.registry import SubServiceEndpoints
from jira_query_assistant.utils.exceptions import CustomException, CustomHTTPException


class APIEndpointConfig(BaseSettings):
    """Configuration settings for the API endpoint.

    Attributes:
        information: Information about the API
        tags_metadata: Tags metadata for OpenAPI
        api_version_prefix: API version prefix
        allow_origins: CORS allowed origins
    """

    information: dict = fastapi_information
    tags_metadata: list = fastapi_tags_metadata
    api_version_prefix: str = api_prefix
    allow_origins: list = ["*"]


def create_app(
    sub_service_endpoints: SubServiceEndpoints,
    config: APIEndpointConfig = None,
) -> FastAPI:
    """Create the FastAPI application and mount every registered endpoint.

    Args:
        sub_service_endpoints: Registry of endpoint services
        config: API configuration, defaults to APIEndpointConfig()

    Returns:
        Configured FastAPI application
    """
    config = config or APIEndpointConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        LOGGER.info("Starting API server...")
        yield
        LOGGER.info("Shutting down API server...")

    app = FastAPI(
        **config.information,
        openapi_tags=config.tags_metadata,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "validation_error", "errors": errors},
        )

    @app.exception_handler(CustomException)
    async def custom_exception_handler(request: Request, exc: CustomException):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.message,
            headers=exc.headers,
        )

    @app.exception_handler(CustomHTTPException)
    async def custom_http_exception_handler(request: Request, exc: CustomHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.message,
            headers=exc.to_json(),
        )

    @app.get("/", tags=["Main"], include_in_schema=False)
    async def root():
        return RedirectResponse(url=f"{config.api_version_prefix}/docs")

    for endpoint in sub_service_endpoints.endpoints:
        LOGGER.info(f"Mounting endpoint: {endpoint.__class__.__name__}")
        app.include_router(endpoint.create_rest_api_route(), prefix=config.api_version_prefix)

    return app
