"""Base blueprint for API endpoints."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from fastapi import APIRouter, status

from jira_query_assistant import LOGGER
from jira_query_assistant.utils.exceptions import CustomException, CustomHTTPException


def to_http_exception(error: Exception, action: str) -> CustomHTTPException:
    """Translate a use case failure into the HTTP error returned to the client.

    Args:
        error: Exception raised while serving the request
        action: Short description of what the endpoint was doing

    Returns:
        CustomHTTPException carrying the status and message body
    """
    if isinstance(error, CustomException):
        LOGGER.warning(f"Error {action}: {error.message}")
        return CustomHTTPException.from_custom_exception(error)
    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        LOGGER.error(f"Timed out {action}")
        return CustomHTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            message={"error": f"timed out {action}"},
        )
    LOGGER.error(f"Error {action}: {str(error)}", exc_info=True)
    return CustomHTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message={"error": f"Error {action}: {str(error)}"},
    )


class ServiceAPIEndpointBluePrint(ABC):
    """Blueprint for API endpoints following Clean Architecture.

    Endpoints receive their use cases through the constructor and expose
    their routes through an APIRouter.
    """

    @abstractmethod
    def create_rest_api_route(self) -> APIRouter:
        """Create and return a configured APIRouter with route handlers.

        Returns:
            APIRouter with all endpoint routes properly configured
        """
        pass
