"""
App-wide constants for route configuration.

Route prefixes, tags and the error response definitions shared by the
OpenAPI docs of every router.
"""

from dataclasses import dataclass
from typing import Any

from ecohouse.models.common import ErrorResponse


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    AUTH = RouteConfig(prefix="/auth", tag="auth")
    HOUSE = RouteConfig(prefix="/houses", tag="houses")
    PROFILE = RouteConfig(prefix="/profiles", tag="profiles")
    HEALTH = RouteConfig(prefix="/health", tag="health")


class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    BAD_REQUEST: dict[int | str, dict[str, Any]] = {
        400: {"model": ErrorResponse, "description": "Invalid request data"}
    }
    UNAUTHORIZED: dict[int | str, dict[str, Any]] = {
        401: {
            "model": ErrorResponse,
            "description": "Not authenticated or invalid credentials",
        }
    }
    FORBIDDEN: dict[int | str, dict[str, Any]] = {
        403: {"model": ErrorResponse, "description": "Lacks permissions"}
    }
    NOT_FOUND: dict[int | str, dict[str, Any]] = {
        404: {"model": ErrorResponse, "description": "Resource not found"}
    }
    CONFLICT: dict[int | str, dict[str, Any]] = {
        409: {"model": ErrorResponse, "description": "Resource already exists"}
    }
    RATE_LIMITED: dict[int | str, dict[str, Any]] = {
        429: {"model": ErrorResponse, "description": "Too many attempts"}
    }
    PROVIDER_ERROR: dict[int | str, dict[str, Any]] = {
        502: {"model": ErrorResponse, "description": "Auth provider unavailable"}
    }
