"""Health domain router.

Health check endpoint for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ecohouse.core.constants import Routes
from ecohouse.core.deps import SessionDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix=Routes.HEALTH.prefix, tags=[Routes.HEALTH.tag])


@router.get("")
async def health(session: SessionDep, settings: SettingsDep):
    """Database connectivity check.

    ``auth_provider`` only reports whether the provider is configured; it is
    not called.
    """
    auth_provider = "configured" if settings.auth_api_base_url else "not_configured"
    try:
        session.exec(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check database query failed")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "database": "error",
                "auth_provider": auth_provider,
            },
        )
    return {"status": "ok", "database": "ok", "auth_provider": auth_provider}
