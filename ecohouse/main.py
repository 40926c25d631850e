import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqladmin import Admin

from ecohouse.admin.auth import AdminAuth
from ecohouse.admin.views import ADMIN_VIEWS
from ecohouse.auth.service import AuthChangeEvent, AuthUser, get_auth_service
from ecohouse.core.cors import add_cors_middleware
from ecohouse.core.exception_handlers import register_exception_handlers
from ecohouse.core.http import close_auth_client
from ecohouse.core.logging import configure_logging
from ecohouse.core.request_logging import add_request_logging_middleware
from ecohouse.db.engine import engine
from ecohouse.router import api_router

configure_logging()

auth_events_logger = logging.getLogger("ecohouse.auth.events")


def log_auth_event(event: AuthChangeEvent, user: AuthUser | None) -> None:
    auth_events_logger.info(
        "Auth state changed: %s",
        event.value,
        extra={"event": event.value, "user_id": user.id if user else None},
    )


@asynccontextmanager
async def lifespan(_: FastAPI):
    unsubscribe = get_auth_service().on_auth_state_change(log_auth_event)
    yield
    unsubscribe()
    await close_auth_client()


app = FastAPI(title="EcoHouse", version="0.1.0", lifespan=lifespan)

app.include_router(api_router)

add_request_logging_middleware(app)
add_cors_middleware(app)
register_exception_handlers(app)

# Operator console at /admin (sessions come from the auth backend secret)
admin = Admin(
    app=app,
    engine=engine,
    authentication_backend=AdminAuth(),
    title="EcoHouse Admin",
)
for view in ADMIN_VIEWS:
    admin.add_view(view)
