import secrets

from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from ecohouse.core.settings import get_settings


class AdminAuth(AuthenticationBackend):
    """Operator console login against the configured admin credentials.

    The console is for repairing households and profiles by hand, e.g. an
    account left without a profile by a failed sign-up.
    """

    def __init__(self) -> None:
        settings = get_settings()
        super().__init__(secret_key=settings.session_secret_key)

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = str(form.get("username", "")).strip()
        password = str(form.get("password", ""))

        settings = get_settings()
        ok = secrets.compare_digest(
            username, settings.admin_username
        ) and secrets.compare_digest(password, settings.admin_password)
        if ok:
            request.session["admin_user"] = username
        return ok

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return bool(request.session.get("admin_user"))
