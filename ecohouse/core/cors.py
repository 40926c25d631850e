from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ecohouse.core.request_logging import REQUEST_ID_HEADER
from ecohouse.core.settings import get_settings

ALLOWED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]
ALLOWED_HEADERS = ["Authorization", "Content-Type", REQUEST_ID_HEADER]


def add_cors_middleware(app: FastAPI) -> None:
    """Let the web client call the API and read the request id back.

    Browsers reject credentialed requests against a wildcard origin, so the
    session cookie only travels when origins are listed explicitly.
    """
    origins = get_settings().cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=[REQUEST_ID_HEADER],
    )
