"""
FastAPI integration.

Usage:
    from fastapi import FastAPI
    from resource_guard.integrations.fastapi import (
        AuthenticationMiddleware,
        CurrentAuthentication,
        register_exception_handlers,
    )

    app = FastAPI()
    app.add_middleware(AuthenticationMiddleware, authenticate=authenticate_from_token)
    register_exception_handlers(app)

    @app.get("/projects/{project_id}")
    async def read_project(project_id: str, auth: CurrentAuthentication):
        project = project_service.get_project(project_id, auth)  # guarded
        return ProjectOut.from_model(project)

AccessDeniedError raised anywhere in a request becomes a 403 response.
"""

from typing import Annotated, Callable

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from resource_guard.config import GuardSettings, get_settings
from resource_guard.exceptions import AccessDeniedError
from resource_guard.interfaces import Authentication


# ============================================================
# EXCEPTION HANDLERS
# ============================================================

def register_exception_handlers(app: FastAPI, settings: GuardSettings | None = None) -> None:
    """
    Map AccessDeniedError to an HTTP error response.

    Status code comes from GUARD_DENY_STATUS_CODE (default 403). The
    denial reason is only included when GUARD_EXPOSE_REASON is set.
    """
    settings = settings or get_settings()

    @app.exception_handler(AccessDeniedError)
    async def access_denied_handler(request: Request, exc: AccessDeniedError) -> JSONResponse:
        content = {
            "error": "access_denied",
            "message": "Access denied",
        }
        if settings.expose_reason:
            content["message"] = exc.reason
            content["category"] = exc.category.value

        return JSONResponse(status_code=settings.deny_status_code, content=content)


# ============================================================
# MIDDLEWARE
# ============================================================

class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Stores the request's Authentication on request.state.

    The `authenticate` callable is application code (token decoding,
    session lookup...); it returns None for anonymous requests.
    """

    def __init__(self, app, authenticate: Callable[[Request], Authentication | None]):
        super().__init__(app)
        self.authenticate = authenticate

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.authentication = self.authenticate(request)
        return await call_next(request)


# ============================================================
# DEPENDENCIES
# ============================================================

async def get_authentication(request: Request) -> Authentication | None:
    """Authentication of the current request, or None if anonymous."""
    return getattr(request.state, "authentication", None)


CurrentAuthentication = Annotated[Authentication | None, Depends(get_authentication)]
