"""
Tests for the FastAPI integration.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from httpx import AsyncClient, ASGITransport

from resource_guard import Authentication, GuardSettings, guard_resource, scope
from resource_guard.integrations.fastapi import (
    AuthenticationMiddleware,
    CurrentAuthentication,
    register_exception_handlers,
)

from tests.models import ProjectModel, TeamModel, build_user

PROJECTS = {
    "abcd-1234": ProjectModel("abcd-1234", TeamModel("1234-5678")),
}

# Token -> authorities, standing in for a real token decoder
TOKENS = {
    "member-token": ("ROLE_TEAM_USER_1234-5678",),
    "outsider-token": ("ROLE_TEAM_USER_5678-1234",),
}


def authenticate(request: Request) -> Authentication | None:
    header = request.headers.get("Authorization", "")
    token = header.removeprefix("Bearer ")
    if token not in TOKENS:
        return None
    return Authentication(build_user(*TOKENS[token], username=token))


@guard_resource(scope("team", "USER"))
def load_project(project_id: str, auth: Authentication | None) -> ProjectModel | None:
    return PROJECTS.get(project_id)


def create_app(settings: GuardSettings) -> FastAPI:
    app = FastAPI()
    app.add_middleware(AuthenticationMiddleware, authenticate=authenticate)
    register_exception_handlers(app, settings)

    @app.get("/projects/{project_id}")
    async def read_project(project_id: str, auth: CurrentAuthentication):
        project = load_project(project_id, auth)
        if project is None:
            return {"project": None}
        return {"project": project.id, "team": project.team.id}

    return app


@pytest_asyncio.fixture
async def client(settings: GuardSettings) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=create_app(settings)),
        base_url="http://test",
    ) as client:
        yield client


@pytest.mark.asyncio
async def test_member_reads_project(client: AsyncClient):
    response = await client.get(
        "/projects/abcd-1234",
        headers={"Authorization": "Bearer member-token"},
    )

    assert response.status_code == 200
    assert response.json() == {"project": "abcd-1234", "team": "1234-5678"}


@pytest.mark.asyncio
async def test_outsider_is_forbidden(client: AsyncClient):
    response = await client.get(
        "/projects/abcd-1234",
        headers={"Authorization": "Bearer outsider-token"},
    )

    assert response.status_code == 403
    assert response.json() == {"error": "access_denied", "message": "Access denied"}


@pytest.mark.asyncio
async def test_anonymous_is_forbidden(client: AsyncClient):
    response = await client.get("/projects/abcd-1234")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_missing_project_is_not_guarded(client: AsyncClient):
    response = await client.get("/projects/missing")

    assert response.status_code == 200
    assert response.json() == {"project": None}


@pytest.mark.asyncio
async def test_reason_exposed_when_configured(settings: GuardSettings):
    exposing = settings.model_copy(update={"expose_reason": True, "deny_status_code": 404})

    async with AsyncClient(
        transport=ASGITransport(app=create_app(exposing)),
        base_url="http://test",
    ) as client:
        response = await client.get("/projects/abcd-1234")

    assert response.status_code == 404
    data = response.json()
    assert data["category"] == "user_resolution"
    assert data["message"] == "Object provided is not an instance of Authentication"
