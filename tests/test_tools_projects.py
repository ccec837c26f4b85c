import json

import pytest
import respx
from httpx import Response
from linear_mcp.core.auth import StaticCredential
from linear_mcp.core.errors import CompositeOperationError
from linear_mcp.core.session import LinearSession
from linear_mcp.core.tools.projects import (
    linear_create_project_with_issues,
    linear_get_project,
    linear_search_projects,
)

API = "https://mock-linear.test/graphql"

PROJECT = {"id": "p1", "name": "Launch", "url": "https://linear.app/x/project/p1"}


async def _session() -> LinearSession:
    session = LinearSession(api_url=API)
    await session.configure(StaticCredential(token="tok"))
    return session


def _by_operation(responses):
    """respx side effect answering per GraphQL operationName."""

    def handler(request):
        name = json.loads(request.content)["operationName"]
        return responses[name]

    return handler


@pytest.mark.asyncio
async def test_project_with_issues_success():
    responses = {
        "CreateProject": Response(
            200, json={"data": {"projectCreate": {"success": True, "project": PROJECT}}}
        ),
        "CreateIssues": Response(
            200,
            json={
                "data": {
                    "issueBatchCreate": {
                        "success": True,
                        "issues": [{"id": "i1", "title": "One"}],
                    }
                }
            },
        ),
    }
    async with respx.mock:
        route = respx.post(API).mock(side_effect=_by_operation(responses))
        async with await _session() as session:
            result = await linear_create_project_with_issues(
                session,
                {"name": "Launch", "teamIds": ["t1"]},
                [{"title": "One", "teamId": "t1"}],
            )

    assert result["status"] == "ok"
    assert result["project"]["id"] == "p1"
    assert result["issues"] == [{"id": "i1", "title": "One"}]

    batch = json.loads(route.calls[1].request.content)["variables"]["input"]["issues"]
    assert batch == [{"title": "One", "teamId": "t1", "projectId": "p1"}]


@pytest.mark.asyncio
async def test_issue_failure_returns_partial_result():
    responses = {
        "CreateProject": Response(
            200, json={"data": {"projectCreate": {"success": True, "project": PROJECT}}}
        ),
        "CreateIssues": Response(
            200, json={"data": None, "errors": [{"message": "Team not found"}]}
        ),
    }
    async with respx.mock:
        route = respx.post(API).mock(side_effect=_by_operation(responses))
        async with await _session() as session:
            result = await linear_create_project_with_issues(
                session,
                {"name": "Launch", "teamIds": ["t1"]},
                [{"title": "One", "teamId": "bad"}],
            )

    assert result["status"] == "partial"
    assert result["failed_step"] == "createIssues"
    assert result["project"]["id"] == "p1"
    assert "Team not found" in result["error"]
    # no cleanup call for the created project
    assert route.call_count == 2


@pytest.mark.asyncio
async def test_project_failure_raises():
    responses = {
        "CreateProject": Response(
            200, json={"data": {"projectCreate": {"success": False, "project": None}}}
        ),
    }
    async with respx.mock:
        respx.post(API).mock(side_effect=_by_operation(responses))
        async with await _session() as session:
            with pytest.raises(CompositeOperationError) as exc:
                await linear_create_project_with_issues(
                    session, {"name": "Launch", "teamIds": ["t1"]}, []
                )

    assert exc.value.failed_step == "createProject"


@pytest.mark.asyncio
async def test_get_project():
    async with respx.mock:
        route = respx.post(API).mock(
            return_value=Response(
                200,
                json={
                    "data": {
                        "project": {**PROJECT, "teams": {"nodes": [{"id": "t1"}]}}
                    }
                },
            )
        )
        async with await _session() as session:
            result = await linear_get_project(session, "p1")

    assert result["project"]["teams"] == {"nodes": [{"id": "t1"}]}
    assert json.loads(route.calls[0].request.content)["variables"] == {"id": "p1"}


@pytest.mark.asyncio
async def test_search_projects_by_name():
    async with respx.mock:
        route = respx.post(API).mock(
            return_value=Response(200, json={"data": {"projects": {"nodes": [PROJECT]}}})
        )
        async with await _session() as session:
            result = await linear_search_projects(session, name="Launch")
            await linear_search_projects(session)

    assert result["count"] == 1
    assert json.loads(route.calls[0].request.content)["variables"] == {
        "filter": {"name": {"eq": "Launch"}}
    }
    assert "variables" not in json.loads(route.calls[1].request.content)
