from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, cast

from linear_mcp.core.errors import CompositeOperationError
from linear_mcp.core.models import ProjectConnection, ProjectPayload, ProjectRef
from linear_mcp.core.operations import GET_PROJECT, SEARCH_PROJECTS
from linear_mcp.core.orchestrator import STEP_CREATE_ISSUES, STEP_CREATE_PROJECT
from linear_mcp.core.session import LinearSession
from linear_mcp.core.tools._serialize import dump

log = logging.getLogger("linear_mcp.core.tools.projects")


async def linear_create_project_with_issues(
    session: LinearSession,
    project: Dict[str, Any],
    issues: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Create a project and its issues.

    ``project`` takes name, teamIds, description and state. Each issue takes
    the fields of linear_create_issue and is placed in the new project.

    If the project is created but the issues are not, the project is kept and
    the result has ``status: "partial"`` with the project and the error, so
    the caller can retry the issues or delete the project.
    """
    await session.ensure_authenticated()
    try:
        result = await session.orchestrator.create_project_with_issues(
            project, issues or []
        )
    except CompositeOperationError as exc:
        if exc.failed_step != STEP_CREATE_ISSUES:
            raise
        log.warning(
            "Project %s created but its issues were not: %s", exc.parent_id, exc.cause
        )
        created = cast(Optional[ProjectPayload], exc.output(STEP_CREATE_PROJECT))
        return {
            "status": "partial",
            "failed_step": exc.failed_step,
            "project": dump(created.project) if created else None,
            "error": str(exc.cause),
        }

    created = cast(ProjectPayload, result[STEP_CREATE_PROJECT])
    batch = result.get(STEP_CREATE_ISSUES)
    return {
        "status": "ok",
        "project": dump(created.project),
        "issues": [dump(issue) for issue in batch.issues] if batch else [],
    }


async def linear_get_project(session: LinearSession, project_id: str) -> Dict[str, Any]:
    """Fetch a project with its teams."""
    await session.ensure_authenticated()
    project = cast(
        ProjectRef, await session.executor.run(GET_PROJECT, {"id": project_id})
    )
    return {"project": dump(project)}


async def linear_search_projects(
    session: LinearSession, name: Optional[str] = None
) -> Dict[str, Any]:
    """List projects, optionally only those whose name matches exactly."""
    await session.ensure_authenticated()
    project_filter = {"name": {"eq": name}} if name else None
    connection = cast(
        ProjectConnection,
        await session.executor.run(SEARCH_PROJECTS, {"filter": project_filter}),
    )
    return {
        "projects": [dump(project) for project in connection.nodes],
        "count": len(connection.nodes),
    }


__all__ = [
    "linear_create_project_with_issues",
    "linear_get_project",
    "linear_search_projects",
]
