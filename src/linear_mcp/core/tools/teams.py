from __future__ import annotations

from typing import Any, Dict, List, cast

from linear_mcp.core.models import IssueLabelPayload, TeamConnection
from linear_mcp.core.operations import CREATE_ISSUE_LABELS, GET_TEAMS
from linear_mcp.core.session import LinearSession
from linear_mcp.core.tools._serialize import dump


async def linear_get_teams(session: LinearSession) -> Dict[str, Any]:
    """List teams with their workflow states and labels."""
    await session.ensure_authenticated()
    connection = cast(TeamConnection, await session.executor.run(GET_TEAMS))
    return {"teams": [dump(team) for team in connection.nodes]}


async def linear_create_issue_labels(
    session: LinearSession, labels: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """Create issue labels; each item takes name, teamId and an optional color."""
    await session.ensure_authenticated()
    payload = cast(
        IssueLabelPayload,
        await session.executor.run(CREATE_ISSUE_LABELS, {"labels": labels}),
    )
    return {"labels": [dump(label) for label in payload.issue_labels]}


__all__ = ["linear_get_teams", "linear_create_issue_labels"]
