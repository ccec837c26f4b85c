from __future__ import annotations

from typing import Any, Dict, List, Optional, cast

from linear_mcp.core.errors import OperationInputError
from linear_mcp.core.models import IssueConnection, IssuePayload
from linear_mcp.core.operations import CREATE_ISSUE, SEARCH_ISSUES
from linear_mcp.core.session import LinearSession
from linear_mcp.core.tools._serialize import dump


def build_issue_filter(
    *,
    query: Optional[str] = None,
    project_id: Optional[str] = None,
    team_ids: Optional[List[str]] = None,
    assignee_ids: Optional[List[str]] = None,
    states: Optional[List[str]] = None,
    priority: Optional[int] = None,
) -> Optional[Dict[str, Any]]:
    """Translate search arguments into a Linear IssueFilter; None when nothing is set."""
    issue_filter: Dict[str, Any] = {}
    if query:
        issue_filter["searchableContent"] = {"contains": query}
    if project_id:
        issue_filter["project"] = {"id": {"eq": project_id}}
    if team_ids:
        issue_filter["team"] = {"id": {"in": list(team_ids)}}
    if assignee_ids:
        issue_filter["assignee"] = {"id": {"in": list(assignee_ids)}}
    if states:
        issue_filter["state"] = {"name": {"in": list(states)}}
    if priority is not None:
        issue_filter["priority"] = {"eq": priority}
    return issue_filter or None


async def linear_create_issue(
    session: LinearSession,
    title: str,
    team_id: str,
    description: Optional[str] = None,
    assignee_id: Optional[str] = None,
    priority: Optional[int] = None,
    project_id: Optional[str] = None,
    state_id: Optional[str] = None,
    label_ids: Optional[List[str]] = None,
    parent_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a single issue. Priority runs from 0 (none) to 4 (low)."""
    await session.ensure_authenticated()
    issue = {
        "title": title,
        "team_id": team_id,
        "description": description,
        "assignee_id": assignee_id,
        "priority": priority,
        "project_id": project_id,
        "state_id": state_id,
        "label_ids": label_ids,
        "parent_id": parent_id,
    }
    payload = cast(
        IssuePayload, await session.executor.run(CREATE_ISSUE, {"input": issue})
    )
    return {"issue": dump(payload.issue)}


async def linear_create_issues(
    session: LinearSession, issues: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """
    Create several issues with one batched call.

    Each item takes the same fields as linear_create_issue, in either
    snake_case or Linear's camelCase (``teamId``, ``projectId``...).
    """
    await session.ensure_authenticated()
    payload = await session.orchestrator.create_issues(issues)
    return {"issues": [dump(issue) for issue in payload.issues]}


async def linear_bulk_update_issues(
    session: LinearSession,
    issue_ids: List[str],
    update: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Apply the same update to every listed issue with one batched call.

    ``update`` accepts title, description, stateId, assigneeId, priority,
    projectId, labelIds and dueDate.
    """
    await session.ensure_authenticated()
    payload = await session.orchestrator.bulk_update_issues(issue_ids, update)
    return {
        "updated": len(payload.issues),
        "issues": [dump(issue) for issue in payload.issues],
    }


async def linear_search_issues(
    session: LinearSession,
    query: Optional[str] = None,
    project_id: Optional[str] = None,
    team_ids: Optional[List[str]] = None,
    assignee_ids: Optional[List[str]] = None,
    states: Optional[List[str]] = None,
    priority: Optional[int] = None,
    first: int = 50,
    after: Optional[str] = None,
    order_by: str = "updatedAt",
) -> Dict[str, Any]:
    """
    Search issues. All filters are optional and combined with AND.

    Pagination: pass the returned ``end_cursor`` as ``after`` while
    ``has_next_page`` is true.
    """
    if priority is not None and not 0 <= priority <= 4:
        raise OperationInputError("priority must be between 0 and 4")

    await session.ensure_authenticated()
    issue_filter = build_issue_filter(
        query=query,
        project_id=project_id,
        team_ids=team_ids,
        assignee_ids=assignee_ids,
        states=states,
        priority=priority,
    )
    connection = cast(
        IssueConnection,
        await session.executor.run(
            SEARCH_ISSUES,
            {"filter": issue_filter, "first": first, "after": after, "orderBy": order_by},
        ),
    )
    return {
        "issues": [dump(issue) for issue in connection.nodes],
        "count": len(connection.nodes),
        "has_next_page": connection.page_info.has_next_page,
        "end_cursor": connection.page_info.end_cursor,
    }


async def linear_delete_issue(session: LinearSession, issue_id: str) -> Dict[str, Any]:
    """Delete one issue (moves it to Linear's trash)."""
    return await linear_delete_issues(session, [issue_id])


async def linear_delete_issues(
    session: LinearSession, issue_ids: List[str]
) -> Dict[str, Any]:
    """Delete several issues with one batched call."""
    await session.ensure_authenticated()
    payload = await session.orchestrator.bulk_delete_issues(issue_ids)
    return {"success": payload.success, "deleted": list(issue_ids)}


__all__ = [
    "build_issue_filter",
    "linear_create_issue",
    "linear_create_issues",
    "linear_bulk_update_issues",
    "linear_search_issues",
    "linear_delete_issue",
    "linear_delete_issues",
]
