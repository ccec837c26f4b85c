from __future__ import annotations

from typing import Any, Dict, Optional, cast

from linear_mcp.core.models import CommentConnection, CommentPayload, DeletePayload
from linear_mcp.core.operations import (
    CREATE_COMMENT,
    DELETE_COMMENT,
    GET_COMMENTS,
    UPDATE_COMMENT,
)
from linear_mcp.core.session import LinearSession
from linear_mcp.core.tools._serialize import dump


def build_comment_filter(
    *, issue_id: Optional[str] = None, user_id: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    comment_filter: Dict[str, Any] = {}
    if issue_id:
        comment_filter["issue"] = {"id": {"eq": issue_id}}
    if user_id:
        comment_filter["user"] = {"id": {"eq": user_id}}
    return comment_filter or None


async def linear_get_comments(
    session: LinearSession,
    issue_id: Optional[str] = None,
    user_id: Optional[str] = None,
    first: int = 50,
    after: Optional[str] = None,
    order_by: str = "createdAt",
) -> Dict[str, Any]:
    """
    List comments, optionally only those on one issue or by one user.

    Pass the returned ``end_cursor`` as ``after`` for the next page.
    """
    await session.ensure_authenticated()
    connection = cast(
        CommentConnection,
        await session.executor.run(
            GET_COMMENTS,
            {
                "filter": build_comment_filter(issue_id=issue_id, user_id=user_id),
                "first": first,
                "after": after,
                "orderBy": order_by,
            },
        ),
    )
    return {
        "comments": [dump(comment) for comment in connection.nodes],
        "count": len(connection.nodes),
        "has_next_page": connection.page_info.has_next_page,
        "end_cursor": connection.page_info.end_cursor,
    }


async def linear_create_comment(
    session: LinearSession,
    issue_id: str,
    body: str,
    parent_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Comment on an issue (markdown body); ``parent_id`` makes it a reply."""
    await session.ensure_authenticated()
    payload = cast(
        CommentPayload,
        await session.executor.run(
            CREATE_COMMENT,
            {"input": {"issue_id": issue_id, "body": body, "parent_id": parent_id}},
        ),
    )
    return {"comment": dump(payload.comment)}


async def linear_update_comment(
    session: LinearSession, comment_id: str, body: str
) -> Dict[str, Any]:
    """Replace the body of a comment."""
    await session.ensure_authenticated()
    payload = cast(
        CommentPayload,
        await session.executor.run(
            UPDATE_COMMENT, {"id": comment_id, "input": {"body": body}}
        ),
    )
    return {"comment": dump(payload.comment)}


async def linear_delete_comment(session: LinearSession, comment_id: str) -> Dict[str, Any]:
    await session.ensure_authenticated()
    payload = cast(
        DeletePayload, await session.executor.run(DELETE_COMMENT, {"id": comment_id})
    )
    return {"success": payload.success, "deleted": comment_id}


__all__ = [
    "build_comment_filter",
    "linear_get_comments",
    "linear_create_comment",
    "linear_update_comment",
    "linear_delete_comment",
]
