"""
Tool functions exposed over MCP.

Every name in __all__ is an async tool taking the injected ``session`` first;
core.registry registers exactly that list.
"""

from .auth import linear_auth, linear_auth_callback
from .comments import (
    linear_create_comment,
    linear_delete_comment,
    linear_get_comments,
    linear_update_comment,
)
from .issues import (
    linear_bulk_update_issues,
    linear_create_issue,
    linear_create_issues,
    linear_delete_issue,
    linear_delete_issues,
    linear_search_issues,
)
from .projects import (
    linear_create_project_with_issues,
    linear_get_project,
    linear_search_projects,
)
from .teams import linear_create_issue_labels, linear_get_teams
from .users import linear_get_user

__all__ = [
    "linear_auth",
    "linear_auth_callback",
    "linear_create_issue",
    "linear_create_issues",
    "linear_bulk_update_issues",
    "linear_search_issues",
    "linear_delete_issue",
    "linear_delete_issues",
    "linear_create_project_with_issues",
    "linear_get_project",
    "linear_search_projects",
    "linear_get_teams",
    "linear_create_issue_labels",
    "linear_get_user",
    "linear_get_comments",
    "linear_create_comment",
    "linear_update_comment",
    "linear_delete_comment",
]
