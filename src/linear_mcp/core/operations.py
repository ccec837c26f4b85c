"""Static operation descriptors, resolved once at import time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Type

from pydantic import BaseModel

from . import documents
from .errors import OperationInputError
from .models import (
    CommentConnection,
    CommentPayload,
    CreateCommentVariables,
    CreateIssueLabelsVariables,
    CreateIssuesVariables,
    CreateIssueVariables,
    CreateProjectVariables,
    DeleteCommentVariables,
    DeleteIssuesVariables,
    DeletePayload,
    GetCommentsVariables,
    GetProjectVariables,
    IssueBatchPayload,
    IssueConnection,
    IssueLabelPayload,
    IssuePayload,
    NoVariables,
    ProjectConnection,
    ProjectPayload,
    ProjectRef,
    SearchIssuesVariables,
    SearchProjectsVariables,
    TeamConnection,
    UpdateCommentVariables,
    UpdateIssuesVariables,
    Viewer,
)


@dataclass(frozen=True)
class OperationDescriptor:
    """
    One named remote operation.
    - document: GraphQL text sent verbatim
    - root_field: key of ``data`` holding the result
    - input_model / output_model: pydantic models for variables and result
    - mutation: result carries a ``success`` flag that must be true
    """

    name: str
    operation_name: str
    document: str
    root_field: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    mutation: bool = False


CREATE_ISSUE = OperationDescriptor(
    name="createIssue",
    operation_name="CreateIssue",
    document=documents.CREATE_ISSUE_MUTATION,
    root_field="issueCreate",
    input_model=CreateIssueVariables,
    output_model=IssuePayload,
    mutation=True,
)

CREATE_ISSUES = OperationDescriptor(
    name="createIssues",
    operation_name="CreateIssues",
    document=documents.CREATE_ISSUES_MUTATION,
    root_field="issueBatchCreate",
    input_model=CreateIssuesVariables,
    output_model=IssueBatchPayload,
    mutation=True,
)

CREATE_PROJECT = OperationDescriptor(
    name="createProject",
    operation_name="CreateProject",
    document=documents.CREATE_PROJECT_MUTATION,
    root_field="projectCreate",
    input_model=CreateProjectVariables,
    output_model=ProjectPayload,
    mutation=True,
)

UPDATE_ISSUES = OperationDescriptor(
    name="updateIssues",
    operation_name="UpdateIssues",
    document=documents.UPDATE_ISSUES_MUTATION,
    root_field="issueBatchUpdate",
    input_model=UpdateIssuesVariables,
    output_model=IssueBatchPayload,
    mutation=True,
)

DELETE_ISSUES = OperationDescriptor(
    name="deleteIssues",
    operation_name="DeleteIssues",
    document=documents.DELETE_ISSUES_MUTATION,
    root_field="issueBatchDelete",
    input_model=DeleteIssuesVariables,
    output_model=DeletePayload,
    mutation=True,
)

CREATE_ISSUE_LABELS = OperationDescriptor(
    name="createIssueLabels",
    operation_name="CreateIssueLabels",
    document=documents.CREATE_ISSUE_LABELS_MUTATION,
    root_field="issueLabelCreate",
    input_model=CreateIssueLabelsVariables,
    output_model=IssueLabelPayload,
    mutation=True,
)

SEARCH_ISSUES = OperationDescriptor(
    name="searchIssues",
    operation_name="SearchIssues",
    document=documents.SEARCH_ISSUES_QUERY,
    root_field="issues",
    input_model=SearchIssuesVariables,
    output_model=IssueConnection,
)

GET_TEAMS = OperationDescriptor(
    name="getTeams",
    operation_name="GetTeams",
    document=documents.GET_TEAMS_QUERY,
    root_field="teams",
    input_model=NoVariables,
    output_model=TeamConnection,
)

GET_VIEWER = OperationDescriptor(
    name="getViewer",
    operation_name="GetViewer",
    document=documents.GET_VIEWER_QUERY,
    root_field="viewer",
    input_model=NoVariables,
    output_model=Viewer,
)

GET_PROJECT = OperationDescriptor(
    name="getProject",
    operation_name="GetProject",
    document=documents.GET_PROJECT_QUERY,
    root_field="project",
    input_model=GetProjectVariables,
    output_model=ProjectRef,
)

SEARCH_PROJECTS = OperationDescriptor(
    name="searchProjects",
    operation_name="SearchProjects",
    document=documents.SEARCH_PROJECTS_QUERY,
    root_field="projects",
    input_model=SearchProjectsVariables,
    output_model=ProjectConnection,
)

CREATE_COMMENT = OperationDescriptor(
    name="createComment",
    operation_name="CreateComment",
    document=documents.CREATE_COMMENT_MUTATION,
    root_field="commentCreate",
    input_model=CreateCommentVariables,
    output_model=CommentPayload,
    mutation=True,
)

UPDATE_COMMENT = OperationDescriptor(
    name="updateComment",
    operation_name="UpdateComment",
    document=documents.UPDATE_COMMENT_MUTATION,
    root_field="commentUpdate",
    input_model=UpdateCommentVariables,
    output_model=CommentPayload,
    mutation=True,
)

DELETE_COMMENT = OperationDescriptor(
    name="deleteComment",
    operation_name="DeleteComment",
    document=documents.DELETE_COMMENT_MUTATION,
    root_field="commentDelete",
    input_model=DeleteCommentVariables,
    output_model=DeletePayload,
    mutation=True,
)

GET_COMMENTS = OperationDescriptor(
    name="getComments",
    operation_name="GetComments",
    document=documents.GET_COMMENTS_QUERY,
    root_field="comments",
    input_model=GetCommentsVariables,
    output_model=CommentConnection,
)

OPERATIONS: Dict[str, OperationDescriptor] = {
    op.name: op
    for op in (
        CREATE_ISSUE,
        CREATE_ISSUES,
        CREATE_PROJECT,
        UPDATE_ISSUES,
        DELETE_ISSUES,
        CREATE_ISSUE_LABELS,
        SEARCH_ISSUES,
        GET_TEAMS,
        GET_VIEWER,
        GET_PROJECT,
        SEARCH_PROJECTS,
        CREATE_COMMENT,
        UPDATE_COMMENT,
        DELETE_COMMENT,
        GET_COMMENTS,
    )
}


def get_operation(name: str) -> OperationDescriptor:
    try:
        return OPERATIONS[name]
    except KeyError:
        raise OperationInputError(f"Unknown operation: {name}") from None


__all__ = [
    "OperationDescriptor",
    "OPERATIONS",
    "get_operation",
    "CREATE_ISSUE",
    "CREATE_ISSUES",
    "CREATE_PROJECT",
    "UPDATE_ISSUES",
    "DELETE_ISSUES",
    "CREATE_ISSUE_LABELS",
    "SEARCH_ISSUES",
    "GET_TEAMS",
    "GET_VIEWER",
    "GET_PROJECT",
    "SEARCH_PROJECTS",
    "CREATE_COMMENT",
    "UPDATE_COMMENT",
    "DELETE_COMMENT",
    "GET_COMMENTS",
]
