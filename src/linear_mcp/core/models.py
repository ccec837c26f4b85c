from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# --- Input Models (GraphQL input objects) --- #


class ProjectCreateInput(BaseModel):
    name: str = Field(min_length=1)
    team_ids: List[str] = Field(alias="teamIds", min_length=1)
    description: Optional[str] = None
    state: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class IssueCreateInput(BaseModel):
    title: str = Field(min_length=1)
    team_id: str = Field(alias="teamId", min_length=1)
    description: Optional[str] = None
    assignee_id: Optional[str] = Field(default=None, alias="assigneeId")
    priority: Optional[int] = Field(default=None, ge=0, le=4)
    project_id: Optional[str] = Field(default=None, alias="projectId")
    state_id: Optional[str] = Field(default=None, alias="stateId")
    label_ids: Optional[List[str]] = Field(default=None, alias="labelIds")
    parent_id: Optional[str] = Field(default=None, alias="parentId")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class IssueUpdateInput(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    state_id: Optional[str] = Field(default=None, alias="stateId")
    assignee_id: Optional[str] = Field(default=None, alias="assigneeId")
    priority: Optional[int] = Field(default=None, ge=0, le=4)
    project_id: Optional[str] = Field(default=None, alias="projectId")
    label_ids: Optional[List[str]] = Field(default=None, alias="labelIds")
    due_date: Optional[str] = Field(default=None, alias="dueDate")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class IssueLabelCreateInput(BaseModel):
    name: str = Field(min_length=1)
    team_id: str = Field(alias="teamId", min_length=1)
    color: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class CommentCreateInput(BaseModel):
    issue_id: str = Field(alias="issueId", min_length=1)
    body: str = Field(min_length=1)
    parent_id: Optional[str] = Field(default=None, alias="parentId")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class CommentUpdateInput(BaseModel):
    body: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


# --- Operation variables --- #


class NoVariables(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CreateIssueVariables(BaseModel):
    input: IssueCreateInput

    model_config = ConfigDict(extra="forbid")


class IssueBatchCreateInput(BaseModel):
    issues: List[IssueCreateInput] = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


class CreateIssuesVariables(BaseModel):
    input: IssueBatchCreateInput

    model_config = ConfigDict(extra="forbid")


class CreateProjectVariables(BaseModel):
    input: ProjectCreateInput

    model_config = ConfigDict(extra="forbid")


class UpdateIssuesVariables(BaseModel):
    ids: List[str] = Field(min_length=1)
    input: IssueUpdateInput

    model_config = ConfigDict(extra="forbid")


class DeleteIssuesVariables(BaseModel):
    ids: List[str] = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


class CreateIssueLabelsVariables(BaseModel):
    labels: List[IssueLabelCreateInput] = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


class SearchIssuesVariables(BaseModel):
    filter: Optional[Dict[str, Any]] = None
    first: int = Field(default=50, ge=1, le=250)
    after: Optional[str] = None
    order_by: Literal["createdAt", "updatedAt"] = Field(
        default="updatedAt", alias="orderBy"
    )

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class GetProjectVariables(BaseModel):
    id: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


class SearchProjectsVariables(BaseModel):
    filter: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")


class CreateCommentVariables(BaseModel):
    input: CommentCreateInput

    model_config = ConfigDict(extra="forbid")


class UpdateCommentVariables(BaseModel):
    id: str = Field(min_length=1)
    input: CommentUpdateInput

    model_config = ConfigDict(extra="forbid")


class DeleteCommentVariables(BaseModel):
    id: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


class GetCommentsVariables(BaseModel):
    filter: Optional[Dict[str, Any]] = None
    first: int = Field(default=50, ge=1, le=250)
    after: Optional[str] = None
    order_by: Literal["createdAt", "updatedAt"] = Field(
        default="createdAt", alias="orderBy"
    )

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


# --- Lightweight Reference Models (Output) --- #


class NamedRef(BaseModel):
    id: str
    name: str
    key: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class StateRef(BaseModel):
    id: Optional[str] = None
    name: str
    type: Optional[str] = None
    color: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class LabelRef(BaseModel):
    id: str
    name: str
    color: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class UserRef(BaseModel):
    id: str
    name: str
    email: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class PageInfo(BaseModel):
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: Optional[str] = Field(default=None, alias="endCursor")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class NodeList(BaseModel):
    nodes: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class IssueRef(BaseModel):
    id: str
    identifier: Optional[str] = None
    title: str
    url: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[float] = None
    state: Optional[StateRef] = None
    team: Optional[NamedRef] = None
    project: Optional[NamedRef] = None
    assignee: Optional[UserRef] = None

    model_config = ConfigDict(extra="ignore")


class ProjectRef(BaseModel):
    id: str
    name: str
    url: Optional[str] = None
    description: Optional[str] = None
    teams: Optional[NodeList] = None

    model_config = ConfigDict(extra="ignore")


class TeamRef(BaseModel):
    id: str
    name: str
    key: Optional[str] = None
    description: Optional[str] = None
    states: Optional[NodeList] = None
    labels: Optional[NodeList] = None

    model_config = ConfigDict(extra="ignore")


# --- Operation payloads (Output) --- #


class IssuePayload(BaseModel):
    success: bool
    issue: Optional[IssueRef] = None

    model_config = ConfigDict(extra="ignore")


class IssueBatchPayload(BaseModel):
    success: bool
    issues: List[IssueRef] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class ProjectPayload(BaseModel):
    success: bool
    project: Optional[ProjectRef] = None
    last_sync_id: Optional[float] = Field(default=None, alias="lastSyncId")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DeletePayload(BaseModel):
    success: bool

    model_config = ConfigDict(extra="ignore")


class IssueLabelPayload(BaseModel):
    success: bool
    issue_labels: List[LabelRef] = Field(default_factory=list, alias="issueLabels")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class IssueConnection(BaseModel):
    nodes: List[IssueRef] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TeamConnection(BaseModel):
    nodes: List[TeamRef] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class ProjectConnection(BaseModel):
    nodes: List[ProjectRef] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class Viewer(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    teams: Optional[NodeList] = None

    model_config = ConfigDict(extra="ignore")


class IssueLink(BaseModel):
    id: str
    identifier: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class ParentLink(BaseModel):
    id: str

    model_config = ConfigDict(extra="ignore")


class CommentRef(BaseModel):
    id: str
    body: str
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    edited_at: Optional[str] = Field(default=None, alias="editedAt")
    user: Optional[UserRef] = None
    issue: Optional[IssueLink] = None
    parent: Optional[ParentLink] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CommentPayload(BaseModel):
    success: bool
    comment: Optional[CommentRef] = None

    model_config = ConfigDict(extra="ignore")


class CommentConnection(BaseModel):
    nodes: List[CommentRef] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
