from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union, cast

from pydantic import BaseModel, ValidationError

from .errors import CompositeOperationError, LinearMCPError, OperationInputError, RemoteCallError
from .executor import OperationExecutor
from .models import (
    CreateIssuesVariables,
    CreateProjectVariables,
    DeleteIssuesVariables,
    DeletePayload,
    IssueBatchCreateInput,
    IssueBatchPayload,
    IssueCreateInput,
    IssueUpdateInput,
    ProjectCreateInput,
    ProjectPayload,
    UpdateIssuesVariables,
)
from .observability import log_event, timed_event
from .operations import (
    CREATE_ISSUES,
    CREATE_PROJECT,
    DELETE_ISSUES,
    UPDATE_ISSUES,
    OperationDescriptor,
)

PROJECT_WITH_ISSUES = "createProjectWithIssues"
STEP_CREATE_PROJECT = CREATE_PROJECT.name
STEP_CREATE_ISSUES = CREATE_ISSUES.name

# child inputs reference their parent project under this key
PARENT_REFERENCE_FIELD = "project_id"

IssueInput = Union[IssueCreateInput, Mapping[str, Any]]


@dataclass(frozen=True)
class CompositeResult:
    """Outputs of a finished workflow, keyed by step name (executed steps only)."""

    workflow: str
    steps: Dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, step: str) -> Any:
        return self.steps[step]

    def __contains__(self, step: object) -> bool:
        return step in self.steps

    def get(self, step: str, default: Any = None) -> Any:
        return self.steps.get(step, default)


class CompositeOperationOrchestrator:
    """
    Sequences executor calls into workflows.

    Steps run one after another and stop at the first failure. Outputs of
    steps that already ran are reported on CompositeOperationError; nothing is
    rolled back. Bulk workflows are a single batched call carrying every id.
    Holds no state between invocations.
    """

    def __init__(self, executor: OperationExecutor):
        self._executor = executor

    async def create_project_with_issues(
        self,
        project: Union[ProjectCreateInput, Mapping[str, Any]],
        issues: Sequence[IssueInput],
    ) -> CompositeResult:
        """
        Create a project, then create every issue inside it with one batched call.

        If the batch fails the project already exists: the raised
        CompositeOperationError carries its output under ``createProject`` and
        its id as ``parent_id``. Cleaning it up is left to the caller.
        """
        project_input = _validate(ProjectCreateInput, project, "project")
        issue_inputs = [_validate(IssueCreateInput, i, "issue") for i in issues]
        completed: Dict[str, Any] = {}

        created = cast(
            ProjectPayload,
            await self._step(
                PROJECT_WITH_ISSUES,
                completed,
                CREATE_PROJECT,
                CreateProjectVariables(input=project_input),
            ),
        )
        if created.project is None or not created.project.id:
            raise CompositeOperationError(
                workflow=PROJECT_WITH_ISSUES,
                failed_step=STEP_CREATE_PROJECT,
                completed={},
                cause=RemoteCallError(STEP_CREATE_PROJECT, "response has no project id"),
            )
        completed[STEP_CREATE_PROJECT] = created
        parent_id = created.project.id

        if issue_inputs:
            children = attach_parent(issue_inputs, parent_id)
            batch = await self._step(
                PROJECT_WITH_ISSUES,
                completed,
                CREATE_ISSUES,
                CreateIssuesVariables(input=IssueBatchCreateInput(issues=children)),
                parent_id=parent_id,
            )
            completed[STEP_CREATE_ISSUES] = batch

        return CompositeResult(workflow=PROJECT_WITH_ISSUES, steps=completed)

    async def create_issues(self, issues: Sequence[IssueInput]) -> IssueBatchPayload:
        issue_inputs = [_validate(IssueCreateInput, i, "issue") for i in issues]
        if not issue_inputs:
            raise OperationInputError("issues must not be empty")
        result = await self._executor.run(
            CREATE_ISSUES,
            CreateIssuesVariables(input=IssueBatchCreateInput(issues=issue_inputs)),
        )
        return cast(IssueBatchPayload, result)

    async def bulk_update_issues(
        self,
        ids: Sequence[str],
        update: Union[IssueUpdateInput, Mapping[str, Any]],
    ) -> IssueBatchPayload:
        id_list = _require_ids(ids)
        update_input = _validate(IssueUpdateInput, update, "update")
        with timed_event("bulk_call", operation=UPDATE_ISSUES.name, count=len(id_list)):
            result = await self._executor.run(
                UPDATE_ISSUES, UpdateIssuesVariables(ids=id_list, input=update_input)
            )
        return cast(IssueBatchPayload, result)

    async def bulk_delete_issues(self, ids: Sequence[str]) -> DeletePayload:
        id_list = _require_ids(ids)
        with timed_event("bulk_call", operation=DELETE_ISSUES.name, count=len(id_list)):
            result = await self._executor.run(
                DELETE_ISSUES, DeleteIssuesVariables(ids=id_list)
            )
        return cast(DeletePayload, result)

    async def _step(
        self,
        workflow: str,
        completed: Dict[str, Any],
        descriptor: OperationDescriptor,
        variables: BaseModel,
        *,
        parent_id: Optional[str] = None,
    ) -> BaseModel:
        try:
            output = await self._executor.run(descriptor, variables)
        except LinearMCPError as exc:
            log_event(
                "composite_step",
                workflow=workflow,
                step=descriptor.name,
                status="failed",
                error_type=type(exc).__name__,
            )
            raise CompositeOperationError(
                workflow=workflow,
                failed_step=descriptor.name,
                completed=completed,
                cause=exc,
                parent_id=parent_id,
            ) from exc

        log_event("composite_step", workflow=workflow, step=descriptor.name, status="ok")
        return output


def attach_parent(issues: Sequence[IssueCreateInput], parent_id: str) -> List[IssueCreateInput]:
    """Set the parent project on each issue, keeping a reference the caller already set."""
    return [
        issue
        if getattr(issue, PARENT_REFERENCE_FIELD)
        else issue.model_copy(update={PARENT_REFERENCE_FIELD: parent_id})
        for issue in issues
    ]


def _validate(model, value, label: str):
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        raise OperationInputError(f"invalid {label}: {exc}") from exc


def _require_ids(ids: Sequence[str]) -> List[str]:
    if isinstance(ids, str):
        raise OperationInputError("ids must be a list of issue ids")
    id_list = [str(i) for i in ids]
    if not id_list:
        raise OperationInputError("ids must not be empty")
    if not all(id_list):
        raise OperationInputError("ids must not contain empty values")
    return id_list


__all__ = [
    "CompositeResult",
    "CompositeOperationOrchestrator",
    "attach_parent",
    "PROJECT_WITH_ISSUES",
    "STEP_CREATE_PROJECT",
    "STEP_CREATE_ISSUES",
]
