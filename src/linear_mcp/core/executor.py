from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from .client import LinearClient, LinearClientError
from .errors import OperationInputError, OperationRejectedError, RemoteCallError
from .observability import timed_event
from .operations import OperationDescriptor, get_operation

ClientProvider = Callable[[], LinearClient]


class OperationExecutor:
    """
    Runs one named operation per call against the client handed out by the
    auth strategy.
    - invalid input -> OperationInputError (nothing is sent)
    - transport/HTTP/GraphQL/shape failures -> RemoteCallError
    - ``success: false`` on a mutation -> OperationRejectedError
    - single attempt, no retries, no caching
    """

    def __init__(self, client_provider: Union[ClientProvider, Any]):
        # accept an AuthStrategy (anything with .client()) or a plain callable
        provider = getattr(client_provider, "client", client_provider)
        if not callable(provider):
            raise TypeError("client_provider must be callable or expose client()")
        self._client_provider: ClientProvider = provider

    async def run(
        self,
        descriptor: Union[OperationDescriptor, str],
        variables: Optional[Union[BaseModel, Mapping[str, Any]]] = None,
    ) -> BaseModel:
        op = descriptor if isinstance(descriptor, OperationDescriptor) else get_operation(descriptor)
        payload = self.serialize(op, variables)
        client = self._client_provider()

        with timed_event("op_call", operation=op.name) as event:
            try:
                data = await client.execute(
                    op.document, payload, operation_name=op.operation_name
                )
            except LinearClientError as exc:
                raise RemoteCallError(op.name, str(exc)) from exc

            result = data.get(op.root_field)
            if not isinstance(result, dict):
                raise RemoteCallError(
                    op.name, f"response is missing the '{op.root_field}' object"
                )

            if op.mutation and result.get("success") is False:
                event["status"] = "rejected"
                raise OperationRejectedError(op.name, result)

            try:
                return op.output_model.model_validate(result)
            except ValidationError as exc:
                raise RemoteCallError(
                    op.name, f"unexpected response shape: {exc}"
                ) from exc

    @staticmethod
    def serialize(
        op: OperationDescriptor,
        variables: Optional[Union[BaseModel, Mapping[str, Any]]],
    ) -> Dict[str, Any]:
        if not isinstance(variables, op.input_model):
            try:
                variables = op.input_model.model_validate(
                    variables if variables is not None else {}
                )
            except ValidationError as exc:
                raise OperationInputError(f"{op.name}: invalid input: {exc}") from exc
        return variables.model_dump(by_alias=True, exclude_none=True)


__all__ = ["OperationExecutor", "ClientProvider"]
