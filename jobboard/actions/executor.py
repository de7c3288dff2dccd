"""Uniform execution of a single data operation.

Every entity action is a thin descriptor (``Operation``) handed to the
executor, which runs the same sequence for all of them:

1. Acquire the shared connection.
2. Validate the payload against its allow-list schema.
3. Run exactly one repository operation inside a session.
4. Serialize the result through the record schema.
5. After commit, fire the invalidation signal once for mutations.
6. Wrap the outcome in an ``ActionResult``.

Any failure in steps 1-4 becomes a failure envelope carrying the action's
fixed message. ``ConfigurationError`` is the single exception that escapes.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pydantic
from loguru import logger

from jobboard.actions.envelope import ActionResult
from jobboard.actions.failures import failure_result
from jobboard.actions.invalidation import CacheInvalidator, get_invalidator
from jobboard.actions.schemas import FieldSchema, RecordSchema
from jobboard.core.context import correlation_scope, current_correlation_id
from jobboard.core.error_context import sanitize_dict
from jobboard.core.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    ValidationError,
)
from jobboard.core.types import LogContext, Payload
from jobboard.infrastructure.database.base import BaseModel
from jobboard.infrastructure.database.repository import CollectionRepository
from jobboard.infrastructure.database.session import (
    ConnectionManager,
    get_connection_manager,
)


class OperationKind(Enum):
    """The four data operations an action can perform."""

    CREATE = "create"
    FIND_ONE = "findOne"
    FIND_MANY = "findMany"
    FIND_ONE_AND_UPDATE = "findOneAndUpdate"

    @property
    def is_mutation(self) -> bool:
        """Whether the operation changes stored data."""
        return self in (OperationKind.CREATE, OperationKind.FIND_ONE_AND_UPDATE)


@dataclass(frozen=True, kw_only=True)
class Operation:
    """Descriptor of one action invocation.

    Attributes:
        action: Name of the action, used in logs.
        collection: Model class of the target table.
        kind: Which data operation to run.
        record_schema: How stored records are presented back.
        failure_message: Fixed message returned when the operation fails.
        query: Column conditions for find and update operations.
        payload: Caller-supplied fields for create and update operations.
        payload_schema: Allow-list the payload is validated against.
        invalidation_path: View to invalidate after a successful mutation.
    """

    action: str
    collection: type[BaseModel]
    kind: OperationKind
    record_schema: type[RecordSchema]
    failure_message: str
    query: Mapping[str, object] = field(default_factory=dict)
    payload: Payload | None = None
    payload_schema: type[FieldSchema] | None = None
    invalidation_path: str | None = None


class ActionExecutor:
    """Runs ``Operation`` descriptors against the shared connection.

    Args:
        connections: Connection manager to use. Defaults to the process-wide one,
            resolved on every call.
        invalidator: Invalidation signal to fire. Defaults to the process-wide
            one, resolved on every call.
    """

    def __init__(
        self,
        connections: ConnectionManager | None = None,
        invalidator: CacheInvalidator | None = None,
    ) -> None:
        self._connections = connections
        self._invalidator = invalidator

    @property
    def connections(self) -> ConnectionManager:
        return self._connections or get_connection_manager()

    @property
    def invalidator(self) -> CacheInvalidator:
        return self._invalidator or get_invalidator()

    async def execute(self, operation: Operation) -> ActionResult:
        """Run ``operation`` and return its result envelope.

        Args:
            operation: The descriptor to run.

        Returns:
            ActionResult: Success with the serialized record(s), or failure with
                ``operation.failure_message``.

        Raises:
            ConfigurationError: If the database endpoint is not configured.
        """
        # Direct calls get their own correlation id; requests keep theirs
        with (
            correlation_scope(current_correlation_id()),
            logger.contextualize(
                action=operation.action,
                collection=operation.collection.__tablename__,
                operation=operation.kind.value,
            ),
        ):
            try:
                await self.connections.acquire()
            except DatabaseConnectionError as e:
                return failure_result(e, operation.failure_message)

            try:
                data, matched_count = await self._run(operation)
            except ConfigurationError:
                raise
            except Exception as e:  # noqa: BLE001 - every failure becomes an envelope
                return failure_result(
                    e, operation.failure_message, self._log_context(operation)
                )

            if operation.kind.is_mutation and operation.invalidation_path is not None:
                self.invalidator.invalidate(operation.invalidation_path)

            logger.info("Action {} succeeded", operation.action)
            return ActionResult.ok(data, matched_count)

    async def _run(self, operation: Operation) -> tuple[Any, int | None]:
        query = dict(operation.query)
        values = self._validate(operation)
        if operation.kind is OperationKind.FIND_ONE_AND_UPDATE:
            query["id"] = values.pop("id")

        async with self.connections.session() as session:
            repository = CollectionRepository(session, operation.collection)

            match operation.kind:
                case OperationKind.CREATE:
                    instance = await repository.create(values)
                    return self._serialize(operation, instance), None
                case OperationKind.FIND_ONE:
                    instance = await repository.find_one(query)
                    return self._serialize(operation, instance), None
                case OperationKind.FIND_MANY:
                    instances = await repository.find_many(query)
                    return [self._serialize(operation, i) for i in instances], None
                case OperationKind.FIND_ONE_AND_UPDATE:
                    instance, matched = await repository.find_one_and_update(
                        query, values
                    )
                    return self._serialize(operation, instance), matched

    @staticmethod
    def _validate(operation: Operation) -> dict[str, Any]:
        """Reduce the payload to its allow-listed fields."""
        if operation.payload_schema is None:
            return {}

        try:
            validated = operation.payload_schema.model_validate(
                operation.payload or {}
            )
        except pydantic.ValidationError as e:
            msg = f"Invalid payload for {operation.action}"
            raise ValidationError(
                msg,
                context={
                    "errors": [
                        {"loc": list(err["loc"]), "type": err["type"]}
                        for err in e.errors()
                    ]
                },
                cause=e,
            ) from e

        return validated.model_dump(exclude_unset=True)

    @staticmethod
    def _serialize(operation: Operation, instance: BaseModel | None) -> Any:  # noqa: ANN401 - records are opaque
        if instance is None:
            return None
        return operation.record_schema.model_validate(instance).to_payload()

    @staticmethod
    def _log_context(operation: Operation) -> LogContext:
        context: LogContext = {"query": sanitize_dict(dict(operation.query))}
        if operation.payload is not None:
            context["payload_fields"] = sorted(operation.payload.keys())
        return context


_executor = ActionExecutor()


async def execute(operation: Operation) -> ActionResult:
    """Run ``operation`` on the process-wide executor."""
    return await _executor.execute(operation)
