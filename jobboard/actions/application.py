"""Job application actions."""

from jobboard.actions.envelope import ActionResult
from jobboard.actions.executor import Operation, OperationKind, execute
from jobboard.actions.schemas import (
    ApplicationCreate,
    ApplicationRecord,
    ApplicationUpdate,
)
from jobboard.core.types import Payload
from jobboard.infrastructure.database.models import Application

FETCH_FAILED = "Failed to fetch applications."


async def create_job_application_action(
    data: Payload, path_to_revalidate: str
) -> ActionResult:
    """Submit a candidate's application to a job."""
    return await execute(
        Operation(
            action="createJobApplicationAction",
            collection=Application,
            kind=OperationKind.CREATE,
            record_schema=ApplicationRecord,
            failure_message="Failed to submit application. Please try again.",
            payload=data,
            payload_schema=ApplicationCreate,
            invalidation_path=path_to_revalidate,
        )
    )


async def fetch_job_applications_for_candidate(candidate_id: str) -> ActionResult:
    """List the applications submitted by ``candidate_id``."""
    return await execute(
        Operation(
            action="fetchJobApplicationsForCandidate",
            collection=Application,
            kind=OperationKind.FIND_MANY,
            record_schema=ApplicationRecord,
            failure_message=FETCH_FAILED,
            query={"candidate_user_id": candidate_id},
        )
    )


async def fetch_job_applications_for_recruiter(recruiter_id: str) -> ActionResult:
    """List the applications received by ``recruiter_id``."""
    return await execute(
        Operation(
            action="fetchJobApplicationsForRecruiter",
            collection=Application,
            kind=OperationKind.FIND_MANY,
            record_schema=ApplicationRecord,
            failure_message=FETCH_FAILED,
            query={"recruiter_user_id": recruiter_id},
        )
    )


async def update_job_application_action(
    data: Payload, path_to_revalidate: str
) -> ActionResult:
    """Patch the application identified by ``data["_id"]``, e.g. its status.

    An ``_id`` that matches nothing still succeeds, with ``data`` None and
    ``matchedCount`` 0.
    """
    return await execute(
        Operation(
            action="updateJobApplicationAction",
            collection=Application,
            kind=OperationKind.FIND_ONE_AND_UPDATE,
            record_schema=ApplicationRecord,
            failure_message="Failed to update application. Please try again.",
            payload=data,
            payload_schema=ApplicationUpdate,
            invalidation_path=path_to_revalidate,
        )
    )
