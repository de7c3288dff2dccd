"""Profile actions."""

from jobboard.actions.envelope import ActionResult
from jobboard.actions.executor import Operation, OperationKind, execute
from jobboard.actions.schemas import ProfileCreate, ProfileRecord, ProfileUpdate
from jobboard.core.types import Payload
from jobboard.infrastructure.database.models import Profile


async def create_profile_action(
    form_data: Payload, path_to_revalidate: str
) -> ActionResult:
    """Create a profile from onboarding form data."""
    return await execute(
        Operation(
            action="createProfileAction",
            collection=Profile,
            kind=OperationKind.CREATE,
            record_schema=ProfileRecord,
            failure_message="Failed to create profile. Please try again.",
            payload=form_data,
            payload_schema=ProfileCreate,
            invalidation_path=path_to_revalidate,
        )
    )


async def fetch_profile_action(user_id: str) -> ActionResult:
    """Fetch the profile owned by ``user_id``; data is None when there is none."""
    return await execute(
        Operation(
            action="fetchProfileAction",
            collection=Profile,
            kind=OperationKind.FIND_ONE,
            record_schema=ProfileRecord,
            failure_message="Failed to fetch profile.",
            query={"user_id": user_id},
        )
    )


async def update_profile_action(
    data: Payload, path_to_revalidate: str
) -> ActionResult:
    """Patch the profile identified by ``data["_id"]``."""
    return await execute(
        Operation(
            action="updateProfileAction",
            collection=Profile,
            kind=OperationKind.FIND_ONE_AND_UPDATE,
            record_schema=ProfileRecord,
            failure_message="Failed to update profile. Please try again.",
            payload=data,
            payload_schema=ProfileUpdate,
            invalidation_path=path_to_revalidate,
        )
    )


async def get_candidate_details_by_id_action(candidate_id: str) -> ActionResult:
    """Fetch a candidate's profile for a recruiter reviewing an application."""
    return await execute(
        Operation(
            action="getCandidateDetailsByIDAction",
            collection=Profile,
            kind=OperationKind.FIND_ONE,
            record_schema=ProfileRecord,
            failure_message="Failed to fetch candidate details.",
            query={"user_id": candidate_id},
        )
    )
