"""Job posting actions, including the candidate job search."""

from loguru import logger

from jobboard.actions.envelope import ActionResult
from jobboard.actions.executor import Operation, OperationKind, execute
from jobboard.actions.schemas import JobCreate, JobRecord
from jobboard.core.types import Payload
from jobboard.infrastructure.database.models import Job

# Filter keys a candidate may search on, mapped to job columns
FILTER_FIELDS = {
    "companyName": "company_name",
    "title": "title",
    "location": "location",
    "type": "type",
    "experience": "experience",
    "skills": "skills",
    "recruiterId": "recruiter_id",
}

FILTER_SEPARATOR = ","


def build_candidate_filter(
    filter_params: Payload | None,
) -> dict[str, list[str]]:
    """Translate candidate search parameters into a membership query.

    Each non-empty value is split on commas and matches jobs whose column
    value is one of the parts. Empty or missing keys do not constrain the
    search at all, so an empty filter matches every job.

    Args:
        filter_params: Wire-named filter values, e.g.
            ``{"location": "Pune,Remote", "skills": ""}``.

    Returns:
        dict[str, list[str]]: Column name to accepted values.

    Example:
        >>> build_candidate_filter({"location": "", "skills": "go,rust"})
        {'skills': ['go', 'rust']}
    """
    query: dict[str, list[str]] = {}
    for key, value in (filter_params or {}).items():
        if not value:
            continue
        column = FILTER_FIELDS.get(key)
        if column is None:
            logger.warning("Ignoring unknown job filter '{}'", key)
            continue
        query[column] = str(value).split(FILTER_SEPARATOR)
    return query


async def post_new_job_action(
    form_data: Payload, path_to_revalidate: str
) -> ActionResult:
    """Create a job posting."""
    return await execute(
        Operation(
            action="postNewJobAction",
            collection=Job,
            kind=OperationKind.CREATE,
            record_schema=JobRecord,
            failure_message="Failed to post job. Please try again.",
            payload=form_data,
            payload_schema=JobCreate,
            invalidation_path=path_to_revalidate,
        )
    )


async def fetch_jobs_for_recruiter_action(recruiter_id: str) -> ActionResult:
    """List the jobs posted by ``recruiter_id``."""
    return await execute(
        Operation(
            action="fetchJobsForRecruiterAction",
            collection=Job,
            kind=OperationKind.FIND_MANY,
            record_schema=JobRecord,
            failure_message="Failed to fetch jobs.",
            query={"recruiter_id": recruiter_id},
        )
    )


async def fetch_jobs_for_candidate_action(
    filter_params: Payload | None = None,
) -> ActionResult:
    """Search jobs for a candidate; see ``build_candidate_filter``."""
    return await execute(
        Operation(
            action="fetchJobsForCandidateAction",
            collection=Job,
            kind=OperationKind.FIND_MANY,
            record_schema=JobRecord,
            failure_message="Failed to fetch jobs.",
            query=build_candidate_filter(filter_params),
        )
    )


async def create_filter_category_action() -> ActionResult:
    """List every job so the client can derive its filter categories."""
    return await execute(
        Operation(
            action="createFilterCategoryAction",
            collection=Job,
            kind=OperationKind.FIND_MANY,
            record_schema=JobRecord,
            failure_message="Failed to fetch filter data.",
        )
    )
