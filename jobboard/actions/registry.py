"""Name-to-function table of every callable action.

Names match the web client's server-action names, so a client can invoke
``POST /actions/createProfileAction`` with the same positional arguments it
would pass to the in-process function.
"""

import inspect
from collections.abc import Awaitable, Callable
from types import MappingProxyType
from typing import Any

from jobboard.actions.application import (
    create_job_application_action,
    fetch_job_applications_for_candidate,
    fetch_job_applications_for_recruiter,
    update_job_application_action,
)
from jobboard.actions.envelope import ActionResult
from jobboard.actions.feed import (
    create_feed_post_action,
    fetch_all_feed_posts_action,
    update_feed_post_action,
)
from jobboard.actions.job import (
    create_filter_category_action,
    fetch_jobs_for_candidate_action,
    fetch_jobs_for_recruiter_action,
    post_new_job_action,
)
from jobboard.actions.payment import (
    create_price_id_action,
    create_stripe_payment_action,
)
from jobboard.actions.profile import (
    create_profile_action,
    fetch_profile_action,
    get_candidate_details_by_id_action,
    update_profile_action,
)
from jobboard.core.exceptions import ActionNotFoundError, ValidationError

type Action = Callable[..., Awaitable[ActionResult]]

ACTIONS: MappingProxyType[str, Action] = MappingProxyType(
    {
        "createProfileAction": create_profile_action,
        "fetchProfileAction": fetch_profile_action,
        "updateProfileAction": update_profile_action,
        "getCandidateDetailsByIDAction": get_candidate_details_by_id_action,
        "postNewJobAction": post_new_job_action,
        "fetchJobsForRecruiterAction": fetch_jobs_for_recruiter_action,
        "fetchJobsForCandidateAction": fetch_jobs_for_candidate_action,
        "createFilterCategoryAction": create_filter_category_action,
        "createJobApplicationAction": create_job_application_action,
        "fetchJobApplicationsForCandidate": fetch_job_applications_for_candidate,
        "fetchJobApplicationsForRecruiter": fetch_job_applications_for_recruiter,
        "updateJobApplicationAction": update_job_application_action,
        "createFeedPostAction": create_feed_post_action,
        "fetchAllFeedPostsAction": fetch_all_feed_posts_action,
        "updateFeedPostAction": update_feed_post_action,
        "createPriceIdAction": create_price_id_action,
        "createStripePaymentAction": create_stripe_payment_action,
    }
)


def get_action(name: str) -> Action:
    """Look up an action by name.

    Raises:
        ActionNotFoundError: If no action is registered under ``name``.
    """
    try:
        return ACTIONS[name]
    except KeyError as e:
        msg = f"Unknown action '{name}'"
        raise ActionNotFoundError(msg, context={"action": name}) from e


async def invoke(name: str, args: list[Any]) -> ActionResult:
    """Invoke the action ``name`` with positional ``args``.

    Raises:
        ActionNotFoundError: If no action is registered under ``name``.
        ValidationError: If ``args`` does not fit the action's signature.
        ConfigurationError: If a required resource is not configured.
    """
    action = get_action(name)
    try:
        bound = inspect.signature(action).bind(*args)
    except TypeError as e:
        msg = f"Invalid arguments for action '{name}'"
        raise ValidationError(
            msg, context={"action": name, "arg_count": len(args)}, cause=e
        ) from e
    return await action(*bound.args)
