"""Social feed actions."""

from jobboard.actions.envelope import ActionResult
from jobboard.actions.executor import Operation, OperationKind, execute
from jobboard.actions.schemas import FeedPostCreate, FeedPostRecord, FeedPostUpdate
from jobboard.core.types import Payload
from jobboard.infrastructure.database.models import FeedPost


async def create_feed_post_action(
    data: Payload, path_to_revalidate: str
) -> ActionResult:
    return await execute(
        Operation(
            action="createFeedPostAction",
            collection=FeedPost,
            kind=OperationKind.CREATE,
            record_schema=FeedPostRecord,
            failure_message="Failed to create post.",
            payload=data,
            payload_schema=FeedPostCreate,
            invalidation_path=path_to_revalidate,
        )
    )


async def fetch_all_feed_posts_action() -> ActionResult:
    return await execute(
        Operation(
            action="fetchAllFeedPostsAction",
            collection=FeedPost,
            kind=OperationKind.FIND_MANY,
            record_schema=FeedPostRecord,
            failure_message="Failed to fetch posts.",
        )
    )


async def update_feed_post_action(
    data: Payload, path_to_revalidate: str
) -> ActionResult:
    """Patch a post, typically to replace its ``likes``."""
    return await execute(
        Operation(
            action="updateFeedPostAction",
            collection=FeedPost,
            kind=OperationKind.FIND_ONE_AND_UPDATE,
            record_schema=FeedPostRecord,
            failure_message="Failed to update post.",
            payload=data,
            payload_schema=FeedPostUpdate,
            invalidation_path=path_to_revalidate,
        )
    )
