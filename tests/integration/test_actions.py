"""Integration tests for the entity actions against a real database."""

import asyncio

import pytest
import pytest_check
from pytest_mock import MockerFixture
from sqlalchemy.exc import OperationalError

from jobboard.actions.application import (
    create_job_application_action,
    fetch_job_applications_for_candidate,
    fetch_job_applications_for_recruiter,
    update_job_application_action,
)
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
from jobboard.actions.profile import (
    create_profile_action,
    fetch_profile_action,
    get_candidate_details_by_id_action,
    update_profile_action,
)
from jobboard.core.exceptions import ConfigurationError
from jobboard.infrastructure.database.session import (
    ConnectionManager,
    ConnectionState,
)

CANDIDATE_PROFILE = {
    "userId": "user_cand",
    "role": "candidate",
    "email": "ada@example.com",
    "candidateInfo": {"name": "Ada", "currentCompany": "Acme", "skills": "python"},
}

JOBS = [
    {
        "companyName": "Acme",
        "title": "Backend Engineer",
        "location": "Pune",
        "type": "Full time",
        "experience": "2 years",
        "description": "APIs",
        "skills": "go",
        "recruiterId": "rec_1",
    },
    {
        "companyName": "Globex",
        "title": "Systems Engineer",
        "location": "Remote",
        "type": "Contract",
        "experience": "5 years",
        "description": "Storage",
        "skills": "rust",
        "recruiterId": "rec_2",
    },
    {
        "companyName": "Initech",
        "title": "Data Engineer",
        "location": "Pune",
        "type": "Full time",
        "experience": "1 year",
        "description": "Pipelines",
        "skills": "python",
        "recruiterId": "rec_1",
    },
]


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.usefixtures("connection_manager")
class TestProfileActions:
    """Profile create, fetch and update."""

    async def test_create_then_fetch(self, invalidated_paths: list[str]) -> None:
        created = await create_profile_action(CANDIDATE_PROFILE, "/onboard")
        fetched = await fetch_profile_action("user_cand")

        assert created.success is True
        assert fetched.success is True
        with pytest_check.check:
            assert fetched.data["_id"] == created.data["_id"]
        with pytest_check.check:
            assert fetched.data["candidateInfo"]["name"] == "Ada"
        with pytest_check.check:
            assert fetched.data["isPremiumUser"] is False
        assert invalidated_paths == ["/onboard"]

    async def test_fields_outside_allow_list_are_not_stored(self) -> None:
        created = await create_profile_action(
            {**CANDIDATE_PROFILE, "isAdmin": True, "_id": "chosen_by_caller"},
            "/onboard",
        )

        assert created.success is True
        assert created.data["_id"] != "chosen_by_caller"
        assert "isAdmin" not in created.data

    async def test_fetch_missing_profile_is_not_an_error(
        self, invalidated_paths: list[str]
    ) -> None:
        result = await fetch_profile_action("nobody")

        assert result.to_dict() == {"success": True, "data": None}
        assert invalidated_paths == []

    async def test_update_membership(self, invalidated_paths: list[str]) -> None:
        created = await create_profile_action(CANDIDATE_PROFILE, "/onboard")

        updated = await update_profile_action(
            {
                "_id": created.data["_id"],
                "isPremiumUser": True,
                "memberShipType": "pro",
                "memberShipStartDate": "2024-06-14",
            },
            "/membership",
        )

        assert updated.success is True
        assert updated.matched_count == 1
        with pytest_check.check:
            assert updated.data["isPremiumUser"] is True
        with pytest_check.check:
            assert updated.data["memberShipType"] == "pro"
        with pytest_check.check:
            assert updated.data["email"] == "ada@example.com"
        assert invalidated_paths == ["/onboard", "/membership"]

    async def test_candidate_details(self) -> None:
        await create_profile_action(CANDIDATE_PROFILE, "/onboard")

        result = await get_candidate_details_by_id_action("user_cand")

        assert result.success is True
        assert result.data["userId"] == "user_cand"

    async def test_invalid_payload_fails_without_invalidation(
        self, invalidated_paths: list[str]
    ) -> None:
        result = await create_profile_action({"role": "candidate"}, "/onboard")

        assert result.to_dict() == {
            "success": False,
            "message": "Failed to create profile. Please try again.",
        }
        assert invalidated_paths == []


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.usefixtures("connection_manager")
class TestJobActions:
    """Job posting and search."""

    @pytest.fixture(autouse=True)
    async def posted_jobs(self, connection_manager: ConnectionManager) -> None:
        _ = connection_manager  # Jobs must go into the test database
        for job in JOBS:
            result = await post_new_job_action(job, "/jobs")
            assert result.success is True

    async def test_jobs_for_recruiter(self) -> None:
        result = await fetch_jobs_for_recruiter_action("rec_1")

        assert sorted(job["companyName"] for job in result.data) == ["Acme", "Initech"]
        assert all(job["applicants"] == [] for job in result.data)

    async def test_jobs_for_unknown_recruiter(self) -> None:
        result = await fetch_jobs_for_recruiter_action("rec_404")

        assert result.to_dict() == {"success": True, "data": []}

    async def test_candidate_filter_ignores_empty_keys(self) -> None:
        """An empty location plus two skills matches jobs with either skill."""
        result = await fetch_jobs_for_candidate_action(
            {"location": "", "skills": "go,rust"}
        )

        assert result.success is True
        assert sorted(job["skills"] for job in result.data) == ["go", "rust"]

    async def test_candidate_filter_combines_keys(self) -> None:
        result = await fetch_jobs_for_candidate_action(
            {"location": "Pune", "type": "Full time,Contract"}
        )

        assert sorted(job["companyName"] for job in result.data) == [
            "Acme",
            "Initech",
        ]

    async def test_empty_filter_matches_all(self) -> None:
        result = await fetch_jobs_for_candidate_action({})

        assert len(result.data) == len(JOBS)

    async def test_filter_categories_list_all_jobs(
        self, invalidated_paths: list[str]
    ) -> None:
        result = await create_filter_category_action()

        assert len(result.data) == len(JOBS)
        assert invalidated_paths == []


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.usefixtures("connection_manager")
class TestApplicationActions:
    """Applications and status updates."""

    async def test_submit_and_list(self) -> None:
        created = await create_job_application_action(
            {
                "recruiterUserID": "rec_1",
                "name": "Ada",
                "email": "ada@example.com",
                "candidateUserID": "user_cand",
                "status": "Applied",
                "jobID": "job_1",
                "jobAppliedDate": "2024-06-14",
            },
            "/jobs",
        )

        for_candidate = await fetch_job_applications_for_candidate("user_cand")
        for_recruiter = await fetch_job_applications_for_recruiter("rec_1")

        assert created.success is True
        assert [a["_id"] for a in for_candidate.data] == [created.data["_id"]]
        assert [a["_id"] for a in for_recruiter.data] == [created.data["_id"]]
        assert for_candidate.data[0]["jobID"] == "job_1"

    async def test_update_status(self, invalidated_paths: list[str]) -> None:
        created = await create_job_application_action(
            {"recruiterUserID": "rec_1", "candidateUserID": "user_cand"}, "/jobs"
        )

        updated = await update_job_application_action(
            {"_id": created.data["_id"], "status": "Selected"}, "/jobs"
        )

        assert updated.to_dict()["matchedCount"] == 1
        assert updated.data["status"] == "Selected"
        assert invalidated_paths == ["/jobs", "/jobs"]

    async def test_update_unknown_identity_still_succeeds(
        self, invalidated_paths: list[str]
    ) -> None:
        """An _id that matches nothing succeeds and reports zero matches."""
        result = await update_job_application_action(
            {"_id": "X", "status": "Rejected"}, "/jobs"
        )

        assert result.to_dict() == {"success": True, "data": None, "matchedCount": 0}
        assert invalidated_paths == ["/jobs"]


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.usefixtures("connection_manager")
class TestFeedActions:
    """Feed posts and likes."""

    async def test_post_like_and_list(self, invalidated_paths: list[str]) -> None:
        created = await create_feed_post_action(
            {"userId": "user_cand", "userName": "Ada", "message": "Hired!"}, "/feed"
        )
        liked = await update_feed_post_action(
            {
                "_id": created.data["_id"],
                "likes": [{"reactorUserId": "rec_1", "reactorUserName": "Bob"}],
            },
            "/feed",
        )
        listed = await fetch_all_feed_posts_action()

        assert created.data["likes"] == []
        assert liked.data["likes"] == [
            {"reactorUserId": "rec_1", "reactorUserName": "Bob"}
        ]
        assert liked.data["message"] == "Hired!"
        assert [post["_id"] for post in listed.data] == [created.data["_id"]]
        assert invalidated_paths == ["/feed", "/feed"]

    async def test_empty_path_is_passed_through(
        self, invalidated_paths: list[str]
    ) -> None:
        result = await create_feed_post_action(
            {"userId": "user_cand", "message": "Root view"}, ""
        )

        assert result.success
        assert invalidated_paths == [""]


@pytest.mark.integration
@pytest.mark.asyncio
class TestFailureHandling:
    """Connection and operation failures become envelopes."""

    async def test_operation_failure_hides_detail(
        self,
        connection_manager: ConnectionManager,
        invalidated_paths: list[str],
        mocker: MockerFixture,
    ) -> None:
        await connection_manager.acquire()
        mocker.patch(
            "jobboard.infrastructure.database.repository.CollectionRepository.create",
            side_effect=OperationalError(
                "INSERT", {}, Exception("disk I/O error at /var/db")
            ),
        )

        result = await create_feed_post_action({"userId": "user_cand"}, "/feed")

        assert result.to_dict() == {
            "success": False,
            "message": "Failed to create post.",
        }
        assert invalidated_paths == []

    async def test_unreachable_database(
        self,
        monkeypatch: pytest.MonkeyPatch,
        invalidated_paths: list[str],
    ) -> None:
        """A connection failure is reported as the action's fixed message."""
        manager = ConnectionManager(
            "sqlite+aiosqlite:////nonexistent-dir/jobboard.db", create_tables=True
        )
        monkeypatch.setattr(
            "jobboard.infrastructure.database.session._connection_manager", manager
        )

        result = await post_new_job_action(JOBS[0], "/jobs")

        assert result.to_dict() == {
            "success": False,
            "message": "Failed to post job. Please try again.",
        }
        assert manager.state is ConnectionState.FAILED
        assert invalidated_paths == []

    async def test_missing_configuration_is_raised(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Missing configuration escapes instead of becoming an envelope."""
        monkeypatch.setattr(
            "jobboard.infrastructure.database.session._connection_manager",
            ConnectionManager(None),
        )

        with pytest.raises(ConfigurationError):
            await fetch_all_feed_posts_action()

    async def test_concurrent_actions_share_one_connection(
        self, connection_manager: ConnectionManager
    ) -> None:
        results = await asyncio.gather(
            *(fetch_profile_action(f"user_{i}") for i in range(20))
        )

        assert all(r.success for r in results)
        assert connection_manager.connection_attempts == 1
