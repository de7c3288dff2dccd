"""Unit tests for the candidate job search filter."""

import pytest

from jobboard.actions.job import build_candidate_filter


@pytest.mark.unit
class TestBuildCandidateFilter:
    """Tests for build_candidate_filter."""

    def test_empty_values_are_omitted(self) -> None:
        """An empty location does not constrain the search."""
        query = build_candidate_filter({"location": "", "skills": "go,rust"})

        assert query == {"skills": ["go", "rust"]}

    @pytest.mark.parametrize("filter_params", [None, {}, {"title": "", "type": None}])
    def test_no_constraints_matches_everything(
        self, filter_params: dict[str, str] | None
    ) -> None:
        assert build_candidate_filter(filter_params) == {}

    def test_wire_names_map_to_columns(self) -> None:
        query = build_candidate_filter(
            {"companyName": "Acme", "recruiterId": "rec_1", "type": "Remote,Hybrid"}
        )

        assert query == {
            "company_name": ["Acme"],
            "recruiter_id": ["rec_1"],
            "type": ["Remote", "Hybrid"],
        }

    def test_unknown_keys_are_ignored(self) -> None:
        query = build_candidate_filter({"salary": "100", "location": "Pune"})

        assert query == {"location": ["Pune"]}
