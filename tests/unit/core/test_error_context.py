"""Unit tests for jobboard/core/error_context.py."""

import pytest

from jobboard.core.error_context import (
    REDACTED,
    is_sensitive_field,
    is_sensitive_header,
    sanitize_dict,
    sanitize_error_context,
    sanitize_headers,
    sanitize_sql_params,
)
from jobboard.core.exceptions import OperationError


@pytest.mark.unit
class TestSensitiveDetection:
    """Tests for sensitive field detection."""

    @pytest.mark.parametrize(
        "field_name",
        ["password", "api_key", "secret_key", "email", "candidateEmail", "token"],
    )
    def test_sensitive_fields(self, field_name: str) -> None:
        assert is_sensitive_field(field_name)

    @pytest.mark.parametrize("field_name", ["userId", "role", "status", "title"])
    def test_regular_fields(self, field_name: str) -> None:
        assert not is_sensitive_field(field_name)

    def test_configured_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_CONFIG__SENSITIVE_FIELDS", '["resume"]')

        assert is_sensitive_field("resumeUrl")

    def test_sensitive_headers(self) -> None:
        assert is_sensitive_header("Authorization")
        assert not is_sensitive_header("X-Correlation-ID")


@pytest.mark.unit
class TestSanitization:
    """Tests for redaction of nested values."""

    def test_nested_values(self) -> None:
        data = {
            "userId": "user_1",
            "candidateInfo": {"name": "Ada", "email": "ada@example.com"},
            "items": [{"token": "abc", "id": 1}],
        }

        assert sanitize_dict(data) == {
            "userId": "user_1",
            "candidateInfo": {"name": "Ada", "email": REDACTED},
            "items": [{"token": REDACTED, "id": 1}],
        }

    def test_original_not_modified(self) -> None:
        data = {"password": "hunter2"}

        sanitize_dict(data)

        assert data == {"password": "hunter2"}

    def test_headers(self) -> None:
        assert sanitize_headers({"Cookie": "a=b", "Accept": "*/*"}) == {
            "Cookie": REDACTED,
            "Accept": "*/*",
        }

    def test_sql_params(self) -> None:
        assert sanitize_sql_params({"email": "a@b.c", "id": 1}) == {
            "email": REDACTED,
            "id": 1,
        }
        assert sanitize_sql_params(None) is None

    def test_error_context_excludes_stack_trace(self) -> None:
        error = OperationError("boom", context={"api_key": "sk_live"})

        context = sanitize_error_context(error, {"action": "createPriceIdAction"})

        assert context["error_type"] == "OperationError"
        assert context["action"] == "createPriceIdAction"
        assert "stack_trace" not in context["error_attributes"]
        assert context["error_attributes"]["context"] == {"api_key": REDACTED}
