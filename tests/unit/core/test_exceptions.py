"""Unit tests for jobboard/core/exceptions.py."""

import pytest
import pytest_check

from jobboard.core.exceptions import (
    ActionNotFoundError,
    ConfigurationError,
    DatabaseConnectionError,
    ErrorCode,
    JobboardError,
    OperationError,
    PaymentGatewayError,
    Severity,
    ValidationError,
)


@pytest.mark.unit
class TestErrorTaxonomy:
    """Each error class has a fixed code and severity."""

    @pytest.mark.parametrize(
        ("error_class", "error_code", "severity"),
        [
            (ConfigurationError, ErrorCode.CONFIGURATION_ERROR, Severity.CRITICAL),
            (DatabaseConnectionError, ErrorCode.CONNECTION_ERROR, Severity.HIGH),
            (OperationError, ErrorCode.OPERATION_ERROR, Severity.MEDIUM),
            (ValidationError, ErrorCode.VALIDATION_ERROR, Severity.LOW),
            (PaymentGatewayError, ErrorCode.PAYMENT_ERROR, Severity.HIGH),
            (ActionNotFoundError, ErrorCode.ACTION_NOT_FOUND, Severity.LOW),
        ],
    )
    def test_code_and_severity(
        self,
        error_class: type[JobboardError],
        error_code: ErrorCode,
        severity: Severity,
    ) -> None:
        error = error_class("something failed")

        with pytest_check.check:
            assert isinstance(error, JobboardError)
        with pytest_check.check:
            assert error.error_code == error_code.value
        with pytest_check.check:
            assert error.severity is severity

    def test_configuration_error_is_not_a_connection_error(self) -> None:
        assert not issubclass(ConfigurationError, DatabaseConnectionError)
        assert not issubclass(DatabaseConnectionError, ConfigurationError)

    def test_alerting_follows_severity(self) -> None:
        assert ConfigurationError("missing").should_alert
        assert not ValidationError("bad").should_alert
        assert OperationError("failed").is_expected


@pytest.mark.unit
class TestJobboardError:
    """Tests for the base error."""

    def test_str_and_repr(self) -> None:
        error = OperationError("Insert failed", context={"collection": "jobs"})

        assert str(error) == "[OPERATION_ERROR] Insert failed"
        assert repr(error) == (
            "OperationError(error_code='OPERATION_ERROR', message='Insert failed', "
            "severity=MEDIUM, context={'collection': 'jobs'})"
        )

    def test_cause_is_chained(self) -> None:
        cause = ConnectionRefusedError("refused")

        error = DatabaseConnectionError("unreachable", cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause

    def test_fingerprint_is_stable_for_same_location(self) -> None:
        fingerprints = {OperationError("boom").fingerprint for _ in range(3)}

        assert len(fingerprints) == 1
        assert len(fingerprints.pop()) == 16

    def test_stack_trace_captured(self) -> None:
        assert OperationError("boom").stack_trace
