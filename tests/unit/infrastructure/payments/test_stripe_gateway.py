"""Unit tests for jobboard/infrastructure/payments/stripe_gateway.py.

The Stripe client's async service methods are mocked so calls can be
inspected without network access.
"""

import pytest
import pytest_check
import stripe
from pytest_mock import MockerFixture, MockType

from jobboard.core.exceptions import ConfigurationError, PaymentGatewayError
from jobboard.infrastructure.payments import StripeGateway, get_payment_gateway


@pytest.fixture
def stripe_client(mocker: MockerFixture) -> MockType:
    """Stripe client answering every create call with a fixed id."""
    client = mocker.Mock()
    client.v1.prices.create_async = mocker.AsyncMock(
        return_value=mocker.Mock(id="price_123")
    )
    client.v1.checkout.sessions.create_async = mocker.AsyncMock(
        return_value=mocker.Mock(id="cs_test_1")
    )
    return client


@pytest.fixture
def gateway(stripe_client: MockType) -> StripeGateway:
    return StripeGateway(stripe_client)


@pytest.mark.unit
@pytest.mark.asyncio
class TestStripeGateway:
    """Tests for the provider calls."""

    async def test_create_recurring_price(
        self, gateway: StripeGateway, stripe_client: MockType
    ) -> None:
        price_id = await gateway.create_recurring_price(
            49900, currency="inr", interval="year", product_name="Premium Plan"
        )

        assert price_id == "price_123"
        stripe_client.v1.prices.create_async.assert_awaited_once_with(
            params={
                "currency": "inr",
                "unit_amount": 49900,
                "recurring": {"interval": "year"},
                "product_data": {"name": "Premium Plan"},
            }
        )

    async def test_create_checkout_session(
        self, gateway: StripeGateway, stripe_client: MockType
    ) -> None:
        session_id = await gateway.create_checkout_session(
            [{"price": "price_123", "quantity": 1}],
            success_url="https://jobs.example.com/membership?status=success",
            cancel_url="https://jobs.example.com/membership?status=cancel",
        )

        assert session_id == "cs_test_1"
        params = stripe_client.v1.checkout.sessions.create_async.call_args.kwargs[
            "params"
        ]
        with pytest_check.check:
            assert params["mode"] == "subscription"
        with pytest_check.check:
            assert params["payment_method_types"] == ["card"]
        with pytest_check.check:
            assert params["billing_address_collection"] == "required"
        with pytest_check.check:
            assert params["line_items"] == [{"price": "price_123", "quantity": 1}]
        with pytest_check.check:
            assert params["success_url"].endswith("/membership?status=success")

    async def test_provider_rejection(
        self, gateway: StripeGateway, stripe_client: MockType
    ) -> None:
        rejection = stripe.InvalidRequestError(
            "Invalid currency: xxx",
            "currency",
            code="parameter_invalid_string",
            http_status=400,
        )
        stripe_client.v1.prices.create_async.side_effect = rejection

        with pytest.raises(PaymentGatewayError) as exc_info:
            await gateway.create_recurring_price(
                100, currency="xxx", interval="year", product_name="Premium Plan"
            )

        assert exc_info.value.cause is rejection
        assert exc_info.value.context == {
            "status_code": 400,
            "provider_error_code": "parameter_invalid_string",
            "provider_message": "Invalid currency: xxx",
        }

    async def test_provider_unreachable(
        self, gateway: StripeGateway, stripe_client: MockType
    ) -> None:
        stripe_client.v1.checkout.sessions.create_async.side_effect = (
            stripe.APIConnectionError("Network error")
        )

        with pytest.raises(PaymentGatewayError) as exc_info:
            await gateway.create_checkout_session(
                [], success_url="https://a/s", cancel_url="https://a/c"
            )

        assert isinstance(exc_info.value.cause, stripe.APIConnectionError)
        assert exc_info.value.context["status_code"] is None


@pytest.mark.unit
class TestGetPaymentGateway:
    """Tests for building the gateway from settings."""

    def test_missing_secret_key(self) -> None:
        with pytest.raises(ConfigurationError):
            get_payment_gateway()

    def test_configured_gateway(
        self, monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture
    ) -> None:
        monkeypatch.setenv("PAYMENT_CONFIG__SECRET_KEY", "sk_test_abc")
        monkeypatch.setenv("PAYMENT_CONFIG__API_BASE", "https://stripe.test")
        client_class = mocker.patch(
            "jobboard.infrastructure.payments.stripe_gateway.stripe.StripeClient"
        )

        gateway = get_payment_gateway()

        assert gateway.client is client_class.return_value
        assert get_payment_gateway() is gateway
        args, kwargs = client_class.call_args
        with pytest_check.check:
            assert args == ("sk_test_abc",)
        with pytest_check.check:
            assert kwargs["base_addresses"] == {"api": "https://stripe.test"}
        with pytest_check.check:
            assert kwargs["max_network_retries"] == 0
