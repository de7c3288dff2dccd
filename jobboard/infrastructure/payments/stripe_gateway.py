"""Stripe adapter for subscription pricing and checkout.

Only the two calls the membership flow needs are wrapped: creating a
recurring price and creating a checkout session. Nothing is validated or
retried here; any ``stripe.StripeError`` is raised as ``PaymentGatewayError``
for the action layer to map.
"""

from collections.abc import Mapping, Sequence
from functools import lru_cache

import stripe
from loguru import logger

from jobboard.core.config import get_settings
from jobboard.core.exceptions import ConfigurationError, PaymentGatewayError


def _provider_error(operation: str, error: stripe.StripeError) -> PaymentGatewayError:
    msg = f"Payment provider failed to {operation}"
    return PaymentGatewayError(
        msg,
        context={
            "status_code": error.http_status,
            "provider_error_code": error.code,
            "provider_message": error.user_message,
        },
        cause=error,
    )


class StripeGateway:
    """Async wrapper around the two Stripe calls used for memberships.

    Args:
        client: Configured Stripe client.
    """

    def __init__(self, client: stripe.StripeClient) -> None:
        self.client = client

    async def create_recurring_price(
        self,
        unit_amount: int,
        *,
        currency: str,
        interval: str,
        product_name: str,
    ) -> str:
        """Create a recurring price.

        Args:
            unit_amount: Price in the currency's minor unit.
            currency: ISO currency code.
            interval: Billing interval (day, week, month or year).
            product_name: Label of the product created alongside the price.

        Returns:
            str: The price identifier.

        Raises:
            PaymentGatewayError: If the provider rejects or cannot be reached.
        """
        try:
            price = await self.client.v1.prices.create_async(
                params={
                    "currency": currency,
                    "unit_amount": unit_amount,
                    "recurring": {"interval": interval},
                    "product_data": {"name": product_name},
                }
            )
        except stripe.StripeError as e:
            raise _provider_error("create price", e) from e

        logger.info("Payment provider created price {}", price.id)
        return price.id

    async def create_checkout_session(
        self,
        line_items: Sequence[Mapping[str, object]],
        *,
        success_url: str,
        cancel_url: str,
    ) -> str:
        """Create a subscription checkout session.

        Args:
            line_items: Priced items, e.g. ``[{"price": "price_1", "quantity": 1}]``.
            success_url: Redirect target after a completed checkout.
            cancel_url: Redirect target after an abandoned checkout.

        Returns:
            str: The checkout session identifier.

        Raises:
            PaymentGatewayError: If the provider rejects or cannot be reached.
        """
        try:
            session = await self.client.v1.checkout.sessions.create_async(
                params={
                    "payment_method_types": ["card"],
                    "line_items": [dict(item) for item in line_items],
                    "mode": "subscription",
                    "billing_address_collection": "required",
                    "success_url": success_url,
                    "cancel_url": cancel_url,
                }
            )
        except stripe.StripeError as e:
            raise _provider_error("create checkout session", e) from e

        logger.info("Payment provider created checkout session {}", session.id)
        return session.id


@lru_cache
def get_payment_gateway() -> StripeGateway:
    """Build the payment gateway from settings.

    Raises:
        ConfigurationError: If no Stripe secret key is configured.
    """
    payment_config = get_settings().payment_config
    if payment_config.secret_key is None:
        msg = (
            "Payment provider is not configured; set "
            "PAYMENT_CONFIG__SECRET_KEY in the environment or .env file"
        )
        raise ConfigurationError(msg, context={"setting": "payment_secret_key"})

    client = stripe.StripeClient(
        payment_config.secret_key.get_secret_value(),
        base_addresses={"api": payment_config.api_base},
        max_network_retries=0,
        http_client=stripe.HTTPXClient(timeout=payment_config.timeout),
    )
    return StripeGateway(client)
