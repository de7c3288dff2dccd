"""Membership payment actions.

These do not touch the database; they call the payment provider and report
the identifier of the created object in a result envelope:

- ``create_price_id_action``: ``{"success": True, "data": {"id": "price_..."}}``
- ``create_stripe_payment_action``: ``{"success": True, "data": {"id": "cs_..."}}``

Provider failures become failure envelopes. A missing provider key is a
configuration error and is raised.
"""

import math
from contextlib import suppress

from loguru import logger

from jobboard.actions.envelope import ActionResult
from jobboard.actions.failures import failure_result
from jobboard.core.config import get_settings
from jobboard.core.exceptions import ConfigurationError, ValidationError
from jobboard.core.types import Payload
from jobboard.infrastructure.payments import get_payment_gateway

# Amounts arrive in major currency units; the provider expects minor units
MINOR_UNITS_PER_MAJOR = 100

PRICE_FAILED = "Failed to create payment plan. Please try again."
CHECKOUT_FAILED = "Failed to create payment session. Please try again."


def _membership_url(status: str) -> str:
    return f"{get_settings().app_url}/membership?status={status}"


def _unit_amount(data: Payload | None) -> int:
    """Convert the major-unit amount to minor units.

    Form state often carries numbers as strings, so numeric strings such as
    ``"499"`` are accepted alongside ints and floats.
    """
    amount = (data or {}).get("amount")
    if isinstance(amount, str):
        with suppress(ValueError):
            amount = float(amount.strip())
    if (
        isinstance(amount, bool)
        or not isinstance(amount, int | float)
        or not math.isfinite(amount)
    ):
        msg = "Membership amount must be a number"
        raise ValidationError(msg, context={"amount_type": type(amount).__name__})
    return round(amount * MINOR_UNITS_PER_MAJOR)


async def create_price_id_action(data: Payload | None) -> ActionResult:
    """Create the recurring price for a membership plan.

    Args:
        data: ``{"amount": <price in major units>}``.

    Returns:
        ActionResult: The price identifier under ``data["id"]``.

    Raises:
        ConfigurationError: If the payment provider key is not configured.
    """
    gateway = get_payment_gateway()
    payment_config = get_settings().payment_config

    with logger.contextualize(action="createPriceIdAction"):
        try:
            price_id = await gateway.create_recurring_price(
                _unit_amount(data),
                currency=payment_config.currency,
                interval=payment_config.billing_interval,
                product_name=payment_config.product_name,
            )
        except ConfigurationError:
            raise
        except Exception as e:  # noqa: BLE001 - every failure becomes an envelope
            return failure_result(e, PRICE_FAILED)

        return ActionResult.ok({"id": price_id})


async def create_stripe_payment_action(
    data: Payload | None,
) -> ActionResult:
    """Start a subscription checkout for the given line items.

    Args:
        data: ``{"lineItems": [{"price": "<price id>", "quantity": 1}]}``.

    Returns:
        ActionResult: The checkout session identifier under ``data["id"]``.

    Raises:
        ConfigurationError: If the payment provider key is not configured.
    """
    gateway = get_payment_gateway()

    with logger.contextualize(action="createStripePaymentAction"):
        try:
            session_id = await gateway.create_checkout_session(
                (data or {}).get("lineItems") or [],
                success_url=_membership_url("success"),
                cancel_url=_membership_url("cancel"),
            )
        except ConfigurationError:
            raise
        except Exception as e:  # noqa: BLE001 - every failure becomes an envelope
            return failure_result(e, CHECKOUT_FAILED)

        return ActionResult.ok({"id": session_id})
