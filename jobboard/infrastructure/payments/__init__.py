"""Payment provider integration."""

from jobboard.infrastructure.payments.stripe_gateway import (
    StripeGateway,
    get_payment_gateway,
)

__all__ = ["StripeGateway", "get_payment_gateway"]
