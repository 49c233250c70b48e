"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- SimulatedGateway by default, tuned from the domain's custom settings
- FakeGateway for tests
"""

from storefront.payment.fake_adapter import FakeGateway
from storefront.payment.port import PaymentGateway
from storefront.payment.simulator import SimulatedGateway
from storefront.settings import setting

__all__ = ["FakeGateway", "PaymentGateway", "SimulatedGateway", "get_gateway", "reset_gateway", "set_gateway"]

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway. Defaults to SimulatedGateway."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = SimulatedGateway(
            failure_rate=float(setting("PAYMENT_FAILURE_RATE")),
            min_latency=float(setting("PAYMENT_MIN_LATENCY")),
            max_latency=float(setting("PAYMENT_MAX_LATENCY")),
        )
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
