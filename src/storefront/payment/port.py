"""Payment gateway port (abstract interface).

Defines the contract every payment adapter implements, so the HTTP layer can
switch between the simulated gateway and a deterministic fake without any
order code changing. Detail validation is shared by all adapters.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime

CARD = "card"

_EXPIRY = re.compile(r"^(0[1-9]|1[0-2])/(\d{2})$")


@dataclass(frozen=True)
class PaymentDetails:
    """What the customer submitted to pay for an order."""

    order_number: str | None
    amount: float | None
    payment_method: str | None
    card_number: str | None = None
    expiry_date: str | None = None  # MM/YY
    cvv: str | None = None


@dataclass(frozen=True)
class PaymentValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of a charge or refund attempt."""

    success: bool
    transaction_id: str | None = None
    message: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    def validate(self, details: PaymentDetails, today: datetime | None = None) -> PaymentValidation:
        """Check payment details before any charge is attempted."""
        errors = []
        if not details.order_number:
            errors.append("Order number is required")
        if details.amount is None or details.amount <= 0:
            errors.append("Valid amount is required")
        if not details.payment_method:
            errors.append("Payment method is required")

        if details.payment_method == CARD:
            errors.extend(self._card_errors(details, today or datetime.now(UTC)))

        return PaymentValidation(valid=not errors, errors=errors)

    @staticmethod
    def _card_errors(details, today):
        errors = []

        digits = re.sub(r"[\s-]", "", details.card_number or "")
        if not (digits.isdigit() and 13 <= len(digits) <= 19):
            errors.append("Invalid card number")

        match = _EXPIRY.match((details.expiry_date or "").strip())
        if not match:
            errors.append("Invalid expiry date (MM/YY)")
        else:
            month, year = int(match.group(1)), 2000 + int(match.group(2))
            if (year, month) < (today.year, today.month):
                errors.append("Card has expired")

        cvv = (details.cvv or "").strip()
        if not (cvv.isdigit() and 3 <= len(cvv) <= 4):
            errors.append("Invalid CVV")

        return errors

    @abstractmethod
    async def process(
        self,
        order_number: str,
        amount: float,
        payment_method: str,
        force_success: bool = False,
    ) -> PaymentResult:
        """Charge ``amount`` for an order. Resolves exactly once and is never retried here."""
        ...

    @abstractmethod
    async def refund(self, transaction_id: str, amount: float) -> PaymentResult:
        """Refund a previous charge."""
        ...
