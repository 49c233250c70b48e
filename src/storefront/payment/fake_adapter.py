"""Deterministic fake payment gateway for tests and local development.

Succeeds or fails as configured and records every call, with no latency.
"""

from uuid import uuid4

from storefront.payment.port import PaymentGateway, PaymentResult


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, should_succeed: bool = True, failure_reason: str = "Card declined") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def process(
        self,
        order_number: str,
        amount: float,
        payment_method: str,
        force_success: bool = False,
    ) -> PaymentResult:
        self.calls.append(
            {
                "method": "process",
                "order_number": order_number,
                "amount": amount,
                "payment_method": payment_method,
                "force_success": force_success,
            }
        )

        if self.should_succeed or force_success:
            return PaymentResult(
                success=True,
                transaction_id=f"fake_txn_{uuid4().hex[:12]}",
                message="Payment processed successfully",
            )
        return PaymentResult(success=False, message=self.failure_reason)

    async def refund(self, transaction_id: str, amount: float) -> PaymentResult:
        self.calls.append({"method": "refund", "transaction_id": transaction_id, "amount": amount})

        if self.should_succeed:
            return PaymentResult(
                success=True,
                transaction_id=f"fake_ref_{uuid4().hex[:12]}",
                message="Refund processed successfully",
            )
        return PaymentResult(success=False, message=self.failure_reason)
