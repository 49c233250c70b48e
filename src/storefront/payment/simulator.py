"""Simulated payment gateway — the default adapter.

Waits a random interval, then approves the charge unless a random draw falls
under the configured failure rate. ``force_success`` skips the draw.
"""

import asyncio
import random
import secrets
import string
import time

import structlog

from storefront.payment.port import PaymentGateway, PaymentResult

logger = structlog.get_logger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _transaction_id(prefix="txn"):
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


class SimulatedGateway(PaymentGateway):
    def __init__(
        self,
        failure_rate: float = 0.1,
        min_latency: float = 0.5,
        max_latency: float = 1.0,
        rng: random.Random | None = None,
    ) -> None:
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        self.failure_rate = failure_rate
        self.min_latency = max(0.0, min_latency)
        self.max_latency = max(self.min_latency, max_latency)
        self.rng = rng or random.Random()

    async def _wait(self):
        delay = self.rng.uniform(self.min_latency, self.max_latency)
        if delay > 0:
            await asyncio.sleep(delay)

    async def process(
        self,
        order_number: str,
        amount: float,
        payment_method: str,
        force_success: bool = False,
    ) -> PaymentResult:
        await self._wait()

        if not force_success and self.rng.random() < self.failure_rate:
            logger.warning("payment_declined", order_number=order_number, amount=amount, method=payment_method)
            return PaymentResult(success=False, message="Payment failed. Please try again.")

        transaction_id = _transaction_id()
        logger.info(
            "payment_processed",
            order_number=order_number,
            amount=amount,
            method=payment_method,
            transaction_id=transaction_id,
        )
        return PaymentResult(success=True, transaction_id=transaction_id, message="Payment processed successfully")

    async def refund(self, transaction_id: str, amount: float) -> PaymentResult:
        await self._wait()
        logger.info("payment_refunded", transaction_id=transaction_id, amount=amount)
        return PaymentResult(
            success=True,
            transaction_id=_transaction_id("ref"),
            message=f"Refund of {amount:.2f} processed successfully",
        )
