"""Tests for payment detail validation and the gateway adapters."""

import asyncio
import random
from datetime import UTC, datetime

import pytest
from storefront.payment import FakeGateway, SimulatedGateway
from storefront.payment.port import PaymentDetails

TODAY = datetime(2026, 6, 15, tzinfo=UTC)


def _card(**overrides):
    params = {
        "order_number": "ORD-1-AAAAAA",
        "amount": 49.99,
        "payment_method": "card",
        "card_number": "4242 4242 4242 4242",
        "expiry_date": "12/27",
        "cvv": "123",
    }
    params.update(overrides)
    return PaymentDetails(**params)


class TestValidation:
    def test_valid_card(self):
        result = FakeGateway().validate(_card(), today=TODAY)
        assert result.valid is True
        assert result.errors == []

    def test_non_card_methods_skip_card_checks(self):
        details = PaymentDetails(order_number="ORD-1-AAAAAA", amount=10.0, payment_method="wallet")
        assert FakeGateway().validate(details, today=TODAY).valid is True

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"order_number": ""}, "Order number is required"),
            ({"amount": 0}, "Valid amount is required"),
            ({"amount": None}, "Valid amount is required"),
            ({"payment_method": None}, "Payment method is required"),
            ({"card_number": "4242"}, "Invalid card number"),
            ({"card_number": "4242-4242-4242-abcd"}, "Invalid card number"),
            ({"expiry_date": "13/27"}, "Invalid expiry date (MM/YY)"),
            ({"expiry_date": "05/26"}, "Card has expired"),
            ({"cvv": "12"}, "Invalid CVV"),
            ({"cvv": "12345"}, "Invalid CVV"),
        ],
    )
    def test_invalid_details(self, overrides, message):
        result = FakeGateway().validate(_card(**overrides), today=TODAY)
        assert result.valid is False
        assert message in result.errors

    def test_card_expiring_this_month_is_accepted(self):
        assert FakeGateway().validate(_card(expiry_date="06/26"), today=TODAY).valid is True

    def test_all_errors_reported_together(self):
        result = FakeGateway().validate(_card(card_number="1", cvv="x"), today=TODAY)
        assert len(result.errors) == 2


class TestFakeGateway:
    def test_success(self):
        gateway = FakeGateway()
        result = asyncio.run(gateway.process("ORD-1", 10.0, "card"))
        assert result.success is True
        assert result.transaction_id.startswith("fake_txn_")
        assert gateway.calls[0]["amount"] == 10.0

    def test_configured_failure(self):
        gateway = FakeGateway(should_succeed=False, failure_reason="Insufficient funds")
        result = asyncio.run(gateway.process("ORD-1", 10.0, "card"))
        assert result.success is False
        assert result.message == "Insufficient funds"

    def test_force_success_overrides_failure(self):
        gateway = FakeGateway(should_succeed=False)
        assert asyncio.run(gateway.process("ORD-1", 10.0, "card", force_success=True)).success is True


class TestSimulatedGateway:
    def test_always_succeeds_with_zero_failure_rate(self):
        gateway = SimulatedGateway(failure_rate=0.0, min_latency=0, max_latency=0)
        result = asyncio.run(gateway.process("ORD-1", 10.0, "card"))
        assert result.success is True
        assert result.transaction_id.startswith("txn_")

    def test_always_fails_with_full_failure_rate(self):
        gateway = SimulatedGateway(failure_rate=1.0, min_latency=0, max_latency=0)
        result = asyncio.run(gateway.process("ORD-1", 10.0, "card"))
        assert result.success is False
        assert result.transaction_id is None

    def test_force_success_skips_the_draw(self):
        gateway = SimulatedGateway(failure_rate=1.0, min_latency=0, max_latency=0)
        assert asyncio.run(gateway.process("ORD-1", 10.0, "card", force_success=True)).success is True

    def test_seeded_failure_rate(self):
        gateway = SimulatedGateway(failure_rate=0.5, min_latency=0, max_latency=0, rng=random.Random(7))
        outcomes = [asyncio.run(gateway.process("ORD-1", 1.0, "card")).success for _ in range(200)]
        assert 60 < outcomes.count(False) < 140

    def test_refund(self):
        gateway = SimulatedGateway(failure_rate=0.0, min_latency=0, max_latency=0)
        result = asyncio.run(gateway.refund("txn_1", 12.5))
        assert result.success is True
        assert result.transaction_id.startswith("ref_")

    def test_invalid_failure_rate(self):
        with pytest.raises(ValueError):
            SimulatedGateway(failure_rate=1.5)
