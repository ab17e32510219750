"""Tests for late-fee and payment-method rules."""

from datetime import date
from decimal import Decimal

import pytest

from propledger_backend.modules.billing.late_fees import (
    LateFeeConfig,
    calculate_late_fee,
)
from propledger_backend.modules.billing.models import PaymentMethod
from propledger_backend.modules.billing.payment_methods import (
    available_payment_methods,
    format_multibanco_reference,
    validate_portuguese_phone,
    validate_spanish_phone,
)

DUE = date(2025, 3, 1)


class TestLateFee:
    def test_within_grace_period(self):
        fee = calculate_late_fee(Decimal("1000"), DUE, today=date(2025, 3, 6))
        assert fee.amount == 0
        assert fee.days_overdue == 0

    def test_percentage_after_grace_period(self):
        fee = calculate_late_fee(Decimal("1000"), DUE, today=date(2025, 3, 10))
        assert fee.amount == Decimal("50.00")
        assert fee.days_overdue == 4

    def test_flat_fee_is_added(self):
        config = LateFeeConfig(flat_fee=Decimal("15"))
        fee = calculate_late_fee(Decimal("1000"), DUE, config, today=date(2025, 4, 1))
        assert fee.amount == Decimal("65.00")

    def test_capped_at_max_percentage(self):
        config = LateFeeConfig(percentage=Decimal("10"), flat_fee=Decimal("100"),
                               max_percentage=Decimal("12"))
        fee = calculate_late_fee(Decimal("500"), DUE, config, today=date(2025, 4, 1))
        assert fee.amount == Decimal("60.00")

    def test_disabled(self):
        config = LateFeeConfig(enabled=False)
        fee = calculate_late_fee(Decimal("1000"), DUE, config, today=date(2025, 6, 1))
        assert fee.amount == 0

    def test_config_from_settings(self):
        config = LateFeeConfig.from_settings()
        assert config.grace_period_days == 5
        assert config.percentage == Decimal("5")


class TestPaymentMethods:
    def test_portugal_offers_local_methods(self):
        methods = available_payment_methods("Portugal")
        assert PaymentMethod.MULTIBANCO in methods
        assert PaymentMethod.MBWAY in methods

    def test_spain(self):
        assert available_payment_methods("es") == [
            PaymentMethod.CARD,
            PaymentMethod.SEPA_DEBIT,
        ]

    @pytest.mark.parametrize("country", [None, "", "FR"])
    def test_unknown_country_falls_back_to_card(self, country):
        assert available_payment_methods(country) == [PaymentMethod.CARD]

    def test_multibanco_reference_grouping(self):
        assert format_multibanco_reference("123 45678 9") == "123 456 789"

    @pytest.mark.parametrize(
        "phone,valid",
        [("912 345 678", True), ("961234567", True), ("212345678", False), ("91234", False)],
    )
    def test_portuguese_phone(self, phone, valid):
        assert validate_portuguese_phone(phone) is valid

    @pytest.mark.parametrize(
        "phone,valid",
        [("612 345 678", True), ("712345678", True), ("912345678", False)],
    )
    def test_spanish_phone(self, phone, valid):
        assert validate_spanish_phone(phone) is valid
