"""Late-fee policy and calculation."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ...config import settings
from ...core.utils import round_money, to_decimal, today as utc_today

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class LateFeeConfig:
    enabled: bool = True
    grace_period_days: int = 5
    percentage: Decimal = Decimal("5")
    flat_fee: Decimal = Decimal("0")
    # Cap as a percentage of the original amount; None or 0 means uncapped
    max_percentage: Decimal | None = Decimal("25")

    @classmethod
    def from_settings(cls) -> "LateFeeConfig":
        return cls(
            enabled=settings.late_fee_enabled,
            grace_period_days=settings.late_fee_grace_period_days,
            percentage=settings.late_fee_percentage,
            flat_fee=settings.late_fee_flat,
            max_percentage=settings.late_fee_max_percentage,
        )


@dataclass(frozen=True)
class LateFee:
    amount: Decimal
    days_overdue: int


NO_FEE = LateFee(amount=Decimal("0.00"), days_overdue=0)


def calculate_late_fee(
    amount: Decimal,
    due_date: date,
    config: LateFeeConfig | None = None,
    today: date | None = None,
) -> LateFee:
    """Fee owed on ``amount`` once the grace period after ``due_date`` has run.

    ``days_overdue`` counts days past the end of the grace period.
    """
    config = config or LateFeeConfig()
    if not config.enabled:
        return NO_FEE

    days_late = ((today or utc_today()) - due_date).days
    if days_late <= config.grace_period_days:
        return NO_FEE

    amount = to_decimal(amount)
    fee = amount * config.percentage / HUNDRED + to_decimal(config.flat_fee)
    if config.max_percentage:
        fee = min(fee, amount * config.max_percentage / HUNDRED)

    return LateFee(
        amount=round_money(fee),
        days_overdue=days_late - config.grace_period_days,
    )
