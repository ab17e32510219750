"""Common utilities for PropLedger backend."""

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def today() -> date:
    return utc_now().date()


def sanitize_string(value: str | None, max_length: int = 255) -> str | None:
    """Sanitize a string value by stripping whitespace and truncating."""
    if value is None:
        return None
    value = value.strip()
    if len(value) > max_length:
        return value[:max_length]
    return value


def generate_code(prefix: str, id: int, padding: int = 6) -> str:
    """Generate a business code like PROP-000001."""
    return f"{prefix}-{str(id).zfill(padding)}"


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce a numeric value to Decimal without float artefacts."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Decimal | int | float) -> Decimal:
    """Round a monetary amount half-up to cents."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def year_bounds(year: int) -> tuple[date, date]:
    """Return [Jan 1 of year, Jan 1 of next year)."""
    return date(year, 1, 1), date(year + 1, 1, 1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""
    first = date(year, month, 1)
    if month == 12:
        next_first = date(year + 1, 1, 1)
    else:
        next_first = date(year, month + 1, 1)
    return first, date.fromordinal(next_first.toordinal() - 1)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from backends without tz."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
