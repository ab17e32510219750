"""Placeholder substitution for correspondence templates."""

import re
from datetime import date

from ...core.utils import today as utc_today

PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_.]*)\s*\}\}")


def builtin_variables(today: date | None = None) -> dict[str, str]:
    today = today or utc_today()
    return {
        "current_date": today.isoformat(),
        "current_year": str(today.year),
    }


def render_template(
    text: str, variables: dict[str, object] | None = None, today: date | None = None
) -> str:
    """Replace each ``{{ name }}`` with its value.

    ``current_date`` and ``current_year`` are always available and can be
    overridden. Unknown placeholders are left as written.
    """
    values = builtin_variables(today)
    values.update({k: "" if v is None else str(v) for k, v in (variables or {}).items()})

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        return values[name] if name in values else match.group(0)

    return PLACEHOLDER.sub(substitute, text)


def find_placeholders(text: str) -> list[str]:
    """Distinct placeholder names in order of first appearance."""
    return list(dict.fromkeys(PLACEHOLDER.findall(text)))
