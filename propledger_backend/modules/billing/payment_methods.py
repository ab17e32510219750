"""Country payment-method rules and Iberian payment reference helpers."""

import re

from .models import PaymentMethod

_METHODS_BY_COUNTRY: dict[str, list[PaymentMethod]] = {
    "PT": [
        PaymentMethod.CARD,
        PaymentMethod.MULTIBANCO,
        PaymentMethod.MBWAY,
        PaymentMethod.SEPA_DEBIT,
    ],
    "ES": [PaymentMethod.CARD, PaymentMethod.SEPA_DEBIT],
}

_COUNTRY_ALIASES = {"PORTUGAL": "PT", "SPAIN": "ES", "ESPAÑA": "ES", "ESPANA": "ES"}


def available_payment_methods(country: str | None) -> list[PaymentMethod]:
    """Methods tenants may pay with for a property in ``country``."""
    code = (country or "").strip().upper()
    code = _COUNTRY_ALIASES.get(code, code)
    return list(_METHODS_BY_COUNTRY.get(code, [PaymentMethod.CARD]))


def format_multibanco_reference(reference: str) -> str:
    """Group a 9-digit Multibanco reference as ``XXX XXX XXX``."""
    clean = re.sub(r"\s", "", reference)
    return f"{clean[0:3]} {clean[3:6]} {clean[6:9]}"


def validate_portuguese_phone(phone: str) -> bool:
    """MB WAY numbers: Portuguese mobiles, 9 digits starting with 9."""
    return re.fullmatch(r"9\d{8}", re.sub(r"\D", "", phone)) is not None


def validate_spanish_phone(phone: str) -> bool:
    return re.fullmatch(r"[67]\d{8}", re.sub(r"\D", "", phone)) is not None
