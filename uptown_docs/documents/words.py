"""Amount-in-words (English / Arabic) backed by num2words.

The integer part is spelled with num2words; the currency name and the
fractional unit come from a small table. Unknown currency codes are spelled
as the code itself; an empty code means no currency name at all.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from num2words import num2words

from uptown_docs.calculators.money import to_amount, to_cents
from uptown_docs.documents.locale import ARABIC

logger = logging.getLogger(__name__)

# code → {lang: (major unit, minor unit)}
CURRENCY_NAMES: dict[str, dict[str, tuple[str, str]]] = {
    "EGP": {"en": ("Egyptian Pounds", "piasters"), "ar": ("جنيه مصري", "قرش")},
    "USD": {"en": ("US Dollars", "cents"), "ar": ("دولار أمريكي", "سنت")},
    "EUR": {"en": ("Euros", "cents"), "ar": ("يورو", "سنت")},
    "GBP": {"en": ("Pounds Sterling", "pence"), "ar": ("جنيه إسترليني", "بنس")},
    "SAR": {"en": ("Saudi Riyals", "halalas"), "ar": ("ريال سعودي", "هللة")},
    "AED": {"en": ("UAE Dirhams", "fils"), "ar": ("درهم إماراتي", "فلس")},
}

# Short currency display on Arabic documents; other codes are shown as-is.
ARABIC_CURRENCY_DISPLAY = {"EGP": "جم"}


def display_currency(code: str, lang: str) -> str:
    code = (code or "").strip()
    if lang == ARABIC:
        return ARABIC_CURRENCY_DISPLAY.get(code.upper(), code)
    return code


def _spell(n: int, lang: str) -> str:
    return num2words(n, lang=ARABIC if lang == ARABIC else "en")


def amount_in_words(amount: Decimal | int | float | None, lang: str, currency: str = "") -> str:
    """Spell a monetary amount, e.g. 200000 EGP → "Two hundred thousand Egyptian Pounds"."""
    value = to_cents(abs(to_amount(amount)))
    whole = int(value)
    fraction = int((value - whole) * 100)

    code = (currency or "").strip().upper()
    key = ARABIC if lang == ARABIC else "en"
    major, minor = CURRENCY_NAMES.get(code, {}).get(key, (code, ""))

    parts = [_spell(whole, lang)]
    if major:
        parts.append(major)
    spelled = " ".join(parts)

    if fraction > 0:
        cents = _spell(fraction, lang)
        if lang == ARABIC:
            spelled = f"{spelled} و{cents} {minor}".rstrip()
        else:
            spelled = f"{spelled} and {cents} {minor}".rstrip()

    if lang != ARABIC and spelled:
        spelled = spelled[0].upper() + spelled[1:]
    return spelled

