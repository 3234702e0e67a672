import re

from salon_recruit.config import settings


def normalize_phone(raw: str | None, country_code: str | None = None) -> str | None:
    """Return *raw* as an E.164 dialable number, or None if it cannot be dialed.

    Ten digits are treated as a domestic number, eleven digits starting with
    the country code as already prefixed, and a value that already starts with
    ``+`` is trusted as international.
    """
    if not raw:
        return None
    cc = country_code or settings.PHONE_COUNTRY_CODE
    value = raw.strip()
    digits = re.sub(r"\D", "", value)

    if len(digits) == 10:
        return f"+{cc}{digits}"
    if len(digits) == 10 + len(cc) and digits.startswith(cc):
        return f"+{digits}"
    if value.startswith("+"):
        return value
    return None
