# payments/domain/services/vat_validation.py

import re

# Country prefix -> national part of the VAT number (after normalisation).
# GB is outside the EU but its numbers still show up on B2B orders.
VAT_PATTERNS = {
    "AT": re.compile(r"^U\d{8}$"),
    "BE": re.compile(r"^0\d{9}$"),
    "BG": re.compile(r"^\d{9,10}$"),
    "CY": re.compile(r"^\d{8}[A-Z]$"),
    "CZ": re.compile(r"^\d{8,10}$"),
    "DE": re.compile(r"^\d{9}$"),
    "DK": re.compile(r"^\d{8}$"),
    "EE": re.compile(r"^\d{9}$"),
    "ES": re.compile(r"^[A-Z]\d{7}[A-Z0-9]$"),
    "FI": re.compile(r"^\d{8}$"),
    "FR": re.compile(r"^[A-Z0-9]{2}\d{9}$"),
    "GB": re.compile(r"^(\d{9}|\d{12}|(GD|HA)\d{3})$"),
    "GR": re.compile(r"^\d{9}$"),
    "HR": re.compile(r"^\d{11}$"),
    "HU": re.compile(r"^\d{8}$"),
    "IE": re.compile(r"^(\d{7}[A-Z]{1,2}|\d[A-Z]\d{5}[A-Z])$"),
    "IT": re.compile(r"^\d{11}$"),
    "LT": re.compile(r"^(\d{9}|\d{12})$"),
    "LU": re.compile(r"^\d{8}$"),
    "LV": re.compile(r"^\d{11}$"),
    "MT": re.compile(r"^\d{8}$"),
    "NL": re.compile(r"^\d{9}B\d{2}$"),
    "PL": re.compile(r"^\d{10}$"),
    "PT": re.compile(r"^\d{9}$"),
    "RO": re.compile(r"^\d{2,10}$"),
    "SE": re.compile(r"^\d{12}$"),
    "SI": re.compile(r"^\d{8}$"),
    "SK": re.compile(r"^\d{10}$"),
}

NIP_WEIGHTS = (6, 5, 7, 2, 3, 4, 5, 6, 7)

_SEPARATORS = re.compile(r"[ \-]")


def normalize_vat_number(raw: str | None) -> str:
    """Strip spaces and dashes, upper-case: ``526-000-12-46`` -> ``5260001246``."""
    if not raw:
        return ""
    return _SEPARATORS.sub("", raw).upper()


def is_valid_vat_format(prefix: str, number: str) -> bool:
    """Check ``number`` against the pattern for ``prefix``.

    Prefixes without a registered pattern are accepted as-is.
    """
    pattern = VAT_PATTERNS.get(prefix.upper())
    if pattern is None:
        return True
    return bool(pattern.match(number))


def nip_check_digit(first_nine: str) -> int | None:
    """Mod-11 check digit for the first 9 NIP digits (``None`` if unassignable)."""
    total = sum(int(d) * w for d, w in zip(first_nine, NIP_WEIGHTS))
    checksum = total % 11
    return None if checksum == 10 else checksum


def is_valid_polish_nip(number: str | None) -> bool:
    if not number or len(number) != 10 or not number.isdigit():
        return False
    expected = nip_check_digit(number[:9])
    return expected is not None and expected == int(number[9])
