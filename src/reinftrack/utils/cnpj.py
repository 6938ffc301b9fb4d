"""CNPJ (Brazilian company registry number) helpers."""

import re

CNPJ_LENGTH = 14


def clean_cnpj(value: str) -> str:
    """Strip everything but digits ("12.345.678/0001-90" -> "12345678000190")."""
    return re.sub(r"\D", "", value or "")


def parse_cnpj(value: str) -> str:
    """Parse a formatted or raw CNPJ into its 14 digits.

    Only the format is checked; the verification digits are not validated.

    Raises:
        ValueError: If the value does not contain exactly 14 digits
    """
    digits = clean_cnpj(value)
    if len(digits) != CNPJ_LENGTH:
        raise ValueError(f"CNPJ must have {CNPJ_LENGTH} digits, got {len(digits)}")
    return digits


def format_cnpj(value: str) -> str:
    """Format 14 digits as 12.345.678/0001-90; other input is returned unchanged."""
    digits = clean_cnpj(value)
    if len(digits) != CNPJ_LENGTH:
        return value
    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"
