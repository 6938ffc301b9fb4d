"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse a currency amount into a Decimal.

    Brazilian notation is assumed when ambiguous:
    - "1234.56", "1234,56"
    - "R$ 1.234,56"
    - "1.234.567,89"
    - "1,234.56" (the last separator is the decimal one)
    - "1.500" (a dot after a non-zero group of 1-3 digits and before three
      digits is a thousands separator; "0.500" stays 0.5)
    - "(123,45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    # Currency symbols and spaces
    text = re.sub(r"(R\$|[$€£]|\s)", "", text)
    if text.startswith("-"):
        is_negative = not is_negative
        text = text[1:]

    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        if text.count(",") > 1:
            raise ValueError(f"Could not parse amount '{amount_str}'")
        text = text.replace(",", ".")
    elif text.count(".") > 1 or re.fullmatch(r"[1-9]\d{0,2}\.\d{3}", text):
        text = text.replace(".", "")

    if not re.fullmatch(r"\d+(\.\d+)?", text):
        raise ValueError(f"Could not parse amount '{amount_str}'")

    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}") from None
    return -amount if is_negative else amount
