"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount: str | int | float | Decimal) -> Decimal:
    """Parse an amount or percentage into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "2.5%"

    Args:
        amount: Amount string or number

    Returns:
        Decimal amount

    Raises:
        ValueError: If the amount cannot be parsed or is not finite
    """
    if isinstance(amount, bool):
        raise ValueError(f"Could not parse amount '{amount}'")
    if isinstance(amount, Decimal):
        result = amount
    elif isinstance(amount, (int, float)):
        # Go through str so 0.1 stays 0.1 rather than its binary expansion
        result = Decimal(str(amount))
    else:
        if amount is None or not str(amount).strip():
            raise ValueError("Empty amount string")

        amount_str = str(amount).strip()

        # Handle parentheses notation (negative)
        is_negative = False
        if amount_str.startswith("(") and amount_str.endswith(")"):
            is_negative = True
            amount_str = amount_str[1:-1]

        # Remove currency and percent symbols, thousands separators, whitespace
        amount_str = re.sub(r"[$€£¥%,\s]", "", amount_str)

        try:
            result = Decimal(amount_str)
        except InvalidOperation as e:
            raise ValueError(f"Could not parse amount '{amount}'") from e
        if is_negative:
            result = -result

    if not result.is_finite():
        raise ValueError(f"Could not parse amount '{amount}': not a finite number")
    return result
