"""Money formatting shared by estimate and invoice responses."""

from typing import Union

Number = Union[int, float]


def format_currency(value: Number, symbol: str) -> str:
    """
    Render an amount as ``{symbol}{amount}`` with thousands separators.

    Up to three fraction digits are kept and trailing zeros dropped, so
    1250 renders as "₪1,250" and 1250.5 as "₪1,250.5". Negative amounts put
    the minus sign before the symbol: "-₪1,250".
    """
    amount = f"{abs(value):,.3f}".rstrip("0").rstrip(".")
    formatted = f"{symbol}{amount}"
    if value < 0:
        return f"-{formatted}"
    return formatted
