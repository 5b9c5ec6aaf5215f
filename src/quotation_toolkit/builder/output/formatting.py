"""
Module: builder.output.formatting

Purpose:
    Number formatting for printed quotations.
    Indian digit grouping (last three digits, then pairs): 12,34,567.00

Key Functions:
    - format_money(): Grouped, exactly two decimals
    - format_quantity(): Grouped, up to three decimals, none forced
    - group_digits(): Indian grouping of an integer digit string

Dependencies:
    - decimal (std): Half-up rounding without float artefacts

Used By:
    - builder.layout.table: Item table cells and totals row
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

_TWO_PLACES = Decimal("0.01")
_THREE_PLACES = Decimal("0.001")


def group_digits(digits: str) -> str:
    """
    Apply Indian grouping to a string of digits.

    Example:
        >>> group_digits("1234567")
        '12,34,567'
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_money(value: Any) -> str:
    """
    Format an amount with Indian grouping and exactly two decimals.

    Non-numeric and non-finite values print as 0.00.

    Example:
        >>> format_money(1234567.5)
        '12,34,567.50'
    """
    number = _quantize(_to_decimal(value), _TWO_PLACES)
    return _format(number, keep_trailing_zeros=True)


def format_quantity(value: Any) -> str:
    """
    Format a quantity with Indian grouping and no forced decimals.

    Example:
        >>> format_quantity(1500)
        '1,500'
        >>> format_quantity(2.5)
        '2.5'
    """
    if value is None or value == "":
        return ""
    number = _quantize(_to_decimal(value), _THREE_PLACES)
    return _format(number, keep_trailing_zeros=False)


def _to_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return Decimal(0)
    if not math.isfinite(number):
        return Decimal(0)
    return Decimal(repr(number))


def _quantize(number: Decimal, places: Decimal) -> Decimal:
    # Precision must cover every integer digit plus the decimals
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + 8)
        return number.quantize(places, rounding=ROUND_HALF_UP)


def _format(number: Decimal, keep_trailing_zeros: bool) -> str:
    sign = "-" if number < 0 else ""
    text = f"{number.copy_abs():f}"
    whole, _, fraction = text.partition(".")
    if not keep_trailing_zeros:
        fraction = fraction.rstrip("0")
    grouped = group_digits(whole)
    if sign and not fraction.strip("0") and whole == "0":
        sign = ""
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"
