"""Display formatting for e-mails and reports"""

from datetime import date
from typing import Optional, Union

CURRENCY_SYMBOLS = {"INR": "₹", "USD": "$", "EUR": "€", "GBP": "£"}


def group_indian(integer_part: str) -> str:
    """Group digits the Indian way: last three, then pairs (12,34,567)"""
    if len(integer_part) <= 3:
        return integer_part
    head, tail = integer_part[:-3], integer_part[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_amount(amount: Union[int, float, None], currency: str = "INR") -> str:
    """
    Format an amount for display, e.g. 123456.5 -> "₹1,23,456.50".

    Whole amounts drop the paise, matching how the amounts are usually written on cheques.
    """
    value = float(amount or 0)
    sign = "-" if value < 0 else ""
    value = abs(value)
    whole = int(value)
    fraction = round(value - whole, 2)
    if fraction >= 1:
        whole, fraction = whole + 1, 0.0

    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    grouped = group_indian(str(whole)) if currency == "INR" else f"{whole:,}"
    if fraction:
        return f"{sign}{symbol}{grouped}.{int(round(fraction * 100)):02d}"
    return f"{sign}{symbol}{grouped}"


def format_display_date(value: Optional[date]) -> str:
    """DD/MM/YYYY, or N/A when missing"""
    if not value:
        return "N/A"
    return value.strftime("%d/%m/%Y")


def pluralize_days(days: int) -> str:
    return f"{days} day{'' if days == 1 else 's'}"
