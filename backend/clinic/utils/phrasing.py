from __future__ import annotations

from datetime import date, datetime
from typing import Iterable


def plural(count: int, noun: str, plural_form: str | None = None) -> str:
    """Return `noun` or its plural for `count`; `count == 1` is the only singular."""
    if count == 1:
        return noun
    return plural_form or f"{noun}s"


def counted(count: int, noun: str, plural_form: str | None = None) -> str:
    return f"{count} {plural(count, noun, plural_form)}"


def join_words(items: Iterable[str], conjunction: str = "and") -> str:
    words = [w for w in items if w]
    if not words:
        return ""
    if len(words) == 1:
        return words[0]
    if len(words) == 2:
        return f"{words[0]} {conjunction} {words[1]}"
    return f"{', '.join(words[:-1])} {conjunction} {words[-1]}"


def long_day(value: date | datetime) -> str:
    # "Tuesday, 20 October"
    return f"{value:%A}, {value.day} {value:%B}"


def long_date(value: date | datetime) -> str:
    # "20 October 2026"
    return f"{value.day} {value:%B} {value.year}"


def money(amount: float, symbol: str) -> str:
    return f"{symbol}{amount:,.0f}"
