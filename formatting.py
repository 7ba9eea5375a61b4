"""Locale-aware display helpers (Babel)."""

from babel.numbers import format_currency, format_decimal

from money import quantize


def format_money(x, cur: str, locale: str = "en_US") -> str:
    if x is None:
        return "—"
    return format_currency(quantize(x, 2), cur, locale=locale)


def format_number(x, decimals: int = 2, locale: str = "en_US") -> str:
    """Format a generic number following the given locale."""
    if x is None:
        return "—"
    pattern = f"#,##0.{'0' * decimals}" if decimals > 0 else "#,##0"
    return format_decimal(quantize(x, decimals), format=pattern, locale=locale)


def format_percent(x, decimals: int = 1, locale: str = "en_US") -> str:
    """``x`` is already a percentage (30 means 30%)."""
    if x is None:
        return "—"
    return f"{format_number(x, decimals, locale)}%"
