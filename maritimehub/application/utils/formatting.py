from __future__ import annotations


def format_vnd(amount: int | float | None) -> str:
    """Format an amount the way the app shows prices, e.g. 1500000 -> '1.500.000 ₫'."""
    if not amount:
        return "0 ₫"
    return f"{int(round(amount)):,} ₫".replace(",", ".")
