"""
Product Allocation Formatters
=============================
Formatting utilities for displaying allocation data in the UI.
"""
import pandas as pd
from typing import Any


# ==================== Number Formatting ====================

def format_number(value: Any, decimal_places: int = 0, prefix: str = '', suffix: str = '') -> str:
    """
    Format number with thousand separators.

    Args:
        value: Number to format
        decimal_places: Number of decimal places
        prefix: Optional prefix (e.g., '฿')
        suffix: Optional suffix (e.g., ' Unit')

    Returns:
        Formatted string like "1,234,567" or "฿1,234.56"
    """
    if value is None:
        return '-'

    try:
        if pd.isna(value):
            return '-'
        num = float(value)
        if decimal_places == 0:
            formatted = f"{num:,.0f}"
        else:
            formatted = f"{num:,.{decimal_places}f}"
        return f"{prefix}{formatted}{suffix}"
    except (ValueError, TypeError):
        return str(value)


def format_currency(value: Any, symbol: str = '฿', decimal_places: int = 2) -> str:
    """
    Format money value with currency symbol.

    Returns:
        Formatted string like "฿2,578.75"
    """
    return format_number(value, decimal_places, prefix=symbol)


def format_quantity(qty: Any, uom: str = 'Unit') -> str:
    """
    Format quantity with unit of measure.

    Returns:
        Formatted string like "10 Unit"
    """
    if qty is None:
        return '-'
    return format_number(qty, 0, suffix=f" {uom}" if uom else '')


def format_percentage(value: Any, decimal_places: int = 1) -> str:
    """Format number as percentage (value already in 0-100)"""
    if value is None:
        return '-'

    try:
        num = float(value)
        return f"{num:.{decimal_places}f}%"
    except (ValueError, TypeError):
        return str(value)


# ==================== Status Formatting ====================

def format_stock_status(remaining: int, total: int, uom: str = 'units') -> str:
    """Header stock indicator like "Stock: 5/10 units" """
    return f"Stock: {remaining}/{total} {uom}"


def format_violation(message: str) -> str:
    """Markdown list item for the warnings panel"""
    return f"- {message}"
