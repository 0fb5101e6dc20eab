"""
Product Allocation Tooltips
===========================
Centralized tooltip definitions for the allocation page.
"""

# ==================== ACTIONS ====================

ACTION_TOOLTIPS = {
    'auto_assign': """
**Auto-Assign**

Allocates every order, serving customers with the most credit first.

```
Allocated = min(Requested, Remaining Stock, floor(Credit / Price))
```

Customers with equal credit keep their current order.
""",

    'reset': """
**Reset**

Sets every allocation back to 0 and returns all units to stock.
""",

    'save': """
**Save**

Confirms the current allocations. Nothing is written to a database.
""",

    'add_order': """
**Add Order**

Adds a new order for 1 unit for the default customer and product.
""",
}


# ==================== METRICS ====================

METRIC_TOOLTIPS = {
    'total_stock': "Units available to allocate in this session",
    'allocated': "Units assigned to orders",
    'remaining': """
**Remaining**

```
Remaining = Total Stock - Σ Allocated
```
""",
    'version': "Increments on every change to the allocations",
}


# ==================== TABLE COLUMNS ====================

COLUMN_TOOLTIPS = {
    'credit_remaining': "Customer budget available to back allocations",
    'price_per_unit': "Price captured when the order was created",
    'suggestion': "Recommended quantity (not binding)",
    'allocated': """
**Allocated**

Clamped to the smallest of:
- Requested quantity
- floor(Credit / Price)
- Stock not allocated to other orders
""",
    'total': "Allocated × Price/Unit",
}


# ==================== HELPER FUNCTION ====================

def get_tooltip(category: str, key: str) -> str:
    """
    Get tooltip text by category and key

    Args:
        category: One of 'action', 'metric', 'column'
        key: Tooltip key within category

    Returns:
        Tooltip text or empty string if not found
    """
    tooltips = {
        'action': ACTION_TOOLTIPS,
        'metric': METRIC_TOOLTIPS,
        'column': COLUMN_TOOLTIPS,
    }
    return tooltips.get(category, {}).get(key, '')
