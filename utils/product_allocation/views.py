"""
Product Allocation Views
========================
Builds pandas DataFrames and summary metrics from a snapshot for display.
"""
import logging
from typing import Any, Dict

import pandas as pd

from .models import AllocationState

logger = logging.getLogger(__name__)


ORDER_COLUMNS = [
    'order_id', 'customer_id', 'customer_name', 'product_name', 'credit_remaining',
    'price_per_unit', 'requested_qty', 'suggestion', 'allocated_qty', 'total',
    'coverage_percent',
]

EXPOSURE_COLUMNS = [
    'customer_id', 'customer_name', 'order_count', 'allocated_qty',
    'allocated_value', 'credit_remaining', 'credit_used_percent', 'over_credit',
]


def build_orders_frame(state: AllocationState) -> pd.DataFrame:
    """
    One row per order in snapshot order.

    Money columns are floats for display; the engine keeps Decimals.
    """
    customers = state.customer_map()
    rows = []

    for order in state.orders:
        customer = customers.get(order.customer_id)
        product = state.find_product(order.product_id)
        rows.append({
            'order_id': order.id,
            'customer_id': order.customer_id,
            'customer_name': customer.name if customer else None,
            'product_name': product.name if product else None,
            'credit_remaining': float(customer.credit_remaining) if customer else None,
            'price_per_unit': float(order.price_per_unit),
            'requested_qty': order.requested_qty,
            'suggestion': order.suggestion,
            'allocated_qty': order.allocated_qty,
            'total': float(order.total),
            'coverage_percent': (
                order.allocated_qty / order.requested_qty * 100 if order.requested_qty > 0 else 0
            ),
        })

    return pd.DataFrame(rows, columns=ORDER_COLUMNS)


def build_customer_exposure_frame(state: AllocationState) -> pd.DataFrame:
    """
    Allocated value per customer against the customer's credit.

    Each order is capped at the customer's credit on its own; several orders
    of one customer can still add up to more than that credit, which is what
    over_credit flags.
    """
    orders = build_orders_frame(state)
    if orders.empty:
        return pd.DataFrame(columns=EXPOSURE_COLUMNS)

    exposure = (
        orders.groupby('customer_id', sort=False)
        .agg(
            order_count=('order_id', 'count'),
            allocated_qty=('allocated_qty', 'sum'),
            allocated_value=('total', 'sum'),
        )
        .reset_index()
    )

    customers = state.customer_map()
    exposure['customer_name'] = exposure['customer_id'].map(
        lambda cid: customers[cid].name if cid in customers else None
    )
    exposure['credit_remaining'] = exposure['customer_id'].map(
        lambda cid: float(customers[cid].credit_remaining) if cid in customers else 0.0
    )
    exposure['credit_used_percent'] = exposure.apply(
        lambda row: row['allocated_value'] / row['credit_remaining'] * 100
        if row['credit_remaining'] > 0 else 0.0,
        axis=1
    )
    exposure['over_credit'] = exposure['allocated_value'] > exposure['credit_remaining']

    over = exposure[exposure['over_credit']]
    if not over.empty:
        logger.warning(f"Customers over credit across orders: {', '.join(over['customer_id'])}")

    return exposure[EXPOSURE_COLUMNS]


def build_summary(state: AllocationState) -> Dict[str, Any]:
    """Summary metrics for the cards under the orders table"""
    requested = sum(order.requested_qty for order in state.orders)
    allocated = state.allocated_total

    return {
        'total_stock': state.total_stock,
        'allocated': allocated,
        'remaining': state.remaining_stock,
        'allocated_value': state.allocated_value,
        'order_count': len(state.orders),
        'total_requested': requested,
        'coverage_percent': (allocated / requested * 100) if requested > 0 else 0,
        'stock_used_percent': (
            allocated / state.total_stock * 100 if state.total_stock > 0 else 0
        ),
    }
