"""
Demo snapshot for a fresh allocation session, built from app settings.
"""
import logging
from typing import Any, Optional

from .models import AllocationState, Customer, Order, Product

logger = logging.getLogger(__name__)


def build_demo_state(app_config: Optional[Any] = None) -> AllocationState:
    """
    One customer, one product and one unallocated order.

    Args:
        app_config: utils.config.Config instance (defaults to the singleton)
    """
    if app_config is None:
        from ..config import config as app_config

    setting = app_config.get_app_setting
    price = setting('DEFAULT_PRICE_PER_UNIT')
    credit = setting('DEFAULT_CUSTOMER_CREDIT')
    requested = setting('DEMO_REQUESTED_QTY')
    prefix = setting('ORDER_ID_PREFIX')
    width = setting('ORDER_ID_WIDTH')

    state = AllocationState(
        total_stock=setting('TOTAL_STOCK'),
        orders=[
            Order(
                id=f"{prefix}-{'1'.zfill(width)}",
                customer_id=setting('DEFAULT_CUSTOMER_ID'),
                product_id=setting('DEFAULT_PRODUCT_ID'),
                requested_qty=requested,
                price_per_unit=price,
                allocated_qty=0,
                suggestion=requested,
            )
        ],
        customers=[
            Customer(
                id=setting('DEFAULT_CUSTOMER_ID'),
                name=setting('DEFAULT_CUSTOMER_NAME'),
                credit_remaining=credit,
                closing_balance=credit,
            )
        ],
        products=[
            Product(
                id=setting('DEFAULT_PRODUCT_ID'),
                name=setting('DEFAULT_PRODUCT_NAME'),
                price_per_unit=price,
            )
        ],
    )
    logger.info(f"Demo session: {len(state.orders)} order(s), {state.total_stock} units in stock")
    return state
