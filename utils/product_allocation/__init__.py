"""
Product Allocation Module
=========================
Allocates a shared product stock to customer orders under customer credit
and stock limits.

Components:
- models: Immutable snapshot types (Product, Customer, Order, AllocationState)
- allocation_engine: Auto-assignment, manual update, reset, order creation
- session: State container with error list and version key
- validators: Invariant checks for snapshots
- views: pandas tables and summary metrics for display
- formatters: Display formatting
- tooltips: UI tooltip definitions
- demo_data: Starting snapshot built from app settings
"""

from .models import AllocationState, Customer, Order, Product, coerce_quantity
from .allocation_engine import (
    AllocationConfig,
    add_order,
    get_priority_order,
    max_affordable_qty,
    reset_allocations,
    run_auto_assignment,
    update_allocation,
)
from .session import AllocationSession, SaveAcknowledgement
from .validators import AllocationValidator, ValidationResult
from .views import build_customer_exposure_frame, build_orders_frame, build_summary
from .demo_data import build_demo_state

__all__ = [
    # Models
    'AllocationState',
    'Customer',
    'Order',
    'Product',
    'coerce_quantity',

    # Engine
    'AllocationConfig',
    'add_order',
    'get_priority_order',
    'max_affordable_qty',
    'reset_allocations',
    'run_auto_assignment',
    'update_allocation',

    # Session
    'AllocationSession',
    'SaveAcknowledgement',

    # Validation
    'AllocationValidator',
    'ValidationResult',

    # Views
    'build_customer_exposure_frame',
    'build_orders_frame',
    'build_summary',
    'build_demo_state',
]

__version__ = '1.0.0'
