"""
Allocation Engine
=================
Assigns a shared stock of units to customer orders.

Two hard limits apply to every order:
- Customer credit: allocated value may not exceed the customer's credit
- Stock: allocations across all orders may not exceed total stock

Modes:
- Auto-assignment: serve customers with the most credit first
- Manual update: set one order's quantity, clamped to its limits, and
  report which limit clipped the request

Every function takes a snapshot and returns a new one; inputs are never
modified. Limit breaches are reported as messages, never raised.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Any, Dict, List, Optional, Tuple

from .models import AllocationState, Customer, Order, coerce_quantity

logger = logging.getLogger(__name__)


DEFAULT_PRICE_PER_UNIT = Decimal('515.75')


@dataclass(frozen=True)
class AllocationConfig:
    """Configuration for the allocation engine"""
    # Check each order against the customer's running balance instead of
    # the customer's full credit
    track_customer_credit: bool = False

    # New order defaults
    default_customer_id: str = 'company1'
    default_product_id: str = 'product'
    default_price_per_unit: Decimal = DEFAULT_PRICE_PER_UNIT
    default_requested_qty: int = 1
    default_suggestion: int = 1
    order_id_prefix: str = 'ORDER'
    order_id_width: int = 3

    @classmethod
    def from_app_config(cls, app_config: Any) -> 'AllocationConfig':
        """Build engine configuration from utils.config.Config"""
        return cls(
            track_customer_credit=app_config.get_app_setting('TRACK_CUSTOMER_CREDIT', False),
            default_customer_id=app_config.get_app_setting('DEFAULT_CUSTOMER_ID', 'company1'),
            default_product_id=app_config.get_app_setting('DEFAULT_PRODUCT_ID', 'product'),
            default_price_per_unit=app_config.get_app_setting(
                'DEFAULT_PRICE_PER_UNIT', DEFAULT_PRICE_PER_UNIT
            ),
            order_id_prefix=app_config.get_app_setting('ORDER_ID_PREFIX', 'ORDER'),
            order_id_width=app_config.get_app_setting('ORDER_ID_WIDTH', 3),
        )


# ==================== Violation Messages ====================

def credit_limit_exceeded(order_id: str) -> str:
    return f"Order {order_id}: Exceeds customer credit limit"


def requested_qty_exceeded(order_id: str) -> str:
    return f"Order {order_id}: Allocation exceeds requested quantity"


def limited_by_credit(order_id: str) -> str:
    return f"Order {order_id}: Limited by customer credit"


def limited_by_stock(order_id: str) -> str:
    return f"Order {order_id}: Limited by available stock"


# ==================== Constraint Arithmetic ====================

def max_affordable_qty(credit: Decimal, price_per_unit: Decimal) -> Optional[int]:
    """
    Largest whole quantity the credit can pay for.

    Returns None when the price is zero (affordability is unbounded).
    """
    if price_per_unit == 0:
        return None
    if credit <= 0:
        return 0
    # Integer division needs every digit of the quotient in the context
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, credit.adjusted() - price_per_unit.adjusted() + 2)
        return int(credit // price_per_unit)


def _upper_bound(*limits: Optional[int]) -> int:
    """Smallest of the given limits; None means no limit"""
    return min(limit for limit in limits if limit is not None)


def get_priority_order(state: AllocationState) -> List[Order]:
    """
    Orders sorted by customer credit, highest first.

    The sort is stable: orders whose customers have equal credit keep their
    current relative order. Orders with an unknown customer rank as zero
    credit.
    """
    customers = state.customer_map()

    def credit_of(order: Order) -> Decimal:
        customer = customers.get(order.customer_id)
        return customer.credit_remaining if customer else Decimal('0')

    return sorted(state.orders, key=credit_of, reverse=True)


# ==================== Auto-Assignment ====================

def _allocate_order(order: Order, customer: Customer, credit: Decimal,
                    remaining_stock: int) -> Tuple[Order, List[str]]:
    """Allocate one order against the given credit and remaining stock"""
    max_affordable = max_affordable_qty(credit, order.price_per_unit)
    allocated_qty = max(0, _upper_bound(order.requested_qty, remaining_stock, max_affordable))
    allocated = order.with_allocation(allocated_qty)

    violations = []
    if order.price_per_unit > 0 and allocated.allocated_qty > credit / order.price_per_unit:
        violations.append(credit_limit_exceeded(order.id))
    if allocated.allocated_qty > order.requested_qty:
        violations.append(requested_qty_exceeded(order.id))

    logger.debug(
        f"{order.id} ({customer.id}): requested={order.requested_qty}, "
        f"affordable={'unbounded' if max_affordable is None else max_affordable}, "
        f"stock={remaining_stock} -> allocated={allocated_qty}"
    )
    return allocated, violations


def run_auto_assignment(state: AllocationState,
                        config: Optional[AllocationConfig] = None) -> Tuple[AllocationState, List[str]]:
    """
    Allocate every order in priority order.

    Args:
        state: Current snapshot
        config: Engine configuration (defaults to AllocationConfig())

    Returns:
        Tuple of (new snapshot with orders in priority order, violation messages)
    """
    config = config or AllocationConfig()
    customers = state.customer_map()

    remaining_stock = state.total_stock
    credit_balance: Dict[str, Decimal] = {
        customer_id: customer.credit_remaining for customer_id, customer in customers.items()
    }
    allocated_orders = []
    violations = []

    for order in get_priority_order(state):
        customer = customers.get(order.customer_id)
        if customer is None:
            logger.warning(f"Auto-assignment: customer {order.customer_id} of {order.id} not found")
            allocated_orders.append(order.with_allocation(0))
            continue

        if config.track_customer_credit:
            credit = credit_balance[customer.id]
        else:
            credit = customer.credit_remaining

        allocated, order_violations = _allocate_order(order, customer, credit, remaining_stock)
        remaining_stock -= allocated.allocated_qty
        credit_balance[customer.id] = credit_balance[customer.id] - allocated.total

        allocated_orders.append(allocated)
        violations.extend(order_violations)

    new_state = state.with_orders(allocated_orders)
    logger.info(
        f"Auto-assignment: {len(allocated_orders)} orders, "
        f"{new_state.allocated_total}/{new_state.total_stock} units allocated, "
        f"{len(violations)} violation(s)"
    )
    return new_state, violations


# ==================== Manual Update ====================

def _credit_for_manual_update(state: AllocationState, order: Order, customer: Customer,
                              config: AllocationConfig) -> Decimal:
    if not config.track_customer_credit:
        return customer.credit_remaining

    committed = sum(
        (o.total for o in state.orders if o.customer_id == customer.id and o.id != order.id),
        Decimal('0')
    )
    return max(Decimal('0'), customer.credit_remaining - committed)


def update_allocation(state: AllocationState, order_id: str, desired_qty: Any,
                      config: Optional[AllocationConfig] = None) -> Tuple[AllocationState, List[str]]:
    """
    Set one order's allocated quantity within its limits.

    The requested quantity is clamped to [0, min(requested, affordable,
    available)]. When the request was clipped, the binding limit is
    reported: customer credit first, then available stock. A clip by the
    order's own requested quantity is not reported.

    Args:
        state: Current snapshot
        order_id: Target order
        desired_qty: Requested quantity (int, float, Decimal or numeric string)
        config: Engine configuration

    Returns:
        Tuple of (new snapshot, violation messages). An unknown order or
        customer returns the input snapshot unchanged with no messages.
    """
    config = config or AllocationConfig()
    desired = coerce_quantity(desired_qty)

    order = state.find_order(order_id)
    if order is None:
        logger.debug(f"Manual update ignored: order {order_id} not found")
        return state, []

    customer = state.find_customer(order.customer_id)
    if customer is None:
        logger.debug(f"Manual update ignored: customer {order.customer_id} not found")
        return state, []

    credit = _credit_for_manual_update(state, order, customer, config)
    max_affordable = max_affordable_qty(credit, order.price_per_unit)
    others_allocated = sum(o.allocated_qty for o in state.orders if o.id != order_id)
    max_available = state.total_stock - others_allocated

    upper = _upper_bound(order.requested_qty, max_affordable, max_available)
    constrained_qty = max(0, min(desired, upper))

    new_state = state.with_orders(
        o.with_allocation(constrained_qty) if o.id == order_id else o
        for o in state.orders
    )

    violations = []
    if constrained_qty < desired:
        if constrained_qty == max_affordable:
            violations.append(limited_by_credit(order_id))
        elif constrained_qty == max_available:
            violations.append(limited_by_stock(order_id))

    logger.info(
        f"Manual update {order_id}: desired={desired}, allocated={constrained_qty}, "
        f"remaining stock={new_state.remaining_stock}"
    )
    return new_state, violations


# ==================== Reset & Order Creation ====================

def reset_allocations(state: AllocationState) -> AllocationState:
    """Zero every order's allocation"""
    return state.with_orders(order.with_allocation(0) for order in state.orders)


def next_order_id(state: AllocationState, prefix: str = 'ORDER', width: int = 3) -> str:
    """
    Sequential display id based on the current order count.

    Skips ahead if the count-based id is already taken.
    """
    existing = {order.id for order in state.orders}
    number = len(state.orders) + 1
    order_id = f"{prefix}-{str(number).zfill(width)}"
    while order_id in existing:
        number += 1
        order_id = f"{prefix}-{str(number).zfill(width)}"
    return order_id


def add_order(state: AllocationState, config: Optional[AllocationConfig] = None) -> AllocationState:
    """Append a new unallocated order bound to the default customer and product"""
    config = config or AllocationConfig()

    customer_id = config.default_customer_id
    if state.find_customer(customer_id) is None and state.customers:
        customer_id = state.customers[0].id

    product_id = config.default_product_id
    if state.find_product(product_id) is None and state.products:
        product_id = state.products[0].id

    order = Order(
        id=next_order_id(state, config.order_id_prefix, config.order_id_width),
        customer_id=customer_id,
        product_id=product_id,
        requested_qty=config.default_requested_qty,
        price_per_unit=config.default_price_per_unit,
        allocated_qty=0,
        suggestion=config.default_suggestion,
    )
    logger.info(f"Added order {order.id} for customer {customer_id}")
    return state.with_orders(state.orders + (order,))
