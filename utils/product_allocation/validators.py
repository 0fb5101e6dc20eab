"""
Product Allocation Validators
=============================
Consistency checks for allocation snapshots.

The engine never raises for limit breaches; these checks exist so the
session can detect (and log) a snapshot that breaks one of the allocation
invariants.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List

from .models import AllocationState

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of validation check"""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        self.warnings.append(message)

    def merge(self, other: 'ValidationResult'):
        """Merge another validation result into this one"""
        if not other.is_valid:
            self.is_valid = False
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)


class AllocationValidator:
    """Validator for allocation snapshots"""

    # ================================================================
    # ORDER CHECKS
    # ================================================================

    def validate_orders(self, state: AllocationState) -> ValidationResult:
        """
        Per-order rules:
        1. 0 <= allocated_qty <= requested_qty
        2. allocated value within the customer's credit
        """
        result = ValidationResult(is_valid=True)
        customers = state.customer_map()

        for order in state.orders:
            if order.allocated_qty < 0:
                result.add_error(f"Order {order.id}: Negative allocation ({order.allocated_qty})")
            if order.allocated_qty > order.requested_qty:
                result.add_error(
                    f"Order {order.id}: Allocated {order.allocated_qty} exceeds "
                    f"requested {order.requested_qty}"
                )

            customer = customers.get(order.customer_id)
            if customer is None:
                if order.allocated_qty > 0:
                    result.add_error(
                        f"Order {order.id}: Allocated without customer {order.customer_id}"
                    )
                else:
                    result.add_warning(f"Order {order.id}: Unknown customer {order.customer_id}")
            elif order.total > customer.credit_remaining:
                result.add_error(
                    f"Order {order.id}: Value {order.total} exceeds credit "
                    f"{customer.credit_remaining} of {customer.id}"
                )

            if state.find_product(order.product_id) is None:
                result.add_warning(f"Order {order.id}: Unknown product {order.product_id}")

        return result

    # ================================================================
    # SNAPSHOT CHECKS
    # ================================================================

    def validate_stock(self, state: AllocationState) -> ValidationResult:
        """Allocations across all orders must fit the total stock"""
        result = ValidationResult(is_valid=True)

        if state.allocated_total > state.total_stock:
            result.add_error(
                f"Allocated {state.allocated_total} units exceeds total stock {state.total_stock}"
            )

        return result

    def validate_order_ids(self, state: AllocationState) -> ValidationResult:
        """Order ids must be unique"""
        result = ValidationResult(is_valid=True)

        counts = Counter(order.id for order in state.orders)
        for order_id, count in counts.items():
            if count > 1:
                result.add_error(f"Duplicate order id {order_id} ({count} orders)")

        return result

    def check_invariants(self, state: AllocationState) -> ValidationResult:
        """Run every snapshot check"""
        result = ValidationResult(is_valid=True)
        result.merge(self.validate_orders(state))
        result.merge(self.validate_stock(state))
        result.merge(self.validate_order_ids(state))
        return result

