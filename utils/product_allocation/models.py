"""
Product Allocation Models
=========================
Immutable snapshot types used by the allocation engine.

Derived values (order total, remaining stock) are properties computed from
primary fields so they always stay consistent with the allocated quantities.
Money is held as Decimal; quantities are whole units.
"""
import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


# ==================== Coercion Helpers ====================

def coerce_quantity(value: Any) -> int:
    """
    Convert user input to a whole quantity.

    Fractions are truncated toward zero. None, empty strings and anything
    non-numeric count as 0. Negative results are returned as-is; callers
    decide how to clamp them.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value

    try:
        number = Decimal(str(value).strip())
        return int(number)
    except (InvalidOperation, ValueError, OverflowError):
        return 0


def to_decimal(value: Any, field_name: str = 'value') -> Decimal:
    """
    Convert a money value to Decimal via its string form.

    Raises:
        ValueError: if the value is not a finite, non-negative number
    """
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValueError(f"{field_name} must be a number, got {value!r}")

    if not number.is_finite():
        raise ValueError(f"{field_name} must be finite, got {value!r}")
    if number < 0:
        raise ValueError(f"{field_name} must be non-negative, got {value!r}")
    return number


# ==================== Reference Data ====================

@dataclass(frozen=True)
class Product:
    """Product reference data"""
    id: str
    name: str
    price_per_unit: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'price_per_unit', to_decimal(self.price_per_unit, 'price_per_unit'))


@dataclass(frozen=True)
class Customer:
    """Customer with the credit budget that backs its orders"""
    id: str
    name: str
    credit_remaining: Decimal
    closing_balance: Decimal = Decimal('0')

    def __post_init__(self):
        object.__setattr__(self, 'credit_remaining', to_decimal(self.credit_remaining, 'credit_remaining'))
        object.__setattr__(self, 'closing_balance', to_decimal(self.closing_balance, 'closing_balance'))


# ==================== Orders ====================

@dataclass(frozen=True)
class Order:
    """
    Customer order line.

    price_per_unit is a snapshot taken when the order was created and may
    differ from the product's current price.
    """
    id: str
    customer_id: str
    product_id: str
    requested_qty: int
    price_per_unit: Decimal
    allocated_qty: int = 0
    suggestion: int = 0

    def __post_init__(self):
        requested = max(0, coerce_quantity(self.requested_qty))
        allocated = min(max(0, coerce_quantity(self.allocated_qty)), requested)

        object.__setattr__(self, 'requested_qty', requested)
        object.__setattr__(self, 'allocated_qty', allocated)
        object.__setattr__(self, 'suggestion', max(0, coerce_quantity(self.suggestion)))
        object.__setattr__(self, 'price_per_unit', to_decimal(self.price_per_unit, 'price_per_unit'))

    @property
    def total(self) -> Decimal:
        return self.allocated_qty * self.price_per_unit

    def with_allocation(self, allocated_qty: int) -> 'Order':
        return replace(self, allocated_qty=allocated_qty)


# ==================== Snapshot ====================

@dataclass(frozen=True)
class AllocationState:
    """Snapshot of one allocation session"""
    total_stock: int
    orders: Tuple[Order, ...] = field(default_factory=tuple)
    customers: Tuple[Customer, ...] = field(default_factory=tuple)
    products: Tuple[Product, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'total_stock', max(0, coerce_quantity(self.total_stock)))
        object.__setattr__(self, 'orders', tuple(self.orders))
        object.__setattr__(self, 'customers', tuple(self.customers))
        object.__setattr__(self, 'products', tuple(self.products))

    @property
    def allocated_total(self) -> int:
        """Units allocated across all orders"""
        return sum(order.allocated_qty for order in self.orders)

    @property
    def remaining_stock(self) -> int:
        return self.total_stock - self.allocated_total

    @property
    def allocated_value(self) -> Decimal:
        return sum((order.total for order in self.orders), Decimal('0'))

    def find_order(self, order_id: str) -> Optional[Order]:
        return next((o for o in self.orders if o.id == order_id), None)

    def find_customer(self, customer_id: str) -> Optional[Customer]:
        return next((c for c in self.customers if c.id == customer_id), None)

    def find_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def customer_map(self) -> Dict[str, Customer]:
        """Customers keyed by id (first occurrence wins)"""
        customers = {}
        for customer in self.customers:
            customers.setdefault(customer.id, customer)
        return customers

    def with_orders(self, orders: Iterable[Order]) -> 'AllocationState':
        return replace(self, orders=tuple(orders))
