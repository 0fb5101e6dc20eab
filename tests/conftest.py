from decimal import Decimal
from pathlib import Path
import sys

import pytest

# Project root on the import path so tests run from any directory
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from utils.product_allocation.models import AllocationState, Customer, Order, Product


PRICE = Decimal('515.75')


def make_order(order_id, customer_id='company1', requested=10, allocated=0,
               price=PRICE, suggestion=None, product_id='product'):
    """Order factory with the demo product defaults"""
    return Order(
        id=order_id,
        customer_id=customer_id,
        product_id=product_id,
        requested_qty=requested,
        price_per_unit=price,
        allocated_qty=allocated,
        suggestion=requested if suggestion is None else suggestion,
    )


def make_customer(customer_id='company1', credit='3000.00', name=None):
    return Customer(
        id=customer_id,
        name=name or customer_id.title(),
        credit_remaining=Decimal(credit),
        closing_balance=Decimal(credit),
    )


@pytest.fixture
def product():
    return Product(id='product', name='1 day delivery Product', price_per_unit=PRICE)


@pytest.fixture
def demo_state(product):
    """Stock 10, one order for 10 units, customer credit 3000 at 515.75/unit."""
    return AllocationState(
        total_stock=10,
        orders=[make_order('ORDER-001')],
        customers=[make_customer()],
        products=[product],
    )


@pytest.fixture
def shared_stock_state(product):
    """Stock 10, order A holds 8 units, order B unallocated; ample credit."""
    return AllocationState(
        total_stock=10,
        orders=[
            make_order('ORDER-A', customer_id='rich', requested=8, allocated=8, price=Decimal('10')),
            make_order('ORDER-B', customer_id='rich', requested=10, allocated=0, price=Decimal('10')),
        ],
        customers=[make_customer('rich', credit='100000')],
        products=[product],
    )


@pytest.fixture
def multi_customer_state(product):
    """Three customers with different credit competing for 10 units."""
    return AllocationState(
        total_stock=10,
        orders=[
            make_order('ORDER-001', customer_id='small', requested=5, price=Decimal('100')),
            make_order('ORDER-002', customer_id='big', requested=6, price=Decimal('100')),
            make_order('ORDER-003', customer_id='medium', requested=6, price=Decimal('100')),
        ],
        customers=[
            make_customer('small', credit='1000'),
            make_customer('big', credit='5000'),
            make_customer('medium', credit='2000'),
        ],
        products=[product],
    )
