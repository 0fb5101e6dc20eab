"""Invariant tests over random operation sequences.

Coverage:
- 0 <= allocated <= requested, total == allocated * price
- Σ allocated <= total stock, remaining == total - Σ allocated
- allocated value within the customer's credit
- unique, stable order ids
- manual update equals clamp(desired, 0, min(requested, affordable, available))
"""

import random
from decimal import Decimal

import pytest

from utils.product_allocation.allocation_engine import (
    AllocationConfig,
    add_order,
    max_affordable_qty,
    reset_allocations,
    run_auto_assignment,
    update_allocation,
)
from utils.product_allocation.models import AllocationState, Product
from utils.product_allocation.validators import AllocationValidator

from tests.conftest import make_customer, make_order


PRICES = ['0', '0.99', '10', '33.33', '100', '515.75']
CREDITS = ['0', '50', '1000', '1000', '3000', '12345.67']


def random_state(rng: random.Random) -> AllocationState:
    customers = [
        make_customer(f"c{i}", credit=rng.choice(CREDITS))
        for i in range(rng.randint(1, 4))
    ]
    orders = [
        make_order(
            f"ORDER-{i + 1:03d}",
            customer_id=rng.choice(customers).id,
            requested=rng.randint(0, 12),
            price=Decimal(rng.choice(PRICES)),
            suggestion=rng.randint(0, 12),
        )
        for i in range(rng.randint(0, 6))
    ]
    return AllocationState(
        total_stock=rng.randint(0, 30),
        orders=orders,
        customers=customers,
        products=[Product(id='product', name='Product', price_per_unit=Decimal('515.75'))],
    )


def random_desired(rng: random.Random):
    return rng.choice([
        rng.randint(-5, 40),
        rng.uniform(-2, 20),
        str(rng.randint(0, 15)),
        "",
    ])


def assert_invariants(before: AllocationState, after: AllocationState):
    result = AllocationValidator().check_invariants(after)
    assert result.is_valid, result.errors

    for order in after.orders:
        assert 0 <= order.allocated_qty <= order.requested_qty
        assert order.total == order.allocated_qty * order.price_per_unit
    assert after.remaining_stock == after.total_stock - sum(o.allocated_qty for o in after.orders)
    assert after.remaining_stock >= 0

    # ids of the previous snapshot survive unchanged
    assert {o.id for o in before.orders} <= {o.id for o in after.orders}


@pytest.mark.parametrize("seed", range(40))
@pytest.mark.parametrize("track_credit", [False, True])
def test_invariants_hold_for_random_operation_sequences(seed, track_credit):
    rng = random.Random(seed)
    config = AllocationConfig(track_customer_credit=track_credit)
    state = random_state(rng)

    for _ in range(25):
        action = rng.choice(['auto', 'update', 'update', 'reset', 'add'])
        before = state

        if action == 'auto':
            state, _ = run_auto_assignment(state, config)
        elif action == 'update':
            ids = [o.id for o in state.orders] + ['MISSING']
            state, _ = update_allocation(state, rng.choice(ids), random_desired(rng), config)
        elif action == 'reset':
            state = reset_allocations(state)
        else:
            state = add_order(state, config)

        assert_invariants(before, state)


@pytest.mark.parametrize("seed", range(30))
def test_manual_update_matches_clamp_formula(seed):
    rng = random.Random(1000 + seed)
    state, _ = run_auto_assignment(random_state(rng))
    if not state.orders:
        return

    order = rng.choice(state.orders)
    desired = rng.randint(-5, 40)
    customer = state.find_customer(order.customer_id)

    affordable = max_affordable_qty(customer.credit_remaining, order.price_per_unit)
    available = state.total_stock - sum(o.allocated_qty for o in state.orders if o.id != order.id)
    limits = [order.requested_qty, available] + ([affordable] if affordable is not None else [])
    expected = max(0, min(desired, min(limits)))

    new_state, _ = update_allocation(state, order.id, desired)

    assert new_state.find_order(order.id).allocated_qty == expected


@pytest.mark.parametrize("seed", range(20))
def test_auto_assignment_respects_credit_priority(seed):
    rng = random.Random(2000 + seed)
    state = random_state(rng)
    credits = {c.id: c.credit_remaining for c in state.customers}

    new_state, _ = run_auto_assignment(state)

    ranked = [credits[o.customer_id] for o in new_state.orders]
    assert ranked == sorted(ranked, reverse=True)
    assert sorted(o.id for o in new_state.orders) == sorted(o.id for o in state.orders)
