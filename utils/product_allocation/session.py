"""
Allocation Session
==================
Holds the current snapshot of one operator session together with the last
violation messages and a version key.

Every operation hands the current snapshot to the engine and swaps in the
result wholesale. The version key increments once per successful change
(auto-assign, manual update, reset, add order, save) so callers can tell
that something changed.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from . import allocation_engine as engine
from .allocation_engine import AllocationConfig
from .models import AllocationState, Order
from .validators import AllocationValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveAcknowledgement:
    """Confirmation returned by save(); nothing is persisted"""
    version_key: int
    saved_at: datetime
    order_count: int
    allocated_qty: int
    allocated_value: Decimal

    @property
    def message(self) -> str:
        return f"Allocations saved successfully! Version: {self.version_key}"


class AllocationSession:
    """State container for one allocation session"""

    def __init__(self, state: AllocationState, config: Optional[AllocationConfig] = None,
                 version_key: int = 1):
        self._state = state
        self._errors: Tuple[str, ...] = ()
        self._version_key = version_key
        self.config = config or AllocationConfig()
        self.validator = AllocationValidator()

    @classmethod
    def from_app_config(cls, app_config: Any = None) -> 'AllocationSession':
        """Start a demo session configured from utils.config"""
        from .demo_data import build_demo_state

        if app_config is None:
            from ..config import config as app_config

        return cls(
            state=build_demo_state(app_config),
            config=AllocationConfig.from_app_config(app_config),
        )

    # ==================== Read-only views ====================

    @property
    def state(self) -> AllocationState:
        return self._state

    @property
    def errors(self) -> List[str]:
        return list(self._errors)

    @property
    def version_key(self) -> int:
        return self._version_key

    # ==================== Internal ====================

    def _commit(self, action: str, state: AllocationState, errors: Optional[List[str]] = None):
        """Swap in a new snapshot (and error list, when given) and bump the version"""
        self._state = state
        if errors is not None:
            self._errors = tuple(errors)
        self._version_key += 1

        check = self.validator.check_invariants(state)
        if not check.is_valid:
            for error in check.errors:
                logger.error(f"❌ Invariant broken after {action}: {error}")

        logger.info(
            f"{action} -> version {self._version_key}, "
            f"stock {state.remaining_stock}/{state.total_stock}, {len(self._errors)} warning(s)"
        )

    # ==================== Operations ====================

    def run_auto_assignment(self) -> List[str]:
        """Allocate all orders; returns the violation messages"""
        state, violations = engine.run_auto_assignment(self._state, self.config)
        self._commit("Auto-assignment", state, violations)
        return violations

    def update_allocation(self, order_id: str, desired_qty: Any) -> List[str]:
        """
        Set one order's allocation.

        An unknown order or customer leaves the session untouched, including
        the current error list and version key.
        """
        order = self._state.find_order(order_id)
        if order is None or self._state.find_customer(order.customer_id) is None:
            logger.debug(f"Manual update for {order_id} ignored")
            return []

        state, violations = engine.update_allocation(self._state, order_id, desired_qty, self.config)
        self._commit(f"Manual update {order_id}", state, violations)
        return violations

    def use_suggestion(self, order_id: str) -> List[str]:
        """Set the order to its suggested quantity"""
        order = self._state.find_order(order_id)
        if order is None:
            return []
        return self.update_allocation(order_id, order.suggestion)

    def step_allocation(self, order_id: str, delta: int) -> List[str]:
        """Increase or decrease the order's allocation by delta"""
        order = self._state.find_order(order_id)
        if order is None:
            return []
        return self.update_allocation(order_id, order.allocated_qty + delta)

    def reset_allocations(self):
        """Zero all allocations and clear warnings"""
        self._commit("Reset", engine.reset_allocations(self._state), [])

    def add_order(self) -> Order:
        """Append a new order; returns it"""
        state = engine.add_order(self._state, self.config)
        self._commit("Add order", state)
        return state.orders[-1]

    def save(self) -> SaveAcknowledgement:
        """Acknowledge the current allocations without persisting them"""
        ack = SaveAcknowledgement(
            version_key=self._version_key,
            saved_at=datetime.now(),
            order_count=len(self._state.orders),
            allocated_qty=self._state.allocated_total,
            allocated_value=self._state.allocated_value,
        )
        logger.info(f"✅ {ack.message} ({ack.allocated_qty} units, value {ack.allocated_value})")
        self._version_key += 1
        return ack
