"""
Stock reconciliation - applies signed quantity deltas to stock counters.

Every receipt or issue moves stock through apply_delta: creation applies its
lines, deletion reverses them, an update reverses the old lines and applies
the new ones. A failed write part way through a batch is compensated by
reversing the lines already applied in the same call before the error is
raised.
"""
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Iterable, List

from django.db import DatabaseError, transaction

from core.exceptions import NotFoundError, ReconciliationError
from core.services import BaseService
from core.validators import StockValidator
from .repositories import StockRepository


@dataclass(frozen=True)
class StockMovement:
    """One committed change to a stock counter"""
    product_id: int
    delta: int
    stock_after: int

    def as_dict(self):
        return {'product_id': self.product_id, 'delta': self.delta, 'stock_after': self.stock_after}


def _item_value(item, name):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name)


def merge_deltas(items: Iterable, direction: int) -> "OrderedDict[int, int]":
    """Signed delta per product, in product id order; zero deltas are dropped"""
    totals = {}
    for item in items:
        product_id = _item_value(item, 'product_id')
        quantity = StockValidator.validate_quantity(_item_value(item, 'quantity'))
        totals[product_id] = totals.get(product_id, 0) + direction * quantity
    return OrderedDict(
        (product_id, delta)
        for product_id, delta in sorted(totals.items(), key=lambda pair: str(pair[0]).zfill(20))
        if delta != 0
    )


class StockLedger(BaseService):
    """Applies quantity deltas to InkProduct.stock_quantity"""

    write_errors = (DatabaseError, NotFoundError)

    def __init__(self, stock_repo: StockRepository = None):
        super().__init__()
        self.stock_repo = stock_repo or StockRepository()

    def apply_delta(self, items: Iterable, direction: int) -> List[StockMovement]:
        """
        Add ``direction * quantity`` to the stock of every item's product.

        Args:
            items: objects or dicts with product_id and quantity
            direction: +1 (stock in) or -1 (stock out)

        Returns:
            The committed movements, in application order

        Raises:
            ValidationError: bad direction or quantity (nothing applied)
            ReconciliationError: a write failed; earlier writes of this call
                were reversed before raising
        """
        StockValidator.validate_direction(direction)
        deltas = merge_deltas(items, direction)

        applied: List[StockMovement] = []
        for product_id, delta in deltas.items():
            try:
                with transaction.atomic():
                    stock_after = self.stock_repo.increment(product_id, delta)
            except self.write_errors as e:
                failures = self._compensate(applied)
                self.log_error(
                    "Stock write failed, compensated earlier movements",
                    error=e,
                    product_id=product_id,
                    compensated=[m.product_id for m in applied],
                    compensation_failures=failures,
                )
                raise ReconciliationError(
                    message=f"Could not update stock for product {product_id}",
                    details={
                        'failed_product_id': product_id,
                        'applied_product_ids': [m.product_id for m in applied],
                        'compensated': not failures,
                        'compensation_failures': failures,
                        'cause': str(e),
                    }
                ) from e

            movement = StockMovement(product_id, delta, stock_after)
            applied.append(movement)
            if stock_after < 0:
                self.log_warning(
                    "Stock below zero (over-issuance)",
                    product_id=product_id,
                    stock_quantity=stock_after,
                )

        self.log_info(
            "Stock reconciled",
            direction=direction,
            movements=[m.as_dict() for m in applied],
        )
        return applied

    def replace(self, old_items: Iterable, new_items: Iterable, direction: int,
                swap_items: Callable = None) -> List[StockMovement]:
        """
        Move stock from an old set of lines to a new one.

        Reverses ``old_items``, runs ``swap_items`` (which replaces the stored
        lines), then applies ``new_items``. If anything after the reversal
        fails, the old lines are applied again so stock matches its state
        before the call, and the error is raised.
        """
        old_items = list(old_items)
        new_items = list(new_items)
        StockValidator.validate_direction(direction)

        reverted = self.apply_delta(old_items, -direction)
        try:
            if swap_items is not None:
                with transaction.atomic():
                    swap_items()
            applied = self.apply_delta(new_items, direction)
        except ReconciliationError:
            self._restore(old_items, direction)
            raise
        except DatabaseError as e:
            self._restore(old_items, direction)
            raise ReconciliationError(
                message="Could not replace line items",
                details={'cause': str(e)}
            ) from e
        return reverted + applied

    def _restore(self, old_items, direction):
        try:
            self.apply_delta(old_items, direction)
        except ReconciliationError as e:
            self.log_error("Could not restore stock after failed update", error=e, details=e.details)
            raise

    def _compensate(self, applied: List[StockMovement]) -> List[dict]:
        failures = []
        for movement in reversed(applied):
            try:
                with transaction.atomic():
                    self.stock_repo.increment(movement.product_id, -movement.delta)
            except self.write_errors as e:
                failures.append({'product_id': movement.product_id, 'delta': -movement.delta, 'error': str(e)})
                self.log_error("Compensation failed", error=e, product_id=movement.product_id)
        return failures
