"""
Stock counter tests: conditional decrement, restock increment, correction.
"""

import pytest

from eventpos.models import InventoryRecord
from eventpos.services import inventory_service, state_service
from eventpos.services.inventory_service import InsufficientStockError, stock_percent
from eventpos.validation import ValidationError, UnknownProductError


class TestDecrement:

    def test_decrement(self, beer):
        inventory_service.decrement(beer.id, 5)
        assert inventory_service.current(beer.id) == 15

    def test_decrement_to_zero(self, water):
        inventory_service.decrement(water.id, 10)
        assert inventory_service.current(water.id) == 0

    @pytest.mark.smoke
    def test_never_goes_negative(self, water):
        with pytest.raises(InsufficientStockError) as exc_info:
            inventory_service.decrement(water.id, 11)
        assert exc_info.value.details["on_hand"] == 10
        assert inventory_service.current(water.id) == 10

    def test_last_unit_sold_once(self, water):
        inventory_service.correct(water.id, 1, 10)
        inventory_service.decrement(water.id, 1)
        with pytest.raises(InsufficientStockError):
            inventory_service.decrement(water.id, 1)
        assert inventory_service.current(water.id) == 0

    def test_missing_record_is_insufficient(self, water, db_session):
        db_session.delete(db_session.get(InventoryRecord, water.id))
        db_session.commit()

        assert inventory_service.current(water.id) is None
        with pytest.raises(InsufficientStockError) as exc_info:
            inventory_service.decrement(water.id, 1)
        assert exc_info.value.details["on_hand"] is None

    def test_rejects_non_positive(self, beer):
        with pytest.raises(ValidationError):
            inventory_service.decrement(beer.id, 0)


class TestIncrement:

    def test_raises_current_and_initial(self, beer):
        inventory_service.decrement(beer.id, 8)
        record = inventory_service.increment(beer.id, 10)
        assert record.current_quantity == 22
        assert record.initial_total_quantity == 30

    def test_creates_missing_record(self, water, db_session):
        db_session.delete(db_session.get(InventoryRecord, water.id))
        db_session.commit()

        record = inventory_service.increment(water.id, 6)
        assert (record.current_quantity, record.initial_total_quantity) == (6, 6)


class TestCorrect:

    def test_overrides_both_counters(self, beer):
        record = inventory_service.correct(beer.id, 3, 12)
        assert (record.current_quantity, record.initial_total_quantity) == (3, 12)

    def test_rejects_negative(self, beer):
        with pytest.raises(ValidationError):
            inventory_service.correct(beer.id, -1, 12)
        assert inventory_service.current(beer.id) == 20

    def test_unknown_product(self, db_session):
        with pytest.raises(UnknownProductError):
            inventory_service.correct(77, 1, 1)


class TestSummary:

    def test_stock_percent(self):
        assert stock_percent(5, 20) == 25.0
        assert stock_percent(0, 0) == 0.0
        assert stock_percent(3, 0) == 100.0

    def test_summary_flags(self, beer, water):
        inventory_service.correct(beer.id, 4, 20)
        inventory_service.correct(water.id, 0, 10)

        summary = inventory_service.inventory_summary(state_service.load_state())
        rows = {r["name"]: r for r in summary["rows"]}

        assert rows["Beer"]["stock_pct"] == 20.0
        assert rows["Beer"]["is_low"] is True
        assert rows["Water"]["is_out"] is True
        assert rows["Water"]["is_low"] is False
        assert summary["total_current"] == 4
        assert summary["total_initial"] == 30
