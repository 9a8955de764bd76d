"""
Sale commit tests.

A commit is all-or-nothing: every failure below must leave both the sales
table and the stock counters exactly as they were.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from eventpos.cart import CartLine
from eventpos.models import SaleRecord
from eventpos.services import catalog_service, inventory_service, sales_service
from eventpos.services.concurrency import PersistenceError
from eventpos.services.sales_service import SaleError, commit_sale, list_sales


SOLD_AT = datetime(2026, 10, 17, 13, 0, 0)


class TestCommit:

    @pytest.mark.smoke
    def test_two_line_sale(self, beer, water, db_session):
        receipt = commit_sale([(beer.id, 2), (water.id, 1)], sold_at=SOLD_AT)

        assert receipt.total_cents == 1400 + 400
        assert receipt.count == 3
        assert [r.total_price_cents for r in receipt.records] == [1400, 400]
        assert {r.sold_at for r in receipt.records} == {SOLD_AT}
        assert db_session.query(SaleRecord).count() == 2
        assert inventory_service.current(beer.id) == 18
        assert inventory_service.current(water.id) == 9

    def test_line_priced_with_bundles(self, beer):
        receipt = commit_sale([CartLine(product_id=beer.id, quantity=7)])
        assert receipt.total_cents == 3000 + 700

    def test_accepts_dict_lines(self, water):
        receipt = commit_sale([{"product_id": water.id, "quantity": 2}])
        assert receipt.total_cents == 800

    def test_uses_promotions_stored_at_commit(self, beer):
        for promo in catalog_service.list_promotions(beer.id):
            catalog_service.delete_promotion(promo.id)
        receipt = commit_sale([(beer.id, 3)])
        assert receipt.total_cents == 2100

    def test_not_idempotent(self, water, db_session):
        commit_sale([(water.id, 1)])
        commit_sale([(water.id, 1)])
        assert db_session.query(SaleRecord).count() == 2
        assert inventory_service.current(water.id) == 8

    def test_aware_timestamp_stored_as_utc(self, water):
        local = SOLD_AT.replace(hour=10, tzinfo=timezone(timedelta(hours=-3)))
        receipt = commit_sale([(water.id, 1)], sold_at=local)
        assert receipt.records[0].sold_at == SOLD_AT

    def test_receipt_to_dict(self, water):
        body = commit_sale([(water.id, 1)], sold_at=SOLD_AT).to_dict()
        assert body["success"] is True
        assert body["sold_at"] == "2026-10-17T13:00:00Z"
        assert len(body["sales"]) == 1


class TestAllOrNothing:

    @pytest.mark.smoke
    def test_insufficient_stock_rolls_back_earlier_lines(self, beer, water, db_session):
        with pytest.raises(SaleError) as exc_info:
            commit_sale([(water.id, 1), (beer.id, 25)])

        assert exc_info.value.details["product_id"] == beer.id
        assert db_session.query(SaleRecord).count() == 0
        assert inventory_service.current(water.id) == 10
        assert inventory_service.current(beer.id) == 20

    def test_unknown_product_rolls_back(self, beer, db_session):
        with pytest.raises(SaleError):
            commit_sale([(beer.id, 1), (999, 1)])
        assert db_session.query(SaleRecord).count() == 0
        assert inventory_service.current(beer.id) == 20

    def test_storage_failure_rolls_back(self, beer, water, db_session, monkeypatch):
        real_decrement = sales_service.decrement
        calls = []

        def failing_decrement(product_id, by, *, commit=True):
            calls.append(product_id)
            if len(calls) == 2:
                raise OperationalError("UPDATE inventory", {}, Exception("disk I/O error"))
            return real_decrement(product_id, by, commit=commit)

        monkeypatch.setattr(sales_service, "decrement", failing_decrement)

        with pytest.raises(PersistenceError):
            commit_sale([(beer.id, 2), (water.id, 1)])

        assert db_session.query(SaleRecord).count() == 0
        assert inventory_service.current(beer.id) == 20

    def test_retry_after_failure_records_once(self, beer, water, db_session):
        lines = [(water.id, 1), (beer.id, 21)]
        with pytest.raises(SaleError):
            commit_sale(lines)

        inventory_service.increment(beer.id, 1)
        commit_sale(lines)
        assert db_session.query(SaleRecord).count() == 2
        assert inventory_service.current(water.id) == 9


class TestRejectedInput:

    def test_empty(self, db_session):
        with pytest.raises(SaleError):
            commit_sale([])

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True])
    def test_bad_quantity(self, beer, quantity):
        with pytest.raises(SaleError):
            commit_sale([(beer.id, quantity)])
        assert inventory_service.current(beer.id) == 20


class TestListSales:

    def test_newest_first_and_day_filter(self, water):
        commit_sale([(water.id, 1)], sold_at=SOLD_AT - timedelta(days=1))
        commit_sale([(water.id, 1)], sold_at=SOLD_AT - timedelta(hours=2))
        commit_sale([(water.id, 2)], sold_at=SOLD_AT)

        today = list_sales(day=SOLD_AT.date())
        assert [r.quantity_sold for r in today] == [2, 1]
        assert len(list_sales()) == 3
        assert len(list_sales(limit=1)) == 1
