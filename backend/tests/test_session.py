"""
Terminal session: snapshot refresh, cart shortcuts and the commit guard.
"""

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from eventpos.services import inventory_service, sales_service
from eventpos.services.concurrency import PersistenceError
from eventpos.session import TerminalSession, GENERIC_FAILURE


@pytest.fixture
def session(beer, water):
    terminal = TerminalSession(refresh_interval_seconds=12)
    terminal.refresh()
    return terminal


class TestRefresh:

    def test_refresh_replaces_snapshot_and_bumps_version(self, session, beer):
        first = session.state
        inventory_service.decrement(beer.id, 1)
        second = session.refresh()

        assert second is not first
        assert second.version == first.version + 1
        assert first.stock(beer.id).current_quantity == 20
        assert second.stock(beer.id).current_quantity == 19

    def test_refresh_if_stale(self, session):
        fetched = session.state.fetched_at
        assert session.refresh_if_stale(fetched + timedelta(seconds=5)) is False
        assert session.refresh_if_stale(fetched + timedelta(seconds=12)) is True

    def test_empty_session_refreshes_immediately(self, db_session):
        assert TerminalSession().refresh_if_stale() is True


class TestCommit:

    @pytest.mark.smoke
    def test_successful_commit_clears_cart(self, session, beer, water):
        for _ in range(3):
            session.add(beer.id)
        session.add(water.id)
        assert session.cart_total() == 1800 + 400

        result = session.commit()

        assert result.success
        assert result.total_cents == 2200
        assert session.cart.is_empty
        assert session.state.stock(beer.id).current_quantity == 17
        assert session.submitting is False

    def test_empty_cart_is_noop(self, session):
        version = session.state.version
        assert session.commit() is None
        assert session.state.version == version

    def test_single_flight(self, session, water, monkeypatch):
        real_commit = sales_service.commit_sale
        reentrant = []

        def commit_and_retap(lines, sold_at=None):
            # a second tap while the first commit is still running
            reentrant.append(session.commit())
            return real_commit(lines, sold_at)

        monkeypatch.setattr(sales_service, "commit_sale", commit_and_retap)
        session.add(water.id)

        result = session.commit()

        assert result.success
        assert reentrant == [None]
        assert inventory_service.current(water.id) == 9

    def test_rejected_sale_keeps_cart(self, session, beer):
        for _ in range(3):
            session.add(beer.id)
        # another terminal sold most of the stock meanwhile
        inventory_service.correct(beer.id, 1, 20)

        result = session.commit()

        assert result.success is False
        assert result.details["product_id"] == beer.id
        assert session.cart.quantity(beer.id) == 3
        assert session.submitting is False

    def test_reload_failure_after_commit_still_reports_success(self, session, water, db_session, monkeypatch):
        from eventpos.models import SaleRecord
        from eventpos.services import state_service

        def broken_load(version=0):
            raise OperationalError("SELECT products", {}, Exception("database is locked"))

        monkeypatch.setattr(state_service, "load_state", broken_load)
        session.add(water.id)
        stale_version = session.state.version

        result = session.commit()

        assert result.success is True
        assert result.total_cents == 400
        assert session.cart.is_empty
        assert session.state.version == stale_version
        assert session.submitting is False
        assert db_session.query(SaleRecord).count() == 1

    def test_storage_failure_keeps_cart(self, session, water, monkeypatch):
        def broken(lines, sold_at=None):
            raise PersistenceError("Storage failure") from OperationalError("x", {}, Exception())

        monkeypatch.setattr(sales_service, "commit_sale", broken)
        session.add(water.id)

        result = session.commit()

        assert result.success is False
        assert result.message == GENERIC_FAILURE
        assert session.cart.quantity(water.id) == 1
