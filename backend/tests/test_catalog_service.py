import pytest

from eventpos.models import InventoryRecord, Promotion
from eventpos.services import catalog_service, state_service
from eventpos.validation import ConflictError, UnknownProductError


class TestProducts:

    def test_create_product_opens_inventory(self, db_session):
        product = catalog_service.create_product(
            name="Ice", suggested_price_cents=1000, initial_quantity=5,
        )
        record = db_session.get(InventoryRecord, product.id)
        assert record.current_quantity == 5
        assert record.initial_total_quantity == 5
        assert product.category == "general"

    def test_duplicate_name_conflicts(self, beer):
        with pytest.raises(ConflictError):
            catalog_service.create_product(name="Beer", suggested_price_cents=1)

    def test_require_product(self, beer):
        assert catalog_service.require_product(beer.id).name == "Beer"
        with pytest.raises(UnknownProductError):
            catalog_service.require_product(999)

    def test_list_products_in_id_order(self, beer, water):
        assert [p.name for p in catalog_service.list_products()] == ["Beer", "Water"]


class TestPromotions:

    def test_list_by_product_sorted_by_trigger(self, beer, water):
        catalog_service.create_promotion(water.id, 4, 1400)
        promos = catalog_service.list_promotions(beer.id)
        assert [p.trigger_quantity for p in promos] == [3, 6]
        assert len(catalog_service.list_promotions()) == 3

    def test_duplicate_trigger_conflicts(self, beer):
        with pytest.raises(ConflictError):
            catalog_service.create_promotion(beer.id, 3, 1500)

    def test_unknown_product(self, db_session):
        with pytest.raises(UnknownProductError):
            catalog_service.create_promotion(42, 3, 1500)
        assert db_session.query(Promotion).count() == 0

    def test_delete(self, beer):
        promo = catalog_service.list_promotions(beer.id)[0]
        assert catalog_service.delete_promotion(promo.id) is True
        assert catalog_service.delete_promotion(promo.id) is False

    def test_pricing_state_reflects_schedule(self, beer):
        state = state_service.load_pricing_state()
        assert {p.trigger_quantity for p in state.promotions_for(beer.id)} == {3, 6}
        assert state.inventory == ()
