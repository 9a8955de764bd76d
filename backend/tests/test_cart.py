from eventpos.cart import Cart, CartLine
from eventpos.services.pricing_service import price_item


class TestIncrement:

    def test_increment_adds_units(self, pure_state):
        cart = Cart()
        assert cart.increment(pure_state, 1) is True
        assert cart.increment(pure_state, 1) is True
        assert cart.quantity(1) == 2
        assert cart.count() == 2

    def test_increment_beyond_stock_is_noop(self, pure_state):
        cart = Cart()
        # water: 2 in stock
        cart.increment(pure_state, 2)
        cart.increment(pure_state, 2)
        assert cart.increment(pure_state, 2) is False
        assert cart.quantity(2) == 2

    def test_increment_unknown_product_is_noop(self, pure_state):
        cart = Cart()
        assert cart.increment(pure_state, 999) is False
        assert cart.is_empty

    def test_increment_without_inventory_record_is_noop(self, pure_state):
        cart = Cart()
        assert cart.increment(pure_state, 3) is False
        assert 3 not in cart


class TestDecrement:

    def test_decrement_from_one_removes_line(self, pure_state):
        cart = Cart()
        cart.increment(pure_state, 1)
        cart.decrement(1)
        assert 1 not in cart
        assert cart.is_empty

    def test_decrement_above_one(self, pure_state):
        cart = Cart()
        for _ in range(3):
            cart.increment(pure_state, 1)
        cart.decrement(1)
        assert cart.quantity(1) == 2

    def test_decrement_absent_is_noop(self):
        cart = Cart()
        cart.decrement(1)
        assert cart.is_empty


class TestSetQuantity:

    def test_caps_at_stock(self, pure_state):
        cart = Cart()
        assert cart.set_quantity(pure_state, 1, 50) == 5
        assert cart.quantity(1) == 5

    def test_zero_removes(self, pure_state):
        cart = Cart()
        cart.set_quantity(pure_state, 1, 2)
        assert cart.set_quantity(pure_state, 1, 0) == 0
        assert 1 not in cart


class TestTotals:

    def test_total_is_sum_of_line_prices(self, pure_state):
        cart = Cart()
        for _ in range(5):
            cart.increment(pure_state, 1)
        cart.increment(pure_state, 2)

        expected = price_item(pure_state, 1, 5) + price_item(pure_state, 2, 1)
        assert cart.total(pure_state) == expected == 3200 + 400
        assert cart.count() == 6

    def test_total_recomputed_on_each_read(self, pure_state):
        cart = Cart()
        for _ in range(3):
            cart.increment(pure_state, 1)
        assert cart.total(pure_state) == 1800
        cart.decrement(1)
        assert cart.total(pure_state) == 1400

    def test_lines_skip_products_missing_from_snapshot(self, pure_state):
        from eventpos.state import AppState

        cart = Cart()
        cart.increment(pure_state, 1)
        cart.increment(pure_state, 2)
        smaller = AppState(products=(pure_state.product(2),), inventory=pure_state.inventory)

        assert cart.lines(smaller) == [CartLine(product_id=2, quantity=1)]
        assert cart.total(smaller) == 400

    def test_clear(self, pure_state):
        cart = Cart()
        cart.increment(pure_state, 1)
        cart.clear()
        assert cart.is_empty
        assert cart.total(pure_state) == 0

    def test_to_dict(self, pure_state):
        cart = Cart()
        cart.increment(pure_state, 2)
        body = cart.to_dict(pure_state)
        assert body == {
            "lines": [{"product_id": 2, "quantity": 1, "line_total_cents": 400}],
            "count": 1,
            "total_cents": 400,
        }
