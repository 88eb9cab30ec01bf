"""Tests for CartService."""

from decimal import Decimal

import pytest
from sqlalchemy import update

from conftest import OTHER_USER_ID, USER_ID
from market.data.database import SessionLocal
from market.data.models.cart import CartModel
from market.data.models.product import ProductModel
from market.domain.errors import ConcurrentModification, InvalidArgument, NotFound, OutOfStock
from market.services.cart_service import CartService, cart_total
from market.services.catalog_service import CatalogService


@pytest.fixture
def svc(db):
    return CartService(db, CatalogService(db))


def lines(cart):
    return [(i.product_id, i.quantity, Decimal(i.price)) for i in cart.items]


class TestGetCart:
    def test_creates_cart_lazily(self, svc):
        cart = svc.get_cart(USER_ID)

        assert cart.id is not None
        assert cart.user_id == USER_ID
        assert cart.items == []
        assert Decimal(cart.total_amount) == Decimal("0")

    def test_returns_same_cart(self, svc):
        first = svc.get_cart(USER_ID)
        second = svc.get_cart(USER_ID)

        assert first.id == second.id

    def test_one_cart_per_user(self, svc):
        assert svc.get_cart(USER_ID).id != svc.get_cart(OTHER_USER_ID).id


class TestAddItem:
    def test_add_new_line_locks_price(self, svc, make_product):
        pid = make_product(price="10.00", quantity=5)

        cart = svc.add_item(USER_ID, pid, 2)

        assert lines(cart) == [(pid, 2, Decimal("10.00"))]
        assert Decimal(cart.total_amount) == Decimal("20.00")

    def test_default_quantity_is_one(self, svc, make_product):
        pid = make_product()

        cart = svc.add_item(USER_ID, pid)

        assert cart.items[0].quantity == 1

    def test_existing_product_increments_quantity(self, svc, make_product):
        pid = make_product(quantity=5)

        svc.add_item(USER_ID, pid, 1)
        cart = svc.add_item(USER_ID, pid, 2)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        assert Decimal(cart.total_amount) == Decimal("30.00")

    def test_locked_price_survives_catalog_change(self, svc, db, make_product):
        pid = make_product(price="10.00", quantity=5)
        svc.add_item(USER_ID, pid, 1)

        db.get(ProductModel, pid).price = Decimal("99.00")
        db.commit()
        cart = svc.add_item(USER_ID, pid, 1)

        assert lines(cart) == [(pid, 2, Decimal("10.00"))]
        assert Decimal(cart.total_amount) == Decimal("20.00")

    def test_missing_product_raises(self, svc):
        with pytest.raises(NotFound):
            svc.add_item(USER_ID, 12345, 1)

    def test_quantity_above_stock_raises(self, svc, make_product):
        pid = make_product(quantity=2)

        with pytest.raises(OutOfStock):
            svc.add_item(USER_ID, pid, 3)

    def test_stock_checked_against_total_desired_quantity(self, svc, make_product):
        pid = make_product(quantity=3)
        svc.add_item(USER_ID, pid, 2)

        with pytest.raises(OutOfStock):
            svc.add_item(USER_ID, pid, 2)

        assert svc.get_cart(USER_ID).items[0].quantity == 2

    def test_unavailable_product_raises(self, svc, make_product):
        pid = make_product(quantity=10, in_stock=False)

        with pytest.raises(OutOfStock):
            svc.add_item(USER_ID, pid, 1)

    def test_non_positive_quantity_raises(self, svc, make_product):
        pid = make_product()

        with pytest.raises(InvalidArgument):
            svc.add_item(USER_ID, pid, 0)

    def test_add_does_not_touch_stock(self, svc, make_product, stock_of):
        pid = make_product(quantity=5)

        svc.add_item(USER_ID, pid, 4)

        assert stock_of(pid) == 5


class TestUpdateItemQuantity:
    def test_overwrites_quantity(self, svc, make_product):
        pid = make_product(price="4.50", quantity=5)
        svc.add_item(USER_ID, pid, 1)

        cart = svc.update_item_quantity(USER_ID, pid, 4)

        assert cart.items[0].quantity == 4
        assert Decimal(cart.total_amount) == Decimal("18.00")

    def test_no_stock_check(self, svc, make_product):
        pid = make_product(quantity=2)
        svc.add_item(USER_ID, pid, 1)

        cart = svc.update_item_quantity(USER_ID, pid, 50)

        assert cart.items[0].quantity == 50

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_raises(self, svc, make_product, quantity):
        pid = make_product()
        svc.add_item(USER_ID, pid, 1)

        with pytest.raises(InvalidArgument):
            svc.update_item_quantity(USER_ID, pid, quantity)

    def test_no_cart_raises(self, svc, make_product):
        pid = make_product()

        with pytest.raises(NotFound, match="Cart not found"):
            svc.update_item_quantity(USER_ID, pid, 1)

    def test_missing_line_raises(self, svc, make_product):
        pid = make_product()
        other = make_product(title="Other")
        svc.add_item(USER_ID, pid, 1)

        with pytest.raises(NotFound, match="Item not found"):
            svc.update_item_quantity(USER_ID, other, 1)


class TestRemoveAndClear:
    def test_remove_line_recomputes_total(self, svc, make_product):
        a = make_product(title="A", price="10.00")
        b = make_product(title="B", price="5.00")
        svc.add_item(USER_ID, a, 2)
        svc.add_item(USER_ID, b, 1)

        cart = svc.remove_item(USER_ID, a)

        assert lines(cart) == [(b, 1, Decimal("5.00"))]
        assert Decimal(cart.total_amount) == Decimal("5.00")

    def test_remove_absent_item_is_noop(self, svc, make_product):
        a = make_product()
        svc.add_item(USER_ID, a, 1)

        cart = svc.remove_item(USER_ID, 999)

        assert len(cart.items) == 1
        assert Decimal(cart.total_amount) == Decimal("10.00")

    def test_remove_without_cart_raises(self, svc):
        with pytest.raises(NotFound):
            svc.remove_item(USER_ID, 1)

    def test_clear_empties_cart(self, svc, make_product):
        a = make_product()
        svc.add_item(USER_ID, a, 3)

        svc.clear(USER_ID)
        cart = svc.get_cart(USER_ID)

        assert cart.items == []
        assert Decimal(cart.total_amount) == Decimal("0")

    def test_clear_is_idempotent(self, svc):
        svc.clear(USER_ID)
        svc.clear(USER_ID)

        svc.get_cart(USER_ID)
        svc.clear(USER_ID)

        assert svc.get_cart(USER_ID).items == []


class TestTotalInvariant:
    def test_total_matches_lines_after_every_mutation(self, svc, make_product):
        a = make_product(title="A", price="3.25", quantity=20)
        b = make_product(title="B", price="7.10", quantity=20)
        c = make_product(title="C", price="0.99", quantity=20)

        steps = [
            lambda: svc.add_item(USER_ID, a, 2),
            lambda: svc.add_item(USER_ID, b, 1),
            lambda: svc.add_item(USER_ID, a, 3),
            lambda: svc.add_item(USER_ID, c, 7),
            lambda: svc.update_item_quantity(USER_ID, b, 4),
            lambda: svc.remove_item(USER_ID, a),
            lambda: svc.update_item_quantity(USER_ID, c, 1),
        ]
        for step in steps:
            cart = step()
            expected = sum((Decimal(i.price) * i.quantity for i in cart.items), Decimal("0"))
            assert Decimal(cart.total_amount) == expected
            assert cart_total(cart.items) == expected

    def test_version_bumps_on_mutation(self, svc, make_product):
        a = make_product()
        before = svc.get_cart(USER_ID).version

        cart = svc.add_item(USER_ID, a, 1)

        assert cart.version == before + 1


class TestConcurrentModification:
    def test_same_new_line_added_by_two_sessions(self, make_product):
        pid = make_product(quantity=5)
        first, second = SessionLocal(), SessionLocal()
        try:
            first_svc = CartService(first, CatalogService(first))
            second_svc = CartService(second, CatalogService(second))
            first_svc.get_cart(USER_ID)

            second_svc.add_item(USER_ID, pid, 1)
            with pytest.raises(ConcurrentModification):
                first_svc.add_item(USER_ID, pid, 1)
        finally:
            first.close()
            second.close()

        check = SessionLocal()
        try:
            cart = CartService(check, CatalogService(check)).get_cart(USER_ID)
            assert [(i.product_id, i.quantity) for i in cart.items] == [(pid, 1)]
        finally:
            check.close()

    def test_stale_version_is_rejected(self, svc, make_product):
        pid = make_product(quantity=5)
        svc.add_item(USER_ID, pid, 1)

        other = SessionLocal()
        try:
            other.execute(
                update(CartModel)
                .where(CartModel.user_id == USER_ID)
                .values(version=CartModel.version + 1)
            )
            other.commit()
        finally:
            other.close()

        with pytest.raises(ConcurrentModification):
            svc.update_item_quantity(USER_ID, pid, 3)

        check = SessionLocal()
        try:
            cart = CartService(check, CatalogService(check)).get_cart(USER_ID)
            assert [(i.product_id, i.quantity) for i in cart.items] == [(pid, 1)]
            assert Decimal(cart.total_amount) == Decimal("10.00")
        finally:
            check.close()
