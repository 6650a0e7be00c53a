"""Tests for order creation, cancellation and confirmation."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from app.models.cart import Cart, CartItem
from app.models.order import Order
from app.models.product import Product
from app.repositories.cart_repository import CartRepository
from app.services.order_service import OrderService


class FailingNotifier:

    def send_order_confirmed(self, order_data):
        raise RuntimeError("SMTP down")

    def send_order_status_changed(self, order_data):
        raise RuntimeError("SMTP down")


def reload_product(db, product_id):
    db.expire_all()
    return db.get(Product, product_id)


def reload_order(db, order_id):
    db.expire_all()
    return db.get(Order, order_id)


class TestCreateOrder:

    def test_creates_pending_order_with_computed_amount(self, db, make_product, place_order):
        product = make_product()

        created = place_order(product, quantity=5, size="500")

        order = reload_order(db, created.order_id)
        assert order.order_status == "Pending"
        assert order.payment_status == "Pending"
        assert order.amount_paid == Decimal("357.5")
        assert order.original_amount == Decimal("500")
        assert order.discount_amount == Decimal("142.5")
        assert order.discount_percentage == pytest.approx(28.5)
        assert order.amount_paid == order.original_amount - order.discount_amount
        assert created.amount == Decimal("357.5")
        assert created.pricing.has_discount is True

    def test_amount_is_stored_as_fixed_point_text(self, db, make_product, place_order):
        product = make_product()
        created = place_order(product, quantity=5)

        raw = db.execute(
            Order.__table__.select().where(Order.__table__.c.id == created.order_id)
        ).mappings().one()
        # Column type converts back to Decimal, so look at the text directly
        stored = db.connection().exec_driver_sql(
            "SELECT amount_paid FROM orders WHERE id = ?", (created.order_id,)
        ).scalar()
        assert stored == "357.50"
        assert raw["amount_paid"] == Decimal("357.50")

    def test_client_amount_is_ignored(self, db, make_product, place_order):
        product = make_product()

        created = place_order(product, quantity=5, amount=Decimal("999999"))

        assert created.amount_adjusted is True
        assert reload_order(db, created.order_id).amount_paid == Decimal("357.5")

    def test_client_amount_within_tolerance_is_not_flagged(self, make_product, place_order):
        product = make_product()

        created = place_order(product, quantity=5, amount=Decimal("357.51"))

        assert created.amount_adjusted is False
        assert created.amount == Decimal("357.5")

    def test_small_order_has_no_discount(self, db, make_product, place_order):
        product = make_product()

        created = place_order(product, quantity=3, size="250")

        order = reload_order(db, created.order_id)
        assert order.amount_paid == Decimal("150")
        assert order.discount_amount == Decimal("0")
        assert order.discount_percentage == 0
        assert order.size_selected == "250"

    def test_creation_does_not_touch_stock(self, db, make_product, place_order):
        product = make_product(stock=10)

        place_order(product, quantity=4)

        assert reload_product(db, product.id).stock == 10

    def test_missing_product(self, place_order):
        with pytest.raises(NotFoundError):
            place_order(SimpleNamespace(id=9999))

    def test_unknown_size(self, make_product, place_order):
        product = make_product()

        with pytest.raises(ValidationError, match="Invalid size"):
            place_order(product, size="750")

    def test_insufficient_stock(self, make_product, place_order):
        product = make_product(stock=2)

        with pytest.raises(ValidationError, match="Only 2 items available"):
            place_order(product, quantity=3)

    def test_stock_checked_through_ledger(self, order_service, make_product, place_order, monkeypatch):
        product = make_product(stock=10)
        calls = []

        def refuse(product_id, amount):
            calls.append((product_id, amount))
            return False

        monkeypatch.setattr(order_service.stock_ledger, "check_available", refuse)

        with pytest.raises(ValidationError, match="Only 10 items available"):
            place_order(product, quantity=4)
        assert calls == [(product.id, 4)]

    def test_cart_line_removed_when_ordering_from_cart(self, db, make_product, place_order):
        product = make_product()
        cart = CartRepository(db).get_or_create("user-1")
        cart = CartRepository(db).add_item(cart, product.id, "500", 2)
        item_id = cart.items[0].id

        place_order(product, quantity=2, from_cart=True, cart_item_id=item_id)

        db.expire_all()
        assert db.query(CartItem).filter(CartItem.id == item_id).first() is None

    def test_cart_cleanup_failure_does_not_fail_order(self, db, make_product, place_order, monkeypatch):
        product = make_product()

        def broken_remove(self, cart, item_id):
            raise RuntimeError("cart store unavailable")

        CartRepository(db).get_or_create("user-1")
        monkeypatch.setattr(CartRepository, "remove_item", broken_remove)

        created = place_order(product, quantity=1, from_cart=True, cart_item_id=1)

        assert reload_order(db, created.order_id) is not None
        assert db.query(Cart).count() == 1


class TestReadOrders:

    def test_get_order_scoped_to_owner(self, order_service, make_product, place_order):
        product = make_product()
        created = place_order(product, user_id="owner")

        assert order_service.get_order("owner", created.order_id).id == created.order_id
        with pytest.raises(UnauthorizedError):
            order_service.get_order("someone-else", created.order_id)
        with pytest.raises(NotFoundError):
            order_service.get_order("owner", 12345)

    def test_list_filters_by_status(self, order_service, make_product, place_order):
        product = make_product(stock=50)
        first = place_order(product, quantity=1)
        place_order(product, quantity=2)
        place_order(product, quantity=1, user_id="other")
        order_service.cancel_order("user-1", first.order_id)

        everything = order_service.list_user_orders("user-1")
        cancelled = order_service.list_user_orders("user-1", order_status="Cancelled")

        assert everything.total == 2
        assert cancelled.total == 1
        assert cancelled.orders[0].id == first.order_id


class TestCancelOrder:

    def test_cancel_pending_order(self, db, order_service, notifier, make_product, place_order):
        product = make_product()
        created = place_order(product)

        result = order_service.cancel_order("user-1", created.order_id)

        assert result.order_status == "Cancelled"
        assert result.payment_status == "Pending"
        assert notifier.status_changes[0]["new_status"] == "Cancelled"

    def test_cancel_keeps_failed_payment_status(self, db, order_service, make_product, place_order):
        product = make_product()
        created = place_order(product)
        order_service.mark_payment_failed(created.order_id)

        result = order_service.cancel_order("user-1", created.order_id)

        assert result.order_status == "Cancelled"
        assert result.payment_status == "Failed"

    def test_cannot_cancel_confirmed_order(self, order_service, make_product, place_order):
        product = make_product()
        created = place_order(product)
        order_service.confirm_payment(created.order_id)

        with pytest.raises(ConflictError):
            order_service.cancel_order("user-1", created.order_id)

    def test_cannot_cancel_twice(self, order_service, make_product, place_order):
        product = make_product()
        created = place_order(product)
        order_service.cancel_order("user-1", created.order_id)

        with pytest.raises(ConflictError):
            order_service.cancel_order("user-1", created.order_id)

    def test_cannot_cancel_someone_elses_order(self, order_service, make_product, place_order):
        product = make_product()
        created = place_order(product, user_id="owner")

        with pytest.raises(UnauthorizedError):
            order_service.cancel_order("intruder", created.order_id)


class TestConfirmPayment:

    def test_confirms_and_decrements_stock(self, db, order_service, notifier, make_product, place_order):
        product = make_product(stock=10)
        created = place_order(product, quantity=3)

        assert order_service.confirm_payment(created.order_id) is True

        order = reload_order(db, created.order_id)
        assert (order.order_status, order.payment_status) == ("Confirmed", "Completed")
        assert reload_product(db, product.id).stock == 7
        assert len(notifier.confirmed) == 1

    def test_second_confirmation_is_a_no_op(self, db, order_service, notifier, make_product, place_order):
        product = make_product(stock=10)
        created = place_order(product, quantity=3)

        assert order_service.confirm_payment(created.order_id) is True
        assert order_service.confirm_payment(created.order_id) is False

        assert reload_product(db, product.id).stock == 7
        assert len(notifier.confirmed) == 1

    def test_racing_confirmations_decrement_once(self, session_factory, notifier, make_product, place_order):
        product = make_product(stock=10)
        created = place_order(product, quantity=3)

        first_db, second_db = session_factory(), session_factory()
        try:
            first = OrderService(first_db, notifier=notifier)
            second = OrderService(second_db, notifier=notifier)
            # both handlers have read the order while it was still unpaid
            assert first_db.get(Order, created.order_id).payment_status == "Pending"
            assert second_db.get(Order, created.order_id).payment_status == "Pending"

            results = [first.confirm_payment(created.order_id), second.confirm_payment(created.order_id)]
        finally:
            first_db.close()
            second_db.close()

        check = session_factory()
        try:
            assert sorted(results) == [False, True]
            assert check.get(Product, product.id).stock == 7
        finally:
            check.close()

    def test_stock_floors_at_zero(self, db, order_service, make_product, place_order):
        product = make_product(stock=5)
        created = place_order(product, quantity=5)
        db.query(Product).filter(Product.id == product.id).update({"stock": 2})
        db.commit()

        order_service.confirm_payment(created.order_id)

        assert reload_product(db, product.id).stock == 0

    def test_oversold_pending_orders_floor_at_zero(self, db, order_service, make_product, place_order):
        product = make_product(stock=4)
        first = place_order(product, quantity=3)
        second = place_order(product, quantity=3)

        order_service.confirm_payment(first.order_id)
        order_service.confirm_payment(second.order_id)

        assert reload_product(db, product.id).stock == 0

    def test_cancelled_order_is_not_confirmed(self, db, order_service, make_product, place_order):
        product = make_product(stock=10)
        created = place_order(product, quantity=3)
        order_service.cancel_order("user-1", created.order_id)

        assert order_service.confirm_payment(created.order_id) is False

        order = reload_order(db, created.order_id)
        assert order.order_status == "Cancelled"
        assert reload_product(db, product.id).stock == 10

    def test_failed_then_success_confirms(self, db, order_service, make_product, place_order):
        product = make_product(stock=10)
        created = place_order(product, quantity=1)

        assert order_service.mark_payment_failed(created.order_id) is True
        order = reload_order(db, created.order_id)
        assert (order.order_status, order.payment_status) == ("Pending", "Failed")

        assert order_service.confirm_payment(created.order_id) is True
        order = reload_order(db, created.order_id)
        assert (order.order_status, order.payment_status) == ("Confirmed", "Completed")

    def test_failure_after_completion_is_ignored(self, db, order_service, make_product, place_order):
        product = make_product()
        created = place_order(product)
        order_service.confirm_payment(created.order_id)

        assert order_service.mark_payment_failed(created.order_id) is False
        assert reload_order(db, created.order_id).payment_status == "Completed"

    def test_notification_failure_is_swallowed(self, db, make_product, place_order):
        product = make_product(stock=10)
        created = place_order(product, quantity=2)
        service = OrderService(db, notifier=FailingNotifier())

        assert service.confirm_payment(created.order_id) is True
        assert reload_product(db, product.id).stock == 8
