"""
Tests for the cart service (add / update / delete / list) against a real session
"""

from datetime import datetime, timezone

import pytest

from common.exceptions import InvalidArgumentError, NotFoundError
from modules.cart.models import CartLine, MAX_QUANTITY
from modules.cart.schemas import CartInsertRequest, CartUpdateRequest
from modules.cart.service import CartService, cart_service
from modules.pricing.calculator import PriceCalculator, PlainSumCalculator


def insert(option, quantity):
    return CartInsertRequest(option_id=option.id, quantity=quantity)


def update(line, quantity):
    return CartUpdateRequest(cart_id=line.id, quantity=quantity)


def lines_of(db, user):
    db.expire_all()
    return db.query(CartLine).filter(CartLine.user_id == user.id).order_by(CartLine.option_id).all()


class TestFindAll:

    def test_empty_cart(self, db, user):
        assert cart_service.find_all(db, user.id) == {"products": [], "total_price": 0}

    def test_total_and_grouping(self, db, user, catalog, add_line):
        add_line(user, catalog["white"], 2)
        add_line(user, catalog["medium"], 1)
        add_line(user, catalog["black"], 1)

        result = cart_service.find_all(db, user.id)

        # 2*10000 + 1*12000 + 1*5000
        assert result["total_price"] == 37000
        assert [p["product_name"] for p in result["products"]] == ["Wireless Earbuds", "Cotton T-Shirt"]
        earbuds = result["products"][0]
        assert [c["option_id"] for c in earbuds["carts"]] == [catalog["white"].id, catalog["black"].id]

    def test_ordered_by_option_id_not_insertion(self, db, user, catalog, add_line):
        # shirt's option is inserted first but has the higher option id
        add_line(user, catalog["medium"], 1)
        add_line(user, catalog["black"], 1)
        add_line(user, catalog["white"], 1)

        result = cart_service.find_all(db, user.id)

        assert [p["product_name"] for p in result["products"]] == ["Wireless Earbuds", "Cotton T-Shirt"]
        assert [c["option_id"] for c in result["products"][0]["carts"]] == [catalog["white"].id, catalog["black"].id]

    def test_zero_unit_price_counts_as_zero(self, db, user, catalog, add_line):
        add_line(user, catalog["large"], 5)
        add_line(user, catalog["medium"], 1)

        assert cart_service.find_all(db, user.id)["total_price"] == 5000

    def test_only_own_lines(self, db, user, other_user, catalog, add_line):
        add_line(other_user, catalog["white"], 3)

        assert cart_service.find_all(db, user.id)["products"] == []

    def test_reflects_current_option_price(self, db, user, catalog, add_line):
        add_line(user, catalog["white"], 2)
        catalog["white"].price = 7000
        db.commit()

        assert cart_service.find_all(db, user.id)["total_price"] == 14000

    def test_uses_injected_strategy(self, db, user, catalog, add_line):
        class FlatFeeCalculator(PriceCalculator):
            name = "flat-fee"

            def execute(self, lines):
                return PlainSumCalculator().execute(lines) + 2500

        add_line(user, catalog["white"], 1)
        service = CartService(FlatFeeCalculator())

        assert service.find_all(db, user.id)["total_price"] == 12500


class TestAddItems:

    def test_creates_line_in_empty_cart(self, db, user, catalog):
        cart_service.add_items(db, user.id, [insert(catalog["white"], 2)])
        db.commit()

        lines = lines_of(db, user)
        assert len(lines) == 1
        assert lines[0].option_id == catalog["white"].id
        assert lines[0].quantity == 2
        assert cart_service.find_all(db, user.id)["total_price"] == 20000

    def test_increments_existing_line(self, db, user, catalog, add_line):
        add_line(user, catalog["white"], 2)

        cart_service.add_items(db, user.id, [insert(catalog["white"], 3)])
        db.commit()

        lines = lines_of(db, user)
        assert len(lines) == 1
        assert lines[0].quantity == 5

    @pytest.mark.parametrize("q1,q2", [(0, 0), (0, 4), (1, 1), (3, 7), (100, 1)])
    def test_two_adds_accumulate(self, db, user, catalog, q1, q2):
        cart_service.add_items(db, user.id, [insert(catalog["black"], q1)])
        db.commit()
        cart_service.add_items(db, user.id, [insert(catalog["black"], q2)])
        db.commit()

        lines = lines_of(db, user)
        assert len(lines) == 1
        assert lines[0].quantity == q1 + q2

    def test_zero_quantity_creates_zero_line(self, db, user, catalog):
        cart_service.add_items(db, user.id, [insert(catalog["medium"], 0)])
        db.commit()

        lines = lines_of(db, user)
        assert [(l.option_id, l.quantity) for l in lines] == [(catalog["medium"].id, 0)]

    def test_mixed_batch_new_and_existing(self, db, user, catalog, add_line):
        add_line(user, catalog["white"], 1)

        cart_service.add_items(db, user.id, [
            insert(catalog["white"], 1),
            insert(catalog["medium"], 4),
        ])
        db.commit()

        assert [(l.option_id, l.quantity) for l in lines_of(db, user)] == [
            (catalog["white"].id, 2),
            (catalog["medium"].id, 4),
        ]

    def test_does_not_touch_other_users(self, db, user, other_user, catalog, add_line):
        add_line(other_user, catalog["white"], 9)

        cart_service.add_items(db, user.id, [insert(catalog["white"], 1)])
        db.commit()

        assert lines_of(db, other_user)[0].quantity == 9
        assert lines_of(db, user)[0].quantity == 1

    def test_negative_quantity_rejected(self, db, user, catalog):
        with pytest.raises(InvalidArgumentError):
            cart_service.add_items(db, user.id, [
                insert(catalog["white"], 1),
                insert(catalog["black"], -1),
            ])
        db.rollback()

        assert lines_of(db, user) == []

    @pytest.mark.parametrize("q1,q2", [(0, 0), (1, 2), (5, 0)])
    def test_duplicate_option_rejected(self, db, user, catalog, q1, q2):
        with pytest.raises(InvalidArgumentError, match="duplicate"):
            cart_service.add_items(db, user.id, [
                insert(catalog["white"], q1),
                insert(catalog["white"], q2),
            ])
        db.rollback()

        assert lines_of(db, user) == []

    def test_unknown_option_rejects_whole_batch(self, db, user, catalog):
        with pytest.raises(NotFoundError):
            cart_service.add_items(db, user.id, [
                insert(catalog["white"], 1),
                CartInsertRequest(option_id=999999, quantity=1),
            ])
        db.rollback()

        assert lines_of(db, user) == []

    def test_empty_batch_is_noop(self, db, user):
        cart_service.add_items(db, user.id, [])
        assert lines_of(db, user) == []

    @pytest.mark.parametrize("quantity", [MAX_QUANTITY + 1, 2**63])
    def test_quantity_above_column_limit_rejected(self, db, user, catalog, quantity):
        with pytest.raises(InvalidArgumentError, match="exceed"):
            cart_service.add_items(db, user.id, [insert(catalog["white"], quantity)])
        db.rollback()

        assert lines_of(db, user) == []

    def test_quantity_at_column_limit_accepted(self, db, user, catalog):
        cart_service.add_items(db, user.id, [insert(catalog["white"], MAX_QUANTITY)])
        db.commit()

        assert lines_of(db, user)[0].quantity == MAX_QUANTITY

    def test_accumulated_quantity_above_limit_rejects_batch(self, db, user, catalog, add_line):
        add_line(user, catalog["white"], MAX_QUANTITY - 1)

        with pytest.raises(InvalidArgumentError, match="exceed"):
            cart_service.add_items(db, user.id, [
                insert(catalog["medium"], 1),
                insert(catalog["white"], 2),
            ])
        db.rollback()

        assert [(l.option_id, l.quantity) for l in lines_of(db, user)] == [
            (catalog["white"].id, MAX_QUANTITY - 1),
        ]

    def test_adding_zero_refreshes_empty_line(self, db, user, catalog, add_line):
        line = add_line(user, catalog["white"], 0)
        line.updated_at = datetime(2000, 1, 1, tzinfo=timezone.utc)
        db.commit()

        cart_service.add_items(db, user.id, [insert(catalog["white"], 0)])
        db.commit()

        assert cart_service.purge_empty_lines(db, ttl_minutes=60) == 0
        assert [l.quantity for l in lines_of(db, user)] == [0]


class TestUpdateItems:

    def test_sets_absolute_quantity(self, db, user, catalog, add_line):
        line = add_line(user, catalog["white"], 2)

        result = cart_service.update_items(db, user.id, [update(line, 7)])
        db.commit()

        assert lines_of(db, user)[0].quantity == 7
        assert result["total_price"] == 70000
        assert result["carts"] == [{
            "cart_id": line.id,
            "option_id": catalog["white"].id,
            "option_name": "White",
            "quantity": 7,
            "price": 70000,
        }]

    def test_total_covers_updated_lines_only(self, db, user, catalog, add_line):
        white = add_line(user, catalog["white"], 2)
        add_line(user, catalog["medium"], 3)

        result = cart_service.update_items(db, user.id, [update(white, 1)])

        assert result["total_price"] == 10000
        assert len(result["carts"]) == 1

    @pytest.mark.parametrize("quantity", [0, -1, -50])
    def test_non_positive_quantity_rejected(self, db, user, catalog, add_line, quantity):
        line = add_line(user, catalog["white"], 2)

        with pytest.raises(InvalidArgumentError):
            cart_service.update_items(db, user.id, [update(line, quantity)])
        db.rollback()

        assert lines_of(db, user)[0].quantity == 2

    def test_rejection_leaves_earlier_lines_unchanged(self, db, user, catalog, add_line):
        first = add_line(user, catalog["white"], 2)
        second = add_line(user, catalog["black"], 3)

        with pytest.raises(InvalidArgumentError):
            cart_service.update_items(db, user.id, [update(first, 9), update(second, 0)])

        assert first.quantity == 2
        assert second.quantity == 3

    def test_empty_cart_not_found(self, db, user):
        with pytest.raises(NotFoundError, match="empty"):
            cart_service.update_items(db, user.id, [CartUpdateRequest(cart_id=1, quantity=1)])

    def test_unknown_line_not_found(self, db, user, catalog, add_line):
        add_line(user, catalog["white"], 2)

        with pytest.raises(NotFoundError):
            cart_service.update_items(db, user.id, [CartUpdateRequest(cart_id=999999, quantity=1)])

    def test_other_users_line_not_found(self, db, user, other_user, catalog, add_line):
        add_line(user, catalog["white"], 2)
        foreign = add_line(other_user, catalog["black"], 2)

        with pytest.raises(NotFoundError):
            cart_service.update_items(db, user.id, [update(foreign, 5)])
        db.rollback()

        assert lines_of(db, other_user)[0].quantity == 2

    def test_duplicate_line_rejected(self, db, user, catalog, add_line):
        line = add_line(user, catalog["white"], 2)

        with pytest.raises(InvalidArgumentError, match="duplicate"):
            cart_service.update_items(db, user.id, [update(line, 1), update(line, 3)])

    def test_update_does_not_accumulate(self, db, user, catalog, add_line):
        line = add_line(user, catalog["white"], 2)

        cart_service.update_items(db, user.id, [update(line, 4)])
        cart_service.update_items(db, user.id, [update(line, 4)])
        db.commit()

        assert lines_of(db, user)[0].quantity == 4

    @pytest.mark.parametrize("quantity", [MAX_QUANTITY + 1, 2**63])
    def test_quantity_above_column_limit_rejected(self, db, user, catalog, add_line, quantity):
        line = add_line(user, catalog["white"], 2)

        with pytest.raises(InvalidArgumentError, match="exceed"):
            cart_service.update_items(db, user.id, [update(line, quantity)])
        db.rollback()

        assert lines_of(db, user)[0].quantity == 2


class TestDeleteItems:

    def test_deletes_listed_lines(self, db, user, catalog, add_line):
        keep = add_line(user, catalog["white"], 1)
        drop = add_line(user, catalog["black"], 1)

        deleted = cart_service.delete_items(db, user.id, [drop.id])
        db.commit()

        assert deleted == 1
        assert [l.id for l in lines_of(db, user)] == [keep.id]

    def test_missing_ids_ignored(self, db, user, catalog, add_line):
        add_line(user, catalog["white"], 1)

        assert cart_service.delete_items(db, user.id, [424242]) == 0
        assert len(lines_of(db, user)) == 1

    def test_empty_list(self, db, user):
        assert cart_service.delete_items(db, user.id, []) == 0

    def test_other_users_lines_untouched(self, db, user, other_user, catalog, add_line):
        foreign = add_line(other_user, catalog["white"], 1)

        assert cart_service.delete_items(db, user.id, [foreign.id]) == 0
        db.commit()
        assert len(lines_of(db, other_user)) == 1


class TestPurgeEmptyLines:

    def test_removes_only_stale_zero_lines(self, db, user, catalog, add_line):
        stale = add_line(user, catalog["white"], 0)
        fresh = add_line(user, catalog["black"], 0)
        filled = add_line(user, catalog["medium"], 2)
        filled_id, fresh_id = filled.id, fresh.id
        stale.updated_at = datetime(2000, 1, 1, tzinfo=timezone.utc)
        filled.updated_at = datetime(2000, 1, 1, tzinfo=timezone.utc)
        db.commit()

        purged = cart_service.purge_empty_lines(db, ttl_minutes=60)
        db.commit()

        assert purged == 1
        assert sorted(l.id for l in lines_of(db, user)) == sorted([fresh_id, filled_id])
