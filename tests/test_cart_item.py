"""
Tests for CartItem
"""

from decimal import Decimal

import pytest

from shoppingcart.domain.buyable import ProductBuyable
from shoppingcart.domain.cart_item import CartItem
from shoppingcart.domain.errors import InvalidInput, ModelResolutionFailure
from shoppingcart.domain.money import Money
from shoppingcart.services.model_resolver import ModelResolver


def make_item(**overrides) -> CartItem:
    attrs = {
        "product_id": "sku-1",
        "name": "Widget",
        "item_type": "product",
        "price": Money(1000, "USD"),
        "uri": "/widgets/1",
        "options": {},
    }
    attrs.update(overrides)
    return CartItem.from_attributes(**attrs)


class TestConstruction:
    def test_valid_attributes(self):
        item = make_item(options={"size": "L"})

        assert item.id == "sku-1"
        assert item.name == "Widget"
        assert item.type == "product"
        assert item.qty == 1
        assert item.tax_rate == Decimal(0)
        assert item.options == {"size": "L"}
        assert item.model_type is None

    def test_zero_price_is_allowed(self):
        assert make_item(price=Money(0, "USD")).get_total() == Money(0, "USD")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"product_id": ""},
            {"product_id": None},
            {"name": ""},
            {"name": "   "},
            {"item_type": ""},
            {"item_type": None},
            {"price": Money(-1, "USD")},
            {"price": None},
            {"options": {"size": ["L", "XL"]}},
        ],
    )
    def test_invalid_attributes_raise(self, overrides):
        with pytest.raises(InvalidInput):
            make_item(**overrides)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            make_item(name="")


class TestRowId:
    def test_row_id_ignores_option_order(self):
        a = make_item(options={"a": 1, "b": 2})
        b = make_item(options={"b": 2, "a": 1})

        assert a.row_id == b.row_id

    def test_row_id_depends_on_id_and_options(self):
        base = make_item(options={"color": "red"})

        assert base.row_id != make_item(options={"color": "blue"}).row_id
        assert base.row_id != make_item(product_id="sku-2", options={"color": "red"}).row_id

    def test_row_id_is_md5_hex(self):
        row_id = make_item().row_id

        assert len(row_id) == 32
        int(row_id, 16)

    def test_update_item_keeps_row_id(self):
        item = make_item(options={"size": "M"})
        original = item.row_id

        item.update_item(5, {"size": "XL"})

        assert item.qty == 5
        assert item.options == {"size": "XL"}
        assert item.row_id == original
        assert item.row_id != CartItem.generate_row_id("sku-1", {"size": "XL"})


class TestQuantityAndTaxRate:
    def test_set_quantity_accepts_numeric_string(self):
        assert make_item().set_quantity("3").qty == 3

    @pytest.mark.parametrize("qty", [None, "", 0, "abc", -2, 1.5, True])
    def test_set_quantity_rejects_invalid(self, qty):
        with pytest.raises(InvalidInput):
            make_item().set_quantity(qty)

    def test_set_tax_rate(self):
        item = make_item().set_tax_rate("8.75")

        assert item.tax_rate == Decimal("8.75")

    def test_zero_tax_rate_is_valid(self):
        assert make_item().set_tax_rate(0).get_tax() == Money(0, "USD")

    @pytest.mark.parametrize("rate", [None, "", "ten", -1])
    def test_set_tax_rate_rejects_invalid(self, rate):
        with pytest.raises(InvalidInput):
            make_item().set_tax_rate(rate)


class TestMoney:
    def test_widget_scenario(self):
        item = make_item()
        item.set_quantity(2)
        item.set_tax_rate(10)

        assert item.get_price() == Money(1000, "USD")
        assert item.get_subtotal() == Money(2000, "USD")
        assert item.get_tax() == Money(100, "USD")
        assert item.get_tax_total() == Money(200, "USD")
        assert item.get_price_with_tax() == Money(1100, "USD")
        assert item.get_total() == Money(2200, "USD")

    @pytest.mark.parametrize("amount", [0, 1, 99, 1999, 123457])
    @pytest.mark.parametrize("qty", [1, 3, 17])
    @pytest.mark.parametrize("rate", ["0", "7", "8.75", "19.6", "23"])
    def test_total_is_subtotal_plus_tax_total(self, amount, qty, rate):
        item = make_item(price=Money(amount, "USD"))
        item.set_quantity(qty)
        item.set_tax_rate(rate)

        assert item.get_total() == item.get_subtotal().add(item.get_tax_total())

    def test_tax_is_rounded_per_unit(self):
        item = make_item(price=Money(99, "USD"))
        item.set_quantity(3)
        item.set_tax_rate("8.75")

        # 0.99 * 8.75% = 0.0866 -> 0.09 za sztuke
        assert item.get_tax() == Money(9, "USD")
        assert item.get_tax_total() == Money(27, "USD")
        assert item.get_total() == Money(324, "USD")

    def test_to_array(self):
        item = make_item(options={"size": "L"})
        item.set_quantity(2)
        item.set_tax_rate(10)

        data = item.to_array()

        assert data["row_id"] == item.row_id
        assert data["qty"] == 2
        assert data["uri"] == "/widgets/1"
        assert data["options"] == {"size": "L"}
        assert data["value"] == {
            "currency": "USD",
            "price": "10.00",
            "subtotal": "20.00",
            "taxes": {"tax": "1.00", "rate": "10", "total": "2.00"},
            "total": "22.00",
        }


class TestBuyableAndModel:
    def test_from_buyable(self):
        product = ProductBuyable(id=7, name="Keyboard", price=Decimal("199.99"))

        item = CartItem.from_buyable(product, {"layout": "PL"})

        assert item.id == 7
        assert item.name == "Keyboard"
        assert item.type == "product"
        assert item.price == Money(19999, "USD")
        assert item.uri == "/products/7"
        assert item.options == {"layout": "PL"}
        assert item.model_type == "product"
        assert item.model_id == 7

    def test_resolve_model(self):
        product = ProductBuyable(id=7, name="Keyboard", price=Decimal("199.99"))
        resolver = ModelResolver({"product": lambda model_id: product if model_id == 7 else None})

        item = CartItem.from_buyable(product)

        assert item.resolve_model(resolver) is product

    def test_resolve_model_without_association_returns_none(self):
        assert make_item().resolve_model(ModelResolver()) is None

    def test_resolve_model_swallows_failures(self):
        product = ProductBuyable(id=7, name="Keyboard", price=Decimal("1"))
        item = CartItem.from_buyable(product)

        def broken_loader(model_id):
            raise ConnectionError("product-service down")

        assert item.resolve_model(ModelResolver()) is None
        assert item.resolve_model(ModelResolver({"product": lambda model_id: None})) is None
        assert item.resolve_model(ModelResolver({"product": broken_loader})) is None

    def test_resolver_raises_for_unknown_tag(self):
        with pytest.raises(ModelResolutionFailure):
            ModelResolver().resolve("product", 1)


def test_snapshot_round_trip_keeps_stale_row_id():
    product = ProductBuyable(id=3, name="Monitor", price=Decimal("899.00"))
    item = CartItem.from_buyable(product, {"b": 2, "a": 1})
    item.set_quantity(4)
    item.set_tax_rate("8.75")
    item.update_item(4, {"a": 9})

    restored = CartItem.from_snapshot(item.to_snapshot())

    assert restored.row_id == item.row_id
    assert restored.options == {"a": 9}
    assert restored.qty == 4
    assert restored.tax_rate == Decimal("8.75")
    assert restored.model_type == "product"
    assert restored.model_id == 3
    assert restored.to_array() == item.to_array()


def test_update_item_rejects_nested_options():
    item = make_item(options={"size": "M"})

    with pytest.raises(InvalidInput):
        item.update_item(3, {"size": {"eu": 42}})

    assert item.qty == 1
    assert item.options == {"size": "M"}


def test_from_snapshot_reads_any_stored_options():
    item = make_item(options={"size": "M"})
    snapshot = item.to_snapshot().model_copy(update={"options": {"size": ["L", "XL"]}})

    restored = CartItem.from_snapshot(snapshot)

    assert restored.options == {"size": ["L", "XL"]}
    assert restored.row_id == item.row_id
