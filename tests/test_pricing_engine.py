"""
Pricing engine tests: dispatch on each price model, cart quotes and the
documented pricing scenarios.
"""
import pytest

from catalog_pricing.engine import MinimumQuantityError, ProductNotFoundError, PricingEngine
from catalog_pricing.engine.models import CartLineItem, PriceModel, Product


def test_scenario_gradual_between_tiers(engine, tiered_product, models):
    result = engine.calculate(tiered_product, 25, models["gradual"])

    assert result.current_tier.min_quantity == 10
    assert result.price == 8.00
    assert result.percentage == 20
    assert result.next_tier_hint.quantity_needed == 25
    assert result.next_tier_hint.potential_savings == pytest.approx(2.00)


def test_scenario_legacy_wholesale_fields(engine, legacy_product, models):
    result = engine.calculate(legacy_product, 20, models["simple"])

    assert result.price == 7.00
    assert result.percentage == 30
    assert result.current_tier.tier_name == "Atacado Simples"


def test_scenario_cart_total_mode(engine, models):
    """Two lines of 8 reach a cart minimum of 15 together."""
    meia = Product(id="meia", name="Meia", retail_price=5.0, wholesale_price=4.0, min_wholesale_qty=12)
    calca = Product(id="calca", name="Calça", retail_price=10.0, wholesale_price=7.0, min_wholesale_qty=20)

    quote = engine.quote_cart(
        [CartLineItem(product=meia, quantity=8), CartLineItem(product=calca, quantity=8)],
        models["cart"],
    )

    prices = {q.product_id: q.result.price for q in quote.lines}
    assert prices == {"meia": 4.0, "calca": 7.0}
    assert all(q.result.current_tier.tier_name == "Atacado" for q in quote.lines)
    assert quote.total == pytest.approx(88.0)


def test_cart_total_mode_below_threshold(engine, legacy_product, models):
    result = engine.calculate(legacy_product, 8, models["cart"], cart_total_quantity=10)

    assert result.price == 10.0
    assert result.percentage == 0
    assert result.next_tier_hint.quantity_needed == 5
    assert result.next_tier_hint.potential_savings == pytest.approx(3.0)


def test_cart_total_mode_defaults_to_line_quantity(engine, legacy_product, models):
    assert engine.calculate(legacy_product, 15, models["cart"]).price == 7.0
    assert engine.calculate(legacy_product, 14, models["cart"]).price == 10.0


def test_cart_total_mode_uses_entry_tier_price(engine, tiered_product, models):
    result = engine.calculate(tiered_product, 3, models["cart"], cart_total_quantity=20)
    assert result.price == 8.00


def test_scenario_no_tiers_no_legacy(engine, plain_product, models):
    result = engine.calculate(plain_product, 5, models["gradual"])

    assert result.price == plain_product.retail_price
    assert result.percentage == 0
    assert result.next_tier_hint is None
    assert result.current_tier.tier_name == "Varejo"


def test_retail_only_ignores_tiers(engine, tiered_product, models):
    result = engine.calculate(tiered_product, 100, models["retail"])

    assert result.price == 10.0
    assert result.percentage == 0
    assert result.next_tier_hint is None
    assert not result.is_wholesale


def test_unknown_model_falls_back_to_retail(engine, tiered_product):
    price_model = PriceModel(store_id="s", price_model="flash_sale")
    result = engine.calculate(tiered_product, 100, price_model)

    assert result.price == 10.0
    assert result.percentage == 0
    assert result.warnings, "Unknown model should be reported as a warning"


def test_simple_per_item_uses_line_quantity(engine, legacy_product, models):
    assert engine.calculate(legacy_product, 19, models["simple"], cart_total_quantity=100).price == 10.0
    assert engine.calculate(legacy_product, 20, models["simple"]).price == 7.0


def test_idempotent(engine, tiered_product, models):
    first = engine.calculate(tiered_product, 25, models["gradual"])
    second = engine.calculate(tiered_product, 25, models["gradual"])
    assert first == second


def test_inputs_not_mutated(engine, tiered_product, models):
    before = [(t.tier_name, t.min_quantity, t.price) for t in tiered_product.price_tiers]
    engine.calculate(tiered_product, 60, models["gradual"])
    assert [(t.tier_name, t.min_quantity, t.price) for t in tiered_product.price_tiers] == before


@pytest.mark.parametrize("mode", ["retail", "simple", "gradual", "cart"])
def test_price_never_increases_with_quantity(engine, tiered_product, models, mode):
    previous = None
    for qty in range(1, 120):
        price = engine.calculate(tiered_product, qty, models[mode]).price
        if previous is not None:
            assert price <= previous, f"{mode}: price rose from {previous} to {price} at qty {qty}"
        previous = price


@pytest.mark.parametrize("mode", ["retail", "simple", "gradual", "cart", "wholesale"])
def test_result_always_well_formed(engine, models, mode):
    product = Product(id="p", name="p", retail_price=3.0, wholesale_price=9.0, min_wholesale_qty=0)
    result = engine.calculate(product, 10, models[mode])
    assert result.price > 0
    assert result.percentage >= 0
    assert result.current_tier.tier_name


def test_wholesale_only_rejects_below_minimum(engine, tiered_product, models):
    with pytest.raises(MinimumQuantityError) as excinfo:
        engine.calculate(tiered_product, 3, models["wholesale"])

    assert excinfo.value.required == 6
    assert excinfo.value.quantity_needed == 3
    assert excinfo.value.product_id == "camiseta"


def test_wholesale_only_flags_when_not_enforced(engine, tiered_product, models):
    result = engine.calculate(tiered_product, 3, models["wholesale"], enforce_minimum=False)

    assert result.minimum_met is False
    assert result.warnings
    assert result.price == 8.00


def test_wholesale_only_at_minimum(engine, tiered_product, plain_product, models):
    result = engine.calculate(tiered_product, 6, models["wholesale"])
    assert result.minimum_met is True
    assert result.price == 8.00
    assert result.current_tier.tier_name == "Atacado"
    assert result.percentage == 20

    # Product without wholesale data sells at its listed price
    plain = engine.calculate(plain_product, 6, models["wholesale"])
    assert plain.price == 25.0
    assert plain.percentage == 0


def test_wholesale_only_climbs_ladder(engine, tiered_product, models):
    result = engine.calculate(tiered_product, 50, models["wholesale"])
    assert result.price == 6.00
    assert result.current_tier.tier_name == "Atacado"


def test_wholesale_only_hint_skips_entry_tier(engine, tiered_product, models):
    # Between the store minimum and the first tier the line already pays 8.00
    result = engine.calculate(tiered_product, 7, models["wholesale"])

    assert result.price == 8.00
    assert result.next_tier_hint is not None
    assert result.next_tier_hint.next_tier_name == "Atacado"
    assert result.next_tier_hint.quantity_needed == 43
    assert result.next_tier_hint.potential_savings == pytest.approx(2.00)


def test_check_minimum_quantity_only_for_wholesale_only(engine, models):
    engine.check_minimum_quantity(1, models["simple"])
    engine.check_minimum_quantity(6, models["wholesale"])
    with pytest.raises(MinimumQuantityError):
        engine.check_minimum_quantity(5, models["wholesale"])


def test_retail_snapshot_used_as_reference(engine, tiered_product, models):
    result = engine.calculate(tiered_product, 25, models["gradual"], retail_price=16.0)
    assert result.retail_price == 16.0
    assert result.price == 8.00
    assert result.percentage == 50


def test_result_totals(engine, tiered_product, models):
    result = engine.calculate(tiered_product, 25, models["gradual"])
    assert result.total == pytest.approx(200.0)
    assert result.savings == pytest.approx(50.0)
    assert result.is_wholesale


def test_trace_records_resolution(engine, tiered_product, models):
    result = engine.calculate(tiered_product, 25, models["gradual"])
    steps = [t.step for t in result.trace]
    assert "Price Model" in steps
    assert "Tier Match" in steps
    assert "Next Tier" in steps
    assert "Atacarejo" in result.get_trace_text()


def test_quote_cart_blocks_on_unmet_minimum(engine, tiered_product, plain_product, models):
    quote = engine.quote_cart(
        [CartLineItem(product=tiered_product, quantity=10), CartLineItem(product=plain_product, quantity=2)],
        models["wholesale"],
    )

    assert quote.checkout_blocked
    assert len(quote.warnings) == 1
    assert "Boné" in quote.warnings[0]


def test_quote_cart_totals(engine, tiered_product, legacy_product, models):
    quote = engine.quote_cart(
        [CartLineItem(product=tiered_product, quantity=10), CartLineItem(product=legacy_product, quantity=5)],
        models["gradual"],
    )

    assert quote.total_items == 15
    assert quote.total == pytest.approx(10 * 8.0 + 5 * 10.0)
    assert quote.retail_total == pytest.approx(150.0)
    assert quote.savings == pytest.approx(20.0)
    assert not quote.checkout_blocked

    summary = quote.to_summary_dict()
    assert summary["lines"][0]["tier_name"] == "Atacarejo"
    assert summary["lines"][1]["tier_name"] == "Varejo"


def test_cart_line_snapshot_survives_quantity_change(tiered_product):
    line = CartLineItem(product=tiered_product, quantity=2, original_price=9.5)
    updated = line.with_quantity(12)

    assert updated.quantity == 12
    assert updated.original_price == 9.5
    assert line.quantity == 2


def test_cart_line_rejects_zero_quantity(tiered_product):
    with pytest.raises(ValueError):
        CartLineItem(product=tiered_product, quantity=0)


def test_calculate_for_requires_known_product(models):
    class Provider:
        def get_product(self, product_id):
            return None

        def get_price_model(self, store_id):
            return models["gradual"]

    engine = PricingEngine(provider=Provider())
    with pytest.raises(ProductNotFoundError):
        engine.calculate_for("s-gradual", "missing", 1)
