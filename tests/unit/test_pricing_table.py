import pytest

from storefront.errors import UnknownPricingIdError, ValidationError
from storefront.pricing.table import (
    PRICING,
    MaterialOption,
    PricingTable,
    SizeOption,
    calculate_price,
    derive_price,
    price_matrix,
    round_half_up,
)


def test_medium_metal_on_base_50_costs_160():
    assert calculate_price("medium", "metal", 50) == 160
    assert derive_price("medium", "metal", 50) == 160


def test_small_canvas_is_the_base_price():
    assert calculate_price("small", "canvas", 50) == 50


def test_derive_price_defaults_to_table_base_price():
    # base small = 50, large x4, acrylic x1.8 => 360
    assert derive_price("large", "acrylic") == 360


@pytest.mark.parametrize("size_id,material_id", [("xl", "canvas"), ("small", "gold"), ("", "")])
def test_derive_price_is_lenient_on_unknown_ids(size_id, material_id):
    assert derive_price(size_id, material_id, 75) == 75


def test_calculate_price_rejects_unknown_size():
    with pytest.raises(UnknownPricingIdError) as exc:
        calculate_price("xl", "canvas", 50)
    assert exc.value.error == "Invalid size ID: xl"
    assert isinstance(exc.value, ValidationError)


def test_calculate_price_rejects_unknown_material():
    with pytest.raises(UnknownPricingIdError) as exc:
        calculate_price("small", "gold", 50)
    assert exc.value.error == "Invalid material ID: gold"


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2


def test_paper_on_small_rounds_commercially():
    # 42.5 * 0.6 = 25.5 -> 26
    assert calculate_price("small", "paper_matte", 42.5) == 26


def test_price_is_monotonic_in_size_for_every_material():
    order = [s.id for s in sorted(PRICING.sizes, key=lambda s: s.multiplier)]
    for material in PRICING.materials:
        prices = [calculate_price(size_id, material.id, 50) for size_id in order]
        assert prices == sorted(prices)


def test_table_lookups_and_localized_names():
    assert PRICING.find_size("large").dimensions == "60x90"
    assert PRICING.find_size("huge") is None
    assert PRICING.find_material("canvas").name("he") == "קנבס"
    # langue inconnue => anglais
    assert PRICING.find_material("wood").name("fr") == "Wood Print"


def test_base_price_per_size_falls_back_to_small():
    assert PRICING.base_price() == 50
    assert PRICING.base_price("large") == 200
    assert PRICING.base_price("unknown") == 50


def test_table_refuses_duplicate_ids_and_bad_multipliers():
    sizes = [SizeOption("s", "1x1", "1x1", 1.0)]
    materials = [MaterialOption("m", {"en": "M"}, 1.0)]
    with pytest.raises(ValueError):
        PricingTable(sizes * 2, materials, {"small": 1})
    with pytest.raises(ValueError):
        PricingTable(sizes, [MaterialOption("m", {"en": "M"}, 0)], {"small": 1})


def test_price_matrix_covers_every_material_and_size():
    matrix = price_matrix(50)
    assert [row["materialId"] for row in matrix] == [m.id for m in PRICING.materials]
    metal = next(row for row in matrix if row["materialId"] == "metal")
    assert metal["prices"] == {"small": 80, "medium": 160, "large": 320}


def test_to_dict_exposes_options_and_shipping():
    data = PRICING.to_dict("ru")
    assert {s["id"] for s in data["sizes"]} == {"small", "medium", "large"}
    assert next(m for m in data["materials"] if m["id"] == "canvas")["name"] == "Холст"
    assert data["shipping"] == 10
