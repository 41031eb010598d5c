import pytest

from storefront.errors import InvalidOrderError, PriceMismatchError
from storefront.payments.verifier import check_client_amount, verify

PRICES = {"1": 50.0, "2": 50.0}


def _item(product_id="1", size_id="medium", material_id="metal", quantity=1, **extra):
    return {"productId": product_id, "sizeId": size_id, "materialId": material_id, "quantity": quantity, **extra}


def test_single_item_total_includes_shipping():
    calc = verify([_item()], PRICES)
    assert calc.ok
    assert calc.subtotal == 160
    assert calc.shipping == 10
    assert calc.total == 170
    assert calc.per_item[0].calculated_price == 160


def test_client_supplied_price_is_ignored():
    calc = verify([_item(price=1)], PRICES)
    assert calc.total == 170


def test_snake_case_keys_are_accepted():
    calc = verify([{"product_id": "2", "size_id": "small", "material_id": "canvas", "quantity": 2}], PRICES)
    assert calc.subtotal == 100


def test_errors_are_collected_per_item():
    calc = verify(
        [
            _item(product_id="999"),
            _item(size_id="xl"),
            _item(material_id="gold"),
            _item(quantity=0),
            _item(quantity=11),
            _item(quantity="2"),
            _item(product_id="2", size_id="small", material_id="canvas"),
        ],
        PRICES,
    )
    assert calc.errors == [
        "Invalid product ID: 999",
        "Invalid size ID: xl",
        "Invalid material ID: gold",
        "Invalid quantity for product 1",
        "Invalid quantity for product 1",
        "Invalid quantity for product 1",
    ]
    # la ligne valide est tout de même calculée
    assert calc.subtotal == 50


def test_total_item_limit_stops_processing():
    calc = verify([_item(quantity=10), _item(product_id="2", quantity=10), _item(quantity=1, size_id="small")], PRICES)
    assert calc.errors == ["Too many items in order (max 20)"]
    assert len(calc.per_item) == 2


def test_inactive_or_missing_products_are_invalid():
    calc = verify([_item(product_id="1")], {})
    assert calc.errors == ["Invalid product ID: 1"]


def test_check_client_amount_accepts_within_tolerance():
    calc = verify([_item()], PRICES)
    assert check_client_amount(calc, 170) == 170
    assert check_client_amount(calc, 170.01) == 170
    assert check_client_amount(calc, 169.99) == 170


def test_check_client_amount_rejects_mismatch_with_server_total():
    calc = verify([_item()], PRICES)
    with pytest.raises(PriceMismatchError) as exc:
        check_client_amount(calc, 160.05)
    body = exc.value.to_dict()
    assert body["serverTotal"] == 170
    assert body["error"] == "Price verification failed. Please refresh and try again."
    assert exc.value.status_code == 400


def test_check_client_amount_rejects_item_errors_first():
    calc = verify([_item(product_id="999")], PRICES)
    with pytest.raises(InvalidOrderError) as exc:
        check_client_amount(calc, calc.total)
    assert exc.value.to_dict() == {"error": "Invalid order", "details": ["Invalid product ID: 999"]}


def test_to_dict_is_camel_case():
    data = verify([_item()], PRICES).to_dict()
    assert data["perItem"][0] == {
        "productId": "1", "sizeId": "medium", "materialId": "metal", "calculatedPrice": 160, "quantity": 1,
    }
