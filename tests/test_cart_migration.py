from __future__ import annotations

import json
from decimal import Decimal

import pytest

from cityroots.domain.cart import (
    CurrentCartLine,
    LegacyCartLine,
    decode_cart_payload,
    decode_stored_line,
    encode_cart,
)
from cityroots.integrations.cart_persistence import MemoryCartStorage
from cityroots.services.cart_store import CartStore

LEGACY_ENTRY = {
    "plant": {"id": "snake-plant", "name": "Snake Plant", "price": 349, "image": "snake.jpg"},
    "quantity": 2,
}
CURRENT_ENTRY = {
    "product": {"id": "peace-lily", "name": "Peace Lily", "price": 299.5, "inStock": True},
    "quantity": 1,
}


def test_decode_stored_line_tags_both_shapes() -> None:
    assert isinstance(decode_stored_line(LEGACY_ENTRY), LegacyCartLine)
    assert isinstance(decode_stored_line(CURRENT_ENTRY), CurrentCartLine)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "text",
        {"quantity": 1},
        {"product": {"id": "a"}, "quantity": 0},
        {"product": {"id": "a"}, "quantity": "many"},
    ],
)
def test_decode_stored_line_rejects_unknown_entries(raw) -> None:
    assert decode_stored_line(raw) is None


def test_legacy_plant_entries_are_normalized() -> None:
    lines = decode_cart_payload(json.dumps([LEGACY_ENTRY, CURRENT_ENTRY]))

    assert [line.product_id for line in lines] == ["snake-plant", "peace-lily"]
    assert lines[0].quantity == 2
    assert lines[0].product.price == Decimal("349")


def test_encoded_cart_uses_current_shape_only() -> None:
    encoded = encode_cart(decode_cart_payload([LEGACY_ENTRY]))

    assert "plant" not in encoded[0]
    assert encoded[0]["product"]["id"] == "snake-plant"


def test_duplicate_entries_merge_on_load() -> None:
    duplicate = {"product": dict(LEGACY_ENTRY["plant"]), "quantity": 3}

    lines = decode_cart_payload([LEGACY_ENTRY, duplicate])

    assert len(lines) == 1
    assert lines[0].quantity == 5


def test_malformed_entries_are_dropped() -> None:
    lines = decode_cart_payload([{"bogus": True}, CURRENT_ENTRY, {"product": {}, "quantity": 1}])
    assert [line.product_id for line in lines] == ["peace-lily"]


def test_entry_with_badly_typed_fields_does_not_drop_the_cart() -> None:
    storage = MemoryCartStorage()
    broken = {"plant": {**LEGACY_ENTRY["plant"], "id": "fern", "tags": 7}, "quantity": 1}
    storage.set("s", [CURRENT_ENTRY, broken])

    store = CartStore(storage.for_session("s"))

    assert [line.product_id for line in store.lines] == ["peace-lily"]


def test_non_list_payload_is_rejected() -> None:
    with pytest.raises(ValueError):
        decode_cart_payload({"product": {}})


def test_store_rewrites_legacy_cart_on_next_mutation() -> None:
    storage = MemoryCartStorage()
    storage.set("s", [LEGACY_ENTRY])
    store = CartStore(storage.for_session("s"))

    store.update_quantity("snake-plant", 3)

    stored = storage.get("s")
    assert stored == [{"product": store.get_line("snake-plant").product.to_dict(), "quantity": 3}]
