from foodhub.utils.item_hash import build_hash_components, compute_item_hash, normalize_instructions

BASE = dict(
    product_id="product-1",
    merchant_product_id="listing-1",
    product_size="medium",
    selected_modifiers=[
        {"groupId": "sauce", "optionId": "bbq", "name": "BBQ", "price": 0.5},
        {"groupId": "cheese", "optionId": "cheddar", "name": "Cheddar", "price": 1.0},
    ],
    selected_addons=[{"id": "bacon", "name": "Bacon", "price": 2, "quantity": 1}],
    selected_variation_id=None,
    special_instructions="No onions",
)


def with_changes(**changes):
    fields = dict(BASE)
    fields.update(changes)
    return fields


def test_hash_is_md5_hex_digest():
    item_hash = compute_item_hash(**BASE)
    assert len(item_hash) == 32
    int(item_hash, 16)


def test_hash_ignores_modifier_order():
    reordered = with_changes(selected_modifiers=list(reversed(BASE["selected_modifiers"])))
    assert compute_item_hash(**reordered) == compute_item_hash(**BASE)


def test_hash_ignores_key_order_inside_selections():
    shuffled = with_changes(selected_modifiers=[
        {"price": 0.5, "name": "BBQ", "optionId": "bbq", "groupId": "sauce"},
        {"price": 1.0, "optionId": "cheddar", "groupId": "cheese", "name": "Cheddar"},
    ])
    assert compute_item_hash(**shuffled) == compute_item_hash(**BASE)


def test_hash_ignores_addon_order():
    two_addons = [
        {"id": "bacon", "name": "Bacon", "price": 2, "quantity": 1},
        {"id": "egg", "name": "Egg", "price": 1, "quantity": 2},
    ]
    first = compute_item_hash(**with_changes(selected_addons=two_addons))
    second = compute_item_hash(**with_changes(selected_addons=list(reversed(two_addons))))
    assert first == second


def test_instructions_are_trimmed_and_case_folded():
    assert normalize_instructions("  No Onions ") == "no onions"
    assert normalize_instructions(None) == ""
    assert compute_item_hash(**with_changes(special_instructions="  NO ONIONS  ")) == compute_item_hash(**BASE)


def test_missing_optional_fields_use_canonical_defaults():
    components = build_hash_components(product_id="product-1", merchant_product_id="listing-1")
    assert components == {
        "product": "product-1",
        "merchantProduct": "listing-1",
        "productSize": None,
        "selectedModifiers": [],
        "selectedAddons": [],
        "selectedVariation": None,
        "specialInstructions": "",
    }


def test_empty_lists_hash_like_missing_lists():
    explicit = compute_item_hash(product_id="p", merchant_product_id="m", selected_modifiers=[], selected_addons=[])
    implicit = compute_item_hash(product_id="p", merchant_product_id="m")
    assert explicit == implicit


def test_hash_changes_with_customization():
    original = compute_item_hash(**BASE)
    variants = [
        with_changes(product_size="large"),
        with_changes(selected_variation_id="variation-2"),
        with_changes(special_instructions="extra onions"),
        with_changes(selected_modifiers=[
            {"groupId": "sauce", "optionId": "bbq", "name": "BBQ", "price": 0.75},
            {"groupId": "cheese", "optionId": "cheddar", "name": "Cheddar", "price": 1.0},
        ]),
        with_changes(selected_modifiers=[
            {"groupId": "sauce", "optionId": "ketchup", "name": "BBQ", "price": 0.5},
            {"groupId": "cheese", "optionId": "cheddar", "name": "Cheddar", "price": 1.0},
        ]),
        with_changes(selected_addons=[{"id": "bacon", "name": "Bacon", "price": 3, "quantity": 1}]),
        with_changes(selected_addons=[{"id": "avocado", "name": "Bacon", "price": 2, "quantity": 1}]),
    ]
    for fields in variants:
        assert compute_item_hash(**fields) != original, fields


def test_hash_identifies_product_and_listing():
    assert compute_item_hash(**with_changes(product_id="product-2")) != compute_item_hash(**BASE)
    assert compute_item_hash(**with_changes(merchant_product_id="listing-2")) != compute_item_hash(**BASE)
