"""
Cart item fingerprinting

Two add-to-cart requests for the same product with the same customization
must produce the same hash so the second one merges into the first line.
"""
import hashlib
import json
from typing import Any, Dict, List, Optional


def _canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def _canonical_list(items: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    # Selection order in the UI does not change what the customer ordered
    return sorted(items or [], key=_canonical_json)


def normalize_instructions(instructions: Optional[str]) -> str:
    return (instructions or "").strip().lower()


def build_hash_components(
    product_id: str,
    merchant_product_id: str,
    product_size: Optional[str] = None,
    selected_modifiers: Optional[List[Dict[str, Any]]] = None,
    selected_addons: Optional[List[Dict[str, Any]]] = None,
    selected_variation_id: Optional[str] = None,
    special_instructions: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the canonical object that identifies a cart line's customization.

    Quantity, prices snapshots, rider notes and availability are deliberately
    not part of it.
    """
    return {
        "product": product_id,
        "merchantProduct": merchant_product_id,
        "productSize": product_size or None,
        "selectedModifiers": _canonical_list(selected_modifiers),
        "selectedAddons": _canonical_list(selected_addons),
        "selectedVariation": selected_variation_id or None,
        "specialInstructions": normalize_instructions(special_instructions),
    }


def compute_item_hash(**components) -> str:
    """
    Return the MD5 hex digest of the canonical customization object.

    MD5 is only used to spot accidental duplicates, never for security.
    """
    payload = _canonical_json(build_hash_components(**components))
    return hashlib.md5(payload.encode("utf-8")).hexdigest()
