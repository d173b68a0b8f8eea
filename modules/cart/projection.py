"""
Cart Module - Response Projection
===================================
Turns flat cart lines into the shapes returned to callers.
"""

from typing import Dict, List, Sequence

from modules.pricing.calculator import line_price


def to_cart_products(lines: Sequence) -> List[dict]:
    """
    Group lines by product, keeping the order in which each product first
    appears in `lines`.

    [{"id", "product_name", "carts": [{"id", "option_id", "option", "quantity", "price"}]}]
    """
    groups: Dict[int, dict] = {}
    for line in lines or []:
        option = line.option
        product = option.product
        group = groups.get(product.id)
        if group is None:
            group = {"id": product.id, "product_name": product.name, "carts": []}
            groups[product.id] = group
        group["carts"].append({
            "id": line.id,
            "option_id": option.id,
            "option": {
                "id": option.id,
                "option_name": option.name,
                "price": option.price,
            },
            "quantity": line.quantity,
            "price": line_price(line),
        })
    return list(groups.values())


def to_updated_carts(lines: Sequence) -> List[dict]:
    """Flat per-line view for update results."""
    return [
        {
            "cart_id": line.id,
            "option_id": line.option.id,
            "option_name": line.option.name,
            "quantity": line.quantity,
            "price": line_price(line),
        }
        for line in lines or []
    ]
