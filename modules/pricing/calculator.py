"""
Pricing Module - Cart Price Calculators
=========================================
Each strategy implements execute(lines) -> total price.
Registry pattern for strategy lookup by name.

A "line" is anything with a `quantity` and an `option` carrying `price`
(a CartLine resolved against its ProductOption).
"""

import logging
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger("shop.pricing")


def line_price(line) -> int:
    """quantity × current unit price of the line's option."""
    return int(line.quantity) * int(line.option.price)


class PriceCalculator:
    """Abstract pricing strategy."""
    name: str = ""

    def execute(self, lines: Optional[Iterable]) -> int:
        raise NotImplementedError


class PlainSumCalculator(PriceCalculator):
    """Sum of quantity × unit price over all lines, no adjustments."""
    name = "plain"

    def execute(self, lines: Optional[Iterable]) -> int:
        if not lines:
            return 0
        return sum(line_price(line) for line in lines)


# ── Registry ──

_CALCULATORS: Dict[str, PriceCalculator] = {}


def register_calculator(calc: PriceCalculator):
    _CALCULATORS[calc.name] = calc


def get_calculator(name: str) -> PriceCalculator:
    """Look up a registered strategy. Raises KeyError for unknown names."""
    try:
        return _CALCULATORS[name]
    except KeyError:
        logger.error(f"Unknown pricing strategy '{name}', available: {get_all_calculator_names()}")
        raise


def get_all_calculator_names() -> List[str]:
    return list(_CALCULATORS.keys())


register_calculator(PlainSumCalculator())
