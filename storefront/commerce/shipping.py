"""
Shipping cost lookup by destination.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from storefront.catalog.models import ShippingOption

logger = logging.getLogger(__name__)


class ShippingTable:
    """Destination name -> cost; names match case-insensitively."""

    def __init__(self, options: Optional[Iterable[ShippingOption]] = None) -> None:
        self._options: List[ShippingOption] = list(options or [])

    @classmethod
    def from_costs(cls, costs: Mapping[str, float]) -> "ShippingTable":
        return cls(ShippingOption(id=name, name=name, price=float(cost)) for name, cost in costs.items())

    @property
    def options(self) -> List[ShippingOption]:
        return list(self._options)

    def destinations(self) -> List[str]:
        return [option.name for option in self._options]

    def find(self, destination: Optional[str]) -> Optional[ShippingOption]:
        """Look a destination up by name or option id."""
        if not destination:
            return None
        wanted = destination.strip().casefold()
        for option in self._options:
            if option.name.casefold() == wanted or option.id == destination:
                return option
        return None

    def cost_for(self, destination: Optional[str]) -> float:
        """Shipping cost to `destination`; 0 when it is not served."""
        option = self.find(destination)
        if option is None:
            if destination:
                logger.debug("No shipping option for %r; charging 0", destination)
            return 0.0
        return option.price

    def to_dict(self) -> Dict[str, float]:
        return {option.name: option.price for option in self._options}
