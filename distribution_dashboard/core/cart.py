# distribution_dashboard/core/cart.py
from collections import OrderedDict
from typing import Dict, List, Sequence

from distribution_dashboard.core.metrics import available_credit


class ShoppingCart:
    """In-memory cart mapping product id to quantity."""

    def __init__(self):
        self._quantities = OrderedDict()

    def add(self, product_id: str, quantity: int = 1) -> int:
        """Add units of a product.

        Returns:
            New quantity of the product in the cart
        """
        if quantity < 1:
            raise ValueError(f"Quantity must be positive, got {quantity}")

        self._quantities[product_id] = self._quantities.get(product_id, 0) + quantity
        return self._quantities[product_id]

    def remove(self, product_id: str) -> int:
        """Remove one unit of a product, dropping it when none remain.

        Returns:
            Remaining quantity of the product in the cart
        """
        current = self._quantities.get(product_id, 0)
        if current > 1:
            self._quantities[product_id] = current - 1
            return current - 1

        self._quantities.pop(product_id, None)
        return 0

    def clear(self):
        self._quantities.clear()

    def quantity(self, product_id: str) -> int:
        return self._quantities.get(product_id, 0)

    @property
    def quantities(self) -> Dict[str, int]:
        """Copy of the product id to quantity mapping."""
        return dict(self._quantities)

    @property
    def count(self) -> int:
        """Total number of units in the cart."""
        return sum(self._quantities.values())

    def is_empty(self) -> bool:
        return not self._quantities

    def lines(self, products: Sequence) -> List[Dict]:
        """Cart lines joined to product records.

        Products missing from the catalogue keep their line with no price.
        """
        by_id = {product.id: product for product in products}
        lines = []

        for product_id, quantity in self._quantities.items():
            product = by_id.get(product_id)
            unit_price = (product.price or 0) if product is not None else 0
            lines.append({
                'product_id': product_id,
                'name': product.name if product is not None else None,
                'quantity': quantity,
                'unit_price': unit_price,
                'subtotal': unit_price * quantity
            })

        return lines

    def total(self, products: Sequence) -> float:
        """Sum of price * quantity over the cart."""
        return sum(line['subtotal'] for line in self.lines(products))

    def can_checkout(self, products: Sequence, retailer) -> bool:
        """Check whether the cart total fits in the retailer's available credit."""
        return self.total(products) <= available_credit(retailer)
