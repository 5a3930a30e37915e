"""
Domain records: plain data, no behaviour.

Product.column_id is the upsert key. A Sale copies the product name at sale
time instead of referencing the product.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from .time_utils import to_utc_z
from .validation import Name, Price, Value


@dataclass(frozen=True)
class Product:
    column_id: Value
    name: Name
    price: Price
    quantity: Value

    def with_quantity(self, quantity: Value) -> "Product":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        return {
            "column_id": self.column_id.value,
            "name": self.name.value,
            "price": str(self.price),
            "quantity": self.quantity.value,
        }


@dataclass(frozen=True)
class Sale:
    date: datetime
    product_name: Name
    price: Price

    def to_dict(self) -> dict:
        return {
            "date": to_utc_z(self.date),
            "product_name": self.product_name.value,
            "price": str(self.price),
        }
