# Overview: Process-lifetime repositories backed by plain lists.

from __future__ import annotations

from contextlib import contextmanager

from . import ProductRepository, SaleRepository
from ..entities import Product, Sale
from ..validation import Value


@contextmanager
def _restore_on_error(items: list):
    snapshot = list(items)
    try:
        yield
    except BaseException:
        items[:] = snapshot
        raise


class InMemoryProductRepository(ProductRepository):
    def __init__(self, products: list[Product] | None = None):
        self._products: list[Product] = list(products or [])

    def find(self, column_id: Value) -> Product | None:
        for product in self._products:
            if product.column_id == column_id:
                return product
        return None

    def save(self, product: Product) -> None:
        for index, existing in enumerate(self._products):
            if existing.column_id == product.column_id:
                self._products[index] = product
                return
        self._products.append(product)

    def find_all(self) -> list[Product]:
        return list(self._products)

    def transaction(self):
        return _restore_on_error(self._products)


class InMemorySaleRepository(SaleRepository):
    def __init__(self):
        self._sales: list[Sale] = []

    def save(self, sale: Sale) -> None:
        self._sales.append(sale)

    def find_all(self) -> list[Sale]:
        return list(self._sales)

    def transaction(self):
        return _restore_on_error(self._sales)
