"""
Repository capabilities consumed by the vending engine.

The engine only sees these interfaces; concrete storage is chosen by the
container (see vending.container). Every repository also exposes
``transaction()``: writes made inside it are applied together or not at all.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from ..entities import Product, Sale
from ..validation import Value


class ProductRepository(ABC):
    @abstractmethod
    def find(self, column_id: Value) -> Product | None:
        ...

    @abstractmethod
    def save(self, product: Product) -> None:
        """Insert, or replace the product with the same column_id."""

    @abstractmethod
    def find_all(self) -> list[Product]:
        ...

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        ...


class SaleRepository(ABC):
    @abstractmethod
    def save(self, sale: Sale) -> None:
        """Append a sale record."""

    @abstractmethod
    def find_all(self) -> list[Sale]:
        ...

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        ...


from .in_memory import InMemoryProductRepository, InMemorySaleRepository  # noqa: E402
from .sql import SqlProductRepository, SqlSaleRepository  # noqa: E402

__all__ = [
    'ProductRepository', 'SaleRepository',
    'InMemoryProductRepository', 'InMemorySaleRepository',
    'SqlProductRepository', 'SqlSaleRepository',
]
