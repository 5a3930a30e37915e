# Overview: Type-keyed object registry used to wire the machine at startup.

"""
Dependency wiring.

A Container maps a key (normally an abstract type) to a factory. resolve()
builds each key at most once and caches the result, so every consumer of a
key shares one instance for the life of the container. Factories receive the
container and resolve their own dependencies from it.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from .repositories import (
    InMemoryProductRepository,
    InMemorySaleRepository,
    ProductRepository,
    SaleRepository,
    SqlProductRepository,
    SqlSaleRepository,
)
from .services.machine import GuestUnlocked
from .services.payment_service import CliPaymentTerminal, PaymentTerminal

logger = logging.getLogger(__name__)

T = TypeVar("T")

STORAGE_SQL = "sql"
STORAGE_MEMORY = "memory"
VALID_STORAGE_BACKENDS = [STORAGE_SQL, STORAGE_MEMORY]


class Container:
    def __init__(self):
        self._factories: dict[Any, Callable[["Container"], Any]] = {}
        self._instances: dict[Any, Any] = {}
        self._resolving: set = set()

    def register(self, key: type[T], factory: Callable[["Container"], T]) -> None:
        self._factories[key] = factory
        self._instances.pop(key, None)

    def instance(self, key: type[T], obj: T) -> None:
        """Register an already-built singleton."""
        self._instances[key] = obj

    def has(self, key) -> bool:
        return key in self._instances or key in self._factories

    def resolve(self, key: type[T]) -> T:
        if key in self._instances:
            return self._instances[key]

        factory = self._factories.get(key)
        if factory is None:
            raise LookupError(f"Nothing registered for {getattr(key, '__name__', key)}")
        if key in self._resolving:
            raise RuntimeError(f"Dependency cycle while resolving {getattr(key, '__name__', key)}")

        self._resolving.add(key)
        try:
            obj = factory(self)
        finally:
            self._resolving.discard(key)

        self._instances[key] = obj
        logger.debug("Resolved %s -> %s", getattr(key, '__name__', key), type(obj).__name__)
        return obj


def build_container(storage: str = STORAGE_SQL, payment_terminal: PaymentTerminal | None = None) -> Container:
    """
    Wire repositories, payment terminal and the initial machine.

    SQL storage needs an active Flask app context (db.session).
    """
    if storage not in VALID_STORAGE_BACKENDS:
        raise ValueError(f"Invalid storage backend: {storage}. Must be one of {VALID_STORAGE_BACKENDS}")

    container = Container()

    if storage == STORAGE_SQL:
        container.register(ProductRepository, lambda c: SqlProductRepository())
        container.register(SaleRepository, lambda c: SqlSaleRepository())
    else:
        container.register(ProductRepository, lambda c: InMemoryProductRepository())
        container.register(SaleRepository, lambda c: InMemorySaleRepository())

    if payment_terminal is not None:
        container.instance(PaymentTerminal, payment_terminal)
    else:
        container.register(PaymentTerminal, lambda c: CliPaymentTerminal())

    container.register(GuestUnlocked, lambda c: GuestUnlocked.new(
        c.resolve(ProductRepository),
        c.resolve(SaleRepository),
        c.resolve(PaymentTerminal),
    ))
    return container
