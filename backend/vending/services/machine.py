# Overview: The vending machine engine, one class per (role, lock) state.

"""
Vending Machine Engine

A machine is always exactly one of six state classes:

    GuestUnlocked   GuestLocked
    AdminUnlocked   AdminLocked
    SupplierUnlocked SupplierLocked

Operations exist only on the classes where they are legal, so an illegal
call (a supplier buying, a guest locking) is an AttributeError at runtime and
a type error for a static checker. No method inspects a role or lock flag to
decide whether it may run.

Transitions (login, logout, lock, unlock) consume the receiving object: its
capabilities move to the returned object and the old one raises
StaleMachineError from then on. Lock status survives login and logout.

Commerce:
- buy() is only on GuestUnlocked.
- supply_product() is only on SupplierUnlocked.
- list_sales_report() is on both admin states.
- look_up() is on every state.
"""
from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, TypeVar

from ..entities import Product, Sale
from ..errors import InsufficientStockError, ProductNotFoundError, PurchaseError, StaleMachineError
from ..repositories import ProductRepository, SaleRepository
from ..states import LockStatus, Role
from ..time_utils import utcnow
from ..validation import Name, Password, Price, ValidationError, Value
from .auth_service import authenticate
from .payment_service import PaymentTerminal, collect_payment

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound="VendingMachine")


class _MachineCore:
    """Capabilities shared by every state of one machine."""
    __slots__ = ("product_repository", "sale_repository", "payment_terminal")

    def __init__(
        self,
        product_repository: ProductRepository,
        sale_repository: SaleRepository,
        payment_terminal: PaymentTerminal,
    ):
        self.product_repository = product_repository
        self.sale_repository = sale_repository
        self.payment_terminal = payment_terminal


class VendingMachine:
    """Base for the six state classes. Not constructed directly."""
    __slots__ = ("_core",)

    role: ClassVar[Role]
    lock_status: ClassVar[LockStatus]

    def __init__(self, core: _MachineCore):
        self._core: _MachineCore | None = core

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} cannot be copied; transitions move it forward")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} cannot be copied; transitions move it forward")

    def __repr__(self) -> str:
        suffix = " (consumed)" if self._core is None else ""
        return f"<{type(self).__name__}{suffix}>"

    @property
    def state(self) -> tuple[Role, LockStatus]:
        return self.role, self.lock_status

    @property
    def is_consumed(self) -> bool:
        return self._core is None

    def _capabilities(self) -> _MachineCore:
        if self._core is None:
            raise StaleMachineError(
                f"{type(self).__name__} was consumed by an earlier transition",
                details={"state": type(self).__name__},
            )
        return self._core

    def _become(self, target: type[_M]) -> _M:
        core = self._capabilities()
        self._core = None
        logger.debug("Machine transition %s -> %s", type(self).__name__, target.__name__)
        return target(core)

    def look_up(self) -> list[Product]:
        """List every product. Browsing is allowed in all states."""
        return self._capabilities().product_repository.find_all()


class AuthOutcome(str, Enum):
    SUCCESS_ADMIN = "SUCCESS_ADMIN"
    SUCCESS_SUPPLIER = "SUCCESS_SUPPLIER"
    FAILURE = "FAILURE"


@dataclass(frozen=True)
class AuthResult:
    outcome: AuthOutcome
    machine: VendingMachine

    @property
    def succeeded(self) -> bool:
        return self.outcome is not AuthOutcome.FAILURE


class _Guest(VendingMachine):
    __slots__ = ()

    def _login(self, username: Name, password: Password, admin_state, supplier_state) -> AuthResult:
        self._capabilities()
        role = authenticate(username, password)
        if not role.is_authenticated:
            logger.info("Login failed for %r", username.value)
            return AuthResult(AuthOutcome.FAILURE, self)

        if role is Role.ADMIN:
            logger.info("Administrator logged in (%s)", self.lock_status.value)
            return AuthResult(AuthOutcome.SUCCESS_ADMIN, self._become(admin_state))

        logger.info("Supplier logged in (%s)", self.lock_status.value)
        return AuthResult(AuthOutcome.SUCCESS_SUPPLIER, self._become(supplier_state))


class _Admin(VendingMachine):
    __slots__ = ()

    def list_sales_report(self) -> list[Sale]:
        return self._capabilities().sale_repository.find_all()


class GuestUnlocked(_Guest):
    __slots__ = ()
    role = Role.GUEST
    lock_status = LockStatus.UNLOCKED

    @classmethod
    def new(
        cls,
        product_repository: ProductRepository,
        sale_repository: SaleRepository,
        payment_terminal: PaymentTerminal,
    ) -> "GuestUnlocked":
        """The only way to create a machine: a guest session on an unlocked machine."""
        return cls(_MachineCore(product_repository, sale_repository, payment_terminal))

    def login(self, username: Name, password: Password) -> AuthResult:
        return self._login(username, password, AdminUnlocked, SupplierUnlocked)

    def buy(self, column_id: Value, qty: Value) -> Product:
        """
        Sell ``qty`` units from column ``column_id``.

        Blocks in the payment loop until the total is paid. The stock update
        and the sale record are persisted as one unit. Returns the product as
        it is after the sale.

        Raises:
            ProductNotFoundError: no product in that column
            InsufficientStockError: the sale would not leave at least one unit
            PurchaseError: the total would exceed the largest valid price
        """
        core = self._capabilities()

        product = core.product_repository.find(column_id)
        if product is None:
            raise ProductNotFoundError("Product not found", details={"column_id": column_id.value})

        try:
            total_price = Price.parse_float(product.price.value * qty.value)
        except ValidationError:
            raise PurchaseError(
                "Total price is out of range",
                details={"column_id": column_id.value, "requested_quantity": qty.value},
            )

        try:
            new_qty = Value.parse_int(product.quantity.value - qty.value)
        except ValidationError:
            raise InsufficientStockError(
                "Insufficient quantity in stock",
                details={
                    "column_id": column_id.value,
                    "requested_quantity": qty.value,
                    "on_hand": product.quantity.value,
                },
            )

        receipt = collect_payment(core.payment_terminal, total_price)

        bought_product = product.with_quantity(new_qty)
        sale = Sale(date=utcnow(), product_name=product.name, price=total_price)

        with ExitStack() as stack:
            stack.enter_context(core.product_repository.transaction())
            stack.enter_context(core.sale_repository.transaction())
            core.product_repository.save(bought_product)
            core.sale_repository.save(sale)

        logger.info(
            "Sold %d x %s from column %d for %s, paid %s, change %s (%d left)",
            qty.value, product.name, column_id.value, total_price,
            receipt.amount_paid, receipt.change, new_qty.value,
        )
        return bought_product


class GuestLocked(_Guest):
    __slots__ = ()
    role = Role.GUEST
    lock_status = LockStatus.LOCKED

    def login(self, username: Name, password: Password) -> AuthResult:
        return self._login(username, password, AdminLocked, SupplierLocked)


class AdminUnlocked(_Admin):
    __slots__ = ()
    role = Role.ADMIN
    lock_status = LockStatus.UNLOCKED

    def logout(self) -> GuestUnlocked:
        return self._become(GuestUnlocked)

    def lock(self) -> "AdminLocked":
        logger.info("Machine locked for maintenance")
        return self._become(AdminLocked)


class AdminLocked(_Admin):
    __slots__ = ()
    role = Role.ADMIN
    lock_status = LockStatus.LOCKED

    def logout(self) -> GuestLocked:
        return self._become(GuestLocked)

    def unlock(self) -> AdminUnlocked:
        logger.info("Machine unlocked")
        return self._become(AdminUnlocked)


class SupplierUnlocked(VendingMachine):
    __slots__ = ()
    role = Role.SUPPLIER
    lock_status = LockStatus.UNLOCKED

    def logout(self) -> GuestUnlocked:
        return self._become(GuestUnlocked)

    def supply_product(self, product: Product) -> None:
        """
        Upsert a product listing.

        The record replaces any product in the same column wholesale (name,
        price and quantity); quantities are not added together.
        """
        self._capabilities().product_repository.save(product)
        logger.info(
            "Supplied column %d: %s x %d at %s",
            product.column_id.value, product.name, product.quantity.value, product.price,
        )


class SupplierLocked(VendingMachine):
    __slots__ = ()
    role = Role.SUPPLIER
    lock_status = LockStatus.LOCKED

    def logout(self) -> GuestLocked:
        return self._become(GuestLocked)


MACHINE_STATES: dict[tuple[Role, LockStatus], type[VendingMachine]] = {
    (state.role, state.lock_status): state
    for state in (GuestUnlocked, GuestLocked, AdminUnlocked, AdminLocked, SupplierUnlocked, SupplierLocked)
}
