# Overview: Payment terminal capability and the coin-in payment loop.

"""
Payment Collection

The engine never talks to a payment device directly. It receives a
PaymentTerminal and runs collect_payment() against it:

- Each request() returns one inserted amount.
- A PaymentRequestError (unreadable input, rejected coin) is logged and the
  request is repeated. There is no retry limit and no timeout.
- Any other exception from the terminal is fatal and propagates.
- Once the inserted total covers the amount due, the change is handed back
  through refund(). Refund failures propagate.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

import click

from ..errors import PaymentRequestError, RefundError
from ..validation import Price, ValidationError

logger = logging.getLogger(__name__)


class PaymentTerminal(ABC):
    """Abstract payment device."""

    @abstractmethod
    def prompt(self, message: str) -> None:
        ...

    @abstractmethod
    def request(self) -> Price:
        """Return one inserted amount or raise PaymentRequestError."""

    @abstractmethod
    def refund(self, amount: Price) -> None:
        """Hand back change or raise RefundError."""


class CliPaymentTerminal(PaymentTerminal):
    """Reads one decimal amount per request from standard input."""

    def prompt(self, message: str) -> None:
        click.echo(message)

    def request(self) -> Price:
        raw = click.prompt("Please insert the amount", type=str, prompt_suffix=": ")
        try:
            return Price.parse(raw)
        except ValidationError as exc:
            raise PaymentRequestError(str(exc)) from exc

    def refund(self, amount: Price) -> None:
        try:
            click.echo(f"Here's your refund: {amount}")
        except OSError as exc:
            raise RefundError(f"Could not hand back {amount}", details={"amount": str(amount)}) from exc


@dataclass(frozen=True)
class PaymentReceipt:
    amount_due: Price
    amount_paid: Decimal
    change: Decimal


def collect_payment(terminal: PaymentTerminal, amount: Price) -> PaymentReceipt:
    """
    Block until the terminal has received at least ``amount``.

    Returns a receipt with the inserted total and the change refunded.
    Exact payment refunds nothing (a zero refund is not a valid Price).
    """
    paid = Decimal("0")
    terminal.prompt(f"You have to pay: {amount}")

    while True:
        try:
            inserted = terminal.request()
        except PaymentRequestError as exc:
            logger.warning("Payment request failed, asking again: %s", exc)
            continue

        paid += inserted.value
        if paid >= amount.value:
            change = paid - amount.value
            if change > 0:
                terminal.refund(Price.parse_float(change))
            logger.debug("Collected %s for %s (change %s)", paid, amount, change)
            return PaymentReceipt(amount_due=amount, amount_paid=paid, change=change)

        terminal.prompt(f"You have to pay: {amount.value - paid:.2f} more")
