# Overview: Text-menu front end that drives one machine through its states.

"""
Each machine state has its own numbered menu. step() renders the menu for
the current state, reads one line, runs the chosen command and returns the
machine the session continues with: the same object when nothing changed,
a new state object after login, logout, lock or unlock.

Failures are printed as "Error: <message>" and the session carries on. Only
Exit (or end of input) leaves the loop.
"""
from __future__ import annotations

import logging
import sys
from typing import Callable, TextIO

import click

from .entities import Product, Sale
from .errors import VendingError
from .services.machine import (
    AdminLocked,
    AdminUnlocked,
    GuestLocked,
    GuestUnlocked,
    SupplierLocked,
    SupplierUnlocked,
    VendingMachine,
)
from .validation import Name, Password, Price, ValidationError, Value

logger = logging.getLogger(__name__)


def format_product(product: Product) -> str:
    return f"#{product.column_id.value:<4} {product.name.value:<30} {product.price!s:>8}  qty {product.quantity}"


def format_sale(sale: Sale) -> str:
    return f"{sale.date:%Y-%m-%d %H:%M:%S}  {sale.product_name.value:<30} {sale.price!s:>8}"


class MachineTerminal:
    def __init__(self, stdin: TextIO | None = None, echo: Callable[[str], None] | None = None):
        self._stdin = stdin
        self._echo = echo or click.echo

    def prompt(self, message: str) -> None:
        self._echo(message)

    def read_line(self) -> str:
        stream = self._stdin if self._stdin is not None else sys.stdin
        line = stream.readline()
        if line == "":
            raise EOFError("No more input")
        return line.strip()

    def ask(self, message: str) -> str:
        self.prompt(message)
        return self.read_line()

    # -- loop --------------------------------------------------------------

    def run(self, machine: VendingMachine) -> None:
        """Drive the machine until Exit. Exit terminates the process; end of input ends the session."""
        try:
            while True:
                machine = self.step(machine)
        except (EOFError, click.Abort):
            # click.prompt raises Abort when input ends inside a payment
            self.prompt("Goodbye! Thanks for using the vending machine!")

    def step(self, machine: VendingMachine) -> VendingMachine:
        commands = MENUS[type(machine)]

        self.prompt("Choose a command:")
        for number, (label, _) in enumerate(commands, start=1):
            self.prompt(f"{number}. {label}")

        choice = self.read_line()
        try:
            if not (choice.isascii() and choice.isdigit()) or not 1 <= int(choice) <= len(commands):
                raise ValidationError("Invalid command")
            _, handler = commands[int(choice) - 1]
            return handler(self, machine)
        except (ValidationError, VendingError) as exc:
            self.prompt(f"Error: {exc}")
            return machine
        except (EOFError, click.Abort):
            raise
        except Exception as exc:
            logger.exception("Command failed in %s", type(machine).__name__)
            self.prompt(f"Error: {exc}")
            return machine
        finally:
            self.prompt("")

    # -- commands ----------------------------------------------------------

    def login(self, machine):
        username = Name.parse(self.ask("Enter your username:"))
        password = Password.parse(self.ask("Enter your password:"))

        result = machine.login(username, password)
        if not result.succeeded:
            self.prompt("Login failed")
        else:
            self.prompt(f"Welcome, {username}")
        return result.machine

    def logout(self, machine):
        self.prompt("Logged out")
        return machine.logout()

    def list_products(self, machine):
        self.prompt("Products:")
        for product in machine.look_up():
            self.prompt(format_product(product))
        return machine

    def list_sales(self, machine):
        self.prompt("Sales report:")
        for sale in machine.list_sales_report():
            self.prompt(format_sale(sale))
        return machine

    def buy_product(self, machine):
        column_id = Value.parse(self.ask("Enter the product id:"))
        amount = Value.parse(self.ask("Enter the amount:"))

        product = machine.buy(column_id, amount)
        self.prompt(f"Product bought successfully: {format_product(product)}")
        return machine

    def supply_product(self, machine):
        column_id = Value.parse(self.ask("Enter the product id:"))
        name = Name.parse(self.ask("Enter the product name:"))
        price = Price.parse(self.ask("Enter the price:"))
        quantity = Value.parse(self.ask("Enter the quantity:"))

        product = Product(column_id=column_id, name=name, price=price, quantity=quantity)
        machine.supply_product(product)
        self.prompt(f"Product supplied successfully: {format_product(product)}")
        return machine

    def lock(self, machine):
        self.prompt("Machine locked")
        return machine.lock()

    def unlock(self, machine):
        self.prompt("Machine unlocked")
        return machine.unlock()

    def exit(self, machine):
        self.prompt("Goodbye! Thanks for using the vending machine!")
        sys.exit(0)


MENUS: dict[type[VendingMachine], list[tuple[str, Callable]]] = {
    GuestUnlocked: [
        ("Login", MachineTerminal.login),
        ("List Products", MachineTerminal.list_products),
        ("Buy Product", MachineTerminal.buy_product),
        ("Exit", MachineTerminal.exit),
    ],
    GuestLocked: [
        ("Login", MachineTerminal.login),
        ("List Products", MachineTerminal.list_products),
        ("Exit", MachineTerminal.exit),
    ],
    AdminUnlocked: [
        ("Logout", MachineTerminal.logout),
        ("List Products", MachineTerminal.list_products),
        ("List Sales", MachineTerminal.list_sales),
        ("Lock", MachineTerminal.lock),
        ("Exit", MachineTerminal.exit),
    ],
    AdminLocked: [
        ("Logout", MachineTerminal.logout),
        ("List Products", MachineTerminal.list_products),
        ("List Sales", MachineTerminal.list_sales),
        ("Unlock", MachineTerminal.unlock),
        ("Exit", MachineTerminal.exit),
    ],
    SupplierUnlocked: [
        ("Logout", MachineTerminal.logout),
        ("List Products", MachineTerminal.list_products),
        ("Supply Product", MachineTerminal.supply_product),
        ("Exit", MachineTerminal.exit),
    ],
    SupplierLocked: [
        ("Logout", MachineTerminal.logout),
        ("List Products", MachineTerminal.list_products),
        ("Exit", MachineTerminal.exit),
    ],
}
