# Overview: Pytest coverage for the text-menu front end.

import io

import click
import pytest

from conftest import ScriptedPaymentTerminal, make_product
from vending.services.machine import (
    AdminLocked,
    AdminUnlocked,
    GuestLocked,
    GuestUnlocked,
    SupplierUnlocked,
)
from vending.terminal import MENUS, MachineTerminal


def scripted(*lines):
    output: list[str] = []
    terminal = MachineTerminal(stdin=io.StringIO("".join(f"{line}\n" for line in lines)), echo=output.append)
    return terminal, output


class TestMenus:
    @pytest.mark.parametrize("state,labels", [
        (GuestUnlocked, ["Login", "List Products", "Buy Product", "Exit"]),
        (GuestLocked, ["Login", "List Products", "Exit"]),
        (AdminUnlocked, ["Logout", "List Products", "List Sales", "Lock", "Exit"]),
        (AdminLocked, ["Logout", "List Products", "List Sales", "Unlock", "Exit"]),
        (SupplierUnlocked, ["Logout", "List Products", "Supply Product", "Exit"]),
    ])
    def test_menu_per_state(self, state, labels):
        assert [label for label, _ in MENUS[state]] == labels

    def test_menu_rendered_with_numbers(self, machine):
        terminal, output = scripted("2")
        terminal.step(machine)
        assert output[:5] == ["Choose a command:", "1. Login", "2. List Products", "3. Buy Product", "4. Exit"]


class TestStep:
    def test_list_products(self, machine, cola):
        terminal, output = scripted("2")
        assert terminal.step(machine) is machine
        assert "Products:" in output
        assert any("Cola" in line and "1.50" in line for line in output)

    def test_login_transitions(self, machine):
        terminal, output = scripted("1", "admin", "admin_pass")
        admin = terminal.step(machine)
        assert isinstance(admin, AdminUnlocked)
        assert "Welcome, admin" in output

    def test_failed_login_stays_guest(self, machine):
        terminal, output = scripted("1", "admin", "letmein_please")
        assert terminal.step(machine) is machine
        assert "Login failed" in output

    def test_short_password_is_reported(self, machine):
        terminal, output = scripted("1", "admin", "short")
        assert terminal.step(machine) is machine
        assert "Error: Password is too short" in output

    @pytest.mark.parametrize("choice", ["9", "0", "abc", ""])
    def test_invalid_command(self, machine, choice):
        terminal, output = scripted(choice)
        assert terminal.step(machine) is machine
        assert "Error: Invalid command" in output

    def test_buy_product(self, product_repository, sale_repository, cola):
        payments = ScriptedPaymentTerminal(["2.00"])
        machine = GuestUnlocked.new(product_repository, sale_repository, payments)
        terminal, output = scripted("3", "1", "1")

        terminal.step(machine)

        assert any(line.startswith("Product bought successfully") for line in output)
        assert payments.refunds and str(payments.refunds[0]) == "0.50"

    def test_buy_failure_is_rendered(self, machine, cola):
        terminal, output = scripted("3", "1", "10")
        assert terminal.step(machine) is machine
        assert "Error: Insufficient quantity in stock" in output

    def test_supply_product(self, supplier, product_repository):
        terminal, output = scripted("3", "4", "Chocolate Bar", "1.25", "15")
        terminal.step(supplier)
        assert product_repository.find_all() == [make_product(4, "Chocolate Bar", "1.25", 15)]

    def test_lock_then_logout_keeps_lock(self, admin):
        terminal, _ = scripted("4", "1")
        locked = terminal.step(admin)
        assert isinstance(locked, AdminLocked)
        guest = terminal.step(locked)
        assert isinstance(guest, GuestLocked)

    def test_locked_guest_has_no_buy(self, guest_locked):
        terminal, output = scripted("3")
        with pytest.raises(SystemExit) as exc_info:
            terminal.step(guest_locked)
        assert exc_info.value.code == 0
        assert "Goodbye! Thanks for using the vending machine!" in output

    def test_admin_sales_report(self, admin):
        terminal, output = scripted("3")
        terminal.step(admin)
        assert "Sales report:" in output


class TestRun:
    def test_exit_terminates(self, machine):
        terminal, output = scripted("2", "4")
        with pytest.raises(SystemExit) as exc_info:
            terminal.run(machine)
        assert exc_info.value.code == 0

    def test_end_of_input_ends_session(self, machine):
        terminal, output = scripted("2")
        terminal.run(machine)
        assert output[-1] == "Goodbye! Thanks for using the vending machine!"

    def test_session_walks_through_states(self, machine, cola):
        terminal, output = scripted(
            "1", "admin", "admin_pass",   # login
            "4",                           # lock
            "1",                           # logout
            "1", "admin", "admin_pass",   # login again, still locked
            "4",                           # unlock
            "1",                           # logout
        )
        terminal.run(machine)
        assert output.count("Machine locked") == 1
        assert output.count("Machine unlocked") == 1
        assert "3. Buy Product" in output

    def test_input_ending_during_payment_says_goodbye(self, product_repository, sale_repository, cola):
        payments = ScriptedPaymentTerminal(["0.50", click.Abort()])
        machine = GuestUnlocked.new(product_repository, sale_repository, payments)
        terminal, output = scripted("3", "1", "1")

        terminal.run(machine)

        assert output[-1] == "Goodbye! Thanks for using the vending machine!"
        assert product_repository.find(cola.column_id) == cola
        assert sale_repository.find_all() == []
