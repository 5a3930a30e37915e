# Overview: Flask CLI command groups for running, seeding and inspecting the machine.

# backend/vending/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to vending (PowerShell: $env:FLASK_APP="vending").
# - Use: python -m flask <group> <command> [options]
#
# Machine:
# - python -m flask machine run [--seed]
#   Start the interactive menu as a guest on an unlocked machine.
#   --seed loads the demo catalogue first (useful with VENDING_STORAGE=memory).
# - python -m flask machine seed
#   Upsert the demo catalogue into the database.
#
# Inspection:
# - python -m flask products list [--json]
# - python -m flask sales list [--json]
#
# System:
# - python -m flask system init
#   Create missing tables.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# The `vending` console script is a shortcut for `flask machine run`.

import json

import click
from flask import current_app
from flask.cli import with_appcontext

from .container import STORAGE_SQL, build_container
from .entities import Product
from .extensions import db
from .repositories import ProductRepository, SaleRepository
from .services.machine import GuestUnlocked
from .terminal import MachineTerminal, format_product, format_sale
from .validation import Name, Price, Value


DEMO_PRODUCTS = [
    ("1", "Cola", "1.50", "10"),
    ("2", "Orange Juice", "2.00", "8"),
    ("3", "Sparkling Water", "1.00", "12"),
    ("4", "Chocolate Bar", "1.25", "15"),
    ("5", "Salted Crisps", "1.10", "9"),
]


def demo_products() -> list[Product]:
    return [
        Product(
            column_id=Value.parse(column_id),
            name=Name.parse(name),
            price=Price.parse(price),
            quantity=Value.parse(quantity),
        )
        for column_id, name, price, quantity in DEMO_PRODUCTS
    ]


def seed_products(repository: ProductRepository) -> int:
    """Upsert the demo catalogue. Returns the number of products written."""
    products = demo_products()
    with repository.transaction():
        for product in products:
            repository.save(product)
    return len(products)


def _container():
    storage = current_app.config.get("VENDING_STORAGE", STORAGE_SQL)
    if storage == STORAGE_SQL:
        db.create_all()
    return build_container(storage)


# =============================================================================
# MACHINE
# =============================================================================

@click.group('machine')
def machine_group():
    """Run and stock the vending machine."""


@machine_group.command('run')
@click.option('--seed', 'seed', is_flag=True, help='Load the demo catalogue before starting')
@with_appcontext
def run_machine(seed):
    """Start the interactive vending machine menu."""
    start_machine(seed=seed)


def start_machine(*, seed: bool = False) -> None:
    """Wire the machine from app config and hand it to the terminal. Needs an app context."""
    container = _container()
    if seed:
        count = seed_products(container.resolve(ProductRepository))
        click.echo(f"PASS Loaded {count} demo products")

    machine = container.resolve(GuestUnlocked)
    current_app.logger.info("Vending machine started (%s storage)", current_app.config.get("VENDING_STORAGE"))
    MachineTerminal().run(machine)


@machine_group.command('seed')
@with_appcontext
def seed_machine():
    """Upsert the demo catalogue (replaces columns 1-5)."""
    try:
        count = seed_products(_container().resolve(ProductRepository))
    except Exception as e:
        current_app.logger.exception("Failed to seed products")
        click.echo(f"FAIL Failed to seed products: {str(e)}")
        return
    click.echo(f"PASS Seeded {count} products")


# =============================================================================
# INSPECTION
# =============================================================================

@click.group('products')
def products_group():
    """Product listing commands."""


@products_group.command('list')
@click.option('--json', 'as_json', is_flag=True, help='Print products as a JSON array')
@with_appcontext
def list_products(as_json):
    """List every product."""
    products = _container().resolve(ProductRepository).find_all()
    if as_json:
        click.echo(json.dumps([p.to_dict() for p in products], indent=2))
        return
    if not products:
        click.echo("No products found.")
        return

    click.echo("\n" + "="*60)
    for product in products:
        click.echo(format_product(product))
    click.echo("="*60 + "\n")


@click.group('sales')
def sales_group():
    """Sales report commands."""


@sales_group.command('list')
@click.option('--json', 'as_json', is_flag=True, help='Print sales as a JSON array')
@with_appcontext
def list_sales(as_json):
    """List every recorded sale."""
    sales = _container().resolve(SaleRepository).find_all()
    if as_json:
        click.echo(json.dumps([s.to_dict() for s in sales], indent=2))
        return
    if not sales:
        click.echo("No sales found.")
        return

    click.echo("\n" + "="*60)
    for sale in sales:
        click.echo(format_sale(sale))
    click.echo("="*60)
    total = sum(sale.price.value for sale in sales)
    click.echo(f"{len(sales)} sales, {total:.2f} total\n")


# =============================================================================
# SYSTEM
# =============================================================================

@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create missing tables."""
    db.create_all()
    click.echo("PASS Tables ready")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()
    click.echo("BUILD Creating all tables...")
    db.create_all()
    click.echo("PASS Database reset complete")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(machine_group)
    app.cli.add_command(products_group)
    app.cli.add_command(sales_group)
    app.cli.add_command(system_group)


def main():
    """Console entry point: run the machine without the flask wrapper."""
    from . import create_app

    app = create_app()
    with app.app_context():
        start_machine(seed=app.config.get("VENDING_STORAGE") != STORAGE_SQL)
