# Overview: Pytest coverage for the Flask CLI command groups.

import json
from datetime import datetime
from decimal import Decimal

import pytest

from conftest import make_product
from vending.cli import demo_products, seed_products
from vending.models import ProductRow, SaleRow
from vending.repositories import InMemoryProductRepository, SqlProductRepository


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def sql_storage(app, db_session, monkeypatch):
    monkeypatch.setitem(app.config, "VENDING_STORAGE", "sql")
    return db_session


class TestSeed:
    def test_seed_products_upserts_catalogue(self):
        repository = InMemoryProductRepository([make_product(1, "Old Cola", "9.99", 1)])

        count = seed_products(repository)

        assert count == len(demo_products()) == 5
        assert repository.find_all() == demo_products()

    def test_seed_command_writes_rows(self, runner, sql_storage):
        result = runner.invoke(args=["machine", "seed"])

        assert result.exit_code == 0
        assert "PASS Seeded 5 products" in result.output
        assert sql_storage.query(ProductRow).count() == 5

    def test_seed_twice_is_idempotent(self, runner, sql_storage):
        runner.invoke(args=["machine", "seed"])
        runner.invoke(args=["machine", "seed"])
        assert sql_storage.query(ProductRow).count() == 5


class TestInspection:
    def test_products_list_empty(self, runner, sql_storage):
        result = runner.invoke(args=["products", "list"])
        assert result.exit_code == 0
        assert "No products found." in result.output

    def test_products_list(self, runner, sql_storage):
        SqlProductRepository().save(make_product(7, "Iced Tea", "1.80", 6))

        result = runner.invoke(args=["products", "list"])

        assert "Iced Tea" in result.output
        assert "1.80" in result.output

    def test_products_list_json(self, runner, sql_storage):
        SqlProductRepository().save(make_product(7, "Iced Tea", "1.80", 6))

        result = runner.invoke(args=["products", "list", "--json"])

        assert json.loads(result.output) == [
            {"column_id": 7, "name": "Iced Tea", "price": "1.80", "quantity": 6},
        ]

    def test_sales_list_json(self, runner, sql_storage):
        SqlProductRepository().save(make_product(1, "Cola", "1.50", 10))
        sql_storage.add(SaleRow(date=datetime(2026, 3, 1, 9, 15), price=Decimal("1.50"), product_id=1))
        sql_storage.commit()

        result = runner.invoke(args=["sales", "list", "--json"])

        assert json.loads(result.output) == [
            {"date": "2026-03-01T09:15:00Z", "product_name": "Cola", "price": "1.50"},
        ]

    def test_sales_list_empty(self, runner, sql_storage):
        result = runner.invoke(args=["sales", "list"])
        assert "No sales found." in result.output

    def test_sales_list_with_total(self, runner, sql_storage):
        SqlProductRepository().save(make_product(1, "Cola", "1.50", 10))
        sql_storage.add(SaleRow(price=Decimal("1.50"), product_id=1))
        sql_storage.add(SaleRow(price=Decimal("3.00"), product_id=1))
        sql_storage.commit()

        result = runner.invoke(args=["sales", "list"])

        assert result.exit_code == 0
        assert result.output.count("Cola") == 2
        assert "2 sales, 4.50 total" in result.output


class TestSystem:
    def test_reset_db_requires_confirmation(self, runner, sql_storage):
        SqlProductRepository().save(make_product())
        result = runner.invoke(args=["system", "reset-db"], input="n\n")
        assert result.exit_code != 0
        assert sql_storage.query(ProductRow).count() == 1

    def test_reset_db(self, runner, sql_storage):
        SqlProductRepository().save(make_product())

        result = runner.invoke(args=["system", "reset-db", "--yes"])

        assert result.exit_code == 0
        assert "PASS Database reset complete" in result.output
        assert sql_storage.query(ProductRow).count() == 0

    def test_init(self, runner, sql_storage):
        result = runner.invoke(args=["system", "init"])
        assert "PASS Tables ready" in result.output


class TestMachineRun:
    def test_run_with_seed_lists_and_exits(self, runner):
        result = runner.invoke(args=["machine", "run", "--seed"], input="2\n4\n")

        assert result.exit_code == 0
        assert "PASS Loaded 5 demo products" in result.output
        assert "Orange Juice" in result.output
        assert "Goodbye! Thanks for using the vending machine!" in result.output

    def test_run_until_end_of_input(self, runner):
        result = runner.invoke(args=["machine", "run"], input="2\n")
        assert result.exit_code == 0
        assert "Products:" in result.output
