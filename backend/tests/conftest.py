"""
Pytest fixtures for vending backend tests.

Provides an in-memory SQLite app, in-memory repositories, a scripted payment
terminal and ready-made machines in each state.
"""

import pytest

from vending import create_app
from vending.entities import Product
from vending.errors import PaymentError
from vending.extensions import db
from vending.repositories import InMemoryProductRepository, InMemorySaleRepository
from vending.services import auth_service
from vending.services.machine import GuestUnlocked
from vending.services.payment_service import PaymentTerminal
from vending.validation import Name, Password, Price, Value


ADMIN = ("admin", "admin_pass")
SUPPLIER = ("supplier", "supplier_pass")


class ScriptedPaymentTerminal(PaymentTerminal):
    """
    Payment terminal fed from a list.

    Each entry is either an amount (str/Decimal) handed back by request() or
    an exception instance raised by it. An exhausted script raises a fatal
    PaymentError so a test can never spin in the payment loop.
    """

    def __init__(self, script=None, refund_error: Exception | None = None):
        self.script = list(script or [])
        self.refund_error = refund_error
        self.prompts: list[str] = []
        self.refunds: list[Price] = []
        self.requests = 0

    def insert(self, *entries) -> "ScriptedPaymentTerminal":
        self.script.extend(entries)
        return self

    def prompt(self, message: str) -> None:
        self.prompts.append(message)

    def request(self) -> Price:
        self.requests += 1
        if not self.script:
            raise PaymentError("Payment script exhausted")
        entry = self.script.pop(0)
        if isinstance(entry, Exception):
            raise entry
        return Price.parse(str(entry))

    def refund(self, amount: Price) -> None:
        if self.refund_error is not None:
            raise self.refund_error
        self.refunds.append(amount)


def make_product(column_id=1, name="Cola", price="1.50", quantity=10) -> Product:
    return Product(
        column_id=Value.parse_int(column_id),
        name=Name.parse(name),
        price=Price.parse(str(price)),
        quantity=Value.parse_int(quantity),
    )


def credentials(pair):
    username, password = pair
    return Name.parse(username), Password.parse(password)


@pytest.fixture(scope='session', autouse=True)
def fast_password_hashing():
    """bcrypt at cost 12 makes every login noticeably slow; tests use the minimum."""
    original = auth_service.BCRYPT_ROUNDS
    auth_service.BCRYPT_ROUNDS = 4
    auth_service.credential_table.cache_clear()
    yield
    auth_service.BCRYPT_ROUNDS = original
    auth_service.credential_table.cache_clear()


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'VENDING_STORAGE': 'memory',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture
def product_repository():
    return InMemoryProductRepository()


@pytest.fixture
def sale_repository():
    return InMemorySaleRepository()


@pytest.fixture
def payment_terminal():
    return ScriptedPaymentTerminal()


@pytest.fixture
def cola(product_repository):
    product = make_product(1, "Cola", "1.50", 10)
    product_repository.save(product)
    return product


@pytest.fixture
def machine(product_repository, sale_repository, payment_terminal):
    return GuestUnlocked.new(product_repository, sale_repository, payment_terminal)


@pytest.fixture
def admin(machine):
    return machine.login(*credentials(ADMIN)).machine


@pytest.fixture
def supplier(machine):
    return machine.login(*credentials(SUPPLIER)).machine


@pytest.fixture
def guest_locked(admin):
    return admin.lock().logout()
