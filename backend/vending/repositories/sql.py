# Overview: Repositories over the product and sale tables (Flask-SQLAlchemy).

"""
SQL-backed repositories.

Writes commit immediately unless they run inside ``transaction()``, in which
case the outermost transaction commits or rolls back the whole unit. The
transaction depth lives in ``session.info``, so every repository on the same
session (both default to ``db.session``) joins the unit opened by any of
them: a purchase touching product and sale rows commits once.

Rows that no longer satisfy the value-object invariants are skipped on read
and logged.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from . import ProductRepository, SaleRepository
from ..entities import Product, Sale
from ..errors import RepositoryError
from ..extensions import db
from ..models import ProductRow, SaleRow
from ..services.concurrency import run_with_retry
from ..validation import Name, Price, ValidationError, Value

logger = logging.getLogger(__name__)


def _product_from_row(row: ProductRow) -> Product:
    return Product(
        column_id=Value.parse_int(row.column_id),
        name=Name.parse(row.name),
        price=Price.parse_float(row.price),
        quantity=Value.parse_int(row.quantity),
    )


def _sale_from_rows(sale_row: SaleRow, product_row: ProductRow) -> Sale:
    return Sale(
        date=sale_row.date,
        product_name=Name.parse(product_row.name),
        price=Price.parse_float(sale_row.price),
    )


_DEPTH_KEY = "vending_transaction_depth"


class _SqlRepository:
    def __init__(self, session=None):
        self._session = session if session is not None else db.session

    @property
    def _depth(self) -> int:
        # Kept on the session so every repository sharing it joins one unit
        return self._session.info.get(_DEPTH_KEY, 0)

    @_depth.setter
    def _depth(self, value: int) -> None:
        self._session.info[_DEPTH_KEY] = value

    def _run(self, op, action: str):
        if self._depth:
            # inside transaction(): the outermost unit commits or rolls back
            try:
                return op()
            except SQLAlchemyError as exc:
                raise RepositoryError(f"Failed to {action}") from exc

        def _op():
            result = op()
            self._session.commit()
            return result

        try:
            return run_with_retry(_op, self._session)
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise RepositoryError(f"Failed to {action}") from exc

    @contextmanager
    def transaction(self):
        self._depth += 1
        try:
            yield
            if self._depth == 1:
                self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise RepositoryError("Failed to commit transaction") from exc
        except BaseException:
            self._session.rollback()
            raise
        finally:
            self._depth -= 1


class SqlProductRepository(_SqlRepository, ProductRepository):
    def find(self, column_id: Value) -> Product | None:
        row = self._session.get(ProductRow, column_id.value)
        if row is None:
            return None
        try:
            return _product_from_row(row)
        except ValidationError as exc:
            logger.warning("Skipping invalid product row %s: %s", row.column_id, exc)
            return None

    def save(self, product: Product) -> None:
        def _op():
            row = self._session.get(ProductRow, product.column_id.value)
            if row is None:
                row = ProductRow(column_id=product.column_id.value)
                self._session.add(row)
            row.name = product.name.value
            row.price = product.price.value
            row.quantity = product.quantity.value
            self._session.flush()

        self._run(_op, f"save product {product.column_id}")

    def find_all(self) -> list[Product]:
        rows = self._session.query(ProductRow).order_by(ProductRow.column_id.asc()).all()
        products = []
        for row in rows:
            try:
                products.append(_product_from_row(row))
            except ValidationError as exc:
                logger.warning("Skipping invalid product row %s: %s", row.column_id, exc)
        return products


class SqlSaleRepository(_SqlRepository, SaleRepository):
    def save(self, sale: Sale) -> None:
        def _op():
            # The sale table references the product by id; resolve it from the name
            product_row = (
                self._session.query(ProductRow)
                .filter_by(name=sale.product_name.value)
                .order_by(ProductRow.column_id.asc())
                .first()
            )
            if product_row is None:
                raise RepositoryError(f"No product named {sale.product_name} to record a sale against")

            self._session.add(SaleRow(
                date=sale.date,
                price=sale.price.value,
                product_id=product_row.column_id,
            ))
            self._session.flush()

        self._run(_op, f"record sale of {sale.product_name}")

    def find_all(self) -> list[Sale]:
        rows = (
            self._session.query(SaleRow, ProductRow)
            .join(ProductRow, SaleRow.product_id == ProductRow.column_id)
            .order_by(SaleRow.id.asc())
            .all()
        )
        sales = []
        for sale_row, product_row in rows:
            try:
                sales.append(_sale_from_rows(sale_row, product_row))
            except ValidationError as exc:
                logger.warning("Skipping invalid sale row %s: %s", sale_row.id, exc)
        return sales
