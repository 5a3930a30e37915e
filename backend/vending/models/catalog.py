from __future__ import annotations

from ..extensions import db
from ..time_utils import utcnow
from ..validation import MAX_NAME_LENGTH


class ProductRow(db.Model):
    """
    One vending column and the product loaded into it.

    column_id is assigned by the supplier, not generated: saving a product
    with an existing column_id updates that row (upsert).
    """
    __tablename__ = "product"

    column_id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    name = db.Column(db.String(MAX_NAME_LENGTH), nullable=False, index=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<ProductRow column_id={self.column_id} name={self.name!r} quantity={self.quantity}>"


class SaleRow(db.Model):
    """
    Append-only sale ledger.

    The product name is not stored here; it is joined from product on read.
    """
    __tablename__ = "sale"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("product.column_id"), nullable=False, index=True)

    product = db.relationship("ProductRow", backref=db.backref("sales", lazy=True))

    def __repr__(self) -> str:
        return f"<SaleRow id={self.id} product_id={self.product_id} price={self.price}>"
