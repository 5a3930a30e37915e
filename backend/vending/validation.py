"""
Value objects for the vending domain.

Every value object is built through its ``parse`` classmethod, which turns
unstructured input (CLI text, database columns, computed totals) into a
validated instance or raises ValidationError. ``__post_init__`` re-checks the
invariant so an instance can never exist in an invalid state.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation


MAX_NAME_LENGTH = 30
MIN_PASSWORD_LENGTH = 8

# Ids and quantities share one bounded unsigned range (32-bit)
MAX_VALUE = 4_294_967_295

# Maximum price: 9,999,999.99 (999,999,999 cents)
# Fits the NUMERIC(10, 2) price columns and keeps totals exact
MAX_PRICE_CENTS = 999_999_999
CENT = Decimal("0.01")
MAX_PRICE = Decimal(MAX_PRICE_CENTS) * CENT


class ValidationError(ValueError):
    """Malformed input rejected at the boundary."""


@dataclass(frozen=True)
class Name:
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ValidationError("Name must be text")
        if not self.value:
            raise ValidationError("Name cannot be empty")
        if len(self.value) > MAX_NAME_LENGTH:
            raise ValidationError("Name is too long")

    @classmethod
    def parse(cls, value: str) -> "Name":
        return cls(value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Password:
    # Never rendered: used only for the duration of a login call
    value: str = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ValidationError("Password must be text")
        if not self.value:
            raise ValidationError("Password cannot be empty")
        if len(self.value) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password is too short")

    @classmethod
    def parse(cls, value: str) -> "Password":
        return cls(value)


@dataclass(frozen=True)
class Price:
    """Positive currency amount, held as a Decimal.

    Whole cents only, at most MAX_PRICE.
    """
    value: Decimal

    def __post_init__(self):
        if not isinstance(self.value, Decimal):
            raise ValidationError("Price must be a number")
        if not self.value.is_finite():
            raise ValidationError("Price must be a finite number")
        if self.value <= 0:
            raise ValidationError("Price must be greater than zero")
        if self.value > MAX_PRICE:
            raise ValidationError(f"Price cannot exceed {MAX_PRICE:,}")
        if self.value.quantize(CENT) != self.value:
            raise ValidationError("Price cannot have fractions of a cent")

    @classmethod
    def parse(cls, value: str) -> "Price":
        """Parse a price typed by a user or read from a text column."""
        if not isinstance(value, str):
            raise ValidationError("Price must be a number")
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise ValidationError("Price must be a number")
        return cls(amount)

    @classmethod
    def parse_float(cls, value: float | int | Decimal) -> "Price":
        """
        Build a price from a computed amount (totals, refunds, REAL columns).

        Floats go through str() so 1.5 becomes Decimal("1.5") rather than
        its binary expansion.
        """
        if isinstance(value, bool):
            raise ValidationError("Price must be a number")
        if isinstance(value, Decimal):
            return cls(value)
        if isinstance(value, (int, float)):
            return cls(Decimal(str(value)))
        raise ValidationError("Price must be a number")

    def __str__(self) -> str:
        return f"{self.value:.2f}"


@dataclass(frozen=True, order=True)
class Value:
    """Bounded positive integer used for product ids and quantities."""
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError("Value must be an integer")
        if self.value <= 0:
            raise ValidationError("Value must be greater than zero")
        if self.value > MAX_VALUE:
            raise ValidationError(f"Value cannot exceed {MAX_VALUE}")

    @classmethod
    def parse(cls, value: str) -> "Value":
        """Parse a plain positive integer from text (no sign, decimals or exponent)."""
        if not isinstance(value, str):
            raise ValidationError("Value must be an integer")
        stripped = value.strip()
        if not stripped:
            raise ValidationError("Value must be an integer")
        if not (stripped.isascii() and stripped.isdigit()):
            raise ValidationError("Value must be a positive integer")
        return cls(int(stripped))

    @classmethod
    def parse_int(cls, value: int) -> "Value":
        """
        Build from a signed integer, typically the result of a subtraction.

        Fails when value <= 0, which is how a purchase that would empty or
        overdraw a stock level is rejected.
        """
        return cls(value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
