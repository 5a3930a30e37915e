"""Session role and maintenance lock, the two axes of a machine state."""
from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    GUEST = "GUEST"
    ADMIN = "ADMIN"
    SUPPLIER = "SUPPLIER"

    @property
    def is_authenticated(self) -> bool:
        return self is not Role.GUEST


class LockStatus(str, Enum):
    LOCKED = "LOCKED"
    UNLOCKED = "UNLOCKED"
