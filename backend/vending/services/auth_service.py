# Overview: Credential check that resolves a login to a session role.

"""
Authentication Service

The machine knows exactly two accounts, one administrator and one supplier.
Anything else resolves to Role.GUEST: a failed login is a normal outcome,
not an error.

SECURITY NOTES:
- Passwords are compared against bcrypt hashes, never stored in clear text
- Hashes are computed once per process on first use
"""
from __future__ import annotations

from functools import lru_cache

import bcrypt

from ..states import Role
from ..validation import Name, Password

BCRYPT_ROUNDS = 12

ADMIN_USERNAME = "admin"
SUPPLIER_USERNAME = "supplier"

_ACCOUNTS = (
    (ADMIN_USERNAME, "admin_pass", Role.ADMIN),
    (SUPPLIER_USERNAME, "supplier_pass", Role.SUPPLIER),
)


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if password matches hash, False otherwise."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # malformed hash
        return False


@lru_cache(maxsize=1)
def credential_table() -> dict[str, tuple[str, Role]]:
    """username -> (password hash, role)"""
    return {
        username: (hash_password(password), role)
        for username, password, role in _ACCOUNTS
    }


def authenticate(username: Name, password: Password) -> Role:
    """Resolve credentials to ADMIN, SUPPLIER, or GUEST when nothing matches."""
    entry = credential_table().get(username.value)
    if entry is None:
        return Role.GUEST

    password_hash, role = entry
    if not verify_password(password.value, password_hash):
        return Role.GUEST
    return role
