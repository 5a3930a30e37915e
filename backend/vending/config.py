# backend/vending/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/vending.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///vending.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "sql" persists products/sales in the database, "memory" keeps them for the process lifetime
    VENDING_STORAGE = os.environ.get("VENDING_STORAGE", "sql")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
