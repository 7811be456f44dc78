# backend/dealership/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/dealership.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///dealership.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # FIPE price table (read-only enrichment, never required by the core)
    PRICE_REFERENCE_BASE_URL = os.environ.get(
        "PRICE_REFERENCE_BASE_URL",
        "https://fipe.parallelum.com.br/api/v2",
    )
    PRICE_REFERENCE_TOKEN = os.environ.get("PRICE_REFERENCE_TOKEN")
    PRICE_REFERENCE_TIMEOUT = float(os.environ.get("PRICE_REFERENCE_TIMEOUT", "8"))
    PRICE_REFERENCE_CACHE_TTL = int(os.environ.get("PRICE_REFERENCE_CACHE_TTL", "900"))
