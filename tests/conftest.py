"""Test environment: in-memory SQLite and cheap bcrypt, set before app modules are imported."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APP_ENV"] = "dev"
os.environ["SESSION_EXPIRE_HOURS"] = "24"
