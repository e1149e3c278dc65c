"""Root conftest - shared test configuration."""

import os

# Settings are cached on first use; pin test values before any import reads them
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
