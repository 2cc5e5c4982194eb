"""Database schema definitions (used by Alembic)."""
