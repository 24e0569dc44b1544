"""SQLAlchemy models package.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` or Alembic migrations run.

Usage from other modules:
    from app.models import Provider
"""

from app.models.provider import Provider  # noqa: F401

__all__ = [
    "Provider",
]
