"""Seed data script for the provider administration database.

Populates the database with 20 demo providers for development. The script
is idempotent: a provider whose email already exists is skipped.

Usage (from the repository root):
    python seed_providers.py
"""

from __future__ import annotations

import os
import random
import sys

# Ensure the backend package is importable when running from the repo root
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.database import Base, SessionLocal, engine  # noqa: E402
from app.models import Provider  # noqa: E402
from app.schemas.provider import ProviderCreate  # noqa: E402
from app.services import provider_service  # noqa: E402
from app.utils.constants import ProviderType  # noqa: E402

TOTAL = 20


def demo_payloads(total: int = TOTAL) -> list[ProviderCreate]:
    """Build the demo providers: ``Proveedor {i}``, ``prov{i}@test.com``."""
    types = list(ProviderType)
    return [
        ProviderCreate(
            name=f"Proveedor {i}",
            email=f"prov{i}@test.com",
            phone=f"60000000{i}",
            type=random.choice(types),
        )
        for i in range(total)
    ]


def seed_providers(session) -> int:
    """Insert the demo providers that are not present yet.

    Returns:
        Number of providers inserted.
    """
    inserted = 0
    for payload in demo_payloads():
        exists = (
            session.query(Provider.id)
            .filter(Provider.email == payload.email)
            .first()
        )
        if exists:
            print(f"  [SKIP] {payload.email}")
            continue
        provider_service.create_provider(session, payload)
        inserted += 1
    print(f"  [OK] Provider — {inserted} registros insertados.")
    return inserted


def main() -> None:
    print("=" * 60)
    print("  Proveedores — Seed Data Script")
    print("=" * 60)

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_providers(session)
    finally:
        session.close()


if __name__ == "__main__":
    main()
