"""Provider model — travel-package supplier registry."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.database import Base

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 20
TYPE_MAX_LENGTH = 50


class Provider(Base):
    """Supplier of travel packages (hotel, cruise, ski resort, theme park).

    Rows are never physically deleted. Deactivation flips ``active`` and
    rewrites ``name``, ``email`` and ``phone`` with a deletion marker so the
    unique values can be reused by a new active provider.

    Attributes:
        id: Primary key, assigned on first flush.
        name: Provider name.
        email: Contact email address (unique).
        phone: Contact phone number (unique).
        type: ``hotel``, ``crucero``, ``esqui`` or ``parque``; nullable.
        active: Soft-delete flag.
        created_at: Set once, when the provider is created.
        updated_at: Restamped on every mutation.
    """

    __tablename__ = "provider"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH), unique=True, nullable=False)
    phone = Column(String(PHONE_MAX_LENGTH), unique=True, nullable=False)
    type = Column(String(TYPE_MAX_LENGTH), nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    # Stamped explicitly by provider_service, not by column defaults.
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<Provider id={self.id} email={self.email!r} active={self.active}>"
