from __future__ import annotations

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from ..core.catalog import STATUS_AVAILABLE
from ..db.session import Base


class Equipment(Base):
    """A single piece of club equipment.

    ``status`` is a cached value owned by the lifecycle service. It is derived
    from the open checkout, any pending major deficiency and the
    ``out_of_service`` flag, and must never be assigned anywhere else.
    """

    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    equipment_code = Column(String(20), nullable=False, unique=True, index=True)
    name = Column(Text, nullable=False)
    category = Column(String(32), nullable=False, index=True)
    location = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default=STATUS_AVAILABLE, index=True)
    out_of_service = Column(Boolean, nullable=False, default=False)
    last_maintenance = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    checkouts = relationship(
        "Checkout",
        back_populates="equipment",
        cascade="all, delete-orphan",
        order_by="Checkout.checkout_date",
    )
    deficiencies = relationship(
        "Deficiency",
        back_populates="equipment",
        cascade="all, delete-orphan",
        order_by="Deficiency.id",
    )


__all__ = ["Equipment"]
