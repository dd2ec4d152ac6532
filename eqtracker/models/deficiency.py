from __future__ import annotations

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..core.catalog import DEFICIENCY_PENDING, SEVERITY_MAJOR
from ..db.session import Base


class Deficiency(Base):
    """A problem reported against an equipment item.

    Raised either while returning a checkout (``checkout_id`` set) or on its
    own. Only resolution changes a deficiency after it has been created.
    """

    __tablename__ = "deficiencies"

    id = Column(Integer, primary_key=True, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False, index=True)
    checkout_id = Column(Integer, ForeignKey("checkouts.id", ondelete="SET NULL"), nullable=True, index=True)
    reported_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reported_date = Column(Date, nullable=False)
    description = Column(Text, nullable=False)
    severity = Column(String(16), nullable=False, default="minor")
    status = Column(String(16), nullable=False, default=DEFICIENCY_PENDING, index=True)
    resolved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    resolved_date = Column(Date, nullable=True)
    resolution_notes = Column(Text, nullable=True)

    equipment = relationship("Equipment", back_populates="deficiencies", lazy="joined")
    reporter = relationship("User", foreign_keys=[reported_by], lazy="joined")
    resolver = relationship("User", foreign_keys=[resolved_by], lazy="joined")

    @property
    def is_pending_major(self) -> bool:
        return self.status == DEFICIENCY_PENDING and self.severity == SEVERITY_MAJOR

    @property
    def equipment_code(self) -> str | None:
        return self.equipment.equipment_code if self.equipment else None

    @property
    def equipment_name(self) -> str | None:
        return self.equipment.name if self.equipment else None

    @property
    def reporter_name(self) -> str | None:
        return self.reporter.full_name if self.reporter else None


__all__ = ["Deficiency"]
