from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import relationship

from ..db.session import Base

OPEN_CHECKOUT_INDEX = "ux_checkouts_open_equipment"


class Checkout(Base):
    """One loan of an equipment item to a member.

    A checkout is open while ``return_date`` is null. The partial unique index
    below allows at most one open checkout per equipment item, which is what
    settles two members racing for the same tool.
    """

    __tablename__ = "checkouts"
    __table_args__ = (
        Index(
            OPEN_CHECKOUT_INDEX,
            "equipment_id",
            unique=True,
            sqlite_where=text("return_date IS NULL"),
            postgresql_where=text("return_date IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    checkout_date = Column(DateTime, nullable=False)
    expected_return = Column(Date, nullable=True)
    return_date = Column(DateTime, nullable=True)
    use_type = Column(String(16), nullable=False, default="club")
    purpose = Column(Text, nullable=True)
    return_condition = Column(String(16), nullable=True)

    equipment = relationship("Equipment", back_populates="checkouts", lazy="joined")
    user = relationship("User", lazy="joined")

    @property
    def is_open(self) -> bool:
        return self.return_date is None

    @property
    def equipment_code(self) -> str | None:
        return self.equipment.equipment_code if self.equipment else None

    @property
    def equipment_name(self) -> str | None:
        return self.equipment.name if self.equipment else None

    @property
    def member_name(self) -> str | None:
        return self.user.full_name if self.user else None


__all__ = ["Checkout", "OPEN_CHECKOUT_INDEX"]
