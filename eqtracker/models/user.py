from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text

from ..core.catalog import ROLE_VOLUNTEER
from ..db.session import Base


class User(Base):
    """A club member. Chairs and admins also carry an email and password hash."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    member_number = Column(Integer, nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True, unique=True)
    password_hash = Column(Text, nullable=True)
    role = Column(String(16), nullable=False, default=ROLE_VOLUNTEER)
    created_at = Column(DateTime, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


__all__ = ["User"]
