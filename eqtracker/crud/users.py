"""Member lookups and provisioning."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..core.catalog import normalize_role
from ..core.clock import utcnow
from ..core.security import hash_password
from ..models.user import User


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_member_number(db: Session, member_number: int) -> User | None:
    stmt = select(User).where(User.member_number == member_number)
    return db.execute(stmt).scalars().first()


def get_user_by_email(db: Session, email: str) -> User | None:
    cleaned = (email or "").strip().lower()
    if not cleaned:
        return None
    stmt = select(User).where(func.lower(User.email) == cleaned)
    return db.execute(stmt).scalars().first()


def list_users(db: Session, limit: int = 200, offset: int = 0) -> list[User]:
    stmt = select(User).order_by(User.last_name, User.first_name).limit(limit).offset(offset)
    return db.execute(stmt).scalars().all()


def create_user(db: Session, payload: dict) -> User:
    """Create a member. ``password`` is hashed; chairs/admins need one to log in."""

    first_name = (payload.get("first_name") or "").strip()
    last_name = (payload.get("last_name") or "").strip()
    if not first_name or not last_name:
        raise ValueError("first_name and last_name are required")
    member_number = payload.get("member_number")
    if member_number is None:
        raise ValueError("member_number is required")
    email = (payload.get("email") or "").strip().lower() or None
    password = payload.get("password") or None
    user = User(
        first_name=first_name,
        last_name=last_name,
        member_number=int(member_number),
        email=email,
        password_hash=hash_password(password) if password else None,
        role=normalize_role(payload.get("role")),
        created_at=utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
