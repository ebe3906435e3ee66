# app/models/user.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.db.base import Base
from app.schemas.enums import UserRole


class User(Base):
    """
    A team member who submits daily standups.

    Users are seeded and never modified through the API. The team is
    referenced by `team_id` only; callers join explicitly when they need
    team data.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(75), nullable=False, unique=True)

    # Stored as the enum's string value ("Member" / "Lead").
    role = Column(String(20), nullable=False, default=UserRole.MEMBER.value)

    team_id = Column(
        Integer,
        ForeignKey("teams.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} name={self.name!r} role={self.role}>"
