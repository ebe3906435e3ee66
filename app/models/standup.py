# app/models/standup.py
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from app.db.base import Base


class Standup(Base):
    """
    One user's standup update for a single calendar date.

    Blocker fields are only populated while `has_blocker` is true; the
    service layer keeps `blocker_description` and `blocker_status` in sync
    with that flag.
    """

    __tablename__ = "standups"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    date = Column(Date, nullable=False, index=True)

    jira_id = Column(String(50), nullable=False)
    task_description = Column(String(500), nullable=False)
    percentage_complete = Column(Integer, nullable=False, default=0)

    has_blocker = Column(Boolean, nullable=False, default=False)
    blocker_description = Column(String(1000), nullable=True)
    # Stored as the enum's string value ("New" / "Critical" / "Resolved").
    blocker_status = Column(String(20), nullable=True)

    next_task = Column(String(500), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "date",
            name="uq_standups_user_date",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Standup id={self.id} user_id={self.user_id} "
            f"date={self.date} has_blocker={self.has_blocker}>"
        )
