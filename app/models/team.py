# app/models/team.py
from sqlalchemy import Column, DateTime, Integer, String

from app.db.base import Base


class Team(Base):
    """
    A group of users who share a daily standup.
    """

    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Team id={self.id} name={self.name!r}>"
