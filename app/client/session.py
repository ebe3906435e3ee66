# app/client/session.py
from __future__ import annotations

from dataclasses import dataclass

from app.schemas.enums import UserRole
from app.schemas.user import UserRead


@dataclass(frozen=True)
class UserSession:
    """
    The user a client acts on behalf of.

    There is no server-side authentication: the session is an explicit value
    handed to client calls rather than ambient global state, so switching user
    means creating a new session.
    """

    user_id: int
    name: str
    team_id: int
    role: UserRole

    @classmethod
    def from_user(cls, user: UserRead) -> "UserSession":
        return cls(
            user_id=user.id,
            name=user.name,
            team_id=user.team_id,
            role=UserRole(user.role),
        )

    @property
    def is_team_lead(self) -> bool:
        return self.role is UserRole.LEAD

    @property
    def initials(self) -> str:
        """
        Up to two upper-case initials for avatar display ("Bob Smith" -> "BS").
        """
        return "".join(part[0] for part in self.name.split() if part).upper()[:2]
