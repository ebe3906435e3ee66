# app/services/directory.py
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.team import Team
from app.models.user import User
from app.schemas.lookups import user_role_label
from app.schemas.user import UserRead, UserSummary
from app.services.exceptions import StandupNotFoundError


def _to_user_read(user: User, team_name: str) -> UserRead:
    return UserRead(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        role_label=user_role_label(user.role),
        team_id=user.team_id,
        team_name=team_name,
    )


async def list_users(db: AsyncSession) -> list[UserRead]:
    """
    All users with their team name, ordered by id.
    """
    stmt = (
        select(User, Team.name)
        .join(Team, User.team_id == Team.id)
        .order_by(User.id.asc())
    )
    result = await db.execute(stmt)
    return [_to_user_read(user, team_name) for user, team_name in result.all()]


async def get_user(db: AsyncSession, user_id: int) -> UserRead:
    stmt = (
        select(User, Team.name)
        .join(Team, User.team_id == Team.id)
        .where(User.id == user_id)
    )
    result = await db.execute(stmt)
    row = result.one_or_none()
    if row is None:
        raise StandupNotFoundError(f"User with id={user_id} not found.")
    return _to_user_read(row[0], row[1])


async def list_team_members(db: AsyncSession, team_id: int) -> list[UserSummary]:
    """
    Members of a team ordered by name.

    Raises StandupNotFoundError for unknown teams so callers can tell an
    empty team apart from a missing one.
    """
    team = await db.get(Team, team_id)
    if team is None:
        raise StandupNotFoundError(f"Team with id={team_id} not found.")

    result = await db.execute(
        select(User).where(User.team_id == team_id).order_by(User.name.asc())
    )
    return [
        UserSummary(id=user.id, name=user.name, role=user.role)
        for user in result.scalars().all()
    ]
