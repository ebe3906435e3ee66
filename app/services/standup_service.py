# app/services/standup_service.py
from __future__ import annotations

import logging
from datetime import date as date_type, datetime, timezone

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models.standup import Standup
from app.models.user import User
from app.schemas.enums import BlockerStatus
from app.schemas.standup import (
    StandupCreate,
    StandupRead,
    StandupSummary,
    StandupUpdate,
    TeamSubmissionStatus,
)
from app.schemas.user import UserSummary
from app.services.exceptions import (
    StandupConflictError,
    StandupNotFoundError,
    StandupValidationError,
)

logger = logging.getLogger(__name__)

ALREADY_SUBMITTED_MESSAGE = "Standup already submitted for today. Use update instead."
BLOCKER_DESCRIPTION_REQUIRED_MESSAGE = (
    "Blocker description is required when Has Blocker is checked."
)

# Fields of StandupUpdate that map to NOT NULL columns.
_NON_NULLABLE_UPDATE_FIELDS = {
    "jira_id": "jiraId",
    "task_description": "taskDescription",
    "percentage_complete": "percentageComplete",
    "has_blocker": "hasBlocker",
    "next_task": "nextTask",
}


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def utc_today() -> date_type:
    """
    The calendar date standups are keyed on: today in UTC.
    """
    return utc_now().date()


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _to_read(standup: Standup, user_name: str | None) -> StandupRead:
    return StandupRead(
        id=standup.id,
        user_id=standup.user_id,
        user_name=user_name or "Unknown",
        date=standup.date,
        jira_id=standup.jira_id,
        task_description=standup.task_description,
        percentage_complete=standup.percentage_complete,
        has_blocker=standup.has_blocker,
        blocker_description=standup.blocker_description,
        blocker_status=standup.blocker_status,
        next_task=standup.next_task,
        created_at=standup.created_at,
        updated_at=standup.updated_at,
    )


def _to_summary(standup: Standup, user_name: str | None) -> StandupSummary:
    return StandupSummary(
        id=standup.id,
        user_id=standup.user_id,
        user_name=user_name or "Unknown",
        date=standup.date,
        jira_id=standup.jira_id,
        percentage_complete=standup.percentage_complete,
        has_blocker=standup.has_blocker,
        blocker_status=standup.blocker_status,
        created_at=standup.created_at,
    )


async def _find_for_user_and_date(
    db: AsyncSession,
    user_id: int,
    standup_date: date_type,
) -> tuple[Standup, str] | None:
    stmt = (
        select(Standup, User.name)
        .join(User, Standup.user_id == User.id)
        .where(
            Standup.user_id == user_id,
            Standup.date == standup_date,
        )
    )
    result = await db.execute(stmt)
    row = result.one_or_none()
    return (row[0], row[1]) if row is not None else None


# --------------------------------------------------------------------------
# Queries
# --------------------------------------------------------------------------

async def get_today_standup(db: AsyncSession, user_id: int) -> StandupRead:
    """
    Return the user's standup for today (UTC).

    Raises StandupNotFoundError when nothing was submitted yet.
    """
    row = await _find_for_user_and_date(db, user_id, utc_today())
    if row is None:
        raise StandupNotFoundError(f"No standup found for user id={user_id} today.")

    standup, user_name = row
    return _to_read(standup, user_name)


async def get_user_history(
    db: AsyncSession,
    user_id: int,
    count: int = 10,
) -> list[StandupSummary]:
    """
    Return the user's most recent `count` standups, newest first.

    Unknown users simply have no history.
    """
    if count <= 0:
        return []

    stmt = (
        select(Standup, User.name)
        .join(User, Standup.user_id == User.id)
        .where(Standup.user_id == user_id)
        .order_by(Standup.date.desc())
        .limit(count)
    )
    result = await db.execute(stmt)
    return [_to_summary(standup, user_name) for standup, user_name in result.all()]


async def get_team_standups(
    db: AsyncSession,
    team_id: int,
    standup_date: date_type,
) -> list[StandupRead]:
    """
    Return every standup submitted by members of `team_id` on `standup_date`,
    ordered by member name.
    """
    stmt = (
        select(Standup, User.name)
        .join(User, Standup.user_id == User.id)
        .where(
            User.team_id == team_id,
            Standup.date == standup_date,
        )
        .order_by(User.name.asc())
    )
    result = await db.execute(stmt)
    return [_to_read(standup, user_name) for standup, user_name in result.all()]


async def has_submitted_today(db: AsyncSession, user_id: int) -> bool:
    stmt = select(
        exists().where(
            Standup.user_id == user_id,
            Standup.date == utc_today(),
        )
    )
    return bool(await db.scalar(stmt))


async def get_team_submission_status(
    db: AsyncSession,
    team_id: int,
) -> TeamSubmissionStatus:
    """
    Split the team's members into those who submitted today and those who
    have not. Both lists are ordered by member name.
    """
    members_result = await db.execute(
        select(User).where(User.team_id == team_id).order_by(User.name.asc())
    )
    members = list(members_result.scalars().all())

    submitted_result = await db.execute(
        select(Standup.user_id)
        .join(User, Standup.user_id == User.id)
        .where(
            User.team_id == team_id,
            Standup.date == utc_today(),
        )
    )
    submitted_ids = set(submitted_result.scalars().all())

    submitted: list[UserSummary] = []
    pending: list[UserSummary] = []
    for member in members:
        summary = UserSummary(id=member.id, name=member.name, role=member.role)
        if member.id in submitted_ids:
            submitted.append(summary)
        else:
            pending.append(summary)

    return TeamSubmissionStatus(
        total_members=len(members),
        submitted_count=len(submitted),
        submitted=submitted,
        pending=pending,
    )


# --------------------------------------------------------------------------
# Commands
# --------------------------------------------------------------------------

async def create_standup(
    db: AsyncSession,
    user_id: int,
    payload: StandupCreate,
) -> StandupRead:
    """
    Submit today's standup for `user_id`.

    Rules
    -----
    1) The user must exist                               => else NOT FOUND
    2) At most one standup per user per day              => else CONFLICT
    3) A blocker needs a non-blank description           => else VALIDATION
    4) New blockers start with status New; without a blocker both blocker
       fields stay null.

    A concurrent submission that slips past rule 2 collides with the
    (user_id, date) unique constraint at commit and is reported as CONFLICT.
    """
    today = utc_today()

    user = await db.get(User, user_id)
    if user is None:
        raise StandupNotFoundError(f"User with id={user_id} not found.")

    existing = await db.execute(
        select(Standup.id).where(
            Standup.user_id == user_id,
            Standup.date == today,
        )
    )
    if existing.scalar_one_or_none() is not None:
        logger.warning("Duplicate standup submission for user %s on %s", user_id, today)
        raise StandupConflictError(ALREADY_SUBMITTED_MESSAGE)

    if payload.has_blocker and _is_blank(payload.blocker_description):
        logger.warning("Rejected standup for user %s: blocker without description", user_id)
        raise StandupValidationError(BLOCKER_DESCRIPTION_REQUIRED_MESSAGE)

    standup = Standup(
        user_id=user_id,
        date=today,
        jira_id=payload.jira_id,
        task_description=payload.task_description,
        percentage_complete=payload.percentage_complete,
        has_blocker=payload.has_blocker,
        blocker_description=payload.blocker_description if payload.has_blocker else None,
        blocker_status=BlockerStatus.NEW.value if payload.has_blocker else None,
        next_task=payload.next_task,
        created_at=utc_now(),
        updated_at=None,
    )
    db.add(standup)

    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning(
            "Standup for user %s on %s collided on commit: %s", user_id, today, exc.orig
        )
        raise StandupConflictError(ALREADY_SUBMITTED_MESSAGE) from exc

    await db.refresh(standup)

    logger.info("Standup created for user %s on %s", user_id, today)
    return _to_read(standup, user.name)


async def update_standup(
    db: AsyncSession,
    user_id: int,
    payload: StandupUpdate,
) -> StandupRead:
    """
    Apply a partial update to today's standup for `user_id`.

    Only fields present in the request are touched. Turning the blocker off
    clears its description and status; turning it on starts the status at
    New. The blocker invariant is checked on the resulting state before
    anything is written.
    """
    today = utc_today()

    row = await _find_for_user_and_date(db, user_id, today)
    if row is None:
        raise StandupNotFoundError(
            f"No standup found for user id={user_id} today. Submit one first."
        )
    standup, user_name = row

    changes = payload.model_dump(exclude_unset=True)

    for field, wire_name in _NON_NULLABLE_UPDATE_FIELDS.items():
        if field in changes and changes[field] is None:
            logger.warning("Rejected update for user %s: %s set to null", user_id, wire_name)
            raise StandupValidationError(f"{wire_name} cannot be null.")

    # Work out the resulting blocker state first so a rejected update leaves
    # the tracked row untouched.
    has_blocker = changes.get("has_blocker", standup.has_blocker)
    if has_blocker:
        if standup.has_blocker:
            blocker_description = standup.blocker_description
            blocker_status = standup.blocker_status
        else:
            blocker_description = None
            blocker_status = BlockerStatus.NEW.value
        if "blocker_description" in changes:
            blocker_description = changes["blocker_description"]
    else:
        blocker_description = None
        blocker_status = None

    if has_blocker and _is_blank(blocker_description):
        logger.warning("Rejected update for user %s: blocker without description", user_id)
        raise StandupValidationError(BLOCKER_DESCRIPTION_REQUIRED_MESSAGE)

    for field in ("jira_id", "task_description", "percentage_complete", "next_task"):
        if field in changes:
            setattr(standup, field, changes[field])

    standup.has_blocker = has_blocker
    standup.blocker_description = blocker_description
    standup.blocker_status = blocker_status
    standup.updated_at = utc_now()

    await db.commit()
    await db.refresh(standup)

    logger.info("Standup updated for user %s on %s", user_id, today)
    return _to_read(standup, user_name)


async def update_blocker_status(
    db: AsyncSession,
    standup_id: int,
    status: BlockerStatus,
    allow_reopen: bool | None = None,
) -> StandupRead:
    """
    Change the status of the blocker attached to a standup.

    Any move among New/Critical/Resolved is accepted unless reopening is
    disabled (BLOCKER_ALLOW_REOPEN=false), in which case a Resolved blocker
    can only stay Resolved.
    """
    if allow_reopen is None:
        allow_reopen = get_settings().BLOCKER_ALLOW_REOPEN

    stmt = (
        select(Standup, User.name)
        .join(User, Standup.user_id == User.id)
        .where(Standup.id == standup_id)
    )
    result = await db.execute(stmt)
    row = result.one_or_none()

    if row is None or not row[0].has_blocker:
        raise StandupNotFoundError(f"No blocker found for standup id={standup_id}.")
    standup, user_name = row

    status = BlockerStatus(status)
    if (
        not allow_reopen
        and standup.blocker_status == BlockerStatus.RESOLVED.value
        and status is not BlockerStatus.RESOLVED
    ):
        logger.warning("Rejected reopening resolved blocker on standup %s", standup_id)
        raise StandupValidationError("Resolved blockers cannot be reopened.")

    standup.blocker_status = status.value
    standup.updated_at = utc_now()

    await db.commit()
    await db.refresh(standup)

    logger.info("Blocker status updated to %s for standup %s", status.value, standup_id)
    return _to_read(standup, user_name)
