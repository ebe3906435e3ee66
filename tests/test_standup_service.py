# tests/test_standup_service.py
import logging
from datetime import timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.db.session import AsyncSessionLocal
from app.models.standup import Standup
from app.schemas.enums import BlockerStatus
from app.schemas.standup import StandupCreate, StandupUpdate
from app.services import standup_service
from app.services.exceptions import (
    StandupConflictError,
    StandupNotFoundError,
    StandupValidationError,
)

BOB_ID = 2


def _build_create(**overrides) -> StandupCreate:
    data = {
        "jira_id": "JIRA-1",
        "task_description": "Build API",
        "percentage_complete": 40,
        "has_blocker": False,
        "next_task": "Write tests",
    }
    data.update(overrides)
    return StandupCreate(**data)


def _past_standup(user_id: int, days_ago: int, jira_id: str) -> Standup:
    return Standup(
        user_id=user_id,
        date=standup_service.utc_today() - timedelta(days=days_ago),
        jira_id=jira_id,
        task_description="Earlier work",
        percentage_complete=100,
        has_blocker=False,
        next_task="More work",
        created_at=standup_service.utc_now() - timedelta(days=days_ago),
    )


# --------------------------------------------------------------------------
# create
# --------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_returns_full_standup_for_bob(db_session):
    """
    A first submission of the day is stored with no blocker fields and no
    update timestamp.
    """
    created = await standup_service.create_standup(db_session, BOB_ID, _build_create())

    assert isinstance(created.id, int)
    assert created.user_id == BOB_ID
    assert created.user_name == "Bob Smith"
    assert created.date == standup_service.utc_today()
    assert created.jira_id == "JIRA-1"
    assert created.percentage_complete == 40
    assert created.has_blocker is False
    assert created.blocker_description is None
    assert created.blocker_status is None
    assert created.created_at is not None
    assert created.updated_at is None


@pytest.mark.asyncio
async def test_create_then_get_today_returns_equal_record(db_session):
    created = await standup_service.create_standup(db_session, BOB_ID, _build_create())

    fetched = await standup_service.get_today_standup(db_session, BOB_ID)
    again = await standup_service.get_today_standup(db_session, BOB_ID)

    assert fetched == created
    assert again == fetched


@pytest.mark.asyncio
async def test_create_with_blocker_starts_as_new(db_session):
    created = await standup_service.create_standup(
        db_session,
        BOB_ID,
        _build_create(has_blocker=True, blocker_description="Waiting on DB access"),
    )

    assert created.has_blocker is True
    assert created.blocker_description == "Waiting on DB access"
    assert created.blocker_status == BlockerStatus.NEW


@pytest.mark.asyncio
async def test_create_drops_description_when_no_blocker(db_session):
    created = await standup_service.create_standup(
        db_session,
        BOB_ID,
        _build_create(has_blocker=False, blocker_description="stale text"),
    )

    assert created.blocker_description is None
    assert created.blocker_status is None


@pytest.mark.asyncio
async def test_second_create_same_day_conflicts_and_keeps_original(db_session):
    await standup_service.create_standup(db_session, BOB_ID, _build_create())

    with pytest.raises(StandupConflictError):
        await standup_service.create_standup(
            db_session, BOB_ID, _build_create(jira_id="JIRA-2", percentage_complete=90)
        )

    today = await standup_service.get_today_standup(db_session, BOB_ID)
    assert today.jira_id == "JIRA-1"
    assert today.percentage_complete == 40


@pytest.mark.asyncio
@pytest.mark.parametrize("description", [None, "", "   "])
async def test_create_blocker_without_description_is_rejected(db_session, description):
    with pytest.raises(StandupValidationError):
        await standup_service.create_standup(
            db_session,
            BOB_ID,
            _build_create(has_blocker=True, blocker_description=description),
        )

    assert await standup_service.has_submitted_today(db_session, BOB_ID) is False


@pytest.mark.asyncio
async def test_create_for_unknown_user_is_not_found(db_session):
    with pytest.raises(StandupNotFoundError):
        await standup_service.create_standup(db_session, 999, _build_create())


# --------------------------------------------------------------------------
# update
# --------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_patches_only_supplied_fields(db_session):
    """
    Scenario: Bob submits, then bumps his progress to 60%.
    """
    created = await standup_service.create_standup(db_session, BOB_ID, _build_create())

    updated = await standup_service.update_standup(
        db_session, BOB_ID, StandupUpdate(percentage_complete=60)
    )

    assert updated.id == created.id
    assert updated.percentage_complete == 60
    assert updated.updated_at is not None
    unchanged = {"percentage_complete", "updated_at"}
    assert updated.model_dump(exclude=unchanged) == created.model_dump(exclude=unchanged)


@pytest.mark.asyncio
async def test_update_without_todays_standup_is_not_found(db_session):
    with pytest.raises(StandupNotFoundError):
        await standup_service.update_standup(
            db_session, BOB_ID, StandupUpdate(percentage_complete=60)
        )


@pytest.mark.asyncio
async def test_update_clearing_blocker_nulls_description_and_status(db_session):
    await standup_service.create_standup(
        db_session,
        BOB_ID,
        _build_create(has_blocker=True, blocker_description="Waiting on review"),
    )

    updated = await standup_service.update_standup(
        db_session,
        BOB_ID,
        StandupUpdate(has_blocker=False, blocker_description="ignored"),
    )

    assert updated.has_blocker is False
    assert updated.blocker_description is None
    assert updated.blocker_status is None


@pytest.mark.asyncio
async def test_update_adding_blocker_sets_status_new(db_session):
    await standup_service.create_standup(db_session, BOB_ID, _build_create())

    updated = await standup_service.update_standup(
        db_session,
        BOB_ID,
        StandupUpdate(has_blocker=True, blocker_description="CI is down"),
    )

    assert updated.has_blocker is True
    assert updated.blocker_description == "CI is down"
    assert updated.blocker_status == BlockerStatus.NEW


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "patch",
    [
        {"has_blocker": True},
        {"has_blocker": True, "blocker_description": ""},
        {"has_blocker": True, "blocker_description": "  "},
    ],
)
async def test_update_blocker_without_description_is_rejected(db_session, patch):
    await standup_service.create_standup(db_session, BOB_ID, _build_create())

    with pytest.raises(StandupValidationError):
        await standup_service.update_standup(db_session, BOB_ID, StandupUpdate(**patch))

    today = await standup_service.get_today_standup(db_session, BOB_ID)
    assert today.has_blocker is False
    assert today.updated_at is None


@pytest.mark.asyncio
async def test_update_blanking_existing_blocker_description_is_rejected(db_session):
    await standup_service.create_standup(
        db_session,
        BOB_ID,
        _build_create(has_blocker=True, blocker_description="Waiting on review"),
    )

    with pytest.raises(StandupValidationError):
        await standup_service.update_standup(
            db_session, BOB_ID, StandupUpdate(blocker_description=None)
        )


@pytest.mark.asyncio
async def test_update_explicit_null_for_required_field_is_rejected(db_session):
    await standup_service.create_standup(db_session, BOB_ID, _build_create())

    with pytest.raises(StandupValidationError, match="jiraId"):
        await standup_service.update_standup(db_session, BOB_ID, StandupUpdate(jira_id=None))


# --------------------------------------------------------------------------
# blocker status
# --------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_blocker_status_moves_freely_by_default(db_session):
    created = await standup_service.create_standup(
        db_session,
        BOB_ID,
        _build_create(has_blocker=True, blocker_description="Flaky env"),
    )

    critical = await standup_service.update_blocker_status(
        db_session, created.id, BlockerStatus.CRITICAL, allow_reopen=True
    )
    assert critical.blocker_status == BlockerStatus.CRITICAL
    assert critical.updated_at is not None

    resolved = await standup_service.update_blocker_status(
        db_session, created.id, BlockerStatus.RESOLVED, allow_reopen=True
    )
    assert resolved.blocker_status == BlockerStatus.RESOLVED

    reopened = await standup_service.update_blocker_status(
        db_session, created.id, BlockerStatus.NEW, allow_reopen=True
    )
    assert reopened.blocker_status == BlockerStatus.NEW


@pytest.mark.asyncio
async def test_update_blocker_status_reopen_rejected_when_disabled(db_session):
    created = await standup_service.create_standup(
        db_session,
        BOB_ID,
        _build_create(has_blocker=True, blocker_description="Flaky env"),
    )
    await standup_service.update_blocker_status(
        db_session, created.id, BlockerStatus.RESOLVED, allow_reopen=False
    )

    with pytest.raises(StandupValidationError):
        await standup_service.update_blocker_status(
            db_session, created.id, BlockerStatus.NEW, allow_reopen=False
        )

    # Re-confirming Resolved is not a reopen.
    still_resolved = await standup_service.update_blocker_status(
        db_session, created.id, BlockerStatus.RESOLVED, allow_reopen=False
    )
    assert still_resolved.blocker_status == BlockerStatus.RESOLVED


@pytest.mark.asyncio
async def test_update_blocker_status_without_blocker_is_not_found(db_session):
    created = await standup_service.create_standup(db_session, BOB_ID, _build_create())

    with pytest.raises(StandupNotFoundError):
        await standup_service.update_blocker_status(
            db_session, created.id, BlockerStatus.CRITICAL
        )


@pytest.mark.asyncio
async def test_update_blocker_status_unknown_standup_is_not_found(db_session):
    with pytest.raises(StandupNotFoundError):
        await standup_service.update_blocker_status(db_session, 424242, BlockerStatus.CRITICAL)


# --------------------------------------------------------------------------
# queries
# --------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_today_standup_not_found_when_nothing_submitted(db_session):
    with pytest.raises(StandupNotFoundError):
        await standup_service.get_today_standup(db_session, BOB_ID)


@pytest.mark.asyncio
async def test_history_is_newest_first_and_limited(db_session):
    db_session.add_all(
        [_past_standup(BOB_ID, days_ago, f"OLD-{days_ago}") for days_ago in range(1, 13)]
    )
    await db_session.commit()
    await standup_service.create_standup(db_session, BOB_ID, _build_create())

    history = await standup_service.get_user_history(db_session, BOB_ID)
    assert len(history) == 10
    assert history[0].jira_id == "JIRA-1"
    dates = [item.date for item in history]
    assert dates == sorted(dates, reverse=True)

    short = await standup_service.get_user_history(db_session, BOB_ID, count=3)
    assert [item.jira_id for item in short] == ["JIRA-1", "OLD-1", "OLD-2"]
    assert all(item.user_name == "Bob Smith" for item in short)


@pytest.mark.asyncio
async def test_history_for_unknown_user_is_empty(db_session):
    assert await standup_service.get_user_history(db_session, 999) == []


@pytest.mark.asyncio
async def test_team_standups_are_ordered_by_member_name(db_session):
    # Eve (5), Alice (1) and Carol (3) submit in that order.
    for user_id in (5, 1, 3):
        await standup_service.create_standup(db_session, user_id, _build_create())
    db_session.add(_past_standup(4, 1, "YESTERDAY"))
    await db_session.commit()

    today = await standup_service.get_team_standups(
        db_session, 1, standup_service.utc_today()
    )
    assert [s.user_name for s in today] == ["Alice Johnson", "Carol White", "Eve Davis"]

    yesterday = await standup_service.get_team_standups(
        db_session, 1, standup_service.utc_today() - timedelta(days=1)
    )
    assert [s.jira_id for s in yesterday] == ["YESTERDAY"]

    assert await standup_service.get_team_standups(db_session, 2, standup_service.utc_today()) == []


@pytest.mark.asyncio
async def test_has_submitted_today_ignores_previous_days(db_session):
    db_session.add(_past_standup(BOB_ID, 1, "YESTERDAY"))
    await db_session.commit()

    assert await standup_service.has_submitted_today(db_session, BOB_ID) is False

    await standup_service.create_standup(db_session, BOB_ID, _build_create())
    assert await standup_service.has_submitted_today(db_session, BOB_ID) is True


@pytest.mark.asyncio
async def test_team_submission_status_splits_members(db_session):
    """
    Scenario: team 1 has five members and only Bob has submitted today.
    """
    await standup_service.create_standup(db_session, BOB_ID, _build_create())

    status = await standup_service.get_team_submission_status(db_session, 1)

    assert status.total_members == 5
    assert status.submitted_count == 1
    assert [u.name for u in status.submitted] == ["Bob Smith"]
    assert [u.name for u in status.pending] == [
        "Alice Johnson",
        "Carol White",
        "David Brown",
        "Eve Davis",
    ]


@pytest.mark.asyncio
async def test_unique_constraint_backstops_duplicate_rows(db_session):
    """
    Two rows for the same (user, date) can never be stored, even when the
    service pre-check is bypassed.
    """
    db_session.add_all([_past_standup(BOB_ID, 1, "A"), _past_standup(BOB_ID, 1, "B")])
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()

    result = await db_session.execute(select(Standup).where(Standup.user_id == BOB_ID))
    assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_create_losing_commit_race_is_reported_as_conflict(db_session, monkeypatch):
    """
    Another session stores Bob's standup after the existence check but before
    this commit: the unique constraint rejects the insert, the service rolls
    back and reports a conflict, and the other session's row is kept.
    """
    original_execute = db_session.execute
    calls = 0

    async def execute_then_submit_elsewhere(*args, **kwargs):
        nonlocal calls
        result = await original_execute(*args, **kwargs)
        calls += 1
        if calls == 1:
            async with AsyncSessionLocal() as other:
                await standup_service.create_standup(
                    other, BOB_ID, _build_create(jira_id="OTHER")
                )
        return result

    monkeypatch.setattr(db_session, "execute", execute_then_submit_elsewhere)

    with pytest.raises(StandupConflictError) as exc_info:
        await standup_service.create_standup(db_session, BOB_ID, _build_create(jira_id="MINE"))

    assert str(exc_info.value) == standup_service.ALREADY_SUBMITTED_MESSAGE

    result = await db_session.execute(select(Standup.user_id, Standup.jira_id))
    assert [tuple(row) for row in result.all()] == [(BOB_ID, "OTHER")]


@pytest.mark.asyncio
async def test_validation_failures_are_logged_as_warnings(db_session, caplog):
    caplog.set_level(logging.WARNING, logger="app.services.standup_service")

    with pytest.raises(StandupValidationError):
        await standup_service.create_standup(
            db_session, BOB_ID, _build_create(has_blocker=True, blocker_description=" ")
        )

    await standup_service.create_standup(db_session, BOB_ID, _build_create())
    with pytest.raises(StandupValidationError):
        await standup_service.update_standup(
            db_session, BOB_ID, StandupUpdate(jira_id=None)
        )

    warnings = [
        r.getMessage()
        for r in caplog.records
        if r.name == "app.services.standup_service" and r.levelno == logging.WARNING
    ]
    assert warnings == [
        f"Rejected standup for user {BOB_ID}: blocker without description",
        f"Rejected update for user {BOB_ID}: jiraId set to null",
    ]
