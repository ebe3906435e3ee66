# app/api/routes/standups.py
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.session import get_db
from app.schemas.standup import (
    BlockerStatusUpdate,
    StandupCreate,
    StandupRead,
    StandupSummary,
    StandupUpdate,
    SubmissionStatus,
    TeamSubmissionStatus,
)
from app.services import standup_service
from app.services.exceptions import (
    StandupConflictError,
    StandupNotFoundError,
    StandupValidationError,
)

router = APIRouter(prefix="/standups", tags=["Standups"])

_settings = get_settings()


@router.get(
    "/today/{user_id}",
    response_model=StandupRead,
    status_code=HTTPStatus.OK,
    summary="Get today's standup for a user",
    description=(
        "Return the standup the user submitted today (UTC date).\n\n"
        "A 404 simply means nothing has been submitted yet; clients use it to "
        "decide between the create and update forms."
    ),
    responses={
        200: {"description": "Today's standup."},
        404: {
            "description": "The user has not submitted a standup today.",
            "content": {
                "application/json": {
                    "example": {"detail": "No standup found for user id=2 today."}
                }
            },
        },
    },
)
async def get_today_standup(
    user_id: int = Path(..., description="Numeric ID of the user.", examples=[2]),
    db: AsyncSession = Depends(get_db),
) -> StandupRead:
    try:
        return await standup_service.get_today_standup(db, user_id)
    except StandupNotFoundError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))


@router.get(
    "/history/{user_id}",
    response_model=list[StandupSummary],
    status_code=HTTPStatus.OK,
    summary="List a user's recent standups",
    description=(
        "Return the user's most recent standups, newest first, in the compact "
        "summary shape (no task or blocker descriptions)."
    ),
)
async def get_user_history(
    user_id: int = Path(..., description="Numeric ID of the user.", examples=[2]),
    count: int = Query(
        default=_settings.HISTORY_DEFAULT_COUNT,
        ge=1,
        le=_settings.HISTORY_MAX_COUNT,
        description="Maximum number of standups to return.",
    ),
    db: AsyncSession = Depends(get_db),
) -> list[StandupSummary]:
    return await standup_service.get_user_history(db, user_id, count=count)


@router.get(
    "/team/{team_id}",
    response_model=list[StandupRead],
    status_code=HTTPStatus.OK,
    summary="List a team's standups for a date",
    description=(
        "Return every standup submitted by members of the team on the given "
        "date, ordered by member name. `date` defaults to today (UTC)."
    ),
)
async def get_team_standups(
    team_id: int = Path(..., description="Numeric ID of the team.", examples=[1]),
    date: date_type | None = Query(
        default=None,
        description="Calendar date in ISO format (YYYY-MM-DD). Defaults to today.",
        examples=["2026-01-28"],
    ),
    db: AsyncSession = Depends(get_db),
) -> list[StandupRead]:
    target_date = date or standup_service.utc_today()
    return await standup_service.get_team_standups(db, team_id, target_date)


@router.get(
    "/team/{team_id}/status",
    response_model=TeamSubmissionStatus,
    status_code=HTTPStatus.OK,
    summary="Today's submission status for a team",
    description=(
        "Split the team's members into those who have submitted today and "
        "those still pending."
    ),
    responses={
        200: {
            "description": "Submission split for today.",
            "content": {
                "application/json": {
                    "example": {
                        "totalMembers": 5,
                        "submittedCount": 1,
                        "submitted": [{"id": 2, "name": "Bob Smith", "role": "Member"}],
                        "pending": [
                            {"id": 1, "name": "Alice Johnson", "role": "Lead"},
                        ],
                    }
                }
            },
        }
    },
)
async def get_team_submission_status(
    team_id: int = Path(..., description="Numeric ID of the team.", examples=[1]),
    db: AsyncSession = Depends(get_db),
) -> TeamSubmissionStatus:
    return await standup_service.get_team_submission_status(db, team_id)


@router.get(
    "/status/{user_id}",
    response_model=SubmissionStatus,
    status_code=HTTPStatus.OK,
    summary="Check whether a user has submitted today",
)
async def get_submission_status(
    user_id: int = Path(..., description="Numeric ID of the user.", examples=[2]),
    db: AsyncSession = Depends(get_db),
) -> SubmissionStatus:
    submitted = await standup_service.has_submitted_today(db, user_id)
    return SubmissionStatus(has_submitted_today=submitted)


@router.post(
    "/{user_id}",
    response_model=StandupRead,
    status_code=HTTPStatus.CREATED,
    summary="Submit today's standup",
    description=(
        "Create the user's standup for today.\n\n"
        "- Only one standup per user per day; a second submission returns 409 "
        "and the client should switch to `PUT`.\n"
        "- `blockerDescription` is required when `hasBlocker` is true.\n"
        "- New blockers start with status `New`."
    ),
    responses={
        201: {"description": "Standup created."},
        400: {
            "description": "Invalid payload (e.g. blocker without description, percentage out of range).",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Blocker description is required when Has Blocker is checked."
                    }
                }
            },
        },
        404: {"description": "Unknown user."},
        409: {
            "description": "A standup was already submitted today.",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Standup already submitted for today. Use update instead."
                    }
                }
            },
        },
    },
)
async def create_standup(
    payload: StandupCreate,
    user_id: int = Path(..., description="Numeric ID of the submitting user.", examples=[2]),
    db: AsyncSession = Depends(get_db),
) -> StandupRead:
    try:
        return await standup_service.create_standup(db, user_id, payload)
    except StandupConflictError as exc:
        raise HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(exc))
    except StandupValidationError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))
    except StandupNotFoundError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))


@router.put(
    "/{user_id}",
    response_model=StandupRead,
    status_code=HTTPStatus.OK,
    summary="Update today's standup",
    description=(
        "Partially update the user's standup for today. Only fields present in "
        "the body are modified.\n\n"
        "Setting `hasBlocker` to false clears the blocker description and status."
    ),
    responses={
        200: {"description": "Standup updated."},
        400: {"description": "The resulting standup would be invalid."},
        404: {"description": "No standup submitted today."},
    },
)
async def update_standup(
    payload: StandupUpdate,
    user_id: int = Path(..., description="Numeric ID of the user.", examples=[2]),
    db: AsyncSession = Depends(get_db),
) -> StandupRead:
    try:
        return await standup_service.update_standup(db, user_id, payload)
    except StandupNotFoundError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    except StandupValidationError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))


@router.patch(
    "/{standup_id}/blocker-status",
    response_model=StandupRead,
    status_code=HTTPStatus.OK,
    summary="Change a blocker's status",
    description=(
        "Set the status of the blocker attached to a standup (New, Critical, "
        "Resolved). Intended for team leads; the role is not checked here."
    ),
    responses={
        200: {"description": "Blocker status updated."},
        400: {"description": "Transition not allowed (reopening disabled)."},
        404: {"description": "Unknown standup, or the standup has no blocker."},
    },
)
async def update_blocker_status(
    payload: BlockerStatusUpdate,
    standup_id: int = Path(..., description="Numeric ID of the standup.", examples=[1]),
    db: AsyncSession = Depends(get_db),
) -> StandupRead:
    try:
        return await standup_service.update_blocker_status(db, standup_id, payload.status)
    except StandupNotFoundError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    except StandupValidationError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))
