# app/api/routes/users.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.lookups import Lookups, build_lookups
from app.schemas.user import UserRead, UserSummary
from app.services import directory
from app.services.exceptions import StandupNotFoundError

router = APIRouter(tags=["Directory"])


@router.get(
    "/users",
    response_model=list[UserRead],
    status_code=HTTPStatus.OK,
    summary="List all users",
    description=(
        "Return every user with their role and team. The client uses this list "
        "for its user picker (there is no real authentication)."
    ),
)
async def list_users(db: AsyncSession = Depends(get_db)) -> list[UserRead]:
    return await directory.list_users(db)


@router.get(
    "/users/{user_id}",
    response_model=UserRead,
    status_code=HTTPStatus.OK,
    summary="Get a user by ID",
    responses={404: {"description": "No user exists with the given ID."}},
)
async def get_user(
    user_id: int = Path(..., description="Numeric ID of the user.", ge=1, examples=[1]),
    db: AsyncSession = Depends(get_db),
) -> UserRead:
    try:
        return await directory.get_user(db, user_id)
    except StandupNotFoundError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))


@router.get(
    "/teams/{team_id}/members",
    response_model=list[UserSummary],
    status_code=HTTPStatus.OK,
    summary="List the members of a team",
    responses={404: {"description": "No team exists with the given ID."}},
)
async def list_team_members(
    team_id: int = Path(..., description="Numeric ID of the team.", ge=1, examples=[1]),
    db: AsyncSession = Depends(get_db),
) -> list[UserSummary]:
    try:
        return await directory.list_team_members(db, team_id)
    except StandupNotFoundError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))


@router.get(
    "/lookups",
    response_model=Lookups,
    status_code=HTTPStatus.OK,
    summary="Display labels and form options",
    description=(
        "Labels for user roles and blocker statuses, blocker status descriptions, "
        "and the percentage values offered by the standup form."
    ),
)
async def get_lookups() -> Lookups:
    return build_lookups()
