# app/schemas/standup.py
from datetime import date as date_type, datetime

from pydantic import Field, field_validator

from app.schemas.base import CamelModel, as_utc
from app.schemas.enums import BlockerStatus
from app.schemas.user import UserSummary


# --------------------------------------------------------------------------
# Requests
# --------------------------------------------------------------------------

class StandupCreate(CamelModel):
    """
    Payload for submitting today's standup (POST /standups/{userId}).
    """

    jira_id: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Ticket the user is working on.",
        examples=["JIRA-1"],
    )
    task_description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the user is working on today.",
        examples=["Build API"],
    )
    percentage_complete: int = Field(
        ...,
        ge=0,
        le=100,
        description="Progress on the current task, 0-100 inclusive.",
        examples=[40],
    )
    has_blocker: bool = Field(
        default=False,
        description="Whether the user is blocked.",
    )
    blocker_description: str | None = Field(
        default=None,
        max_length=1000,
        description="Required when `hasBlocker` is true; ignored otherwise.",
    )
    next_task: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the user plans to pick up next.",
        examples=["Write tests"],
    )


class StandupUpdate(CamelModel):
    """
    Partial update of today's standup (PUT /standups/{userId}).

    Every field is optional. Only the keys present in the request body are
    applied; pydantic's fields-set tracking keeps "omitted" distinct from
    "sent as null".
    """

    jira_id: str | None = Field(default=None, min_length=1, max_length=50)
    task_description: str | None = Field(default=None, min_length=1, max_length=500)
    percentage_complete: int | None = Field(default=None, ge=0, le=100)
    has_blocker: bool | None = Field(default=None)
    blocker_description: str | None = Field(default=None, max_length=1000)
    next_task: str | None = Field(default=None, min_length=1, max_length=500)


class BlockerStatusUpdate(CamelModel):
    """
    Payload for PATCH /standups/{standupId}/blocker-status.
    """

    status: BlockerStatus = Field(
        ...,
        description="New blocker status.",
        examples=["Critical"],
    )


# --------------------------------------------------------------------------
# Responses
# --------------------------------------------------------------------------

class StandupRead(CamelModel):
    """
    Full representation of a standup, including the author's display name.
    """

    id: int = Field(..., examples=[1])
    user_id: int = Field(..., examples=[2])
    user_name: str = Field(..., examples=["Bob Smith"])
    date: date_type
    jira_id: str
    task_description: str
    percentage_complete: int
    has_blocker: bool
    blocker_description: str | None = None
    blocker_status: BlockerStatus | None = None
    next_task: str
    created_at: datetime
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class StandupSummary(CamelModel):
    """
    Compact standup shape used by history lists (no free-text bodies).
    """

    id: int
    user_id: int
    user_name: str
    date: date_type
    jira_id: str
    percentage_complete: int
    has_blocker: bool
    blocker_status: BlockerStatus | None = None
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class SubmissionStatus(CamelModel):
    """
    Whether a user has already submitted today.
    """

    has_submitted_today: bool


class TeamSubmissionStatus(CamelModel):
    """
    Today's submission split for one team.
    """

    total_members: int = Field(..., examples=[5])
    submitted_count: int = Field(..., examples=[1])
    submitted: list[UserSummary]
    pending: list[UserSummary]
