# app/schemas/lookups.py
from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.enums import BlockerStatus, UserRole

# Display metadata lives here rather than on the enums themselves.
USER_ROLE_LABELS: dict[UserRole, str] = {
    UserRole.MEMBER: "Team Member",
    UserRole.LEAD: "Team Lead",
}

BLOCKER_STATUS_LABELS: dict[BlockerStatus, str] = {
    BlockerStatus.NEW: "New",
    BlockerStatus.CRITICAL: "Critical",
    BlockerStatus.RESOLVED: "Resolved",
}

BLOCKER_STATUS_DESCRIPTIONS: dict[BlockerStatus, str] = {
    BlockerStatus.NEW: "Newly reported blocker",
    BlockerStatus.CRITICAL: "Marked as critical by team lead",
    BlockerStatus.RESOLVED: "Blocker has been resolved",
}

PERCENTAGE_STEPS: list[int] = list(range(0, 101, 10))


def user_role_label(role: UserRole | str) -> str:
    """
    Human-friendly label for a role value; unknown values are echoed back.
    """
    try:
        return USER_ROLE_LABELS[UserRole(role)]
    except ValueError:
        return str(role)


def blocker_status_label(status: BlockerStatus | str) -> str:
    try:
        return BLOCKER_STATUS_LABELS[BlockerStatus(status)]
    except ValueError:
        return str(status)


class LookupOption(CamelModel):
    """
    One selectable value plus its display text.
    """

    value: str | int
    label: str
    description: str | None = None


class Lookups(CamelModel):
    """
    Option lists needed to render the standup form and team views.
    """

    user_roles: list[LookupOption] = Field(..., description="Every user role with its label.")
    blocker_statuses: list[LookupOption] = Field(
        ...,
        description="Every blocker status with its label and description.",
    )
    percentage_options: list[LookupOption] = Field(
        ...,
        description="Progress values offered by the form (0-100 in steps of 10).",
    )


def build_lookups() -> Lookups:
    return Lookups(
        user_roles=[
            LookupOption(value=role.value, label=user_role_label(role)) for role in UserRole
        ],
        blocker_statuses=[
            LookupOption(
                value=status.value,
                label=blocker_status_label(status),
                description=BLOCKER_STATUS_DESCRIPTIONS[status],
            )
            for status in BlockerStatus
        ],
        percentage_options=[
            LookupOption(value=step, label=f"{step}%") for step in PERCENTAGE_STEPS
        ],
    )
