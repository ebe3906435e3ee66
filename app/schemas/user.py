# app/schemas/user.py
from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.enums import UserRole


class UserSummary(CamelModel):
    """
    Minimal user shape used in team lists.
    """

    id: int = Field(..., examples=[2])
    name: str = Field(..., examples=["Bob Smith"])
    role: UserRole = Field(..., examples=["Member"])


class UserRead(CamelModel):
    """
    Full user profile as returned by the directory endpoints.
    """

    id: int = Field(..., examples=[1])
    name: str = Field(..., examples=["Alice Johnson"])
    email: str = Field(..., examples=["alice.johnson@company.com"])
    role: UserRole = Field(..., examples=["Lead"])
    role_label: str = Field(
        ...,
        description="Human-friendly role name for display.",
        examples=["Team Lead"],
    )
    team_id: int = Field(..., examples=[1])
    team_name: str = Field(..., examples=["Product Engineering"])
