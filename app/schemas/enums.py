# app/schemas/enums.py
from enum import Enum


class UserRole(str, Enum):
    """
    Roles a StandupBot user can hold within a team.
    """

    MEMBER = "Member"
    LEAD = "Lead"


class BlockerStatus(str, Enum):
    """
    Lifecycle of a blocker reported within a standup.

    A blocker always starts as NEW; leads may then mark it CRITICAL or
    RESOLVED.
    """

    NEW = "New"
    CRITICAL = "Critical"
    RESOLVED = "Resolved"
