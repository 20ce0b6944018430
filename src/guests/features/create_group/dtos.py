"""DTOs for create group feature."""

from pydantic import BaseModel

from src.guests.dtos import DietaryRestriction
from src.guests.schemas import IndividualResponse, NewMemberRequest


class GroupMemberRequest(NewMemberRequest):
    dietary_restrictions: list[DietaryRestriction] = []
    comments: str | None = None


class CreateGroupRequest(BaseModel):
    """Request body for creating a group with its first members."""

    group_name: str
    members: list[GroupMemberRequest]


class CreateGroupResponse(BaseModel):
    message: str
    invitation_code: str
    group_name: str
    members: list[IndividualResponse]
