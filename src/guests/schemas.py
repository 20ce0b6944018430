"""Request/response schemas shared by the guest features."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from src.guests.aggregation import GroupView
from src.guests.dtos import DietaryRestriction, RSVPStatus


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class IndividualResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    invitation_code: str
    first_name: str
    last_name: str
    group_name: str
    email: str | None = None
    rsvp_status: RSVPStatus
    dietary_restrictions: list[DietaryRestriction] = []
    comments: str | None = None
    created_at: datetime
    updated_at: datetime


class GroupResponse(BaseModel):
    invitation_code: str
    group_name: str
    total_members: int
    accepted_count: int
    declined_count: int
    pending_count: int
    created_at: datetime
    updated_at: datetime
    members: list[IndividualResponse]

    @classmethod
    def from_view(cls, view: GroupView) -> "GroupResponse":
        return cls(
            invitation_code=view.invitation_code,
            group_name=view.group_name,
            total_members=view.total_members,
            accepted_count=view.accepted_count,
            declined_count=view.declined_count,
            pending_count=view.pending_count,
            created_at=view.created_at,
            updated_at=view.updated_at,
            members=[IndividualResponse.model_validate(member) for member in view.members],
        )


class NewMemberRequest(BaseModel):
    """A member to add, either in a new group or to an existing one."""

    first_name: str
    last_name: str
    email: EmailStr | None = None

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_is_none(cls, value):
        return blank_to_none(value)
