from fastapi import APIRouter, Depends, HTTPException

from src.guests.dependencies import get_individual_read_model, get_individual_write_model
from src.guests.dtos import (
    BatchWriteError,
    InvalidGuestDataError,
    InvitationCodeExhaustedError,
    StoreError,
)
from src.guests.features.create_group.dtos import CreateGroupRequest, CreateGroupResponse
from src.guests.features.create_group.write_model import GroupCreateWriteModel, NewMemberDTO
from src.guests.repository.read_models import IndividualReadModel
from src.guests.repository.write_models import IndividualWriteModel
from src.guests.schemas import IndividualResponse
from src.guests.urls import GROUPS_URL

router = APIRouter()


def get_group_create_write_model(
    read_model: IndividualReadModel = Depends(get_individual_read_model),
    write_model: IndividualWriteModel = Depends(get_individual_write_model),
) -> GroupCreateWriteModel:
    """Dependency to get group creation write model instance."""
    return GroupCreateWriteModel(read_model=read_model, write_model=write_model)


@router.post(GROUPS_URL, response_model=CreateGroupResponse, status_code=201)
async def create_group(
    request: CreateGroupRequest,
    write_model: GroupCreateWriteModel = Depends(get_group_create_write_model),
) -> CreateGroupResponse:
    """
    Create an invitation group.

    Generates one invitation code shared by every member and inserts the
    members one by one with RSVP status Pending.
    """
    members = [
        NewMemberDTO(
            first_name=member.first_name,
            last_name=member.last_name,
            email=member.email,
            dietary_restrictions=member.dietary_restrictions,
            comments=member.comments,
        )
        for member in request.members
    ]

    try:
        group = await write_model.create_group(group_name=request.group_name, members=members)
    except InvalidGuestDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BatchWriteError as e:
        raise HTTPException(
            status_code=500,
            detail={
                "message": "Failed to add invitation",
                "invitation_code": e.invitation_code,
                "created": [str(individual.uuid) for individual in e.created],
                "failed": f"{e.failed.first_name} {e.failed.last_name}",
                "skipped": [f"{m.first_name} {m.last_name}" for m in e.skipped],
                "error": e.reason,
            },
        )
    except (StoreError, InvitationCodeExhaustedError) as e:
        raise HTTPException(status_code=503, detail=f"Failed to add invitation: {e}")

    return CreateGroupResponse(
        message="Invitation and members added successfully!",
        invitation_code=group.invitation_code,
        group_name=group.group_name,
        members=[IndividualResponse.model_validate(member) for member in group.members],
    )
