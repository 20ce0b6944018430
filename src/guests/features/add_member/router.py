from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.guests.dependencies import get_individual_read_model, get_individual_write_model
from src.guests.dtos import GroupNotFoundError, InvalidGuestDataError, StoreError
from src.guests.features.add_member.write_model import GroupMemberWriteModel
from src.guests.repository.read_models import IndividualReadModel
from src.guests.repository.write_models import IndividualWriteModel
from src.guests.schemas import IndividualResponse, NewMemberRequest
from src.guests.urls import GROUP_MEMBERS_URL

router = APIRouter()


class AddMemberResponse(BaseModel):
    message: str
    individual: IndividualResponse


def get_group_member_write_model(
    read_model: IndividualReadModel = Depends(get_individual_read_model),
    write_model: IndividualWriteModel = Depends(get_individual_write_model),
) -> GroupMemberWriteModel:
    """Dependency to get group member write model instance."""
    return GroupMemberWriteModel(read_model=read_model, write_model=write_model)


@router.post(GROUP_MEMBERS_URL, response_model=AddMemberResponse, status_code=201)
async def add_member(
    invitation_code: str,
    request: NewMemberRequest,
    write_model: GroupMemberWriteModel = Depends(get_group_member_write_model),
) -> AddMemberResponse:
    """
    Add a member to an existing group.
    The new member inherits the group's name and starts as Pending.
    """
    try:
        individual = await write_model.add_member(
            invitation_code=invitation_code,
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
        )
    except InvalidGuestDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GroupNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Failed to add member: {e}")

    return AddMemberResponse(
        message="Member added successfully",
        individual=IndividualResponse.model_validate(individual),
    )
