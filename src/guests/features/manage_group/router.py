import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.guests.aggregation import build_group_view
from src.guests.dependencies import get_individual_read_model, get_individual_write_model
from src.guests.dtos import DietaryRestriction, GroupUpdateDTO, RSVPStatus, StoreError
from src.guests.repository.read_models import IndividualReadModel
from src.guests.repository.write_models import IndividualWriteModel
from src.guests.schemas import GroupResponse
from src.guests.urls import GROUP_URL

logger = logging.getLogger(__name__)

router = APIRouter()

GROUP_NOT_FOUND = "No group found with this invitation code"


class GroupUpdateRequest(BaseModel):
    """Fields applied to every member of the group; omitted fields are left as they are."""

    group_name: str | None = None
    rsvp_status: RSVPStatus | None = None
    dietary_restrictions: list[DietaryRestriction] | None = None
    comments: str | None = None


class GroupUpdateResponse(BaseModel):
    message: str
    modified_count: int


class GroupDeleteResponse(BaseModel):
    message: str
    deleted_count: int


@router.get(GROUP_URL, response_model=GroupResponse)
async def get_group(
    invitation_code: str,
    read_model: IndividualReadModel = Depends(get_individual_read_model),
) -> GroupResponse:
    """
    Resolve an invitation code to its group.
    This is the guest-facing lookup behind the RSVP code entry.
    """
    try:
        members = await read_model.find_by_code(invitation_code)
    except StoreError as e:
        logger.error(f"Failed to fetch group {invitation_code}: {e}")
        raise HTTPException(status_code=503, detail="Internal server error")

    if not members:
        raise HTTPException(status_code=404, detail=GROUP_NOT_FOUND)

    return GroupResponse.from_view(build_group_view(invitation_code, members))


@router.put(GROUP_URL, response_model=GroupUpdateResponse)
async def update_group(
    invitation_code: str,
    request: GroupUpdateRequest,
    write_model: IndividualWriteModel = Depends(get_individual_write_model),
) -> GroupUpdateResponse:
    """Update every member of a group at once."""
    if request.group_name is not None and not request.group_name.strip():
        raise HTTPException(status_code=400, detail="Group name cannot be empty")

    changes = GroupUpdateDTO(
        group_name=request.group_name.strip() if request.group_name else None,
        rsvp_status=request.rsvp_status,
        dietary_restrictions=request.dietary_restrictions,
        comments=request.comments,
    )
    try:
        modified_count = await write_model.update_by_code(invitation_code, changes)
    except StoreError as e:
        logger.error(f"Failed to update group {invitation_code}: {e}")
        raise HTTPException(status_code=503, detail="Internal server error")

    if modified_count == 0:
        raise HTTPException(status_code=404, detail=GROUP_NOT_FOUND)

    return GroupUpdateResponse(message="Group updated successfully", modified_count=modified_count)


@router.delete(GROUP_URL, response_model=GroupDeleteResponse)
async def delete_group(
    invitation_code: str,
    write_model: IndividualWriteModel = Depends(get_individual_write_model),
) -> GroupDeleteResponse:
    """Delete every member of a group; the group disappears with its last member."""
    try:
        deleted_count = await write_model.delete_by_code(invitation_code)
    except StoreError as e:
        logger.error(f"Failed to delete group {invitation_code}: {e}")
        raise HTTPException(status_code=503, detail="Internal server error")

    if deleted_count == 0:
        raise HTTPException(status_code=404, detail=GROUP_NOT_FOUND)

    logger.info(f"Deleted group {invitation_code} ({deleted_count} members)")
    return GroupDeleteResponse(message="Group deleted successfully", deleted_count=deleted_count)
