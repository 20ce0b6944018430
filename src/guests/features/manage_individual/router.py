import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, field_validator

from src.guests.dependencies import get_individual_read_model, get_individual_write_model
from src.guests.dtos import DietaryRestriction, IndividualUpdateDTO, RSVPStatus, StoreError
from src.guests.repository.read_models import IndividualReadModel
from src.guests.repository.write_models import IndividualWriteModel
from src.guests.schemas import IndividualResponse, blank_to_none
from src.guests.urls import INDIVIDUAL_URL, INDIVIDUALS_URL

logger = logging.getLogger(__name__)

router = APIRouter()

INDIVIDUAL_NOT_FOUND = "Individual not found"


class IndividualUpdateRequest(BaseModel):
    """Dashboard edit of one individual; omitted fields are left as they are."""

    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    rsvp_status: RSVPStatus | None = None
    dietary_restrictions: list[DietaryRestriction] | None = None
    comments: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_is_none(cls, value):
        return blank_to_none(value)


class IndividualListResponse(BaseModel):
    individuals: list[IndividualResponse]


class IndividualDeleteResponse(BaseModel):
    message: str
    deleted_individual: IndividualResponse


@router.get(INDIVIDUALS_URL, response_model=IndividualListResponse)
async def list_individuals(
    read_model: IndividualReadModel = Depends(get_individual_read_model),
) -> IndividualListResponse:
    """List every individual, newest first."""
    try:
        individuals = await read_model.find_all()
    except StoreError as e:
        logger.error(f"Failed to fetch individuals: {e}")
        raise HTTPException(status_code=503, detail="Failed to fetch individuals")

    return IndividualListResponse(
        individuals=[IndividualResponse.model_validate(i) for i in individuals]
    )


@router.get(INDIVIDUAL_URL, response_model=IndividualResponse)
async def get_individual(
    individual_id: UUID,
    read_model: IndividualReadModel = Depends(get_individual_read_model),
) -> IndividualResponse:
    try:
        individual = await read_model.find_by_id(individual_id)
    except StoreError as e:
        logger.error(f"Failed to fetch individual {individual_id}: {e}")
        raise HTTPException(status_code=503, detail="Failed to fetch individual")

    if individual is None:
        raise HTTPException(status_code=404, detail=INDIVIDUAL_NOT_FOUND)
    return IndividualResponse.model_validate(individual)


@router.put(INDIVIDUAL_URL, response_model=IndividualResponse)
async def update_individual(
    individual_id: UUID,
    request: IndividualUpdateRequest,
    write_model: IndividualWriteModel = Depends(get_individual_write_model),
) -> IndividualResponse:
    """
    Edit one individual's names, RSVP status, dietary restrictions and comments.
    Group name and invitation code are shared by the group and cannot change here.
    """
    for name in (request.first_name, request.last_name):
        if name is not None and not name.strip():
            raise HTTPException(status_code=400, detail="First name and last name cannot be empty")

    changes = IndividualUpdateDTO(
        first_name=request.first_name.strip() if request.first_name else None,
        last_name=request.last_name.strip() if request.last_name else None,
        email=request.email,
        rsvp_status=request.rsvp_status,
        dietary_restrictions=request.dietary_restrictions,
        comments=request.comments,
    )
    try:
        individual = await write_model.update_by_id(individual_id, changes)
    except StoreError as e:
        logger.error(f"Failed to update individual {individual_id}: {e}")
        raise HTTPException(status_code=503, detail="Failed to update individual")

    if individual is None:
        raise HTTPException(status_code=404, detail=INDIVIDUAL_NOT_FOUND)
    return IndividualResponse.model_validate(individual)


@router.delete(INDIVIDUAL_URL, response_model=IndividualDeleteResponse)
async def delete_individual(
    individual_id: UUID,
    write_model: IndividualWriteModel = Depends(get_individual_write_model),
) -> IndividualDeleteResponse:
    """Delete one individual; the group shrinks, or disappears with its last member."""
    try:
        individual = await write_model.delete_by_id(individual_id)
    except StoreError as e:
        logger.error(f"Failed to delete individual {individual_id}: {e}")
        raise HTTPException(status_code=503, detail="Failed to delete individual")

    if individual is None:
        raise HTTPException(status_code=404, detail=INDIVIDUAL_NOT_FOUND)
    return IndividualDeleteResponse(
        message="Individual deleted successfully",
        deleted_individual=IndividualResponse.model_validate(individual),
    )
