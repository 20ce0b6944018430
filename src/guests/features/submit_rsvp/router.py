import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.guests.dependencies import get_individual_read_model, get_individual_write_model
from src.guests.dtos import DietaryRestriction
from src.guests.features.submit_rsvp.flow import (
    Attendance,
    CodeEntryStep,
    ConfirmationStep,
    GroupResponseStep,
    lookup_group,
    set_attendance,
    set_comments,
    set_dietary_restrictions,
    submit,
)
from src.guests.repository.read_models import IndividualReadModel
from src.guests.repository.write_models import IndividualWriteModel
from src.guests.urls import SUBMIT_RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class MemberRSVPRequest(BaseModel):
    individual_id: UUID
    attending: bool | None = None
    dietary_restrictions: list[DietaryRestriction] = []
    comments: str = ""


class SubmitRSVPRequest(BaseModel):
    responses: list[MemberRSVPRequest]


class SubmitRSVPResponse(BaseModel):
    message: str
    invitation_code: str
    group_name: str
    updated: list[UUID]


def apply_responses(step: GroupResponseStep, responses: list[MemberRSVPRequest]) -> GroupResponseStep:
    for response in responses:
        if response.attending is None:
            continue
        attendance = Attendance.YES if response.attending else Attendance.NO
        step = set_attendance(step, response.individual_id, attendance)
        if attendance == Attendance.YES:
            step = set_dietary_restrictions(
                step, response.individual_id, response.dietary_restrictions
            )
            step = set_comments(step, response.individual_id, response.comments)
    return step


@router.post(SUBMIT_RSVP_URL, response_model=SubmitRSVPResponse)
async def submit_rsvp(
    invitation_code: str,
    request: SubmitRSVPRequest,
    read_model: IndividualReadModel = Depends(get_individual_read_model),
    write_model: IndividualWriteModel = Depends(get_individual_write_model),
) -> SubmitRSVPResponse:
    """
    Record a group's RSVP in one submission.
    Every member must be answered; a declining member's dietary restrictions
    and comments are cleared. Members are written one at a time, so a store
    failure part way through leaves the earlier members saved.
    """
    step = await lookup_group(CodeEntryStep(), invitation_code, read_model)
    if isinstance(step, CodeEntryStep):
        if step.store_unavailable:
            raise HTTPException(status_code=503, detail="Failed to load your invitation. Please try again.")
        raise HTTPException(status_code=404, detail=step.error)

    try:
        step = apply_responses(step, request.responses)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    outcome = await submit(step, write_model)
    if not isinstance(outcome, ConfirmationStep):
        raise HTTPException(
            status_code=400,
            detail={"message": outcome.error, "unanswered": [str(i) for i in outcome.unanswered]},
        )

    result = outcome.result
    if not result.complete:
        raise HTTPException(
            status_code=500,
            detail={
                "message": "Your RSVP was only partly saved. Please try again.",
                "updated": [str(i) for i in result.applied],
                "failed": str(result.failed),
                "skipped": [str(i) for i in result.skipped],
                "error": result.error,
            },
        )

    logger.info(f"RSVP received for {outcome.group_name} ({outcome.invitation_code})")
    return SubmitRSVPResponse(
        message="Thank you! Your RSVP has been saved.",
        invitation_code=outcome.invitation_code,
        group_name=outcome.group_name,
        updated=result.applied,
    )
