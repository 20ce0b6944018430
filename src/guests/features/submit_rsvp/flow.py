"""Guest RSVP flow.

The flow has three steps, held by the client session and never persisted:

    CodeEntryStep  --lookup_group-->  GroupResponseStep  --submit-->  ConfirmationStep

Steps are immutable values; every transition returns a new step. Submitting
writes one update per member, in order. The writes are not transactional: the
first failure stops the remaining writes, nothing already written is rolled
back, and the confirmation step reports which members were saved.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from uuid import UUID

from src.guests.dtos import (
    DietaryRestriction,
    IndividualDTO,
    IndividualUpdateDTO,
    RSVPStatus,
    StoreError,
    SubmissionBlockedError,
    SubmissionResultDTO,
    normalize_dietary_restrictions,
)
from src.guests.invitation_codes import INVITATION_CODE_LENGTH
from src.guests.repository.read_models import IndividualReadModel
from src.guests.repository.write_models import IndividualWriteModel

logger = logging.getLogger(__name__)

CODE_LENGTH_MESSAGE = f"Please enter your {INVITATION_CODE_LENGTH}-character invitation code."
LOOKUP_FAILED_MESSAGE = (
    "We couldn't find an invitation with that code. Please check it and try again."
)


class Attendance(str, Enum):
    UNANSWERED = "unanswered"
    YES = "yes"
    NO = "no"


@dataclass(frozen=True)
class MemberResponse:
    individual_id: UUID
    first_name: str
    last_name: str
    attendance: Attendance = Attendance.UNANSWERED
    dietary_restrictions: tuple[DietaryRestriction, ...] = ()
    comments: str = ""

    @classmethod
    def from_individual(cls, individual: IndividualDTO) -> "MemberResponse":
        return cls(
            individual_id=individual.uuid,
            first_name=individual.first_name,
            last_name=individual.last_name,
        )


@dataclass(frozen=True)
class CodeEntryStep:
    code: str = ""
    error: str | None = None
    # set when the lookup failed because the store could not be reached
    store_unavailable: bool = False


@dataclass(frozen=True)
class GroupResponseStep:
    invitation_code: str
    group_name: str
    members: tuple[MemberResponse, ...]
    error: str | None = None

    @property
    def unanswered(self) -> list[UUID]:
        return [
            member.individual_id
            for member in self.members
            if member.attendance == Attendance.UNANSWERED
        ]

    @property
    def can_submit(self) -> bool:
        return not self.unanswered


@dataclass(frozen=True)
class ConfirmationStep:
    invitation_code: str
    group_name: str
    result: SubmissionResultDTO = field(default_factory=SubmissionResultDTO)


# =============================================================================
# State A: code entry
# =============================================================================


async def lookup_group(
    step: CodeEntryStep, code: str, read_model: IndividualReadModel
) -> CodeEntryStep | GroupResponseStep:
    """Resolve a code to its group, or stay on code entry with a retry message."""
    code = (code or "").strip().upper()
    if len(code) != INVITATION_CODE_LENGTH:
        return replace(step, code=code, error=CODE_LENGTH_MESSAGE, store_unavailable=False)

    try:
        members = await read_model.find_by_code(code)
    except StoreError as e:
        logger.warning(f"Invitation lookup for {code} failed: {e}")
        return replace(step, code=code, error=LOOKUP_FAILED_MESSAGE, store_unavailable=True)

    if not members:
        return replace(step, code=code, error=LOOKUP_FAILED_MESSAGE, store_unavailable=False)

    return GroupResponseStep(
        invitation_code=code,
        group_name=members[0].group_name,
        members=tuple(MemberResponse.from_individual(member) for member in members),
    )


# =============================================================================
# State B: group response
# =============================================================================


def _update_member(step: GroupResponseStep, individual_id: UUID, **changes) -> GroupResponseStep:
    if individual_id not in {member.individual_id for member in step.members}:
        raise ValueError(f"{individual_id} is not a member of group {step.invitation_code}")
    return replace(
        step,
        error=None,
        members=tuple(
            replace(member, **changes) if member.individual_id == individual_id else member
            for member in step.members
        ),
    )


def _member(step: GroupResponseStep, individual_id: UUID) -> MemberResponse:
    for member in step.members:
        if member.individual_id == individual_id:
            return member
    raise ValueError(f"{individual_id} is not a member of group {step.invitation_code}")


def set_attendance(
    step: GroupResponseStep, individual_id: UUID, attendance: Attendance
) -> GroupResponseStep:
    """Answer for one member. Declining discards that member's dietary input and comments."""
    if attendance == Attendance.NO:
        return _update_member(
            step, individual_id, attendance=attendance, dietary_restrictions=(), comments=""
        )
    return _update_member(step, individual_id, attendance=attendance)


def set_dietary_restrictions(
    step: GroupResponseStep,
    individual_id: UUID,
    restrictions: Sequence[DietaryRestriction],
) -> GroupResponseStep:
    if _member(step, individual_id).attendance != Attendance.YES:
        raise ValueError("Dietary restrictions can only be set for attending members")
    return _update_member(
        step,
        individual_id,
        dietary_restrictions=tuple(normalize_dietary_restrictions(restrictions)),
    )


def set_comments(step: GroupResponseStep, individual_id: UUID, comments: str) -> GroupResponseStep:
    if _member(step, individual_id).attendance != Attendance.YES:
        raise ValueError("Comments can only be set for attending members")
    return _update_member(step, individual_id, comments=comments)


def member_update(member: MemberResponse) -> IndividualUpdateDTO:
    accepted = member.attendance == Attendance.YES
    return IndividualUpdateDTO(
        rsvp_status=RSVPStatus.ACCEPTED if accepted else RSVPStatus.DECLINED,
        dietary_restrictions=list(member.dietary_restrictions) if accepted else [],
        comments=member.comments if accepted else "",
    )


def build_member_updates(step: GroupResponseStep) -> list[tuple[UUID, IndividualUpdateDTO]]:
    if not step.can_submit:
        raise SubmissionBlockedError(step.unanswered)
    return [(member.individual_id, member_update(member)) for member in step.members]


# =============================================================================
# B -> C: submission
# =============================================================================


async def submit_member_updates(
    write_model: IndividualWriteModel,
    updates: Sequence[tuple[UUID, IndividualUpdateDTO]],
) -> SubmissionResultDTO:
    """Write each member's update in turn, stopping at the first failure."""
    applied: list[UUID] = []
    for index, (individual_id, changes) in enumerate(updates):
        try:
            updated = await write_model.update_by_id(individual_id, changes)
            error = None if updated else f"Individual {individual_id} not found"
        except StoreError as e:
            error = str(e)

        if error:
            skipped = [skipped_id for skipped_id, _ in updates[index + 1 :]]
            logger.error(
                f"RSVP stopped at {individual_id} after {len(applied)} updates; "
                f"{len(skipped)} not attempted: {error}"
            )
            return SubmissionResultDTO(
                applied=applied, failed=individual_id, skipped=skipped, error=error
            )
        applied.append(individual_id)

    return SubmissionResultDTO(applied=applied)


async def submit(
    step: GroupResponseStep, write_model: IndividualWriteModel
) -> GroupResponseStep | ConfirmationStep:
    """Submit the group's answers; blocked (staying on this step) while anyone is unanswered."""
    try:
        updates = build_member_updates(step)
    except SubmissionBlockedError as e:
        return replace(step, error=str(e))

    result = await submit_member_updates(write_model, updates)
    return ConfirmationStep(
        invitation_code=step.invitation_code,
        group_name=step.group_name,
        result=result,
    )
