"""Write model for creating invitation groups.

Claims one fresh invitation code for the group, then inserts each member as
its own record, one after the other. The batch is not atomic: the first
failed insert stops the loop and the members written so far are kept.
"""

import logging
import random
from dataclasses import dataclass, field

from src.guests.dtos import (
    BatchWriteError,
    DietaryRestriction,
    IndividualDTO,
    InvalidGuestDataError,
    InvitationCodeExhaustedError,
    NewIndividualDTO,
    RSVPStatus,
    StoreError,
)
from src.guests.invitation_codes import generate_unique_code
from src.guests.repository.read_models import IndividualReadModel
from src.guests.repository.write_models import IndividualWriteModel

logger = logging.getLogger(__name__)

# Claims lost to a concurrent group creation before giving up
CLAIM_ATTEMPTS = 5


@dataclass(frozen=True)
class NewMemberDTO:
    first_name: str
    last_name: str
    email: str | None = None
    dietary_restrictions: list[DietaryRestriction] = field(default_factory=list)
    comments: str | None = None


@dataclass(frozen=True)
class CreatedGroupDTO:
    invitation_code: str
    group_name: str
    members: list[IndividualDTO]


def validate_new_group(
    group_name: str, members: list[NewMemberDTO]
) -> tuple[str, list[NewMemberDTO]]:
    """Trim names and reject the group before any write if something is missing."""
    group_name = (group_name or "").strip()
    if not group_name:
        raise InvalidGuestDataError("Group name is required")
    if not members:
        raise InvalidGuestDataError("A group needs at least one member")

    cleaned = []
    for member in members:
        first_name = (member.first_name or "").strip()
        last_name = (member.last_name or "").strip()
        if not first_name or not last_name:
            raise InvalidGuestDataError(
                "Please make sure all members have both first and last names."
            )
        cleaned.append(
            NewMemberDTO(
                first_name=first_name,
                last_name=last_name,
                email=member.email.strip() if member.email else None,
                dietary_restrictions=member.dietary_restrictions,
                comments=member.comments,
            )
        )
    return group_name, cleaned


class GroupCreateWriteModel:
    def __init__(
        self,
        read_model: IndividualReadModel,
        write_model: IndividualWriteModel,
        rng: random.Random | None = None,
    ) -> None:
        self.read_model = read_model
        self.write_model = write_model
        self.rng = rng

    async def create_group(self, group_name: str, members: list[NewMemberDTO]) -> CreatedGroupDTO:
        group_name, members = validate_new_group(group_name, members)
        invitation_code = await self._claim_code(group_name)

        pending = [
            NewIndividualDTO(
                invitation_code=invitation_code,
                first_name=member.first_name,
                last_name=member.last_name,
                group_name=group_name,
                email=member.email,
                rsvp_status=RSVPStatus.PENDING,
                dietary_restrictions=member.dietary_restrictions,
                comments=member.comments or "",
            )
            for member in members
        ]

        created: list[IndividualDTO] = []
        for index, new_individual in enumerate(pending):
            try:
                created.append(await self.write_model.insert(new_individual))
            except StoreError as e:
                logger.error(
                    f"Group {invitation_code} stopped after {len(created)} of "
                    f"{len(pending)} members: {e}"
                )
                raise BatchWriteError(
                    invitation_code=invitation_code,
                    created=created,
                    failed=new_individual,
                    skipped=pending[index + 1 :],
                    reason=str(e),
                ) from e

        logger.info(f"Created group {group_name!r} ({invitation_code}) with {len(created)} members")
        return CreatedGroupDTO(
            invitation_code=invitation_code,
            group_name=group_name,
            members=created,
        )

    async def _claim_code(self, group_name: str) -> str:
        for _ in range(CLAIM_ATTEMPTS):
            code = await generate_unique_code(self.read_model.code_in_use, rng=self.rng)
            if await self.write_model.claim_invitation_code(code, group_name):
                return code
        raise InvitationCodeExhaustedError(CLAIM_ATTEMPTS)
