"""Write model for adding a member to an existing group.

The group name is copied from a current member, which is also how the code
is checked: a code with no members is not a group.
"""

import logging

from src.guests.dtos import (
    GroupNotFoundError,
    IndividualDTO,
    InvalidGuestDataError,
    NewIndividualDTO,
    RSVPStatus,
)
from src.guests.repository.read_models import IndividualReadModel
from src.guests.repository.write_models import IndividualWriteModel

logger = logging.getLogger(__name__)


class GroupMemberWriteModel:
    def __init__(
        self,
        read_model: IndividualReadModel,
        write_model: IndividualWriteModel,
    ) -> None:
        self.read_model = read_model
        self.write_model = write_model

    async def add_member(
        self,
        invitation_code: str,
        first_name: str,
        last_name: str,
        email: str | None = None,
    ) -> IndividualDTO:
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        if not first_name or not last_name:
            raise InvalidGuestDataError("First name and last name are required")

        existing_members = await self.read_model.find_by_code(invitation_code)
        if not existing_members:
            raise GroupNotFoundError(invitation_code)

        individual = await self.write_model.insert(
            NewIndividualDTO(
                invitation_code=invitation_code,
                first_name=first_name,
                last_name=last_name,
                group_name=existing_members[0].group_name,
                email=email.strip() if email else None,
                rsvp_status=RSVPStatus.PENDING,
                dietary_restrictions=[],
                comments="",
            )
        )
        logger.info(f"Added {individual.full_name} to group {invitation_code}")
        return individual
