"""Individual write model - every call is its own transaction and returns DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.guests.dtos import (
    GroupUpdateDTO,
    IndividualDTO,
    IndividualUpdateDTO,
    NewIndividualDTO,
)
from src.guests.repository.orm_models import Individual, InvitationCode
from src.guests.repository.session import store_session
from src.models.base import utcnow

logger = logging.getLogger(__name__)


class IndividualWriteModel(ABC):
    @abstractmethod
    async def insert(self, individual: NewIndividualDTO) -> IndividualDTO:
        raise NotImplementedError

    @abstractmethod
    async def update_by_id(
        self, individual_id: UUID, changes: IndividualUpdateDTO
    ) -> IndividualDTO | None:
        """Apply a partial update. Returns None if the individual does not exist."""
        raise NotImplementedError

    @abstractmethod
    async def delete_by_id(self, individual_id: UUID) -> IndividualDTO | None:
        """Delete one individual. Returns the deleted record, or None if it did not exist."""
        raise NotImplementedError

    @abstractmethod
    async def update_by_code(self, invitation_code: str, changes: GroupUpdateDTO) -> int:
        """Apply a partial update to every member of a group. Returns the number matched."""
        raise NotImplementedError

    @abstractmethod
    async def delete_by_code(self, invitation_code: str) -> int:
        """Delete every member of a group. Returns the number deleted."""
        raise NotImplementedError

    @abstractmethod
    async def claim_invitation_code(self, invitation_code: str, group_name: str) -> bool:
        """Reserve a code for a new group. Returns False if it was already claimed."""
        raise NotImplementedError


def apply_individual_update(individual: Individual, changes: IndividualUpdateDTO) -> None:
    if changes.first_name is not None:
        individual.first_name = changes.first_name
    if changes.last_name is not None:
        individual.last_name = changes.last_name
    if changes.email is not None:
        individual.email = changes.email or None
    if changes.rsvp_status is not None:
        individual.rsvp_status = changes.rsvp_status
    if changes.dietary_restrictions is not None:
        individual.dietary_restrictions = changes.dietary_restrictions
    if changes.comments is not None:
        individual.comments = changes.comments
    individual.updated_at = utcnow()


def apply_group_update(individual: Individual, changes: GroupUpdateDTO) -> None:
    if changes.group_name is not None:
        individual.group_name = changes.group_name
    if changes.rsvp_status is not None:
        individual.rsvp_status = changes.rsvp_status
    if changes.dietary_restrictions is not None:
        individual.dietary_restrictions = changes.dietary_restrictions
    if changes.comments is not None:
        individual.comments = changes.comments
    individual.updated_at = utcnow()


class SqlIndividualWriteModel(IndividualWriteModel):
    """SQL implementation of the individual write model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def insert(self, individual: NewIndividualDTO) -> IndividualDTO:
        async with store_session(self.session_overwrite) as session:
            record = Individual(
                invitation_code=individual.invitation_code,
                first_name=individual.first_name,
                last_name=individual.last_name,
                group_name=individual.group_name,
                email=individual.email or None,
                rsvp_status=individual.rsvp_status,
                comments=individual.comments,
            )
            record.dietary_restrictions = individual.dietary_restrictions
            session.add(record)
            await session.flush()
            return record.to_dto()

    async def update_by_id(
        self, individual_id: UUID, changes: IndividualUpdateDTO
    ) -> IndividualDTO | None:
        async with store_session(self.session_overwrite) as session:
            individual = await session.get(Individual, individual_id)
            if individual is None:
                return None

            apply_individual_update(individual, changes)
            await session.flush()
            return individual.to_dto()

    async def delete_by_id(self, individual_id: UUID) -> IndividualDTO | None:
        async with store_session(self.session_overwrite) as session:
            individual = await session.get(Individual, individual_id)
            if individual is None:
                return None

            deleted = individual.to_dto()
            await session.delete(individual)
            await session.flush()
            return deleted

    async def update_by_code(self, invitation_code: str, changes: GroupUpdateDTO) -> int:
        async with store_session(self.session_overwrite) as session:
            result = await session.execute(
                select(Individual).where(Individual.invitation_code == invitation_code)
            )
            members = result.scalars().all()
            for member in members:
                apply_group_update(member, changes)
            await session.flush()
            return len(members)

    async def delete_by_code(self, invitation_code: str) -> int:
        async with store_session(self.session_overwrite) as session:
            result = await session.execute(
                select(Individual).where(Individual.invitation_code == invitation_code)
            )
            members = result.scalars().all()
            for member in members:
                await session.delete(member)
            await session.flush()
            return len(members)

    async def claim_invitation_code(self, invitation_code: str, group_name: str) -> bool:
        async with store_session(self.session_overwrite) as session:
            session.add(InvitationCode(code=invitation_code, group_name=group_name))
            try:
                await session.flush()
            except IntegrityError:
                await session.rollback()
                logger.info(f"Invitation code {invitation_code} was claimed concurrently")
                return False
            return True
