import abc
from uuid import UUID

from sqlalchemy import exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.guests.dtos import IndividualDTO
from src.guests.repository.orm_models import Individual, InvitationCode
from src.guests.repository.session import store_session


class IndividualReadModel(abc.ABC):
    @abc.abstractmethod
    async def find_by_id(self, individual_id: UUID) -> IndividualDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def find_by_code(self, invitation_code: str) -> list[IndividualDTO]:
        """
        Get every member of a group.
        An empty list means the code is not in use.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def find_all(self) -> list[IndividualDTO]:
        """Get the whole collection, newest created first."""
        raise NotImplementedError

    @abc.abstractmethod
    async def code_in_use(self, invitation_code: str) -> bool:
        """True if a member or a claim already holds the code."""
        raise NotImplementedError


class SqlIndividualReadModel(IndividualReadModel):
    """SQL implementation of the individual read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def find_by_id(self, individual_id: UUID) -> IndividualDTO | None:
        async with store_session(self.session_overwrite) as session:
            individual = await session.get(Individual, individual_id)
            return individual.to_dto() if individual else None

    async def find_by_code(self, invitation_code: str) -> list[IndividualDTO]:
        async with store_session(self.session_overwrite) as session:
            stmt = (
                select(Individual)
                .where(Individual.invitation_code == invitation_code)
                .order_by(Individual.created_at)
            )
            result = await session.execute(stmt)
            return [individual.to_dto() for individual in result.scalars().all()]

    async def find_all(self) -> list[IndividualDTO]:
        async with store_session(self.session_overwrite) as session:
            stmt = select(Individual).order_by(Individual.created_at.desc())
            result = await session.execute(stmt)
            return [individual.to_dto() for individual in result.scalars().all()]

    async def code_in_use(self, invitation_code: str) -> bool:
        async with store_session(self.session_overwrite) as session:
            stmt = select(
                or_(
                    exists().where(Individual.invitation_code == invitation_code),
                    exists().where(InvitationCode.code == invitation_code),
                )
            )
            result = await session.execute(stmt)
            return bool(result.scalar())
