from uuid import UUID

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy_utils import UUIDType

from src.config.table_names import TableNames
from src.guests.dtos import (
    DietaryRestriction,
    IndividualDTO,
    RSVPStatus,
    normalize_dietary_restrictions,
)
from src.models.base import Base, TimeStamp, as_utc


class Individual(Base, TimeStamp):
    __tablename__ = TableNames.INDIVIDUALS.value

    # Shared by every member of one invited group
    invitation_code: Mapped[str] = mapped_column(String(5), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    group_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    rsvp_status: Mapped[RSVPStatus] = mapped_column(
        Enum(
            RSVPStatus,
            name="rsvp_status_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=RSVPStatus.PENDING,
        nullable=False,
    )
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    dietary_options: Mapped[list["DietaryOption"]] = relationship(
        "DietaryOption",
        back_populates="individual",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def dietary_restrictions(self) -> list[DietaryRestriction]:
        return normalize_dietary_restrictions(
            option.requirement_type for option in self.dietary_options
        )

    @dietary_restrictions.setter
    def dietary_restrictions(self, values: list[DietaryRestriction]) -> None:
        self.dietary_options = [
            DietaryOption(requirement_type=value)
            for value in normalize_dietary_restrictions(values)
        ]

    def to_dto(self) -> IndividualDTO:
        return IndividualDTO(
            uuid=self.uuid,
            invitation_code=self.invitation_code,
            first_name=self.first_name,
            last_name=self.last_name,
            group_name=self.group_name,
            email=self.email,
            rsvp_status=RSVPStatus(self.rsvp_status),
            dietary_restrictions=self.dietary_restrictions,
            comments=self.comments,
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at),
        )

    def __repr__(self) -> str:
        return f"<Individual {self.first_name} {self.last_name} ({self.invitation_code})>"


class DietaryOption(Base, TimeStamp):
    __tablename__ = TableNames.DIETARY_OPTIONS.value

    individual_id: Mapped[UUID] = mapped_column(
        UUIDType,
        ForeignKey(f"{TableNames.INDIVIDUALS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    individual: Mapped["Individual"] = relationship("Individual", back_populates="dietary_options")

    requirement_type: Mapped[DietaryRestriction] = mapped_column(
        Enum(
            DietaryRestriction,
            name="dietary_restriction_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<DietaryOption {self.requirement_type} for individual {self.individual_id}>"


class InvitationCode(Base, TimeStamp):
    """Claim on an invitation code; the unique index makes a code single-use."""

    __tablename__ = TableNames.INVITATION_CODES.value

    code: Mapped[str] = mapped_column(String(5), nullable=False, unique=True, index=True)
    group_name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<InvitationCode {self.code}>"
