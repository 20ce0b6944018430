from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class RSVPStatus(str, Enum):
    ACCEPTED = "Accepted"
    DECLINED = "Declined"
    PENDING = "Pending"
    NO_RESPONSE = "No Response"


class DietaryRestriction(str, Enum):
    DAIRY_FREE = "Dairy-free"
    DIABETIC = "Diabetic"
    EGG_FREE = "Egg-free"
    GLUTEN_FREE = "Gluten-free"
    HALAL = "Halal"
    KETO = "Keto"
    KOSHER = "Kosher"
    LACTOSE_INTOLERANT = "Lactose intolerant"
    NO_SPICY_FOOD = "No spicy food"
    NUT_FREE = "Nut-free"
    SHELLFISH_FREE = "Shellfish-free"
    SOY_FREE = "Soy-free"
    VEGAN = "Vegan"
    VEGETARIAN = "Vegetarian"


def normalize_dietary_restrictions(values: Iterable) -> list[DietaryRestriction]:
    """Return restrictions as a set, listed in vocabulary order."""
    chosen = {DietaryRestriction(value) for value in values}
    return [restriction for restriction in DietaryRestriction if restriction in chosen]


# =============================================================================
# Errors
# =============================================================================


class StoreError(Exception):
    """Raised when the store is unreachable or rejects a call."""


class InvalidGuestDataError(ValueError):
    """Raised when a required field is missing or empty."""


class GroupNotFoundError(Exception):
    def __init__(self, invitation_code: str) -> None:
        self.invitation_code = invitation_code
        super().__init__("No existing group found for this invitation code")


class InvitationCodeExhaustedError(RuntimeError):
    """Raised when no free invitation code was found within the attempt budget."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Could not generate a unique invitation code after {attempts} attempts")


class SubmissionBlockedError(ValueError):
    """Raised when an RSVP is submitted while some members have not answered."""

    def __init__(self, unanswered: list[UUID]) -> None:
        self.unanswered = unanswered
        super().__init__("Please respond for every member of your group")


class BatchWriteError(Exception):
    """Raised when a sequential multi-record write stops part way through.

    Records written before the failure are kept; nothing is rolled back.
    """

    def __init__(
        self,
        invitation_code: str,
        created: list["IndividualDTO"],
        failed: "NewIndividualDTO",
        skipped: list["NewIndividualDTO"],
        reason: str,
    ) -> None:
        self.invitation_code = invitation_code
        self.created = created
        self.failed = failed
        self.skipped = skipped
        self.reason = reason
        super().__init__(
            f"Failed to add {failed.first_name} {failed.last_name} to group "
            f"{invitation_code}: {reason}"
        )


# =============================================================================
# DTOs
# =============================================================================


@dataclass(frozen=True)
class IndividualDTO:
    """DTO for one stored guest."""

    uuid: UUID
    invitation_code: str
    first_name: str
    last_name: str
    group_name: str
    rsvp_status: RSVPStatus
    created_at: datetime
    updated_at: datetime
    email: str | None = None
    dietary_restrictions: list[DietaryRestriction] = field(default_factory=list)
    comments: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class NewIndividualDTO:
    """DTO for inserting a guest; the store assigns uuid and timestamps."""

    invitation_code: str
    first_name: str
    last_name: str
    group_name: str
    email: str | None = None
    rsvp_status: RSVPStatus = RSVPStatus.PENDING
    dietary_restrictions: list[DietaryRestriction] = field(default_factory=list)
    comments: str | None = None


@dataclass(frozen=True)
class IndividualUpdateDTO:
    """Partial update of one guest. None leaves a field unchanged."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    rsvp_status: RSVPStatus | None = None
    dietary_restrictions: list[DietaryRestriction] | None = None
    comments: str | None = None


@dataclass(frozen=True)
class GroupUpdateDTO:
    """Partial update applied to every member sharing an invitation code."""

    group_name: str | None = None
    rsvp_status: RSVPStatus | None = None
    dietary_restrictions: list[DietaryRestriction] | None = None
    comments: str | None = None


@dataclass(frozen=True)
class SubmissionResultDTO:
    """Outcome of a sequential per-member write."""

    applied: list[UUID] = field(default_factory=list)
    failed: UUID | None = None
    skipped: list[UUID] = field(default_factory=list)
    error: str | None = None

    @property
    def complete(self) -> bool:
        return self.failed is None
