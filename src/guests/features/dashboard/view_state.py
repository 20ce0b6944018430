"""Host dashboard state.

The dashboard holds the whole individual collection and derives groups from it
on every render. ``reduce`` is the only way the state changes. Saved edits are
patched into the local rows without a refetch, so a concurrent change made
elsewhere stays invisible until the next load.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID

from src.guests.aggregation import GroupView, aggregate
from src.guests.dtos import IndividualDTO, IndividualUpdateDTO, normalize_dietary_restrictions
from src.models import utcnow

LOAD_FAILED_MESSAGE = "Failed to load RSVPs. Please refresh the page."


@dataclass(frozen=True)
class DashboardViewState:
    individuals: tuple[IndividualDTO, ...] = ()
    search: str = ""
    expanded_groups: frozenset[str] = frozenset()
    editing_id: UUID | None = None
    edit_buffer: IndividualUpdateDTO | None = None
    load_error: str | None = None
    alert: str | None = None


# =============================================================================
# Actions
# =============================================================================


@dataclass(frozen=True)
class LoadSucceeded:
    individuals: tuple[IndividualDTO, ...]


@dataclass(frozen=True)
class LoadFailed:
    error: str = LOAD_FAILED_MESSAGE


@dataclass(frozen=True)
class SearchChanged:
    search: str


@dataclass(frozen=True)
class GroupToggled:
    invitation_code: str


@dataclass(frozen=True)
class EditStarted:
    individual_id: UUID


@dataclass(frozen=True)
class EditFieldChanged:
    changes: dict = field(default_factory=dict)


@dataclass(frozen=True)
class EditCancelled:
    pass


@dataclass(frozen=True)
class EditSaved:
    """The server accepted the edit buffer for ``individual_id``."""

    individual_id: UUID
    updated_at: datetime | None = None


@dataclass(frozen=True)
class IndividualDeleted:
    individual_id: UUID


@dataclass(frozen=True)
class MemberAdded:
    individual: IndividualDTO


@dataclass(frozen=True)
class MutationFailed:
    message: str


def _find(state: DashboardViewState, individual_id: UUID) -> IndividualDTO | None:
    for individual in state.individuals:
        if individual.uuid == individual_id:
            return individual
    return None


def _patch(individual: IndividualDTO, changes: IndividualUpdateDTO, updated_at: datetime) -> IndividualDTO:
    patched = {
        name: getattr(changes, name)
        for name in ("first_name", "last_name", "email", "rsvp_status", "comments")
        if getattr(changes, name) is not None
    }
    if changes.dietary_restrictions is not None:
        patched["dietary_restrictions"] = normalize_dietary_restrictions(
            changes.dietary_restrictions
        )
    return replace(individual, updated_at=updated_at, **patched)


def _stop_editing(state: DashboardViewState, **changes) -> DashboardViewState:
    return replace(state, editing_id=None, edit_buffer=None, **changes)


def reduce(state: DashboardViewState, action) -> DashboardViewState:
    if isinstance(action, LoadSucceeded):
        return replace(state, individuals=tuple(action.individuals), load_error=None)

    if isinstance(action, LoadFailed):
        return replace(state, individuals=(), load_error=action.error)

    if isinstance(action, SearchChanged):
        return replace(state, search=action.search)

    if isinstance(action, GroupToggled):
        return replace(state, expanded_groups=state.expanded_groups ^ {action.invitation_code})

    if isinstance(action, EditStarted):
        individual = _find(state, action.individual_id)
        if individual is None:
            return state
        return replace(
            state,
            editing_id=individual.uuid,
            edit_buffer=IndividualUpdateDTO(
                first_name=individual.first_name,
                last_name=individual.last_name,
                email=individual.email,
                rsvp_status=individual.rsvp_status,
                dietary_restrictions=list(individual.dietary_restrictions),
                comments=individual.comments,
            ),
        )

    if isinstance(action, EditFieldChanged):
        if state.edit_buffer is None:
            return state
        return replace(state, edit_buffer=replace(state.edit_buffer, **action.changes))

    if isinstance(action, EditCancelled):
        return _stop_editing(state)

    if isinstance(action, EditSaved):
        if state.edit_buffer is None or state.editing_id != action.individual_id:
            return state
        updated_at = action.updated_at or utcnow()
        return _stop_editing(
            state,
            alert=None,
            individuals=tuple(
                _patch(individual, state.edit_buffer, updated_at)
                if individual.uuid == action.individual_id
                else individual
                for individual in state.individuals
            ),
        )

    if isinstance(action, IndividualDeleted):
        individuals = tuple(i for i in state.individuals if i.uuid != action.individual_id)
        if state.editing_id == action.individual_id:
            return _stop_editing(state, individuals=individuals)
        return replace(state, individuals=individuals)

    if isinstance(action, MemberAdded):
        return replace(state, individuals=state.individuals + (action.individual,))

    if isinstance(action, MutationFailed):
        return replace(state, alert=action.message)

    raise TypeError(f"Unknown dashboard action: {action!r}")


def visible_groups(state: DashboardViewState) -> list[GroupView]:
    return list(aggregate(state.individuals, state.search).values())
