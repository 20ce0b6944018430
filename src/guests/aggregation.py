"""Group views derived from the flat individual collection.

Nothing here is cached: the dashboard re-fetches the whole collection after
every change, and views are rebuilt from scratch on each call.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from src.guests.dtos import DietaryRestriction, IndividualDTO, RSVPStatus


@dataclass(frozen=True)
class GroupView:
    invitation_code: str
    group_name: str
    members: tuple[IndividualDTO, ...]
    accepted_count: int
    declined_count: int
    pending_count: int
    created_at: datetime
    updated_at: datetime

    @property
    def total_members(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class CollectionSummary:
    total_individuals: int
    total_groups: int
    status_counts: dict[RSVPStatus, int] = field(default_factory=dict)
    dietary_counts: dict[DietaryRestriction, int] = field(default_factory=dict)


def _normalize_query(query: str | None) -> str:
    return (query or "").strip().casefold()


def individual_matches(individual: IndividualDTO, query: str | None) -> bool:
    """Case-insensitive substring match on name, group name or invitation code."""
    term = _normalize_query(query)
    if not term:
        return True
    return any(
        term in value.casefold()
        for value in (
            individual.first_name,
            individual.last_name,
            individual.group_name,
            individual.invitation_code,
        )
    )


def group_by_code(individuals: Iterable[IndividualDTO]) -> dict[str, list[IndividualDTO]]:
    """Bucket individuals by invitation code, in order of first appearance."""
    groups: dict[str, list[IndividualDTO]] = {}
    for individual in individuals:
        groups.setdefault(individual.invitation_code, []).append(individual)
    return groups


def build_group_view(invitation_code: str, members: list[IndividualDTO]) -> GroupView:
    statuses = Counter(member.rsvp_status for member in members)
    return GroupView(
        invitation_code=invitation_code,
        group_name=members[0].group_name,
        members=tuple(members),
        accepted_count=statuses[RSVPStatus.ACCEPTED],
        declined_count=statuses[RSVPStatus.DECLINED],
        pending_count=statuses[RSVPStatus.PENDING],
        created_at=min(member.created_at for member in members),
        updated_at=max(member.updated_at for member in members),
    )


def aggregate(
    individuals: Iterable[IndividualDTO], query: str | None = None
) -> dict[str, GroupView]:
    """Group individuals by invitation code and keep the groups matching ``query``.

    A code match keeps the whole group; otherwise only members whose first
    name, last name or group name match are kept, and groups with no match
    are dropped. An empty query keeps everything.
    """
    term = _normalize_query(query)
    views: dict[str, GroupView] = {}
    for code, members in group_by_code(individuals).items():
        if term and term not in code.casefold():
            members = [member for member in members if individual_matches(member, term)]
        if members:
            views[code] = build_group_view(code, members)
    return views


def summarize_collection(individuals: Iterable[IndividualDTO]) -> CollectionSummary:
    individuals = list(individuals)
    statuses = Counter(individual.rsvp_status for individual in individuals)
    dietary = Counter(
        restriction
        for individual in individuals
        for restriction in individual.dietary_restrictions
    )
    return CollectionSummary(
        total_individuals=len(individuals),
        total_groups=len({individual.invitation_code for individual in individuals}),
        status_counts={status: statuses[status] for status in RSVPStatus},
        dietary_counts={
            restriction: dietary[restriction]
            for restriction in DietaryRestriction
            if dietary[restriction]
        },
    )
