from dataclasses import replace

import pytest

from src.guests.aggregation import aggregate, individual_matches, summarize_collection
from src.guests.dtos import DietaryRestriction, RSVPStatus
from src.guests.repository.tests.inmemory_models import create_test_individual


@pytest.fixture
def individuals():
    return [
        create_test_individual("John", "Doe", "ABC12", "Doe Family", RSVPStatus.ACCEPTED,
                               [DietaryRestriction.VEGAN], created_offset=0),
        create_test_individual("Jane", "Doe", "ABC12", "Doe Family", RSVPStatus.DECLINED,
                               created_offset=1),
        create_test_individual("Maria", "Lopez", "XYZ89", "Lopez Household", RSVPStatus.PENDING,
                               [DietaryRestriction.VEGAN, DietaryRestriction.NUT_FREE],
                               created_offset=2),
        create_test_individual("Sam", "Smith", "QQQ11", "Smith & Co", RSVPStatus.NO_RESPONSE,
                               created_offset=3),
    ]


def test_groups_partition_the_collection(individuals):
    groups = aggregate(individuals)

    assert list(groups) == ["ABC12", "XYZ89", "QQQ11"]
    assert sum(view.total_members for view in groups.values()) == len(individuals)
    for code, view in groups.items():
        assert all(member.invitation_code == code for member in view.members)

    members = [member.uuid for view in groups.values() for member in view.members]
    assert sorted(members) == sorted(i.uuid for i in individuals)


def test_group_view_counts_and_dates(individuals):
    view = aggregate(individuals)["ABC12"]

    assert view.group_name == "Doe Family"
    assert view.total_members == 2
    assert view.accepted_count == 1
    assert view.declined_count == 1
    assert view.pending_count == 0
    assert view.created_at == individuals[0].created_at
    assert view.updated_at == individuals[1].updated_at


@pytest.mark.parametrize("query", ["doe", "  LOPEZ ", "house", "xyz", "nobody", ""])
def test_every_kept_member_matches_query(individuals, query):
    groups = aggregate(individuals, query)

    for code, view in groups.items():
        assert view.members
        code_matches = query.strip().casefold() in code.casefold()
        for member in view.members:
            assert code_matches or individual_matches(member, query)

    kept = sum(view.total_members for view in groups.values())
    assert kept <= len(individuals)


def test_name_match_keeps_only_matching_members(individuals):
    groups = aggregate(individuals, "jane")

    assert list(groups) == ["ABC12"]
    assert [m.first_name for m in groups["ABC12"].members] == ["Jane"]


def test_code_match_keeps_whole_group(individuals):
    groups = aggregate(individuals, "abc12")

    assert list(groups) == ["ABC12"]
    assert groups["ABC12"].total_members == 2


def test_group_name_match(individuals):
    groups = aggregate(individuals, "smith & co")

    assert list(groups) == ["QQQ11"]


def test_no_match_returns_no_groups(individuals):
    assert aggregate(individuals, "zzz-nobody") == {}


def test_aggregation_is_idempotent_and_leaves_input_alone(individuals):
    snapshot = list(individuals)

    first = aggregate(individuals, "doe")
    second = aggregate(individuals, "doe")

    assert first == second
    assert individuals == snapshot


def test_aggregation_reflects_changed_input(individuals):
    individuals[1] = replace(individuals[1], rsvp_status=RSVPStatus.ACCEPTED)

    view = aggregate(individuals)["ABC12"]

    assert view.accepted_count == 2
    assert view.declined_count == 0


def test_summary_covers_whole_collection(individuals):
    summary = summarize_collection(individuals)

    assert summary.total_individuals == 4
    assert summary.total_groups == 3
    assert summary.status_counts == {
        RSVPStatus.ACCEPTED: 1,
        RSVPStatus.DECLINED: 1,
        RSVPStatus.PENDING: 1,
        RSVPStatus.NO_RESPONSE: 1,
    }
    assert summary.dietary_counts == {
        DietaryRestriction.NUT_FREE: 1,
        DietaryRestriction.VEGAN: 2,
    }


def test_summary_of_empty_collection():
    summary = summarize_collection([])

    assert summary.total_individuals == 0
    assert summary.total_groups == 0
    assert set(summary.status_counts.values()) == {0}
    assert summary.dietary_counts == {}
