import pytest

from src.guests.dtos import DietaryRestriction, IndividualUpdateDTO, RSVPStatus
from src.guests.features.submit_rsvp.flow import (
    CODE_LENGTH_MESSAGE,
    LOOKUP_FAILED_MESSAGE,
    Attendance,
    CodeEntryStep,
    ConfirmationStep,
    GroupResponseStep,
    build_member_updates,
    lookup_group,
    set_attendance,
    set_comments,
    set_dietary_restrictions,
    submit,
    submit_member_updates,
)
from src.guests.repository.tests.inmemory_models import create_test_individual, create_test_store


@pytest.fixture
def john():
    return create_test_individual("John", "Doe", "ABC12", "Doe Family", created_offset=0)


@pytest.fixture
def jane():
    return create_test_individual("Jane", "Doe", "ABC12", "Doe Family", created_offset=1)


@pytest.fixture
def store(john, jane):
    return create_test_store([john, jane])


@pytest.fixture
async def group_step(store) -> GroupResponseStep:
    step = await lookup_group(CodeEntryStep(), "ABC12", store)
    assert isinstance(step, GroupResponseStep)
    return step


# Code entry


@pytest.mark.asyncio
async def test_lookup_normalizes_code(store, john, jane):
    step = await lookup_group(CodeEntryStep(), "  abc12 ", store)

    assert isinstance(step, GroupResponseStep)
    assert step.invitation_code == "ABC12"
    assert step.group_name == "Doe Family"
    assert [m.individual_id for m in step.members] == [john.uuid, jane.uuid]
    assert all(m.attendance == Attendance.UNANSWERED for m in step.members)


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["", "ABC", "ABC123"])
async def test_lookup_rejects_wrong_length_without_store_call(code):
    store = create_test_store()
    store.fail_reads = True

    step = await lookup_group(CodeEntryStep(), code, store)

    assert isinstance(step, CodeEntryStep)
    assert step.error == CODE_LENGTH_MESSAGE


@pytest.mark.asyncio
async def test_lookup_unknown_code_stays_on_code_entry(store):
    step = await lookup_group(CodeEntryStep(), "ZZZ99", store)

    assert isinstance(step, CodeEntryStep)
    assert step.code == "ZZZ99"
    assert step.error == LOOKUP_FAILED_MESSAGE
    assert not step.store_unavailable


@pytest.mark.asyncio
async def test_lookup_store_failure_stays_on_code_entry(store):
    store.fail_reads = True

    step = await lookup_group(CodeEntryStep(), "ABC12", store)

    assert isinstance(step, CodeEntryStep)
    assert step.error == LOOKUP_FAILED_MESSAGE
    assert step.store_unavailable

# Group response


@pytest.mark.asyncio
async def test_declining_discards_dietary_and_comments(group_step, john):
    step = set_attendance(group_step, john.uuid, Attendance.YES)
    step = set_dietary_restrictions(step, john.uuid, [DietaryRestriction.VEGAN])
    step = set_comments(step, john.uuid, "See you there")
    step = set_attendance(step, john.uuid, Attendance.NO)

    member = step.members[0]
    assert member.attendance == Attendance.NO
    assert member.dietary_restrictions == ()
    assert member.comments == ""


@pytest.mark.asyncio
async def test_dietary_input_requires_attending(group_step, john):
    with pytest.raises(ValueError):
        set_dietary_restrictions(group_step, john.uuid, [DietaryRestriction.VEGAN])

    declined = set_attendance(group_step, john.uuid, Attendance.NO)
    with pytest.raises(ValueError):
        set_comments(declined, john.uuid, "hello")


@pytest.mark.asyncio
async def test_transitions_do_not_mutate_previous_step(group_step, john):
    answered = set_attendance(group_step, john.uuid, Attendance.YES)

    assert group_step.members[0].attendance == Attendance.UNANSWERED
    assert answered.members[0].attendance == Attendance.YES


@pytest.mark.asyncio
async def test_unknown_member_is_rejected(group_step):
    other = create_test_individual("Sam", "Smith", "QQQ11")

    with pytest.raises(ValueError):
        set_attendance(group_step, other.uuid, Attendance.YES)


@pytest.mark.asyncio
async def test_can_submit_only_when_everyone_answered(group_step, john, jane):
    assert not group_step.can_submit

    step = set_attendance(group_step, john.uuid, Attendance.YES)
    assert not step.can_submit
    assert step.unanswered == [jane.uuid]

    step = set_attendance(step, jane.uuid, Attendance.NO)
    assert step.can_submit


@pytest.mark.asyncio
async def test_member_updates(group_step, john, jane):
    step = set_attendance(group_step, john.uuid, Attendance.YES)
    step = set_dietary_restrictions(
        step, john.uuid, [DietaryRestriction.VEGAN, DietaryRestriction.DAIRY_FREE]
    )
    step = set_attendance(step, jane.uuid, Attendance.NO)

    updates = dict(build_member_updates(step))

    assert updates[john.uuid] == IndividualUpdateDTO(
        rsvp_status=RSVPStatus.ACCEPTED,
        dietary_restrictions=[DietaryRestriction.DAIRY_FREE, DietaryRestriction.VEGAN],
        comments="",
    )
    assert updates[jane.uuid] == IndividualUpdateDTO(
        rsvp_status=RSVPStatus.DECLINED, dietary_restrictions=[], comments=""
    )


# Submission


@pytest.mark.asyncio
async def test_blocked_submission_stays_on_group_step(group_step, store, john):
    step = set_attendance(group_step, john.uuid, Attendance.YES)

    outcome = await submit(step, store)

    assert isinstance(outcome, GroupResponseStep)
    assert outcome.error == "Please respond for every member of your group"
    assert store.update_calls == []


@pytest.mark.asyncio
async def test_decline_after_vegan_stores_declined_without_dietary(store, john):
    step = await lookup_group(CodeEntryStep(), "ABC12", store)
    for member in step.members:
        step = set_attendance(step, member.individual_id, Attendance.YES)
    step = set_dietary_restrictions(step, john.uuid, [DietaryRestriction.VEGAN])
    step = set_attendance(step, john.uuid, Attendance.NO)

    outcome = await submit(step, store)

    assert isinstance(outcome, ConfirmationStep)
    assert outcome.result.complete
    stored = await store.find_by_id(john.uuid)
    assert stored.rsvp_status == RSVPStatus.DECLINED
    assert stored.dietary_restrictions == []
    assert stored.comments == ""


@pytest.mark.asyncio
async def test_submission_writes_members_in_order(group_step, store, john, jane):
    step = set_attendance(group_step, john.uuid, Attendance.YES)
    step = set_attendance(step, jane.uuid, Attendance.YES)

    outcome = await submit(step, store)

    assert isinstance(outcome, ConfirmationStep)
    assert outcome.result.applied == [john.uuid, jane.uuid]
    assert store.update_calls == [john.uuid, jane.uuid]
    assert {m.rsvp_status for m in await store.find_by_code("ABC12")} == {RSVPStatus.ACCEPTED}


@pytest.mark.asyncio
async def test_failed_write_stops_remaining_members(store, john, jane):
    third = store.add(create_test_individual("Baby", "Doe", "ABC12", "Doe Family", created_offset=2))
    store.fail_update_ids = {jane.uuid}
    step = await lookup_group(CodeEntryStep(), "ABC12", store)
    for member in step.members:
        step = set_attendance(step, member.individual_id, Attendance.YES)

    outcome = await submit(step, store)

    assert isinstance(outcome, ConfirmationStep)
    result = outcome.result
    assert not result.complete
    assert result.applied == [john.uuid]
    assert result.failed == jane.uuid
    assert result.skipped == [third.uuid]
    assert store.update_calls == [john.uuid, jane.uuid]
    # the earlier write is kept
    assert (await store.find_by_id(john.uuid)).rsvp_status == RSVPStatus.ACCEPTED
    assert (await store.find_by_id(third.uuid)).rsvp_status == RSVPStatus.PENDING


@pytest.mark.asyncio
async def test_member_deleted_meanwhile_stops_submission(store, john, jane):
    await store.delete_by_id(john.uuid)

    result = await submit_member_updates(
        store,
        [
            (john.uuid, IndividualUpdateDTO(rsvp_status=RSVPStatus.ACCEPTED)),
            (jane.uuid, IndividualUpdateDTO(rsvp_status=RSVPStatus.ACCEPTED)),
        ],
    )

    assert result.applied == []
    assert result.failed == john.uuid
    assert result.skipped == [jane.uuid]
