import pytest

from src.guests.dependencies import get_individual_read_model, get_individual_write_model
from src.guests.repository.read_models import SqlIndividualReadModel
from src.guests.repository.tests.inmemory_models import create_test_store
from src.guests.urls import GROUPS_URL


@pytest.fixture
def store():
    return create_test_store()


@pytest.fixture
def overrides(store):
    return {
        get_individual_read_model: lambda: store,
        get_individual_write_model: lambda: store,
    }


@pytest.mark.asyncio
async def test_create_group_end_to_end(client, test_db):
    """Group creation against the real SQL store."""
    response = await client.post(
        GROUPS_URL,
        json={
            "group_name": "Doe Family",
            "members": [
                {"first_name": "John", "last_name": "Doe"},
                {"first_name": "Jane", "last_name": "Doe", "email": ""},
            ],
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Invitation and members added successfully!"
    code = data["invitation_code"]
    assert len(code) == 5
    assert code.isalnum() and code == code.upper()
    assert [m["rsvp_status"] for m in data["members"]] == ["Pending", "Pending"]
    assert all(m["invitation_code"] == code for m in data["members"])

    stored = await SqlIndividualReadModel().find_by_code(code)
    assert len(stored) == 2
    assert {m.group_name for m in stored} == {"Doe Family"}
    assert stored[1].email is None


@pytest.mark.asyncio
async def test_create_group_with_dietary_restrictions(client_factory, overrides, store):
    async with client_factory(overrides) as client:
        response = await client.post(
            GROUPS_URL,
            json={
                "group_name": "Lopez",
                "members": [
                    {
                        "first_name": "Maria",
                        "last_name": "Lopez",
                        "dietary_restrictions": ["Vegan", "Gluten-free", "Vegan"],
                        "comments": "Arriving late",
                    }
                ],
            },
        )

    assert response.status_code == 201
    member = response.json()["members"][0]
    assert member["dietary_restrictions"] == ["Gluten-free", "Vegan"]
    assert member["comments"] == "Arriving late"


@pytest.mark.asyncio
async def test_missing_last_name_returns_400(client_factory, overrides, store):
    async with client_factory(overrides) as client:
        response = await client.post(
            GROUPS_URL,
            json={
                "group_name": "Doe Family",
                "members": [
                    {"first_name": "John", "last_name": "Doe"},
                    {"first_name": "Jane", "last_name": ""},
                ],
            },
        )

    assert response.status_code == 400
    assert response.json()["detail"] == "Please make sure all members have both first and last names."
    assert await store.find_all() == []


@pytest.mark.asyncio
async def test_empty_group_name_returns_400(client_factory, overrides):
    async with client_factory(overrides) as client:
        response = await client.post(
            GROUPS_URL,
            json={"group_name": " ", "members": [{"first_name": "John", "last_name": "Doe"}]},
        )

    assert response.status_code == 400
    assert response.json()["detail"] == "Group name is required"


@pytest.mark.asyncio
async def test_partial_failure_reports_created_members(client_factory, overrides, store):
    store.fail_inserts_after = 1

    async with client_factory(overrides) as client:
        response = await client.post(
            GROUPS_URL,
            json={
                "group_name": "Doe Family",
                "members": [
                    {"first_name": "John", "last_name": "Doe"},
                    {"first_name": "Jane", "last_name": "Doe"},
                    {"first_name": "Baby", "last_name": "Doe"},
                ],
            },
        )

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert len(detail["created"]) == 1
    assert detail["failed"] == "Jane Doe"
    assert detail["skipped"] == ["Baby Doe"]

    stored = await store.find_by_code(detail["invitation_code"])
    assert [str(m.uuid) for m in stored] == detail["created"]


@pytest.mark.asyncio
async def test_store_unavailable_returns_503(client_factory, overrides, store):
    store.fail_reads = True

    async with client_factory(overrides) as client:
        response = await client.post(
            GROUPS_URL,
            json={"group_name": "Doe Family", "members": [{"first_name": "John", "last_name": "Doe"}]},
        )

    assert response.status_code == 503
