"""
Persistence gateway contract: secret stripping, uniqueness, partial updates
and the cascading user delete.
"""
import pytest

from services.errors import DuplicateKeyError, NotFoundError, ValidationError

pytestmark = pytest.mark.anyio


def _assignment(assignment_id, assigned_to="stu-1"):
    return {
        "id": assignment_id,
        "title": "Algebra",
        "subject": "Math",
        "description": "",
        "dueDate": "2026-11-01",
        "assignedTo": assigned_to,
        "status": "PENDING",
        "questionPapers": [],
        "submittedFiles": [],
        "maxScore": 100,
    }


async def test_reads_never_return_password(users, student):
    assert "password" not in student
    assert "_id" not in student
    assert "password" not in await users.find_one({"id": "stu-1"})
    for user in await users.find_many():
        assert "password" not in user


async def test_find_credentials_keeps_password(users, student):
    record = await users.find_credentials("asha@example.com")
    assert record["password"].startswith("$2")


async def test_duplicate_email_rejected(users, student):
    with pytest.raises(DuplicateKeyError):
        await users.insert({
            "id": "stu-2", "name": "Other", "email": "asha@example.com",
            "password": "x", "role": "STUDENT",
        })


async def test_duplicate_id_rejected(users, student):
    with pytest.raises(DuplicateKeyError):
        await users.insert({
            "id": "stu-1", "name": "Other", "email": "other@example.com",
            "password": "x", "role": "STUDENT",
        })


async def test_filters_are_whitelisted(users):
    with pytest.raises(ValidationError):
        await users.find_many({"name": "Asha"})
    with pytest.raises(ValidationError):
        await users.find_many({"email": {"$ne": ""}})


async def test_find_many_filters_by_role(users, student):
    students = await users.find_many({"role": "STUDENT"})
    admins = await users.find_many({"role": "ADMIN"})
    assert [u["id"] for u in students] == ["stu-1"]
    assert [u["id"] for u in admins] == ["admin-001"]


async def test_update_merges_only_given_fields(users, student):
    updated = await users.update("stu-1", {"phone": "555-0101"})
    assert updated["phone"] == "555-0101"
    assert updated["name"] == "Asha Student"
    assert updated["class"] == "Grade 10"
    assert "password" not in updated


async def test_update_missing_user(users):
    with pytest.raises(NotFoundError):
        await users.update("ghost", {"phone": "1"})
    with pytest.raises(NotFoundError):
        await users.update("ghost", {})


async def test_delete_user_cascades_to_assignments(users, assignments, student):
    await assignments.insert(_assignment("100"))
    await assignments.insert(_assignment("101"))
    await assignments.insert(_assignment("102", assigned_to="someone-else"))

    removed = await users.delete("stu-1")

    assert removed == 2
    assert await users.find_one({"id": "stu-1"}) is None
    assert await assignments.find_many({"assignedTo": "stu-1"}) == []
    assert [a["id"] for a in await assignments.find_many()] == ["102"]


async def test_delete_sweeps_orphans_of_missing_user(users, assignments):
    await assignments.insert(_assignment("200", assigned_to="gone"))
    assert await users.delete("gone") == 1
    with pytest.raises(NotFoundError):
        await users.delete("gone")


async def test_assignments_sorted_by_id_descending(assignments):
    for assignment_id in ("1700000000001", "1700000000003", "1700000000002"):
        await assignments.insert(_assignment(assignment_id))
    ids = [a["id"] for a in await assignments.find_many({"assignedTo": "stu-1"})]
    assert ids == ["1700000000003", "1700000000002", "1700000000001"]


async def test_assignment_delete_missing(assignments):
    with pytest.raises(NotFoundError):
        await assignments.delete("nope")
