import asyncio

import pytest
from sqlalchemy.exc import SQLAlchemyError

from competency_tracker.db.session import AsyncSessionLocal
from competency_tracker.schemas.admin import UserUpdateSchema
from competency_tracker.services import directory

from conftest import ADMIN_EMAIL, SIGNATURE

ADA = "ada@example.com"


def create_user(client, email, **fields):
    body = {"firstName": "Ada", "lastName": "Lovelace", "email": email, "company": "Acme Mill", "cohort": "2024A"}
    body.update(fields)
    return client.post("/api/admin/users", json=body)


def test_create_user_with_temporary_password(client, admin, login_as):
    resp = create_user(client, "New.Hire@Example.com")
    assert resp.status_code == 200
    temp_password = resp.json()["tempPassword"]
    assert len(temp_password) == 10
    assert temp_password.isalnum() and temp_password == temp_password.lower()

    users = {user["email"]: user for user in client.get("/api/admin/users").json()}
    assert users["new.hire@example.com"]["role"] == "Apprentice"
    assert users["new.hire@example.com"]["progressPercentage"] == 0.0

    login_as("new.hire@example.com", temp_password)
    assert client.get("/api/user").json()["email"] == "new.hire@example.com"


def test_create_user_conflict_and_missing_fields(client, admin):
    assert create_user(client, ADA).status_code == 200

    dup = create_user(client, ADA.upper())
    assert dup.status_code == 409
    assert dup.json() == {"error": "User with this email already exists"}

    missing = client.post("/api/admin/users", json={"email": "x@example.com"})
    assert missing.status_code == 400
    assert missing.json() == {"error": "First name, last name, and email are required"}


def test_update_user_fields(client, admin):
    create_user(client, ADA)
    resp = client.put(f"/api/admin/users/{ADA}", json={"company": "Birch Lumber", "role": "Journeyman"})
    assert resp.status_code == 200

    users = {user["email"]: user for user in client.get("/api/admin/users").json()}
    assert users[ADA]["company"] == "Birch Lumber"
    assert users[ADA]["role"] == "Journeyman"
    assert users[ADA]["cohort"] == "2024A"


def test_update_email_rekeys_progress_and_admin(client, admin, register, login_as):
    register(ADA)
    login_as(ADA)
    client.post("/api/competencies/G01/viewed")

    login_as(ADMIN_EMAIL)
    assert client.post("/api/admin/admins", json={"email": ADA}).status_code == 200
    new_email = "ada.king@example.com"
    resp = client.put(f"/api/admin/users/{ADA}", json={"email": new_email})
    assert resp.status_code == 200

    assert client.get(f"/api/progress/{new_email}_G01/signature").status_code == 200
    assert client.get(f"/api/progress/{ADA}_G01/signature").status_code == 404

    overview = {row["email"]: row for row in client.get("/api/admin/progress-overview").json()["userProgress"]}
    assert overview[new_email]["totalProgress"] == 1
    assert ADA not in overview

    admins = [row["email"] for row in client.get("/api/admin/admins").json()]
    assert new_email in admins and ADA not in admins

    login_as(new_email)
    board = client.get("/api/competencies").json()["competencies"]["General Competencies"]
    assert board[0]["status"] == "viewed"


def test_update_email_conflict(client, admin):
    create_user(client, ADA)
    resp = client.put(f"/api/admin/users/{ADA}", json={"email": ADMIN_EMAIL})
    assert resp.status_code == 409


def test_update_unknown_user(client, admin):
    resp = client.put("/api/admin/users/ghost@example.com", json={"company": "X"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found"}


def test_delete_user_removes_progress(client, admin, register, login_as):
    register(ADA)
    login_as(ADA)
    client.post(
        "/api/competencies/G02/validate",
        json={"apprenticeEmail": ADA, "rating": 3, "signatureDataUrl": SIGNATURE, "mentorName": "Bob"},
    )

    login_as(ADMIN_EMAIL)
    client.post("/api/admin/admins", json={"email": ADA})
    resp = client.delete(f"/api/admin/users/{ADA}")
    assert resp.status_code == 200

    assert client.get(f"/api/progress/{ADA}_G02/signature").status_code == 404
    assert ADA not in [user["email"] for user in client.get("/api/admin/users").json()]
    assert ADA not in [row["email"] for row in client.get("/api/admin/admins").json()]
    assert client.post("/api/login", json={"email": ADA, "password": "secret123"}).status_code == 401

    assert client.delete(f"/api/admin/users/{ADA}").status_code == 404


def test_reset_password(client, admin, register, login_as):
    register(ADA)
    resp = client.post(f"/api/admin/users/{ADA}/reset-password")
    assert resp.status_code == 200
    new_password = resp.json()["newPassword"]

    assert client.post("/api/login", json={"email": ADA, "password": "secret123"}).status_code == 401
    login_as(ADA, new_password)


def test_builtin_admin_is_seeded(client, admin):
    admins = client.get("/api/admin/admins").json()
    assert admins == [
        {
            "email": ADMIN_EMAIL,
            "firstName": "Grace",
            "lastName": "Hopper",
            "builtin": True,
            "createdAt": admins[0]["createdAt"],
        }
    ]
    assert client.get("/api/user").json()["isAdmin"] is True


def test_add_and_remove_admin(client, admin, register, login_as):
    register(ADA)

    assert client.post("/api/admin/admins", json={"email": "ghost@example.com"}).status_code == 404
    assert client.post("/api/admin/admins", json={}).json() == {"error": "Email is required"}

    assert client.post("/api/admin/admins", json={"email": ADA}).status_code == 200
    dup = client.post("/api/admin/admins", json={"email": ADA})
    assert dup.status_code == 409
    assert dup.json() == {"error": "User is already an admin"}

    login_as(ADA)
    assert client.get("/api/admin/users").status_code == 200
    assert client.get("/api/user").json()["isAdmin"] is True

    login_as(ADMIN_EMAIL)
    assert client.delete(f"/api/admin/admins/{ADA}").status_code == 200
    assert client.delete(f"/api/admin/admins/{ADA}").json() == {"error": "Admin not found"}

    login_as(ADA)
    assert client.get("/api/admin/users").status_code == 403


def test_builtin_admin_cannot_be_removed(client, admin):
    resp = client.delete(f"/api/admin/admins/{ADMIN_EMAIL}")
    assert resp.status_code == 403
    assert resp.json() == {"error": "Built-in admins cannot be removed"}


def test_builtin_admin_survives_user_deletion(client, admin, register, login_as):
    assert client.delete(f"/api/admin/users/{ADMIN_EMAIL}").status_code == 200
    assert client.get("/api/admin/users").status_code == 401

    register(ADMIN_EMAIL, first_name="Grace", last_name="Hopper")
    login_as(ADMIN_EMAIL)
    admins = client.get("/api/admin/admins").json()
    assert [(row["email"], row["builtin"]) for row in admins] == [(ADMIN_EMAIL, True)]


def test_progress_overview(client, admin, register, login_as):
    register(ADA)
    register("bob@example.com", first_name="Bob", last_name="Brown")
    login_as(ADA)
    client.post("/api/competencies/G01/ready", json={"selfRating": 2})
    client.post(
        "/api/competencies/G02/validate",
        json={"apprenticeEmail": ADA, "rating": 5, "signatureDataUrl": SIGNATURE, "mentorName": "Bob"},
    )

    login_as(ADMIN_EMAIL)
    overview = client.get("/api/admin/progress-overview").json()
    assert overview["totalUsers"] == 3
    assert overview["totalCompetencies"] == 56
    assert overview["completedCompetencies"] == 1
    assert overview["inProgressCompetencies"] == 1
    assert overview["notStartedCompetencies"] == 3 * 56 - 2

    first = overview["userProgress"][0]
    assert first["email"] == ADA
    assert first["progressPercentage"] == 1.79
    assert [row["lastName"] for row in overview["userProgress"][1:]] == ["Brown", "Hopper"]


# ---------- input cleaning ----------

def test_create_user_rejects_blank_names(client, admin):
    resp = create_user(client, ADA, firstName="   ")
    assert resp.status_code == 400
    assert resp.json() == {"error": "First name, last name, and email are required"}


def test_create_user_strips_fields(client, admin):
    create_user(client, ADA, firstName="  Ada ", company=" Acme Mill ")
    users = {user["email"]: user for user in client.get("/api/admin/users").json()}
    assert users[ADA]["firstName"] == "Ada"
    assert users[ADA]["company"] == "Acme Mill"


def test_update_user_rejects_empty_name(client, admin):
    create_user(client, ADA)
    resp = client.put(f"/api/admin/users/{ADA}", json={"lastName": "  "})
    assert resp.status_code == 400
    assert resp.json() == {"error": "First name and last name cannot be empty"}
    users = {user["email"]: user for user in client.get("/api/admin/users").json()}
    assert users[ADA]["lastName"] == "Lovelace"


# ---------- transactional changes ----------

def _viewed_by_ada(client, register, login_as):
    register(ADA)
    login_as(ADA)
    client.post("/api/competencies/G01/viewed")
    login_as(ADMIN_EMAIL)


def test_failed_delete_keeps_progress(client, admin, register, login_as):
    _viewed_by_ada(client, register, login_as)

    async def delete_with_failing_user_row():
        async with AsyncSessionLocal() as db:
            async def broken_delete(instance):
                raise SQLAlchemyError("disk I/O error")

            db.delete = broken_delete
            await directory.delete_user(db, ADA)

    with pytest.raises(SQLAlchemyError):
        asyncio.run(delete_with_failing_user_row())

    assert client.get(f"/api/progress/{ADA}_G01/signature").status_code == 200
    assert ADA in [user["email"] for user in client.get("/api/admin/users").json()]


def test_failed_email_change_keeps_progress_keys(client, admin, register, login_as):
    _viewed_by_ada(client, register, login_as)
    client.post("/api/admin/admins", json={"email": ADA})
    new_email = "ada.king@example.com"

    async def rename_with_failing_admin_update():
        async with AsyncSessionLocal() as db:
            execute = db.execute

            async def failing_execute(statement, *args, **kwargs):
                if statement.is_dml and statement.table.name == "admins":
                    raise SQLAlchemyError("disk I/O error")
                return await execute(statement, *args, **kwargs)

            db.execute = failing_execute
            await directory.update_user(db, ADA, UserUpdateSchema(email=new_email))

    with pytest.raises(SQLAlchemyError):
        asyncio.run(rename_with_failing_admin_update())

    assert client.get(f"/api/progress/{ADA}_G01/signature").status_code == 200
    assert client.get(f"/api/progress/{new_email}_G01/signature").status_code == 404
    emails = [user["email"] for user in client.get("/api/admin/users").json()]
    assert ADA in emails and new_email not in emails
