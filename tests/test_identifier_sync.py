"""Renaming logins after a school suffix change."""
import uuid

from sqlalchemy import delete, select

from ecogest.models import AuthUser, Profile
from ecogest.services.account_service import AccountService
from ecogest.services.identifier_sync_service import IdentifierSyncService
from ecogest.services.school_service import SchoolService


async def _register(db):
    result = await SchoolService(db).register(
        {"name": "Ecole Best", "email": "contact@ecolebest.sn", "school_suffix": "ecole_best"},
        {"email": "directeur@ecolebest.sn", "password": "admin-password", "first_name": "Awa", "last_name": "Diop"},
    )
    return result["school"], result["admin_id"]


async def test_rename_keeps_prefix_and_number(db):
    school, admin_id = await _register(db)
    accounts = AccountService(db)
    teacher = await accounts.issue_account(school, "teacher", "Moussa", "Fall")
    student = await accounts.issue_account(school, "student", "Fatou", "Ba")

    result = await IdentifierSyncService(db).sync(school.id, "ecole_best", "lycee_best")

    assert result["success"] is True
    assert result["stats"] == {"total": 2, "success": 2, "errors": 0}

    teacher_user = await db.get(AuthUser, teacher["user_id"])
    await db.refresh(teacher_user)
    assert teacher_user.email == "Prof001@lycee-best.ecogest.app"
    assert teacher_user.user_metadata["school_suffix"] == "lycee_best"
    assert teacher_user.user_metadata["display_email"] == "Prof001@lycee_best"

    student_profile = await db.get(Profile, student["user_id"])
    await db.refresh(student_profile)
    assert student_profile.email == "Eleve001@lycee-best.ecogest.app"
    assert student_profile.matricule == "Eleve001"

    admin = await db.get(Profile, admin_id)
    await db.refresh(admin)
    assert admin.email == "directeur@ecolebest.sn"


async def test_unrelated_emails_are_skipped(db):
    school, _ = await _register(db)
    await AccountService(db).issue_account(school, "teacher", "Moussa", "Fall")

    result = await IdentifierSyncService(db).sync(school.id, "autre_ecole", "lycee_best")

    assert result["stats"]["success"] == 0
    assert result["stats"]["errors"] == 0


async def test_missing_auth_user_is_counted_not_fatal(db):
    school, _ = await _register(db)
    issued = await AccountService(db).issue_account(school, "student", "Fatou", "Ba")

    # Profile left behind by a removed login
    db.add(Profile(
        id=uuid.uuid4(),
        school_id=school.id,
        email="Eleve099@ecole-best.ecogest.app",
        matricule="Eleve099",
        first_name="Orphan",
        last_name="Profile",
        role="student",
    ))
    await db.commit()

    result = await IdentifierSyncService(db).sync(school.id, "ecole_best", "lycee_best")

    assert result["stats"] == {"total": 2, "success": 1, "errors": 1}
    assert result["error_details"][0].startswith("Eleve099@ecole-best.ecogest.app")
    user = (await db.execute(select(AuthUser).where(AuthUser.id == issued["user_id"]))).scalar_one()
    assert user.email == "Eleve001@lycee-best.ecogest.app"


async def test_profile_removed_during_sync_is_counted(db):
    school, _ = await _register(db)
    issued = await AccountService(db).issue_account(school, "student", "Fatou", "Ba")

    service = IdentifierSyncService(db)
    update_email = service.auth.update_email

    async def update_then_remove_profile(user_id, email, metadata_updates=None):
        user = await update_email(user_id, email, metadata_updates)
        await db.execute(delete(Profile).where(Profile.id == user_id))
        return user

    service.auth.update_email = update_then_remove_profile
    result = await service.sync(school.id, "ecole_best", "lycee_best")

    assert result["stats"] == {"total": 1, "success": 0, "errors": 1}
    assert "Profile not found" in result["error_details"][0]
    assert await db.get(Profile, issued["user_id"], populate_existing=True) is None


async def test_suffix_change_through_api_renames_logins(client, admin):
    issued = await client.post("/api/v1/accounts/issue", headers=admin["headers"], json={
        "role": "teacher", "first_name": "Moussa", "last_name": "Fall",
    })
    assert issued.status_code == 201
    password = issued.json()["initial_password"]

    response = await client.put(f"/api/v1/schools/{admin['school_id']}", headers=admin["headers"],
                                json={"school_suffix": "lycee_best"})
    assert response.status_code == 200

    old = await client.post("/api/v1/auth/login", json={"identifier": "Prof001@ecole_best", "password": password})
    new = await client.post("/api/v1/auth/login", json={"identifier": "Prof001@lycee_best", "password": password})
    assert old.status_code == 401
    assert new.status_code == 200
    assert new.json()["role"] == "teacher"
