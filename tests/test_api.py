"""End-to-end flows through the HTTP API."""
from sqlalchemy import func, select

from ecogest.models import AuditLog, AuthUser, Profile, School, Student


async def _login(client, identifier, password):
    response = await client.post("/api/v1/auth/login", json={"identifier": identifier, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def _class_with_subjects(client, headers):
    class_response = await client.post("/api/v1/classes/", headers=headers, json={
        "name": "6e A", "level": "6e", "academic_year": "2024/2025",
    })
    assert class_response.status_code == 201
    class_id = class_response.json()["class"]["id"]

    subjects = {}
    for name, coefficient in (("Mathématiques", 4), ("Français", 3)):
        response = await client.post("/api/v1/subjects/", headers=headers, json={
            "class_id": class_id, "name": name, "coefficient": coefficient,
        })
        assert response.status_code == 201
        subjects[name] = response.json()["subject"]["id"]
    return class_id, subjects


class TestOnboarding:
    async def test_register_and_login_admin(self, client, registration):
        response = await client.post("/api/v1/schools/register", json=registration)
        assert response.status_code == 201
        school = response.json()["school"]
        assert school["school_suffix"] == "ecole_best"
        assert school["subscription_status"] == "trial"

        headers = await _login(client, "directeur@ecolebest.sn", "admin-password")
        me = await client.get("/api/v1/auth/me", headers=headers)
        assert me.json()["role"] == "school_admin"

    async def test_duplicate_suffix_is_rejected(self, client, registration):
        await client.post("/api/v1/schools/register", json=registration)
        registration["admin"]["email"] = "autre@ecolebest.sn"
        response = await client.post("/api/v1/schools/register", json=registration)
        assert response.status_code == 409

    async def test_wrong_password(self, client, admin):
        response = await client.post("/api/v1/auth/login", json={
            "identifier": "directeur@ecolebest.sn", "password": "nope",
        })
        assert response.status_code == 401

    async def test_create_account_for_admin_role_is_refused(self, client, admin):
        response = await client.post("/api/v1/accounts", headers=admin["headers"], json={
            "email": "Admin001@ecole_best", "password": "secret123", "role": "school_admin",
            "first_name": "A", "last_name": "B",
        })
        assert response.status_code == 400

    async def test_create_account_with_foreign_suffix_is_refused(self, client, admin):
        response = await client.post("/api/v1/accounts", headers=admin["headers"], json={
            "email": "Prof001@autre_ecole", "password": "secret123", "role": "teacher",
            "first_name": "A", "last_name": "B",
        })
        assert response.status_code == 400

    async def test_required_school_fields_cannot_be_nulled(self, client, admin):
        url = f"/api/v1/schools/{admin['school_id']}"
        for field in ("name", "school_suffix"):
            response = await client.put(url, headers=admin["headers"], json={field: None})
            assert response.status_code == 422

        settings = await client.put(f"{url}/matricule-settings", headers=admin["headers"],
                                    json={"student_matricule_format": None})
        assert settings.status_code == 422

        cleared = await client.put(url, headers=admin["headers"], json={"slogan": None})
        assert cleared.status_code == 200


class TestStudents:
    async def test_student_and_parent_accounts_are_opened(self, client, admin):
        class_id, _ = await _class_with_subjects(client, admin["headers"])
        response = await client.post("/api/v1/students/", headers=admin["headers"], json={
            "class_id": class_id, "first_name": "Fatou", "last_name": "Ba", "gender": "F",
            "parent_first_name": "Awa", "parent_last_name": "Ba",
        })
        assert response.status_code == 201, response.text
        body = response.json()
        assert body["warnings"] == []
        assert body["student"]["student_number"] == "Eleve001"
        assert body["student"]["user_id"] is not None
        assert body["student"]["parent_matricule"] == "Parent001"

        student_headers = await _login(client, "Eleve001@ecole_best", "student123")
        own = await client.get(f"/api/v1/students/{body['student']['id']}", headers=student_headers)
        assert own.status_code == 200

        parent_headers = await _login(client, "Parent001@ecole-best.ecogest.app", "parent123")
        child = await client.get(f"/api/v1/students/{body['student']['id']}", headers=parent_headers)
        assert child.status_code == 200

    async def test_students_cannot_manage_students(self, client, admin):
        await client.post("/api/v1/students/", headers=admin["headers"], json={"first_name": "Fatou", "last_name": "Ba"})
        student_headers = await _login(client, "Eleve001@ecole_best", "student123")
        response = await client.post("/api/v1/students/", headers=student_headers,
                                     json={"first_name": "X", "last_name": "Y"})
        assert response.status_code == 403

    async def test_unknown_class(self, client, admin):
        response = await client.post("/api/v1/students/", headers=admin["headers"], json={
            "class_id": "00000000-0000-0000-0000-000000000001", "first_name": "Fatou", "last_name": "Ba",
        })
        assert response.status_code == 404


class TestResults:
    async def test_ranking_bulletins_and_visibility(self, client, admin):
        headers = admin["headers"]
        class_id, subjects = await _class_with_subjects(client, headers)

        students = []
        for first_name in ("Fatou", "Moussa", "Awa"):
            response = await client.post("/api/v1/students/", headers=headers, json={
                "class_id": class_id, "first_name": first_name, "last_name": "Ba",
            })
            students.append(response.json()["student"]["id"])

        exam = await client.post("/api/v1/exams/", headers=headers, json={
            "class_id": class_id, "subject_id": subjects["Mathématiques"], "title": "Composition 1",
            "exam_date": "2024-12-10", "semester": "semestre1",
        })
        exam_id = exam.json()["exam"]["id"]

        saved = await client.post("/api/v1/grades/bulk", headers=headers, json={"grades": [
            {"student_id": students[0], "subject_id": subjects["Mathématiques"], "exam_id": exam_id,
             "semester": "semestre1", "grade_value": 16},
            {"student_id": students[0], "subject_id": subjects["Français"], "semester": "semestre1",
             "grade_value": 12},
            {"student_id": students[1], "subject_id": subjects["Mathématiques"], "exam_id": exam_id,
             "semester": "semestre1", "grade_value": 9, "max_grade": 10},
        ]})
        assert saved.json() == {"created": 3, "updated": 0}

        results = await client.get(f"/api/v1/results/classes/{class_id}", headers=headers,
                                   params={"semester": "semestre1"})
        assert results.status_code == 200
        ranked = results.json()["students"]
        # (16*4 + 12*3) / 7 = 14.29 and 18/20 for Moussa
        assert [row["average"] for row in ranked] == [18.0, 14.29, None]
        assert [row["rank"] for row in ranked] == [1, 2, None]
        assert ranked[2]["id"] == students[2]

        pdf = await client.get(f"/api/v1/results/classes/{class_id}/bulletin.pdf", headers=headers,
                               params={"semester": "semestre1"})
        assert pdf.headers["content-type"] == "application/pdf"
        assert pdf.content.startswith(b"%PDF")

        annual = await client.get(f"/api/v1/results/classes/{class_id}/annual", headers=headers)
        assert annual.json()["periods"] == ["semestre1", "semestre2"]
        assert annual.json()["students"][0]["decision"] == "promoted"

        # Unpublished exam: the student only sees the grade without an exam
        student_headers = await _login(client, "Eleve001@ecole_best", "student123")
        visible = await client.get("/api/v1/grades/", headers=student_headers)
        assert visible.json()["total"] == 1

        await client.post(f"/api/v1/exams/{exam_id}/publish", headers=headers)
        visible = await client.get("/api/v1/grades/", headers=student_headers)
        assert visible.json()["total"] == 2

        other = await client.get(f"/api/v1/results/students/{students[1]}", headers=student_headers,
                                 params={"semester": "semestre1"})
        assert other.status_code == 403

    async def test_invalid_period(self, client, admin):
        class_id, _ = await _class_with_subjects(client, admin["headers"])
        response = await client.get(f"/api/v1/results/classes/{class_id}", headers=admin["headers"],
                                    params={"semester": "trimestre4"})
        assert response.status_code == 422

    async def test_grade_above_max_is_rejected(self, client, admin):
        class_id, subjects = await _class_with_subjects(client, admin["headers"])
        student = await client.post("/api/v1/students/", headers=admin["headers"], json={
            "class_id": class_id, "first_name": "Fatou", "last_name": "Ba",
        })
        response = await client.post("/api/v1/grades/", headers=admin["headers"], json={
            "student_id": student.json()["student"]["id"], "subject_id": subjects["Français"],
            "grade_value": 25,
        })
        assert response.status_code == 422


class TestAnnouncementsAndPayments:
    async def test_announcement_audience(self, client, admin):
        headers = admin["headers"]
        await client.post("/api/v1/students/", headers=headers, json={"first_name": "Fatou", "last_name": "Ba"})
        for title, audience in (("Rentrée", ["tous"]), ("Conseil", ["professeurs"]), ("Sortie", ["eleves"])):
            response = await client.post("/api/v1/announcements/", headers=headers,
                                         json={"title": title, "content": "...", "target_audience": audience})
            assert response.status_code == 201

        student_headers = await _login(client, "Eleve001@ecole_best", "student123")
        seen = await client.get("/api/v1/announcements/", headers=student_headers)
        assert sorted(a["title"] for a in seen.json()["items"]) == ["Rentrée", "Sortie"]

        everything = await client.get("/api/v1/announcements/", headers=headers)
        assert everything.json()["total"] == 3

    async def test_payment_and_receipt(self, client, admin):
        headers = admin["headers"]
        student = await client.post("/api/v1/students/", headers=headers, json={"first_name": "Fatou", "last_name": "Ba"})
        student_id = student.json()["student"]["id"]

        payment = await client.post("/api/v1/payments/", headers=headers, json={
            "student_id": student_id, "amount": 25000, "payment_method": "wave", "payment_month": "octobre",
        })
        assert payment.status_code == 201
        payment_id = payment.json()["payment"]["id"]

        summary = await client.get("/api/v1/payments/summary", headers=headers)
        assert summary.json()["total"] == 25000

        receipt = await client.get(f"/api/v1/payments/{payment_id}/receipt.pdf", headers=headers)
        assert receipt.status_code == 200
        assert receipt.content.startswith(b"%PDF")


class TestSchoolDeletion:
    async def test_wrong_password_keeps_everything(self, client, admin):
        response = await client.request("DELETE", f"/api/v1/schools/{admin['school_id']}",
                                        headers=admin["headers"], json={"admin_password": "wrong"})
        assert response.status_code == 401

    async def test_other_roles_cannot_delete(self, client, admin):
        await client.post("/api/v1/students/", headers=admin["headers"], json={"first_name": "Fatou", "last_name": "Ba"})
        student_headers = await _login(client, "Eleve001@ecole_best", "student123")
        response = await client.request("DELETE", f"/api/v1/schools/{admin['school_id']}",
                                        headers=student_headers, json={"admin_password": "student123"})
        assert response.status_code == 403

    async def test_delete_removes_school_data_and_logins(self, client, admin, session_factory):
        headers = admin["headers"]
        class_id, subjects = await _class_with_subjects(client, headers)
        await client.post("/api/v1/students/", headers=headers, json={
            "class_id": class_id, "first_name": "Fatou", "last_name": "Ba",
            "parent_first_name": "Awa", "parent_last_name": "Ba",
        })

        response = await client.request("DELETE", f"/api/v1/schools/{admin['school_id']}",
                                        headers=headers, json={"admin_password": "admin-password"})
        assert response.status_code == 200
        assert response.json()["success"] is True

        async with session_factory() as session:
            assert (await session.execute(select(func.count()).select_from(School))).scalar() == 0
            assert (await session.execute(select(func.count()).select_from(Student))).scalar() == 0
            assert (await session.execute(select(func.count()).select_from(Profile))).scalar() == 0
            assert (await session.execute(select(func.count()).select_from(AuthUser))).scalar() == 0
            log = (await session.execute(select(AuditLog))).scalar_one()
            assert log.category == "security"
            assert log.details["users_deleted"] == 3

        login = await client.post("/api/v1/auth/login", json={
            "identifier": "directeur@ecolebest.sn", "password": "admin-password",
        })
        assert login.status_code == 401
