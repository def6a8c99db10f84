"""Matricule formatting, parsing and sequential issuance."""
import asyncio

import pytest
from sqlalchemy import select

from ecogest.core.exceptions import DuplicateError, IdentifierNotAllowed
from ecogest.models import MatriculeGenerationLog, SchoolUserCounter
from ecogest.services.account_service import AccountService
from ecogest.services.identifier_service import IdentifierService
from ecogest.utils.identifiers import (
    build_auth_email,
    build_display_email,
    format_identifier,
    parse_identifier,
    split_login,
    to_auth_email,
    validate_identifier,
)


class TestFormatting:
    def test_counter_is_zero_padded(self):
        assert format_identifier("Eleve", 7, "ecole_best") == "Eleve007@ecole_best"
        assert format_identifier("Prof", 1234, "ecole_best") == "Prof1234@ecole_best"

    def test_counter_starts_at_one(self):
        with pytest.raises(ValueError):
            format_identifier("Eleve", 0, "ecole_best")

    def test_auth_email_replaces_underscores(self):
        assert build_auth_email("Prof003", "ecole_best") == "Prof003@ecole-best.ecogest.app"

    def test_display_email(self):
        assert build_display_email("Prof003", "ecole_best") == "Prof003@ecole_best"
        assert build_display_email("Prof003@ecole_best", "other") == "Prof003@ecole_best"


class TestParsing:
    def test_parse_known_prefix(self):
        parsed = parse_identifier("Prof003@ecole_best")
        assert parsed == {
            "role": "teacher",
            "prefix": "Prof",
            "number": 3,
            "school_suffix": "ecole_best",
            "matricule": "Prof003",
        }

    def test_parse_custom_prefixes(self):
        prefixes = {"student": "Stu", "teacher": "Ens", "parent": "Tuteur"}
        assert parse_identifier("Tuteur012@lycee_kane", prefixes)["role"] == "parent"
        assert parse_identifier("Eleve012@lycee_kane", prefixes) is None

    @pytest.mark.parametrize("value", ["", "Prof3@ecole_best", "Prof003", "Prof003@Ecole-Best", "Inconnu001@ecole"])
    def test_parse_rejects(self, value):
        assert parse_identifier(value) is None

    def test_validate_expected_role(self):
        assert validate_identifier("Eleve001@ecole_best", "student")
        assert not validate_identifier("Eleve001@ecole_best", "teacher")

    def test_split_login(self):
        assert split_login("Eleve001@ecole_best") == ("Eleve001", "ecole_best")
        with pytest.raises(ValueError):
            split_login("no-at-sign")
        with pytest.raises(ValueError):
            split_login("a@b@c")

    def test_login_forms_map_to_auth_email(self):
        assert to_auth_email("Prof003@ecole_best") == "Prof003@ecole-best.ecogest.app"
        assert to_auth_email("Prof003@ecole-best.ecogest.app") == "Prof003@ecole-best.ecogest.app"
        assert to_auth_email("Directeur@EcoleBest.sn") == "Directeur@ecolebest.sn"


class TestIssuance:
    async def test_sequential_without_gaps(self, db, school):
        service = IdentifierService(db)
        issued = [await service.issue(school, "student") for _ in range(3)]

        assert [i["identifier"] for i in issued] == [
            "Eleve001@ecole_best",
            "Eleve002@ecole_best",
            "Eleve003@ecole_best",
        ]
        assert issued[0]["auth_email"] == "Eleve001@ecole-best.ecogest.app"

        log = (await db.execute(select(MatriculeGenerationLog))).scalars().all()
        assert len(log) == 3

    async def test_counters_are_per_role(self, db, school):
        service = IdentifierService(db)
        await service.issue(school, "student")
        await service.issue(school, "student")
        teacher = await service.issue(school, "teacher")
        parent = await service.issue(school, "parent")

        assert teacher["identifier"] == "Prof001@ecole_best"
        assert parent["identifier"] == "Parent001@ecole_best"

    async def test_school_prefix_is_used(self, db, school):
        school.student_matricule_format = "Stu"
        await db.commit()
        issued = await IdentifierService(db).issue(school, "student")
        assert issued["matricule"] == "Stu001"

    async def test_admin_never_gets_an_identifier(self, db, school):
        with pytest.raises(IdentifierNotAllowed):
            await IdentifierService(db).issue(school, "school_admin")
        counters = (await db.execute(select(SchoolUserCounter))).scalars().all()
        assert counters == []

    async def test_concurrent_issuance_yields_distinct_values(self, session_factory, school):
        async def take_one():
            async with session_factory() as session:
                count = await IdentifierService(session).next_count(school.id, "teacher")
                await session.commit()
                return count

        counts = await asyncio.gather(*(take_one() for _ in range(10)))
        assert sorted(counts) == list(range(1, 11))

    async def test_taken_matricule_is_skipped_on_next_issue(self, db, school):
        accounts = AccountService(db)
        await accounts.create_account(school, "Eleve001@ecole_best", "secret-pass", "student", "Awa", "Sow")

        with pytest.raises(DuplicateError):
            await accounts.issue_account(school, "student", "Fatou", "Ba")
        await db.rollback()
        await db.refresh(school)

        issued = await accounts.issue_account(school, "student", "Fatou", "Ba")
        assert issued["identifier"] == "Eleve002@ecole_best"
        counter = (await db.execute(select(SchoolUserCounter))).scalar_one()
        assert counter.current_count == 2

    async def test_stats_show_next_identifier(self, db, school):
        service = IdentifierService(db)
        await service.issue(school, "teacher")
        stats = await service.get_stats(school)
        assert stats["roles"]["teacher"]["current_count"] == 1
        assert stats["roles"]["teacher"]["next_identifier"] == "Prof002@ecole_best"
        assert stats["roles"]["student"]["next_identifier"] == "Eleve001@ecole_best"


class TestIdentifierApi:
    async def test_generate_and_parse(self, client, admin):
        response = await client.post("/api/v1/identifiers/generate", json={"role": "teacher"},
                                     headers=admin["headers"])
        assert response.status_code == 200
        assert response.json()["identifier"] == "Prof001@ecole_best"

        parsed = await client.get("/api/v1/identifiers/parse", params={"identifier": "Prof001@ecole_best"},
                                  headers=admin["headers"])
        assert parsed.json()["valid"] is True
        assert parsed.json()["belongs_to_school"] is True

    async def test_generate_for_admin_is_refused(self, client, admin):
        response = await client.post("/api/v1/identifiers/generate", json={"role": "school_admin"},
                                     headers=admin["headers"])
        assert response.status_code == 400

    async def test_requires_authentication(self, client):
        response = await client.get("/api/v1/identifiers/stats")
        assert response.status_code == 401
