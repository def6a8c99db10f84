"""Announcement audiences and grade visibility."""
from types import SimpleNamespace

from ecogest.utils.announcements import filter_for_role, is_visible_to
from ecogest.utils.visibility import filter_published, sees_only_published


def test_audience_aliases():
    assert is_visible_to(["élèves"], "student")
    assert is_visible_to(["Eleves"], "student")
    assert is_visible_to(["enseignants"], "teacher")
    assert is_visible_to(["administration"], "school_admin")
    assert not is_visible_to(["parents"], "student")


def test_all_and_empty_audience_reach_everyone():
    for role in ("student", "parent", "teacher", "school_admin"):
        assert is_visible_to(["tous"], role)
        assert is_visible_to([], role)
        assert is_visible_to(None, role)


def test_filter_for_role():
    announcements = [
        {"title": "Rentrée", "target_audience": ["all"]},
        {"title": "Conseil de classe", "target_audience": ["professeurs"]},
        SimpleNamespace(title="Réunion", target_audience=["parents", "eleves"]),
    ]
    student_view = filter_for_role(announcements, "student")
    assert len(student_view) == 2
    assert filter_for_role(announcements, "teacher")[1]["title"] == "Conseil de classe"
    assert len(filter_for_role(announcements, "school_admin", is_admin=True)) == 3


def test_students_only_see_published_exam_grades():
    grades = [
        {"id": 1, "exam_id": "published"},
        {"id": 2, "exam_id": "draft"},
        {"id": 3, "exam_id": None},
    ]
    visible = filter_published(grades, {"published"})
    assert [g["id"] for g in visible] == [1, 3]
    assert sees_only_published("student")
    assert sees_only_published("parent")
    assert not sees_only_published("teacher")
