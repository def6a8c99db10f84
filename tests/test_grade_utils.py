"""Averages, rankings, appreciations and year-end decisions."""
import pytest

from ecogest.utils.grade_utils import (
    GradeEntry,
    annual_average,
    annual_decision,
    appreciation,
    class_average,
    compute_class_results,
    parse_max_score,
    rank_students,
    student_average,
    validate_grade_value,
    weighted_average,
)


def test_weighted_average():
    assert weighted_average([(15, 3), (12, 2), (18, 1)]) == 14.5


def test_weighted_average_skips_missing_grades():
    assert weighted_average([(None, 4), (12, 1)]) == 12.0
    assert weighted_average([(None, 2)]) is None
    assert weighted_average([]) is None


def test_grades_are_normalised_to_twenty():
    entries = [
        GradeEntry("s1", "math", 8, max_grade=10),
        GradeEntry("s1", "math", 12, max_grade=20),
    ]
    assert student_average(entries) == 14.0


def test_coefficient_falls_back_to_subject_then_one():
    assert GradeEntry("s", "x", 10, coefficient=3, subject_coefficient=2).weight == 3.0
    assert GradeEntry("s", "x", 10, subject_coefficient=2).weight == 2.0
    assert GradeEntry("s", "x", 10).weight == 1.0
    assert GradeEntry("s", "x", 10, coefficient=0, subject_coefficient=0).weight == 1.0


def test_devoir_and_composition_share_the_coefficient():
    entries = [
        GradeEntry("s1", "math", 10, subject_coefficient=2, exam_type="devoir"),
        GradeEntry("s1", "math", 20, subject_coefficient=2, exam_type="composition"),
    ]
    assert entries[0].weight == pytest.approx(0.8)
    assert entries[1].weight == pytest.approx(1.2)
    assert student_average(entries) == 16.0
    assert GradeEntry("s1", "math", 10, exam_type="oral").weight == 1.0


@pytest.mark.parametrize("raw, expected", [("/20", 20.0), ("/10", 10.0), ("10", 10.0), (None, 20.0),
                                           ("abc", 20.0), (0, 20.0), (40, 40.0)])
def test_parse_max_score(raw, expected):
    assert parse_max_score(raw) == expected


def test_validate_grade_value():
    assert validate_grade_value(12, 20) is None
    assert validate_grade_value(-1) == "Grade must be a positive number"
    assert validate_grade_value(21, 20) == "Grade cannot exceed 20"


def test_ranking_is_descending_and_stable():
    rows = [
        {"id": "a", "average": 14.2},
        {"id": "b", "average": 18.0},
        {"id": "c", "average": None},
        {"id": "d", "average": 16.5},
        {"id": "e", "average": 16.5},
    ]
    ranked = rank_students(rows)
    assert [r["id"] for r in ranked] == ["b", "d", "e", "a", "c"]
    assert [r["rank"] for r in ranked] == [1, 2, 3, 4, None]


def test_class_results_exclude_students_without_grades():
    entries = [
        GradeEntry("s1", "math", 18, subject_coefficient=4),
        GradeEntry("s2", "math", 16.5, subject_coefficient=4),
        GradeEntry("s3", "math", 14.2, subject_coefficient=4),
    ]
    students = [{"id": sid} for sid in ("s3", "s1", "s4", "s2")]

    results = compute_class_results(entries, students)

    ranked = results["students"]
    assert [r["average"] for r in ranked[:3]] == [18.0, 16.5, 14.2]
    assert ranked[3]["id"] == "s4"
    assert ranked[3]["rank"] is None
    assert results["graded_count"] == 3
    assert results["class_average"] == class_average([18.0, 16.5, 14.2])
    assert ranked[0]["subjects"] == {"math": 18.0}


@pytest.mark.parametrize("average, label", [
    (17, "Very Good"), (16, "Very Good"), (15.99, "Good"), (12.5, "Fairly Good"),
    (10, "Pass"), (9.99, "Insufficient"), (None, ""),
])
def test_appreciation(average, label):
    assert appreciation(average) == label


def test_annual_decision():
    assert annual_average([12.0, None, 14.0]) == 13.0
    assert annual_decision(10.0) == "promoted"
    assert annual_decision(8.5) == "repeat"
    assert annual_decision(7.99) == "excluded"
    assert annual_decision(None) is None
