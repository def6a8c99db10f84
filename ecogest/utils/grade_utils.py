# ecogest/utils/grade_utils.py
"""Weighted averages, rankings and decisions for report cards.

All grades are brought to a /20 scale before weighting. A missing grade is
left out of both sums; it is never treated as a zero.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

GRADE_SCALE = 20.0

APPRECIATION_BANDS = (
    (16.0, "Very Good"),
    (14.0, "Good"),
    (12.0, "Fairly Good"),
    (10.0, "Pass"),
)
INSUFFICIENT = "Insufficient"

PROMOTION_THRESHOLD = 10.0
REPEAT_THRESHOLD = 8.0

# Share of the subject coefficient carried by each kind of assessment
EXAM_TYPE_WEIGHTS = {
    "devoir": 0.4,
    "composition": 0.6,
}


@dataclass
class GradeEntry:
    student_id: Any
    subject_id: Any
    value: Optional[float]
    max_grade: float = GRADE_SCALE
    coefficient: Optional[float] = None
    subject_coefficient: Optional[float] = None
    exam_type: Optional[str] = None

    @property
    def weight(self) -> float:
        for candidate in (self.coefficient, self.subject_coefficient):
            if candidate is not None and candidate > 0:
                return float(candidate) * self.type_factor
        return self.type_factor

    @property
    def type_factor(self) -> float:
        return EXAM_TYPE_WEIGHTS.get((self.exam_type or "").lower(), 1.0)

    @property
    def normalized(self) -> Optional[float]:
        if self.value is None:
            return None
        max_grade = float(self.max_grade or GRADE_SCALE)
        return float(self.value) / max_grade * GRADE_SCALE


def parse_max_score(value: Any) -> float:
    """Read "/20", "/10" or "10" as a max score, defaulting to 20."""
    if isinstance(value, (int, float)):
        return float(value) if value > 0 else GRADE_SCALE
    if not value or not isinstance(value, str):
        return GRADE_SCALE
    match = re.search(r'/(\d+(?:\.\d+)?)', value)
    try:
        parsed = float(match.group(1) if match else value.strip())
    except ValueError:
        return GRADE_SCALE
    return parsed if parsed > 0 else GRADE_SCALE


def validate_grade_value(value: float, max_grade: float = GRADE_SCALE) -> Optional[str]:
    """Return an error message, or None when the grade is acceptable."""
    if value is None or value < 0:
        return "Grade must be a positive number"
    if value > max_grade:
        return f"Grade cannot exceed {max_grade:g}"
    return None


def weighted_average(pairs: Iterable[Sequence[Optional[float]]]) -> Optional[float]:
    """sum(grade * coefficient) / sum(coefficient) over (grade, coefficient) pairs.

    >>> weighted_average([(15, 3), (12, 2), (18, 1)])
    14.5
    """
    total, weights = 0.0, 0.0
    for grade, coefficient in pairs:
        if grade is None:
            continue
        coefficient = 1.0 if coefficient is None else float(coefficient)
        total += float(grade) * coefficient
        weights += coefficient
    if weights <= 0:
        return None
    return round(total / weights, 2)


def student_average(entries: Iterable[GradeEntry]) -> Optional[float]:
    return weighted_average((entry.normalized, entry.weight) for entry in entries)


def subject_averages(entries: Iterable[GradeEntry]) -> Dict[Any, Optional[float]]:
    by_subject: Dict[Any, List[GradeEntry]] = {}
    for entry in entries:
        by_subject.setdefault(entry.subject_id, []).append(entry)
    return {subject_id: student_average(items) for subject_id, items in by_subject.items()}


def appreciation(average: Optional[float]) -> str:
    if average is None:
        return ""
    for threshold, label in APPRECIATION_BANDS:
        if average >= threshold:
            return label
    return INSUFFICIENT


def rank_students(averages: Sequence[Dict[str, Any]], key: str = "average") -> List[Dict[str, Any]]:
    """Order rows by descending average and number them.

    Ties keep their incoming order. Rows without an average go last and get
    no rank.
    """
    ranked = sorted((row for row in averages if row.get(key) is not None), key=lambda row: -row[key])
    unranked = [row for row in averages if row.get(key) is None]

    result = []
    for position, row in enumerate(ranked, start=1):
        result.append({**row, "rank": position})
    for row in unranked:
        result.append({**row, "rank": None})
    return result


def class_average(averages: Iterable[Optional[float]]) -> Optional[float]:
    present = [a for a in averages if a is not None]
    if not present:
        return None
    return round(sum(present) / len(present), 2)


def compute_class_results(entries: Iterable[GradeEntry], students: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """Rank a class for one period.

    ``students`` is a list of dicts with at least an ``id``; they are
    returned enriched with ``average``, ``subjects``, ``appreciation`` and
    ``rank``.
    """
    by_student: Dict[Any, List[GradeEntry]] = {}
    for entry in entries:
        by_student.setdefault(entry.student_id, []).append(entry)

    rows = []
    for student in students:
        student_entries = by_student.get(student["id"], [])
        average = student_average(student_entries)
        rows.append({
            **student,
            "average": average,
            "subjects": subject_averages(student_entries),
            "appreciation": appreciation(average),
        })

    ranked = rank_students(rows)
    return {
        "students": ranked,
        "class_average": class_average(row["average"] for row in ranked),
        "graded_count": sum(1 for row in ranked if row["average"] is not None),
    }


def annual_average(period_averages: Iterable[Optional[float]]) -> Optional[float]:
    return class_average(period_averages)


def annual_decision(average: Optional[float]) -> Optional[str]:
    if average is None:
        return None
    if average >= PROMOTION_THRESHOLD:
        return "promoted"
    if average >= REPEAT_THRESHOLD:
        return "repeat"
    return "excluded"
