# ecogest/utils/visibility.py
"""Which grades students and parents may see."""
from typing import Any, Iterable, List, Set

RESTRICTED_ROLES = ("student", "parent")


def filter_published(grades: Iterable[Any], published_exam_ids: Set[Any], exam_id_key: str = "exam_id") -> List[Any]:
    """Keep grades of published exams and grades not tied to any exam."""
    visible = []
    for grade in grades:
        exam_id = grade.get(exam_id_key) if isinstance(grade, dict) else getattr(grade, exam_id_key, None)
        if exam_id is None or exam_id in published_exam_ids:
            visible.append(grade)
    return visible


def sees_only_published(role: str) -> bool:
    return role in RESTRICTED_ROLES
