# ecogest/services/results_service.py
"""Class and student results built from stored grades."""
import logging
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..models import School, Grade, Subject, ClassModel
from ..utils.grade_utils import (
    GradeEntry, compute_class_results, appreciation, annual_average, annual_decision, rank_students,
)
from .grade_service import GradeService
from .student_service import StudentService
from .subject_service import SubjectService

logger = logging.getLogger(__name__)


class ResultsService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.grades = GradeService(db)
        self.students = StudentService(db)
        self.subjects = SubjectService(db)

    async def _class(self, school_id: UUID, class_id: UUID) -> ClassModel:
        class_obj = await self.db.get(ClassModel, class_id)
        if not class_obj or class_obj.school_id != school_id or class_obj.is_deleted:
            raise NotFoundError("Class", class_id)
        return class_obj

    @staticmethod
    def _entries(grades: List[Grade], subjects: Dict[UUID, Subject]) -> List[GradeEntry]:
        entries = []
        for grade in grades:
            subject = subjects.get(grade.subject_id)
            entries.append(GradeEntry(
                student_id=grade.student_id,
                subject_id=grade.subject_id,
                value=float(grade.grade_value) if grade.grade_value is not None else None,
                max_grade=float(grade.max_grade or 20),
                coefficient=float(grade.coefficient) if grade.coefficient is not None else None,
                subject_coefficient=float(subject.coefficient) if subject and subject.coefficient is not None else None,
                exam_type=grade.exam_type,
            ))
        return entries

    async def class_results(self, school: School, class_id: UUID, semester: str, role: str = "school_admin") -> Dict[str, Any]:
        class_obj = await self._class(school.id, class_id)
        students = await self.students.list_for_class(school.id, class_id)
        subjects = await self.subjects.for_class(school.id, class_id)
        subject_map = {s.id: s for s in subjects}

        grades = await self.grades.list_grades(
            school.id, role, student_ids=[s.id for s in students], semester=semester
        )
        rows = [
            {"id": s.id, "name": s.full_name, "student_number": s.student_number}
            for s in students
        ]
        results = compute_class_results(self._entries(grades, subject_map), rows)
        results.update({
            "class_id": class_obj.id,
            "class_name": class_obj.name,
            "semester": semester,
            "subjects": [
                {"id": s.id, "name": s.name, "abbreviation": s.abbreviation,
                 "coefficient": float(s.coefficient or 1)}
                for s in subjects
            ],
        })
        return results

    async def student_results(self, school: School, student_id: UUID, semester: str, role: str = "school_admin") -> Dict[str, Any]:
        student = await self.students.get_or_404(student_id, school.id)
        if not student.class_id:
            raise NotFoundError("Class for student", student_id)
        class_results = await self.class_results(school, student.class_id, semester, role)

        row = next((r for r in class_results["students"] if r["id"] == student.id), None)
        subject_rows = []
        for subject in class_results["subjects"]:
            average = row["subjects"].get(subject["id"]) if row else None
            subject_rows.append({**subject, "average": average, "appreciation": appreciation(average)})

        return {
            "student": {"id": student.id, "name": student.full_name, "student_number": student.student_number},
            "class_name": class_results["class_name"],
            "semester": semester,
            "subjects": subject_rows,
            "average": row["average"] if row else None,
            "rank": row["rank"] if row else None,
            "appreciation": row["appreciation"] if row else "",
            "class_average": class_results["class_average"],
            "class_size": len(class_results["students"]),
        }

    async def annual_results(self, school: School, class_id: UUID, role: str = "school_admin") -> Dict[str, Any]:
        """Mean of the period averages, with a promotion decision."""
        periods = school.period_labels
        per_period = [await self.class_results(school, class_id, period, role) for period in periods]

        by_student: Dict[UUID, Dict[str, Any]] = {}
        for index, results in enumerate(per_period):
            for row in results["students"]:
                entry = by_student.setdefault(row["id"], {
                    "id": row["id"],
                    "name": row["name"],
                    "student_number": row.get("student_number"),
                    "periods": [None] * len(periods),
                })
                entry["periods"][index] = row["average"]

        rows = []
        for entry in by_student.values():
            average = annual_average(entry["periods"])
            rows.append({**entry, "average": average, "decision": annual_decision(average),
                         "appreciation": appreciation(average)})

        ranked = rank_students(rows)
        return {
            "class_id": class_id,
            "class_name": per_period[0]["class_name"] if per_period else "",
            "academic_year": school.academic_year,
            "periods": periods,
            "students": ranked,
            "promoted": sum(1 for r in ranked if r["decision"] == "promoted"),
        }
