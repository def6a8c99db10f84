# ecogest/routers/results.py
"""Averages, rankings and PDF report cards."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import PermissionDenied
from ..models import Profile, School
from ..services.results_service import ResultsService
from ..utils.bulletin_pdf import class_bulletin_pdf, student_bulletin_pdf, annual_bulletin_pdf
from .deps import get_current_profile, get_current_school, require_staff
from .grades import readable_student_ids

router = APIRouter(prefix="/api/v1/results", tags=["Results"])

PERIOD_PATTERN = r'^(semestre[12]|trimestre[123])$'


def pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def school_header(school: School) -> dict:
    return {"name": school.name, "slogan": school.slogan, "currency": school.currency}


def format_row(row: dict) -> dict:
    formatted = {**row, "id": str(row["id"])}
    if "subjects" in row:
        formatted["subjects"] = {str(k): v for k, v in row["subjects"].items()}
    return formatted


def format_class_results(results: dict) -> dict:
    return {
        **results,
        "class_id": str(results["class_id"]),
        "students": [format_row(r) for r in results["students"]],
        "subjects": [{**s, "id": str(s["id"])} for s in results["subjects"]],
    }


@router.get("/classes/{class_id}", response_model=dict)
async def class_results(
    class_id: UUID,
    semester: str = Query(..., pattern=PERIOD_PATTERN),
    staff: Profile = Depends(require_staff),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    """Ranked averages of a class for one period."""
    results = await ResultsService(db).class_results(school, class_id, semester, staff.role)
    return format_class_results(results)


@router.get("/classes/{class_id}/annual", response_model=dict)
async def annual_results(
    class_id: UUID,
    staff: Profile = Depends(require_staff),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    results = await ResultsService(db).annual_results(school, class_id, staff.role)
    return {**results, "class_id": str(results["class_id"]), "students": [format_row(r) for r in results["students"]]}


@router.get("/students/{student_id}", response_model=dict)
async def student_results(
    student_id: UUID,
    semester: str = Query(..., pattern=PERIOD_PATTERN),
    profile: Profile = Depends(get_current_profile),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    allowed = await readable_student_ids(profile, db)
    if allowed is not None and student_id not in allowed:
        raise PermissionDenied("You cannot view this student's results")
    results = await ResultsService(db).student_results(school, student_id, semester, profile.role)
    return {
        **results,
        "student": {**results["student"], "id": str(results["student"]["id"])},
        "subjects": [{**s, "id": str(s["id"])} for s in results["subjects"]],
    }


@router.get("/classes/{class_id}/bulletin.pdf")
async def class_bulletin(
    class_id: UUID,
    semester: str = Query(..., pattern=PERIOD_PATTERN),
    staff: Profile = Depends(require_staff),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    results = await ResultsService(db).class_results(school, class_id, semester, staff.role)
    content = class_bulletin_pdf(school_header(school), results["class_name"], semester, results["subjects"], results)
    return pdf_response(content, f"bulletin_{results['class_name']}_{semester}.pdf")


@router.get("/classes/{class_id}/annual.pdf")
async def annual_bulletin(
    class_id: UUID,
    staff: Profile = Depends(require_staff),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    results = await ResultsService(db).annual_results(school, class_id, staff.role)
    content = annual_bulletin_pdf(
        school_header(school), results["class_name"], results["academic_year"], results["periods"], results["students"]
    )
    return pdf_response(content, f"annual_{results['class_name']}.pdf")


@router.get("/students/{student_id}/bulletin.pdf")
async def student_bulletin(
    student_id: UUID,
    semester: str = Query(..., pattern=PERIOD_PATTERN),
    profile: Profile = Depends(get_current_profile),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    allowed = await readable_student_ids(profile, db)
    if allowed is not None and student_id not in allowed:
        raise PermissionDenied("You cannot view this student's results")
    results = await ResultsService(db).student_results(school, student_id, semester, profile.role)
    content = student_bulletin_pdf(
        school_header(school), results["student"], results["class_name"], semester, results["subjects"], results
    )
    return pdf_response(content, f"bulletin_{results['student']['student_number']}_{semester}.pdf")
