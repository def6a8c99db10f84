# ecogest/routers/identifiers.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..models import School
from ..schemas.account_schemas import IdentifierRequest
from ..services.identifier_service import IdentifierService
from ..utils.identifiers import parse_identifier, build_auth_email
from .deps import get_current_school, require_admin

router = APIRouter(prefix="/api/v1/identifiers", tags=["Identifiers"], dependencies=[Depends(require_admin)])


@router.post("/generate", response_model=dict)
async def generate_identifier(
    data: IdentifierRequest,
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    """Reserve the next matricule for a role without opening an account."""
    return await IdentifierService(db).issue(school, data.role, source="manual")


@router.get("/stats", response_model=dict)
async def identifier_stats(school: School = Depends(get_current_school), db: AsyncSession = Depends(get_db)):
    return await IdentifierService(db).get_stats(school)


@router.get("/log", response_model=dict)
async def generation_log(
    role: Optional[str] = Query(None, pattern=r'^(student|teacher|parent)$'),
    limit: int = Query(50, ge=1, le=500),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    entries = await IdentifierService(db).get_generation_log(school.id, role, limit)
    return {
        "items": [
            {
                "role": e.role,
                "matricule": e.generated_matricule,
                "auth_email": e.generated_email,
                "user_id": str(e.user_id) if e.user_id else None,
                "source": e.source,
                "created_at": e.created_at.isoformat() if e.created_at else None,
            }
            for e in entries
        ]
    }


@router.get("/parse", response_model=dict)
async def parse(identifier: str = Query(..., min_length=3), school: School = Depends(get_current_school)):
    prefixes = {role: school.matricule_prefix(role) for role in ("student", "teacher", "parent")}
    parsed = parse_identifier(identifier, prefixes)
    if parsed is None:
        return {"valid": False, "identifier": identifier}
    return {
        "valid": True,
        "identifier": identifier,
        **parsed,
        "auth_email": build_auth_email(parsed["matricule"], parsed["school_suffix"]),
        "belongs_to_school": parsed["school_suffix"] == school.school_suffix,
    }
