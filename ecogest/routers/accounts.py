# ecogest/routers/accounts.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..models import School
from ..schemas.account_schemas import AccountCreate, AccountIssue, BackfillRequest
from ..services.account_service import AccountService
from .deps import get_current_school, require_admin

router = APIRouter(prefix="/api/v1/accounts", tags=["Accounts"], dependencies=[Depends(require_admin)])


@router.post("", response_model=dict, status_code=201)
async def create_account(
    data: AccountCreate,
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    """Open a login for ``matricule@suffix`` (e.g. Eleve001@ecole_best)."""
    profile = await AccountService(db).create_account(
        school, data.email, data.password, data.role, data.first_name, data.last_name, phone=data.phone
    )
    return {
        "success": True,
        "user_id": str(profile.id),
        "auth_email": profile.email,
        "message": f"User {data.email} created successfully",
    }


@router.post("/issue", response_model=dict, status_code=201)
async def issue_account(
    data: AccountIssue,
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    """Issue the next matricule for the role and open its login in one call."""
    result = await AccountService(db).issue_account(
        school, data.role, data.first_name, data.last_name, password=data.password, phone=data.phone
    )
    return {**result, "user_id": str(result["user_id"])}


@router.post("/backfill", response_model=dict)
async def backfill_accounts(
    data: BackfillRequest,
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    return await AccountService(db).backfill(school, data.role, password=data.password)
