# ecogest/services/identifier_service.py
"""Sequential, per-school, per-role matricule issuance."""
import logging
import uuid
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.cache import cache_manager
from ..core.exceptions import IdentifierNotAllowed, ValidationError
from ..models import School, SchoolUserCounter, MatriculeGenerationLog, UserRole, MATRICULE_ROLES
from ..utils.identifiers import format_identifier, build_auth_email

logger = logging.getLogger(__name__)

STATS_TTL = 300


def stats_cache_key(school_id) -> str:
    return cache_manager.make_key("identifier_stats", school_id)


class IdentifierService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self):
        dialect = self.db.bind.dialect.name if self.db.bind is not None else "postgresql"
        return sqlite_insert if dialect == "sqlite" else pg_insert

    async def next_count(self, school_id: UUID, role: str) -> int:
        """Atomically bump the (school, role) counter and return the new value.

        The read and the increment happen in one upsert statement, so two
        concurrent callers can never receive the same value.
        """
        table = SchoolUserCounter.__table__
        stmt = self._insert()(table).values(
            id=uuid.uuid4(),
            school_id=school_id,
            user_role=role,
            current_count=1,
            is_deleted=False,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.school_id, table.c.user_role],
            set_={"current_count": table.c.current_count + 1, "updated_at": func.now()},
        ).returning(table.c.current_count)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def issue(
        self,
        school: School,
        role: str,
        source: str = "api",
        user_id: Optional[UUID] = None,
    ) -> Dict[str, str]:
        """Issue the next matricule for a role of a school.

        Returns the bare matricule (``Eleve007``), the display identifier
        (``Eleve007@ecole_best``) and the auth email.
        """
        if role == UserRole.SCHOOL_ADMIN.value:
            raise IdentifierNotAllowed()
        if role not in MATRICULE_ROLES:
            raise ValidationError(f"Unknown role '{role}'", field="role")

        count = await self.next_count(school.id, role)
        prefix = school.matricule_prefix(role)
        identifier = format_identifier(prefix, count, school.school_suffix)
        matricule = identifier.split('@')[0]
        auth_email = build_auth_email(matricule, school.school_suffix)

        self.db.add(MatriculeGenerationLog(
            school_id=school.id,
            role=role,
            generated_matricule=matricule,
            generated_email=auth_email,
            user_id=user_id,
            source=source,
        ))
        await self.db.commit()
        await cache_manager.delete(stats_cache_key(school.id))

        logger.info("Issued %s for school %s (%s)", identifier, school.id, source)
        return {"matricule": matricule, "identifier": identifier, "auth_email": auth_email, "number": count}

    async def get_stats(self, school: School) -> Dict:
        cache_key = stats_cache_key(school.id)
        cached = await cache_manager.get(cache_key)
        if cached:
            return cached

        result = await self.db.execute(
            select(SchoolUserCounter.user_role, SchoolUserCounter.current_count)
            .where(SchoolUserCounter.school_id == school.id)
        )
        counts = {row.user_role: row.current_count for row in result}

        stats = {"school_id": str(school.id), "school_suffix": school.school_suffix, "roles": {}}
        for role in MATRICULE_ROLES:
            current = counts.get(role, 0)
            stats["roles"][role] = {
                "prefix": school.matricule_prefix(role),
                "current_count": current,
                "next_identifier": format_identifier(school.matricule_prefix(role), current + 1, school.school_suffix),
            }

        await cache_manager.set(cache_key, stats, ttl=STATS_TTL)
        return stats

    async def get_generation_log(self, school_id: UUID, role: Optional[str] = None, limit: int = 50):
        stmt = (
            select(MatriculeGenerationLog)
            .where(MatriculeGenerationLog.school_id == school_id)
            .order_by(MatriculeGenerationLog.created_at.desc())
            .limit(limit)
        )
        if role:
            stmt = stmt.where(MatriculeGenerationLog.role == role)
        result = await self.db.execute(stmt)
        return result.scalars().all()
