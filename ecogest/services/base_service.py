# ecogest/services/base_service.py
"""Base service with common CRUD operations scoped to one school."""
import logging
from typing import Type, Any, Dict, Optional, TypeVar, Generic
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import DatabaseError, DuplicateError, NotFoundError
from ..core.logging import sanitize_for_log

logger = logging.getLogger(__name__)

# Define generic type
T = TypeVar('T')


class BaseService(Generic[T]):
    resource_name = "Record"

    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    def _scoped(self, stmt, school_id: Optional[UUID], include_deleted: bool = False):
        if school_id is not None and hasattr(self.model, 'school_id'):
            stmt = stmt.where(self.model.school_id == school_id)
        if hasattr(self.model, 'is_deleted') and not include_deleted:
            stmt = stmt.where(self.model.is_deleted.is_(False))
        return stmt

    def _filtered(self, stmt, filters: Dict[str, Any]):
        for key, value in filters.items():
            if hasattr(self.model, key) and value is not None:
                stmt = stmt.where(getattr(self.model, key) == value)
        return stmt

    async def get(self, id: Any, school_id: Optional[UUID] = None) -> Optional[T]:
        stmt = self._scoped(select(self.model).where(self.model.id == id), school_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_404(self, id: Any, school_id: Optional[UUID] = None) -> T:
        obj = await self.get(id, school_id)
        if not obj:
            raise NotFoundError(self.resource_name, id)
        return obj

    async def get_multi(self, school_id: Optional[UUID] = None, skip: int = 0, limit: int = 100,
                        include_deleted: bool = False, **filters):
        stmt = self._scoped(select(self.model), school_id, include_deleted)
        stmt = self._filtered(stmt, filters).offset(skip).limit(limit)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_paginated(
        self,
        school_id: Optional[UUID] = None,
        page: int = 1,
        size: int = 20,
        include_deleted: bool = False,
        order_by: str = None,
        sort: str = "asc",
        **filters
    ):
        """Get paginated results with optional soft delete filtering"""
        offset = (page - 1) * size

        stmt = self._filtered(self._scoped(select(self.model), school_id, include_deleted), filters)
        count_stmt = self._filtered(
            self._scoped(select(func.count()).select_from(self.model), school_id, include_deleted),
            filters
        )
        total = (await self.db.execute(count_stmt)).scalar() or 0

        if order_by and hasattr(self.model, order_by):
            order_field = getattr(self.model, order_by)
            stmt = stmt.order_by(order_field.desc() if sort.lower() == "desc" else order_field.asc())
        else:
            stmt = stmt.order_by(self.model.created_at.desc())

        result = await self.db.execute(stmt.offset(offset).limit(size))
        items = result.scalars().all()

        return {
            "items": items,
            "total": total,
            "page": page,
            "size": size,
            "total_pages": (total + size - 1) // size,
            "has_next": page * size < total,
            "has_previous": page > 1,
        }

    async def create(self, obj_in: Dict) -> T:
        obj = self.model(**obj_in)
        self.db.add(obj)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def update(self, id: Any, obj_in: Dict, school_id: Optional[UUID] = None) -> Optional[T]:
        obj = await self.get(id, school_id)
        if not obj:
            return None
        for key, value in obj_in.items():
            setattr(obj, key, value)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def soft_delete(self, id: Any, school_id: Optional[UUID] = None) -> bool:
        obj = await self.get(id, school_id)
        if not obj:
            return False
        obj.is_deleted = True
        await self._commit()
        return True

    async def _commit(self):
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("Integrity error on %s: %s", self.model.__tablename__, sanitize_for_log(e.orig))
            raise DuplicateError("value", sanitize_for_log(e.orig, 100), self.resource_name.lower())
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Database error on %s: %s", self.model.__tablename__, sanitize_for_log(e))
            raise DatabaseError(f"Could not save {self.resource_name.lower()}")
