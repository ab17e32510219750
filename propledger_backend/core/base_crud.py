"""
Base CRUD operations for the simple account-scoped record types.

Write methods only flush; the calling service owns the transaction.
"""

from datetime import date
from typing import Any, Generic, TypeVar

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType")
UpdateSchemaType = TypeVar("UpdateSchemaType")


class BaseCRUD(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Generic data access for an AccountScoped model.

    Attributes:
        model: SQLAlchemy model class
        search_fields: Columns matched by the free-text ``search`` argument
        date_field: Column used by ``date_from`` / ``date_to`` filters
        default_order_by: Column used for ordering
        default_order_desc: Order newest first when True
    """

    search_fields: list[str] = []
    date_field: str | None = None
    default_order_by: str = "created_at"
    default_order_desc: bool = True

    def __init__(self, model: type[ModelType]):
        self.model = model

    def _scoped(self, query: Select, account_id: int, company_id: int) -> Select:
        return query.where(
            and_(
                self.model.account_id == account_id,
                self.model.company_id == company_id,
            )
        )

    def _apply_filters(
        self,
        query: Select,
        search: str | None = None,
        filters: dict[str, Any] | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> Select:
        if search and self.search_fields:
            conditions = [
                getattr(self.model, name).ilike(f"%{search}%")
                for name in self.search_fields
                if hasattr(self.model, name)
            ]
            if conditions:
                query = query.where(or_(*conditions))

        for name, value in (filters or {}).items():
            if value is not None and hasattr(self.model, name):
                query = query.where(getattr(self.model, name) == value)

        if self.date_field:
            column = getattr(self.model, self.date_field)
            if date_from is not None:
                query = query.where(column >= date_from)
            if date_to is not None:
                query = query.where(column <= date_to)
        return query

    def _apply_ordering(self, query: Select) -> Select:
        column = getattr(self.model, self.default_order_by)
        query = query.order_by(column.desc() if self.default_order_desc else column)
        return query.order_by(self.model.id.desc())

    async def get(
        self, db: AsyncSession, id: int, account_id: int, company_id: int
    ) -> ModelType | None:
        """Get a single record by its id within the tenant scope."""
        query = self._scoped(select(self.model), account_id, company_id).where(
            self.model.id == id
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        db: AsyncSession,
        account_id: int,
        company_id: int,
        skip: int = 0,
        limit: int = 100,
        search: str | None = None,
        filters: dict[str, Any] | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> tuple[list[ModelType], int]:
        """Get a page of records plus the total count of matches."""
        query = self._scoped(select(self.model), account_id, company_id)
        query = self._apply_filters(query, search, filters, date_from, date_to)

        count_query = self._scoped(
            select(func.count(self.model.id)), account_id, company_id
        )
        count_query = self._apply_filters(
            count_query, search, filters, date_from, date_to
        )
        total = (await db.execute(count_query)).scalar() or 0

        query = self._apply_ordering(query).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def create(
        self,
        db: AsyncSession,
        obj_in: CreateSchemaType | dict[str, Any],
        account_id: int,
        company_id: int,
        **kwargs,
    ) -> ModelType:
        """Create a record; id and uuid are assigned on insert."""
        if isinstance(obj_in, dict):
            data = dict(obj_in)
        else:
            data = obj_in.model_dump(exclude_unset=True)

        data["account_id"] = account_id
        data["company_id"] = company_id
        data.update(kwargs)

        db_obj = self.model(**data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        db_obj: ModelType,
        obj_in: UpdateSchemaType | dict[str, Any],
    ) -> ModelType:
        """Apply the set fields of ``obj_in`` to ``db_obj``."""
        if isinstance(obj_in, dict):
            data = obj_in
        else:
            data = obj_in.model_dump(exclude_unset=True)

        for field, value in data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(
        self, db: AsyncSession, db_obj: ModelType, soft_delete: bool = True
    ) -> ModelType:
        """Delete a record (soft delete when the model has ``is_active``)."""
        if soft_delete and hasattr(db_obj, "is_active"):
            db_obj.is_active = False
        else:
            await db.delete(db_obj)
        await db.flush()
        return db_obj

    async def exists(
        self, db: AsyncSession, account_id: int, company_id: int, **filters
    ) -> bool:
        query = self._scoped(select(func.count(self.model.id)), account_id, company_id)
        for name, value in filters.items():
            query = query.where(getattr(self.model, name) == value)
        return ((await db.execute(query)).scalar() or 0) > 0
