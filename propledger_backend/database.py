"""
Database configuration for PropLedger.

Implements two-level multi-tenancy with account_id + company_id.
"""

from uuid import UUID, uuid4
from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
    event,
    text,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import (
    Mapped,
    declarative_base,
    declared_attr,
    mapped_column,
)
from sqlalchemy.sql import func

from .config import settings
from .core.database_types import UUID as UUID_DB
from .core.logging import get_logger

logger = get_logger("database")


def build_connect_args(database_url: str) -> dict:
    """Driver arguments for a URL; only asyncmy takes the SSL options."""
    if not database_url.startswith("mysql+asyncmy"):
        return {}
    return {
        "ssl": {
            "ssl_check_hostname": settings.database_ssl_check_hostname,
            "ssl_verify_cert": settings.database_ssl_verify_cert,
            "ssl_verify_identity": settings.database_ssl_verify_identity,
        },
    }


engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    connect_args=build_connect_args(settings.database_url),
    pool_pre_ping=True,
    pool_recycle=3600,
)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

Base = declarative_base()


class TimestampMixin:
    """Mixin to add created and updated timestamps to models."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class AccountScoped:
    """Mixin for account + company scoped models (two-level multi-tenancy).

    - account_id: Top-level tenant (SaaS account)
    - company_id: Second-level tenant (company within account)

    Models using this mixin get a composite primary key
    (account_id, company_id, id) and an external uuid that is unique
    within the account+company scope.
    """

    account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
        index=True,
    )

    company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
        index=True,
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
        nullable=False,
    )

    uuid: Mapped[UUID] = mapped_column(UUID_DB(), nullable=False, index=True)

    @declared_attr
    def __table_args__(cls):
        return (
            UniqueConstraint(
                "account_id",
                "company_id",
                "uuid",
                name=f"uq_{cls.__tablename__}_acct_comp_uuid",
            ),
        )


async def get_db() -> AsyncSession:
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_next_id_for_tenant(
    session: AsyncSession, model_class, account_id: int, company_id: int
) -> int:
    """Get the next available ID for a table within an account+company scope.

    Callers inserting several rows of one table in a single flush must
    allocate ids from this value themselves; the insert listener only
    sees committed rows.
    """
    table_name = model_class.__tablename__

    result = await session.execute(
        text(
            f"SELECT COALESCE(MAX(id), 0) + 1 FROM {table_name} "
            f"WHERE account_id = :account_id AND company_id = :company_id"
        ),
        {"account_id": account_id, "company_id": company_id},
    )
    return result.scalar()


@event.listens_for(AccountScoped, "before_insert", propagate=True)
def set_composite_key_fields(mapper, connection, target):
    """Assign uuid and the next scoped id before insert when not set."""
    if getattr(target, "uuid", None) is None:
        target.uuid = uuid4()

    if (
        target.id is None
        and target.account_id is not None
        and target.company_id is not None
    ):
        table_name = mapper.persist_selectable.name

        result = connection.execute(
            text(
                f"SELECT COALESCE(MAX(id), 0) + 1 FROM {table_name} "
                f"WHERE account_id = :account_id AND company_id = :company_id"
            ),
            {"account_id": target.account_id, "company_id": target.company_id},
        )
        target.id = result.scalar()


def import_all_models() -> None:
    """Register every model on Base.metadata."""
    from .modules.auth import models as auth_models  # noqa: F401
    from .modules.billing import models as billing_models  # noqa: F401
    from .modules.correspondence import models as correspondence_models  # noqa: F401
    from .modules.distributions import models as distribution_models  # noqa: F401
    from .modules.expenses import models as expense_models  # noqa: F401
    from .modules.lease_management import models as lease_models  # noqa: F401
    from .modules.maintenance import models as maintenance_models  # noqa: F401
    from .modules.owners import models as owner_models  # noqa: F401
    from .modules.property_management import models as property_models  # noqa: F401
    from .modules.tenant_management import models as tenant_models  # noqa: F401


async def init_db():
    """Create all tables (development and tests; production uses Alembic)."""
    import_all_models()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")
