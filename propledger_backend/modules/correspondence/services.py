"""Correspondence business logic."""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import BusinessLogicError, NotFoundError, ValidationError
from ...core.logging import get_logger
from ..tenant_management import crud as tenant_crud
from . import crud
from .crud import template_crud
from .models import Correspondence, CorrespondenceStatus, CorrespondenceTemplate
from .rendering import find_placeholders, render_template
from .schemas import TemplateCreate, TemplateUpdate

logger = get_logger("correspondence")


# ----- Templates -----


async def get_template(
    db: AsyncSession, template_id: int, account_id: int, company_id: int
) -> CorrespondenceTemplate:
    template = await template_crud.get(db, template_id, account_id, company_id)
    if not template:
        raise NotFoundError(f"Template with ID {template_id} not found")
    return template


def _detect_variables(subject: str, content: str) -> list[str]:
    return list(dict.fromkeys(find_placeholders(subject) + find_placeholders(content)))


async def create_template(
    db: AsyncSession, data: TemplateCreate, account_id: int, company_id: int
) -> CorrespondenceTemplate:
    variables = data.variables
    if variables is None:
        variables = _detect_variables(data.subject, data.content)
    template = await template_crud.create(
        db, data, account_id, company_id, variables=variables
    )
    await db.commit()
    logger.info(
        "Correspondence template created",
        extra={"template_id": template.id, "template_name": template.name},
    )
    return template


async def update_template(
    db: AsyncSession,
    template_id: int,
    data: TemplateUpdate,
    account_id: int,
    company_id: int,
) -> CorrespondenceTemplate:
    template = await get_template(db, template_id, account_id, company_id)
    update_data = data.model_dump(exclude_unset=True)
    text_changed = "subject" in update_data or "content" in update_data
    if text_changed and "variables" not in update_data:
        update_data["variables"] = _detect_variables(
            update_data.get("subject", template.subject),
            update_data.get("content", template.content),
        )
    template = await template_crud.update(db, template, update_data)
    await db.commit()
    return template


async def delete_template(
    db: AsyncSession, template_id: int, account_id: int, company_id: int
) -> None:
    """Deactivate a template; correspondence generated from it is kept."""
    template = await get_template(db, template_id, account_id, company_id)
    await template_crud.delete(db, template)
    await db.commit()


# ----- Correspondence -----


async def get_correspondence(
    db: AsyncSession, correspondence_id: int, account_id: int, company_id: int
) -> Correspondence:
    correspondence = await crud.get_correspondence_by_id(
        db, correspondence_id, account_id, company_id
    )
    if not correspondence:
        raise NotFoundError(f"Correspondence with ID {correspondence_id} not found")
    return correspondence


async def generate_correspondence(
    db: AsyncSession,
    template_id: int,
    tenant_id: int,
    variables: dict[str, str] | None,
    account_id: int,
    company_id: int,
) -> Correspondence:
    """Render a template for one tenant and store it as a draft.

    ``tenant_name`` and ``tenant_email`` come from the tenant record; values
    passed in ``variables`` take precedence over them.
    """
    template = await get_template(db, template_id, account_id, company_id)
    if not template.is_active:
        raise ValidationError(
            "Template is not active", field="template_id", value=template_id
        )

    tenant = await tenant_crud.get_tenant_by_id(db, tenant_id, account_id, company_id)
    if not tenant:
        raise NotFoundError(f"Tenant with ID {tenant_id} not found")

    context = {
        "tenant_name": tenant.display_name,
        "tenant_email": tenant.email or "",
    }
    context.update(variables or {})

    correspondence = await crud.create_correspondence(
        db,
        account_id,
        company_id,
        tenant_id=tenant.id,
        template_id=template.id,
        correspondence_type=template.template_type,
        subject=render_template(template.subject, context),
        content=render_template(template.content, context),
    )
    await db.commit()
    logger.info(
        "Correspondence generated",
        extra={
            "correspondence_id": correspondence.id,
            "template_id": template.id,
            "tenant_id": tenant.id,
        },
    )
    return correspondence


async def mark_sent(
    db: AsyncSession,
    correspondence_id: int,
    sent_by: int | None,
    account_id: int,
    company_id: int,
) -> Correspondence:
    correspondence = await get_correspondence(
        db, correspondence_id, account_id, company_id
    )
    if correspondence.status != CorrespondenceStatus.DRAFT:
        raise BusinessLogicError(
            f"Only draft correspondence can be sent (current status: "
            f"{correspondence.status.value})"
        )
    correspondence = await crud.mark_sent(db, correspondence, sent_by)
    await db.commit()
    logger.info(
        "Correspondence sent",
        extra={"correspondence_id": correspondence.id, "sent_by": sent_by},
    )
    return correspondence


async def mark_failed(
    db: AsyncSession,
    correspondence_id: int,
    reason: str,
    account_id: int,
    company_id: int,
) -> Correspondence:
    correspondence = await get_correspondence(
        db, correspondence_id, account_id, company_id
    )
    if correspondence.status == CorrespondenceStatus.SENT:
        raise BusinessLogicError("Sent correspondence cannot be marked as failed")
    correspondence = await crud.mark_failed(db, correspondence, reason)
    await db.commit()
    logger.warning(
        "Correspondence delivery failed",
        extra={"correspondence_id": correspondence.id, "reason": reason},
    )
    return correspondence


async def delete_correspondence(
    db: AsyncSession, correspondence_id: int, account_id: int, company_id: int
) -> None:
    correspondence = await get_correspondence(
        db, correspondence_id, account_id, company_id
    )
    if correspondence.status == CorrespondenceStatus.SENT:
        raise BusinessLogicError("Sent correspondence cannot be deleted")
    await crud.delete_correspondence(db, correspondence)
    await db.commit()
