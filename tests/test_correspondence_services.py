"""Tests for correspondence templates and generated letters."""

import pytest

from propledger_backend.core.exceptions import (
    BusinessLogicError,
    NotFoundError,
    ValidationError,
)
from propledger_backend.modules.correspondence import services
from propledger_backend.modules.correspondence.models import (
    CorrespondenceStatus,
    CorrespondenceType,
)
from propledger_backend.modules.correspondence.schemas import (
    TemplateCreate,
    TemplateUpdate,
)


@pytest.fixture
async def template(db, scope):
    return await services.create_template(
        db,
        TemplateCreate(
            name="Rent reminder",
            template_type=CorrespondenceType.REMINDER,
            subject="Rent due for {{ month }}",
            content="Dear {{tenant_name}}, please pay {{amount}} by {{ due_date }}.",
        ),
        *scope,
    )


async def test_template_variables_are_detected(template):
    assert template.variables == ["month", "tenant_name", "amount", "due_date"]
    assert template.is_active is True


async def test_changing_content_redetects_variables(db, scope, template):
    updated = await services.update_template(
        db, template.id, TemplateUpdate(content="Hello {{ tenant_email }}"), *scope
    )
    assert updated.variables == ["month", "tenant_email"]


async def test_generate_renders_tenant_and_request_values(db, scope, template, tenant):
    letter = await services.generate_correspondence(
        db, template.id, tenant.id, {"month": "June", "amount": "950.00"}, *scope
    )

    assert letter.status == CorrespondenceStatus.DRAFT
    assert letter.correspondence_type == CorrespondenceType.REMINDER
    assert letter.subject == "Rent due for June"
    # unknown placeholders stay visible for review
    assert letter.content == (
        "Dear Ana Silva, please pay 950.00 by {{ due_date }}."
    )


async def test_request_values_override_tenant_fields(db, scope, template, tenant):
    letter = await services.generate_correspondence(
        db, template.id, tenant.id, {"tenant_name": "Sra. Silva"}, *scope
    )
    assert letter.content.startswith("Dear Sra. Silva,")


async def test_inactive_template(db, scope, template, tenant):
    await services.delete_template(db, template.id, *scope)
    with pytest.raises(ValidationError):
        await services.generate_correspondence(db, template.id, tenant.id, {}, *scope)


async def test_unknown_tenant(db, scope, template):
    with pytest.raises(NotFoundError):
        await services.generate_correspondence(db, template.id, 404, {}, *scope)


async def test_send_flow(db, scope, template, tenant):
    letter = await services.generate_correspondence(db, template.id, tenant.id, {}, *scope)

    sent = await services.mark_sent(db, letter.id, 7, *scope)

    assert sent.status == CorrespondenceStatus.SENT
    assert sent.sent_by == 7
    assert sent.sent_at is not None
    with pytest.raises(BusinessLogicError):
        await services.mark_sent(db, letter.id, 7, *scope)
    with pytest.raises(BusinessLogicError):
        await services.mark_failed(db, letter.id, "bounced", *scope)
    with pytest.raises(BusinessLogicError):
        await services.delete_correspondence(db, letter.id, *scope)


async def test_failed_draft_can_be_deleted(db, scope, template, tenant):
    letter = await services.generate_correspondence(db, template.id, tenant.id, {}, *scope)

    failed = await services.mark_failed(db, letter.id, "Mailbox full", *scope)
    assert failed.status == CorrespondenceStatus.FAILED
    assert failed.failure_reason == "Mailbox full"

    await services.delete_correspondence(db, letter.id, *scope)
    with pytest.raises(NotFoundError):
        await services.get_correspondence(db, letter.id, *scope)
