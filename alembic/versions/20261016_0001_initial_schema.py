"""Initial schema for PropLedger

Revision ID: 0001
Revises:
Create Date: 2026-10-16

Creates all tables for:
- Auth (accounts, companies, roles, users, refresh_tokens)
- Portfolio (properties, units, owners, property_owners)
- Tenants and leasing (tenants, tenant_portal_tokens, leases)
- Billing (invoices, payment_transactions, expenses, maintenance_tickets)
- Correspondence (correspondence_templates, correspondence)
- Owner income (income_distributions, income_distribution_shares)

Enum columns store member names, as SQLAlchemy's Enum type does by default.
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money(name: str, nullable: bool = False, **kwargs) -> sa.Column:
    return sa.Column(name, sa.Numeric(15, 2), nullable=nullable, **kwargs)


def _percentage(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.Numeric(7, 4), nullable=nullable)


def _scoped_columns() -> list:
    """Composite-key columns shared by every account-scoped table."""
    return [
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("uuid", sa.String(36), nullable=False),
    ]


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), onupdate=sa.func.now()),
    ]


def _scoped_constraints() -> list:
    return [
        sa.PrimaryKeyConstraint("account_id", "company_id", "id"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
    ]


def _scoped_fk(column: str, table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        ["account_id", "company_id", column],
        [f"{table}.account_id", f"{table}.company_id", f"{table}.id"],
        ondelete="CASCADE",
    )


def _scoped_indexes(table: str) -> None:
    op.create_index(f"ix_{table}_account_id", table, ["account_id"])
    op.create_index(f"ix_{table}_company_id", table, ["company_id"])
    op.create_index(f"ix_{table}_uuid", table, ["uuid"])


def upgrade() -> None:
    """Create all tables."""

    # =====================
    # AUTH
    # =====================

    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
    )

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("slug", sa.String(64), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_companies_account", "companies", ["account_id"])

    op.create_table(
        "users",
        *_scoped_columns(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(120), nullable=False),
        sa.Column("last_name", sa.String(120), nullable=True),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"]),
    )
    op.create_index("ix_users_email", "users", ["account_id", "company_id", "email"], unique=True)
    op.create_index("ix_users_account_company", "users", ["account_id", "company_id"])
    _scoped_indexes("users")

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_account_id", sa.Integer(), nullable=False),
        sa.Column("user_company_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(128), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("user_agent", sa.String(500), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token_hash"),
    )
    op.create_index("ix_refresh_tokens_user", "refresh_tokens", ["user_account_id", "user_company_id", "user_id"])

    # =====================
    # PORTFOLIO
    # =====================

    op.create_table(
        "properties",
        *_scoped_columns(),
        sa.Column("property_code", sa.String(50), nullable=False),
        sa.Column("property_name", sa.String(255), nullable=False),
        sa.Column("usage_type", sa.Enum("RESIDENTIAL", "COMMERCIAL", "MIXED", name="propertyusagetype"), nullable=False, server_default="RESIDENTIAL"),
        sa.Column("address_line_1", sa.String(255), nullable=True),
        sa.Column("address_line_2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("region", sa.String(120), nullable=True),
        sa.Column("country", sa.String(120), nullable=False, server_default="PT"),
        sa.Column("postal_code", sa.String(20), nullable=True),
        sa.Column("latitude", sa.Numeric(10, 7), nullable=True),
        sa.Column("longitude", sa.Numeric(10, 7), nullable=True),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("income_split_mode", sa.Enum("PRE_TAX", "POST_TAX", name="taxmode"), nullable=False, server_default="PRE_TAX"),
        sa.Column("distribution_frequency", sa.Enum("MONTHLY", "QUARTERLY", "ANNUALLY", name="distributionfrequency"), nullable=False, server_default="MONTHLY"),
        sa.Column("total_units_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active_units_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.Enum("ACTIVE", "INACTIVE", "UNDER_MAINTENANCE", name="propertystatus"), nullable=False, server_default="ACTIVE"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default="0"),
        *_timestamps(),
        *_scoped_constraints(),
    )
    op.create_index("ix_properties_code", "properties", ["account_id", "company_id", "property_code"], unique=True)
    op.create_index("ix_properties_status", "properties", ["account_id", "company_id", "status"])
    _scoped_indexes("properties")

    op.create_table(
        "units",
        *_scoped_columns(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("unit_code", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("unit_type", sa.Enum("APARTMENT", "ROOM", "STUDIO", "HOUSE", "COMMERCIAL", "PARKING", "STORAGE", name="unittype"), nullable=False, server_default="APARTMENT"),
        sa.Column("floor_number", sa.String(10), nullable=True),
        sa.Column("bedrooms", sa.Integer(), nullable=True),
        sa.Column("bathrooms", sa.Integer(), nullable=True),
        sa.Column("area_sqm", sa.Numeric(10, 2), nullable=True),
        _money("monthly_rent", nullable=True),
        sa.Column("status", sa.Enum("AVAILABLE", "OCCUPIED", "RESERVED", "UNDER_MAINTENANCE", "INACTIVE", name="unitstatus"), nullable=False, server_default="AVAILABLE"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("property_id", "properties"),
    )
    op.create_index("ix_units_code", "units", ["account_id", "company_id", "property_id", "unit_code"], unique=True)
    op.create_index("ix_units_property", "units", ["account_id", "company_id", "property_id"])
    op.create_index("ix_units_status", "units", ["account_id", "company_id", "status"])
    _scoped_indexes("units")

    op.create_table(
        "owners",
        *_scoped_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("tax_residence_country", sa.String(120), nullable=False, server_default="PT"),
        sa.Column("tax_identification_number", sa.String(50), nullable=True),
        _percentage("tax_rate", nullable=True),
        sa.Column("role", sa.Enum("OWNER", "CO_OWNER", "INVESTOR", name="ownerrole"), nullable=False, server_default="OWNER"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        *_scoped_constraints(),
    )
    op.create_index("ix_owners_name", "owners", ["account_id", "company_id", "name"])
    _scoped_indexes("owners")

    op.create_table(
        "property_owners",
        *_scoped_columns(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        _percentage("ownership_percentage"),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("property_id", "properties"),
        _scoped_fk("owner_id", "owners"),
    )
    op.create_index("ix_property_owners_pair", "property_owners", ["account_id", "company_id", "property_id", "owner_id"], unique=True)
    _scoped_indexes("property_owners")

    # =====================
    # TENANTS AND LEASING
    # =====================

    op.create_table(
        "tenants",
        *_scoped_columns(),
        sa.Column("tenant_code", sa.String(50), nullable=False),
        sa.Column("tenant_type", sa.Enum("INDIVIDUAL", "COMPANY", name="tenanttype"), nullable=False, server_default="INDIVIDUAL"),
        sa.Column("first_name", sa.String(120), nullable=True),
        sa.Column("last_name", sa.String(120), nullable=True),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("tax_id", sa.String(50), nullable=True),
        sa.Column("nationality", sa.String(100), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("status", sa.Enum("ACTIVE", "INACTIVE", "BLACKLISTED", name="tenantstatus"), nullable=False, server_default="ACTIVE"),
        sa.Column("active_leases_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
    )
    op.create_index("ix_tenants_code", "tenants", ["account_id", "company_id", "tenant_code"], unique=True)
    op.create_index("ix_tenants_status", "tenants", ["account_id", "company_id", "status"])
    op.create_index("ix_tenants_email", "tenants", ["account_id", "company_id", "email"])
    _scoped_indexes("tenants")

    op.create_table(
        "tenant_portal_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tenant_account_id", sa.Integer(), nullable=False),
        sa.Column("tenant_company_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(128), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token_hash"),
    )
    op.create_index("ix_tenant_portal_tokens_tenant", "tenant_portal_tokens", ["tenant_account_id", "tenant_company_id", "tenant_id"])

    op.create_table(
        "leases",
        *_scoped_columns(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("unit_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("lease_code", sa.String(50), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("term_days", sa.Integer(), nullable=False),
        _money("monthly_rent"),
        _money("deposit", server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("payment_day", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("tax_regime", sa.Enum("STANDARD", "REDUCED", "EXEMPT", name="taxregime"), nullable=False, server_default="STANDARD"),
        sa.Column("auto_renew", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("renewal_notice_days", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("renewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.Enum("DRAFT", "ACTIVE", "EXPIRED", "TERMINATED", name="leasestatus"), nullable=False, server_default="DRAFT"),
        sa.Column("activated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("termination_date", sa.Date(), nullable=True),
        sa.Column("terminated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("termination_reason", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("property_id", "properties"),
        _scoped_fk("unit_id", "units"),
        _scoped_fk("tenant_id", "tenants"),
    )
    op.create_index("ix_leases_code", "leases", ["account_id", "company_id", "lease_code"], unique=True)
    op.create_index("ix_leases_unit", "leases", ["account_id", "company_id", "unit_id"])
    op.create_index("ix_leases_tenant", "leases", ["account_id", "company_id", "tenant_id"])
    op.create_index("ix_leases_status", "leases", ["account_id", "company_id", "status"])
    op.create_index("ix_leases_dates", "leases", ["account_id", "company_id", "start_date", "end_date"])
    _scoped_indexes("leases")

    # =====================
    # BILLING, EXPENSES, MAINTENANCE
    # =====================

    op.create_table(
        "invoices",
        *_scoped_columns(),
        sa.Column("invoice_number", sa.String(20), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=True),
        sa.Column("property_id", sa.Integer(), nullable=True),
        _money("amount"),
        _money("original_amount"),
        _money("late_fee", server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column("billing_period", sa.Date(), nullable=True),
        sa.Column("status", sa.Enum("PENDING", "PAID", "OVERDUE", "CANCELLED", name="invoicestatus"), nullable=False, server_default="PENDING"),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("line_items", sa.JSON(), nullable=True),
        sa.Column("late_fee_applied_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("tenant_id", "tenants"),
    )
    op.create_index("ix_invoices_number", "invoices", ["account_id", "company_id", "invoice_number"], unique=True)
    op.create_index("ix_invoices_tenant", "invoices", ["account_id", "company_id", "tenant_id"])
    op.create_index("ix_invoices_property", "invoices", ["account_id", "company_id", "property_id"])
    op.create_index("ix_invoices_lease_period", "invoices", ["account_id", "company_id", "lease_id", "billing_period"])
    op.create_index("ix_invoices_status_due", "invoices", ["account_id", "company_id", "status", "due_date"])
    _scoped_indexes("invoices")

    op.create_table(
        "payment_transactions",
        *_scoped_columns(),
        sa.Column("invoice_id", sa.Integer(), nullable=False),
        _money("amount"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("payment_method", sa.Enum("CARD", "MULTIBANCO", "MBWAY", "SEPA_DEBIT", "BANK_TRANSFER", "CASH", name="paymentmethod"), nullable=False),
        sa.Column("status", sa.Enum("PENDING", "SUCCEEDED", "FAILED", "REFUNDED", name="paymentstatus"), nullable=False, server_default="SUCCEEDED"),
        sa.Column("reference", sa.String(255), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        _money("refunded_amount", nullable=True),
        sa.Column("refunded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("refund_reason", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("invoice_id", "invoices"),
    )
    op.create_index("ix_payment_transactions_invoice", "payment_transactions", ["account_id", "company_id", "invoice_id"])
    op.create_index("ix_payment_transactions_status", "payment_transactions", ["account_id", "company_id", "status"])
    _scoped_indexes("payment_transactions")

    op.create_table(
        "expenses",
        *_scoped_columns(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("unit_id", sa.Integer(), nullable=True),
        _money("amount"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("category", sa.Enum("MAINTENANCE", "UTILITIES", "INSURANCE", "TAXES", "MANAGEMENT", "MORTGAGE_INTEREST", "COMMUNITY_FEES", "OTHER", name="expensecategory"), nullable=False, server_default="OTHER"),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("vendor_name", sa.String(255), nullable=True),
        sa.Column("maintenance_ticket_id", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("property_id", "properties"),
    )
    op.create_index("ix_expenses_property_date", "expenses", ["account_id", "company_id", "property_id", "expense_date"])
    op.create_index("ix_expenses_category", "expenses", ["account_id", "company_id", "category"])
    _scoped_indexes("expenses")

    op.create_table(
        "maintenance_tickets",
        *_scoped_columns(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("unit_id", sa.Integer(), nullable=True),
        sa.Column("tenant_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.Enum("PLUMBING", "ELECTRICAL", "HVAC", "CLEANING", "REPAIRS", "INSPECTION", "OTHER", name="maintenancecategory"), nullable=False, server_default="OTHER"),
        sa.Column("priority", sa.Enum("LOW", "MEDIUM", "HIGH", "URGENT", name="maintenancepriority"), nullable=False, server_default="MEDIUM"),
        sa.Column("status", sa.Enum("OPEN", "IN_PROGRESS", "COMPLETED", "CANCELLED", name="maintenancestatus"), nullable=False, server_default="OPEN"),
        sa.Column("assigned_to", sa.String(100), nullable=True),
        sa.Column("reported_date", sa.Date(), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=True),
        sa.Column("completed_date", sa.Date(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        _money("estimated_cost", nullable=True),
        _money("actual_cost", nullable=True),
        sa.Column("expense_id", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("property_id", "properties"),
    )
    op.create_index("ix_maintenance_tickets_property", "maintenance_tickets", ["account_id", "company_id", "property_id"])
    op.create_index("ix_maintenance_tickets_status", "maintenance_tickets", ["account_id", "company_id", "status"])
    op.create_index("ix_maintenance_tickets_priority", "maintenance_tickets", ["account_id", "company_id", "priority"])
    _scoped_indexes("maintenance_tickets")

    # =====================
    # CORRESPONDENCE
    # =====================

    op.create_table(
        "correspondence_templates",
        *_scoped_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("template_type", sa.Enum("LETTER", "EMAIL", "NOTICE", "REMINDER", name="correspondencetype"), nullable=False, server_default="LETTER"),
        sa.Column("subject", sa.String(500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("variables", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        *_scoped_constraints(),
    )
    op.create_index("ix_correspondence_templates_name", "correspondence_templates", ["account_id", "company_id", "name"])
    _scoped_indexes("correspondence_templates")

    op.create_table(
        "correspondence",
        *_scoped_columns(),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("template_id", sa.Integer(), nullable=True),
        sa.Column("correspondence_type", sa.Enum("LETTER", "EMAIL", "NOTICE", "REMINDER", name="correspondencetype"), nullable=False, server_default="LETTER"),
        sa.Column("subject", sa.String(500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", sa.Enum("DRAFT", "SENT", "FAILED", name="correspondencestatus"), nullable=False, server_default="DRAFT"),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sent_by", sa.Integer(), nullable=True),
        sa.Column("failure_reason", sa.Text(), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("tenant_id", "tenants"),
    )
    op.create_index("ix_correspondence_tenant", "correspondence", ["account_id", "company_id", "tenant_id"])
    op.create_index("ix_correspondence_status", "correspondence", ["account_id", "company_id", "status"])
    _scoped_indexes("correspondence")

    # =====================
    # OWNER INCOME
    # =====================

    op.create_table(
        "income_distributions",
        *_scoped_columns(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        _money("total_income"),
        _money("total_expenses"),
        _money("net_income"),
        _money("total_tax"),
        _money("total_net_distributed"),
        sa.Column("tax_mode", sa.Enum("PRE_TAX", "POST_TAX", name="taxmode"), nullable=False, server_default="PRE_TAX"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("calculated_by", sa.Integer(), nullable=True),
        sa.Column("recalculated_by", sa.Integer(), nullable=True),
        sa.Column("recalculated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("property_id", "properties"),
    )
    op.create_index(
        "ix_income_distributions_version",
        "income_distributions",
        ["account_id", "company_id", "property_id", "period_start", "period_end", "version"],
        unique=True,
    )
    op.create_index("ix_income_distributions_period", "income_distributions", ["account_id", "company_id", "period_start"])
    _scoped_indexes("income_distributions")

    op.create_table(
        "income_distribution_shares",
        *_scoped_columns(),
        sa.Column("distribution_id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("owner_name", sa.String(255), nullable=False),
        _percentage("percentage"),
        _money("gross_share"),
        _money("taxable_income"),
        _money("tax_amount"),
        _money("net_share"),
        sa.Column("tax_country", sa.String(50), nullable=False),
        _percentage("tax_rate"),
        _percentage("effective_rate"),
        sa.Column("notified_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        *_scoped_constraints(),
        _scoped_fk("distribution_id", "income_distributions"),
    )
    op.create_index("ix_income_distribution_shares_owner", "income_distribution_shares", ["account_id", "company_id", "owner_id"])
    _scoped_indexes("income_distribution_shares")


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("income_distribution_shares")
    op.drop_table("income_distributions")

    op.drop_table("correspondence")
    op.drop_table("correspondence_templates")

    op.drop_table("maintenance_tickets")
    op.drop_table("expenses")
    op.drop_table("payment_transactions")
    op.drop_table("invoices")

    op.drop_table("leases")
    op.drop_table("tenant_portal_tokens")
    op.drop_table("tenants")

    op.drop_table("property_owners")
    op.drop_table("owners")
    op.drop_table("units")
    op.drop_table("properties")

    op.drop_table("refresh_tokens")
    op.drop_table("users")
    op.drop_table("companies")
    op.drop_table("roles")
    op.drop_table("accounts")
