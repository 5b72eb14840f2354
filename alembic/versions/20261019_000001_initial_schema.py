"""Decision hub schema.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:01
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()"))


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("now()"))


def _case_fk() -> sa.Column:
    return sa.Column(
        "case_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("decision_cases.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Create entitlement, case, AI output and team tables."""
    # Users & entitlements
    op.create_table(
        "profiles",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("company_name", sa.String(255), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "user_roles",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="free"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "subscriptions",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default="inactive"),
        sa.Column("stripe_customer_id", sa.String(100), nullable=True),
        sa.Column("stripe_subscription_id", sa.String(100), nullable=True),
        sa.Column("stripe_price_id", sa.String(100), nullable=True),
        sa.Column("current_period_start", sa.DateTime(), nullable=True),
        sa.Column("current_period_end", sa.DateTime(), nullable=True),
        sa.Column("cancel_at_period_end", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("trial_end", sa.DateTime(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("ix_subscriptions_customer", "subscriptions", ["stripe_customer_id"])

    op.create_table(
        "stripe_products",
        _id(),
        sa.Column("plan_name", sa.String(20), nullable=False),
        sa.Column("stripe_product_id", sa.String(100), nullable=True),
        sa.Column("stripe_price_id", sa.String(100), nullable=True),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("interval", sa.String(20), nullable=False),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("plan_name"),
    )

    # Decision cases & AI output
    op.create_table(
        "decision_cases",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("objectives", sa.Text(), nullable=True),
        sa.Column("constraints", sa.Text(), nullable=True),
        sa.Column("context", sa.Text(), nullable=True),
        sa.Column("risks", sa.Text(), nullable=True),
        sa.Column("additional_text", sa.Text(), nullable=True),
        sa.Column("status", sa.String(30), nullable=False, server_default="active"),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_decision_cases_user_created", "decision_cases", ["user_id", "created_at"])

    op.create_table(
        "decision_analyses",
        _id(),
        _case_fk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("key_arguments", postgresql.JSONB(), nullable=True),
        sa.Column("decision_paths", postgresql.JSONB(), nullable=True),
        sa.Column("effects_tradeoffs", postgresql.JSONB(), nullable=True),
        sa.Column("probability_reasoning", sa.Text(), nullable=True),
        sa.Column("blind_spots", postgresql.JSONB(), nullable=True),
        sa.Column("recommended_path", sa.Text(), nullable=True),
        sa.Column("follow_up_questions", postgresql.JSONB(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_decision_analyses_case_created", "decision_analyses", ["case_id", "created_at"])

    op.create_table(
        "risk_simulations",
        _id(),
        _case_fk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("expected_value", postgresql.JSONB(), nullable=True),
        sa.Column("best_case", postgresql.JSONB(), nullable=True),
        sa.Column("worst_case", postgresql.JSONB(), nullable=True),
        sa.Column("simulation_results", postgresql.JSONB(), nullable=True),
        sa.Column("probability_data", postgresql.JSONB(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_risk_simulations_case_created", "risk_simulations", ["case_id", "created_at"])
    op.create_index("ix_risk_simulations_user_created", "risk_simulations", ["user_id", "created_at"])

    op.create_table(
        "decision_revisions",
        _id(),
        _case_fk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("revision_type", sa.String(50), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), nullable=True, server_default="{}"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_decision_revisions_case", "decision_revisions", ["case_id", "created_at"])

    # Team collaboration
    op.create_table(
        "team_invitations",
        _id(),
        _case_fk(),
        sa.Column("inviter_user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("invitee_email", sa.String(255), nullable=False),
        sa.Column("invitee_user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="viewer"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_team_invitations_case", "team_invitations", ["case_id"])
    op.create_index("ix_team_invitations_email", "team_invitations", ["invitee_email"])

    op.create_table(
        "team_members",
        _id(),
        _case_fk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("invited_user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="viewer"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_team_members_case", "team_members", ["case_id"])
    op.create_index("ix_team_members_invited", "team_members", ["invited_user_id"])

    op.create_table(
        "team_notifications",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.String(500), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), nullable=True, server_default="{}"),
        sa.Column("read", sa.Boolean(), nullable=False, server_default="false"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_team_notifications_user", "team_notifications", ["user_id", "created_at"])

    op.create_table(
        "case_access_logs",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        _case_fk(),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("metadata", postgresql.JSONB(), nullable=True, server_default="{}"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_case_access_logs_case", "case_access_logs", ["case_id", "created_at"])

    # Seed the plan catalog; ids are filled in by provisioning
    op.execute(
        "INSERT INTO stripe_products (id, plan_name, amount, currency, interval) VALUES "
        "(gen_random_uuid(), 'pro', 1000, 'gbp', 'month'), "
        "(gen_random_uuid(), 'premium', 5000, 'gbp', 'one-time')"
    )


def downgrade() -> None:
    """Drop all hub tables."""
    for table in (
        "case_access_logs",
        "team_notifications",
        "team_members",
        "team_invitations",
        "decision_revisions",
        "risk_simulations",
        "decision_analyses",
        "decision_cases",
        "stripe_products",
        "subscriptions",
        "user_roles",
        "profiles",
    ):
        op.drop_table(table)
